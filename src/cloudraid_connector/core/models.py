"""Data structures shared by the connector components."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .errors import ConfigurationError


@dataclass(frozen=True)
class ServerConnection:
    """Credentials and address of a CloudRAID server."""

    host: str
    user: str
    password: str = field(repr=False)
    port: int
    scheme: str = "http"

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("Server host cannot be empty")
        if not isinstance(self.port, int) or self.port < 1 or self.port > 65535:
            raise ConfigurationError("Server port must be an integer between 1 and 65535")

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class RemoteFile:
    """One entry of the server's file listing."""

    name: str
    hash: str
    last_modified: datetime
    state: str


class FileListListener(ABC):
    """Receives every file list retrieved by a connector."""

    @abstractmethod
    def receive_file_list(self, files: List[RemoteFile]) -> None:
        """Handle a freshly retrieved file list.

        Args:
            files: The parsed listing, shared with every other listener
        """
