"""Persistence of an authenticated session between process runs.

The session file holds five plaintext lines: host, user, password, port and
session token. Protecting it is left to the file system permissions.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..config.settings import get_settings
from ..core.connector import SESSION_PREFIX, ServerConnector
from ..core.errors import ConfigurationError, SessionStoreError
from ..core.models import ServerConnection
from ..utils.logging import get_logger, mask_secret

if TYPE_CHECKING:
    from ..api_clients.base import Transport

SESSION_FILE_NAME = "session"

logger = get_logger(__name__)


class SessionStore:
    """Saves and restores the session of a ServerConnector."""

    def __init__(self, config_home: Optional[Union[str, Path]] = None):
        """Initialize the store.

        Args:
            config_home: Directory the session file lives in, by default the
                configured session home
        """
        if config_home is None:
            config_home = get_settings().session.config_home
        self.config_home = Path(config_home)

    @property
    def path(self) -> Path:
        return self.config_home / SESSION_FILE_NAME

    def exists(self) -> bool:
        return self.path.is_file()

    def store(self, connector: ServerConnector) -> None:
        """Write the connector's credentials and session token.

        Does nothing if the connector is not authenticated.

        Raises:
            SessionStoreError: If the file cannot be written
        """
        if connector.session is None:
            return

        connection = connector.connection
        lines = [
            connection.host,
            connection.user,
            connection.password,
            str(connection.port),
            connector.session,
        ]
        try:
            self.config_home.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            logger.error("Failed to store session", path=str(self.path), error=str(e))
            raise SessionStoreError(f"Cannot write session file {self.path}: {e}") from e

        logger.info(
            "Session stored",
            path=str(self.path),
            session=mask_secret(connector.session, len(SESSION_PREFIX) + 4)
        )

    def restore_session(
        self,
        transport: Optional["Transport"] = None,
        scheme: str = "http",
        **connector_kwargs
    ) -> ServerConnector:
        """Rebuild an authenticated connector from the session file.

        The server is not contacted; whether the token is still valid shows
        on the first request.

        Args:
            transport: Transport for the restored connector
            scheme: URL scheme of the server, which the file does not record
            **connector_kwargs: Further ServerConnector arguments

        Returns:
            A ServerConnector carrying the stored session

        Raises:
            SessionStoreError: If the file is missing, unreadable or malformed
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                lines = [f.readline().rstrip("\r\n") for _ in range(5)]
        except OSError as e:
            logger.error("Failed to restore session", path=str(self.path), error=str(e))
            raise SessionStoreError(f"Cannot read session file {self.path}: {e}") from e

        host, user, password, port, session = lines
        if not session:
            raise SessionStoreError(f"Session file {self.path} is incomplete")

        try:
            connection = ServerConnection(
                host=host, user=user, password=password, port=int(port), scheme=scheme
            )
        except (ValueError, ConfigurationError) as e:
            raise SessionStoreError(f"Session file {self.path} is malformed: {e}") from e

        logger.info("Session restored", path=str(self.path), host=host, user=user)
        return ServerConnector(
            connection,
            transport=transport,
            session_store=self,
            session=session,
            **connector_kwargs
        )

    def remove(self) -> None:
        """Delete the session file if there is one.

        Raises:
            SessionStoreError: If the file exists but cannot be deleted
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise SessionStoreError(f"Cannot remove session file {self.path}: {e}") from e
        logger.info("Stored session removed", path=str(self.path))
