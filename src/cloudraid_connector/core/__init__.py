"""Core connector logic package."""

from .connector import ServerConnector, SESSION_PREFIX
from .errors import (
    ErrorKind,
    ConnectorError,
    ServerError,
    SessionStoreError,
    ConfigurationError
)
from .listing import parse_line, parse_listing, parse_timestamp
from .models import FileListListener, RemoteFile, ServerConnection
from .status import map_status, check_status

__all__ = [
    "ServerConnector",
    "SESSION_PREFIX",
    "ErrorKind",
    "ConnectorError",
    "ServerError",
    "SessionStoreError",
    "ConfigurationError",
    "parse_line",
    "parse_listing",
    "parse_timestamp",
    "FileListListener",
    "RemoteFile",
    "ServerConnection",
    "map_status",
    "check_status"
]
