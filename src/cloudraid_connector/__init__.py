"""Client connector for CloudRAID file-storage servers.

Quick start::

    from cloudraid_connector import ServerConnection, ServerConnector, setup_logging

    setup_logging()

    connection = ServerConnection(host="cloud.example.org", user="alice",
                                  password="secret", port=8080)
    async with ServerConnector(connection) as connector:
        await connector.authenticate()
        files = await connector.list_files()
        await connector.end_session()
"""

from .api_clients import AiohttpTransport, Transport, TransportResponse
from .auth import SessionStore
from .core import (
    ServerConnector,
    ServerConnection,
    RemoteFile,
    FileListListener,
    ErrorKind,
    ConnectorError,
    ServerError,
    SessionStoreError,
    ConfigurationError
)
from .utils.logging import setup_logging

__all__ = [
    "ServerConnector",
    "ServerConnection",
    "RemoteFile",
    "FileListListener",
    "SessionStore",
    "Transport",
    "TransportResponse",
    "AiohttpTransport",
    "ErrorKind",
    "ConnectorError",
    "ServerError",
    "SessionStoreError",
    "ConfigurationError",
    "setup_logging"
]

__version__ = "0.1.0"
