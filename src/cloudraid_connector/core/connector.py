"""Connector managing the session with a CloudRAID server."""

import os
import tempfile
from pathlib import Path
from typing import IO, TYPE_CHECKING, AsyncIterator, Dict, List, Optional, Union

from .errors import ErrorKind, ServerError, SessionStoreError
from .listing import parse_listing, split_lines
from .models import FileListListener, RemoteFile, ServerConnection
from .status import (
    AUTHENTICATE,
    DELETE_FILE,
    END_SESSION,
    FETCH_FILE,
    LIST_FILES,
    REGISTER_USER,
    SEND_FILE,
    check_status,
    map_status,
)
from ..api_clients.aiohttp_transport import AiohttpTransport
from ..api_clients.base import DELETE, GET, POST, PUT, Transport, TransportResponse
from ..config.settings import get_settings
from ..utils.logging import get_logger, log_async_execution_time, mask_secret

if TYPE_CHECKING:
    from ..auth.session_store import SessionStore

USER = "X-Username"
PASSWORD = "X-Password"
CONFIRM = "X-Confirm"
CONTENT_LENGTH = "Content-Length"
SET_COOKIE = "Set-Cookie"
COOKIE = "Cookie"

SESSION_PREFIX = "JSESSIONID="


class ServerConnector:
    """Issues authenticated requests against a CloudRAID server.

    The connector is either unauthenticated (no session token) or
    authenticated. Every request made while authenticated carries the token
    as its ``Cookie`` header. Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        connection: ServerConnection,
        transport: Optional[Transport] = None,
        listener: Optional[FileListListener] = None,
        session_store: Optional["SessionStore"] = None,
        session: Optional[str] = None,
        buffer_size: Optional[int] = None,
        temp_dir: Optional[Union[str, Path]] = None,
        encoding: Optional[str] = None
    ):
        """Initialize the connector.

        Args:
            connection: Server address and credentials
            transport: Transport to send requests through; an AiohttpTransport
                for the connection's base URL is created when omitted
            listener: Optional listener registered right away
            session_store: Where ``store_session`` persists the session and
                from which ``end_session`` removes it
            session: Session token of an already authenticated session
            buffer_size: Chunk size for file transfers
            temp_dir: Directory downloaded files are created in
            encoding: Encoding of the file listing
        """
        settings = get_settings()

        self.connection = connection
        self.transport = transport or AiohttpTransport(
            connection.base_url,
            timeout_seconds=settings.transfer.timeout_seconds
        )
        self.session_store = session_store
        self.buffer_size = buffer_size or settings.transfer.buffer_size
        self.temp_dir = Path(temp_dir) if temp_dir else settings.transfer.temp_dir
        self.encoding = encoding or settings.transfer.encoding
        self.logger = get_logger(self.__class__.__name__)

        self._session = session
        self._listeners: List[FileListListener] = []
        if listener is not None:
            self.register_listener(listener)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.transport.close()

    def __repr__(self) -> str:
        return (
            f"ServerConnector(connection={self.connection!r}, "
            f"session={mask_secret(self._session, len(SESSION_PREFIX) + 4)})"
        )

    @property
    def session(self) -> Optional[str]:
        """The current session token, None when not authenticated."""
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def listeners(self) -> List[FileListListener]:
        return list(self._listeners)

    def register_listener(self, listener: FileListListener) -> None:
        """Register a listener for every subsequent file listing.

        Registering the same listener twice has no effect.
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

    def _session_headers(self) -> Dict[str, str]:
        if self._session is None:
            return {}
        return {COOKIE: self._session}

    @staticmethod
    def _extract_session(response: TransportResponse) -> Optional[str]:
        for cookie in response.header_values(SET_COOKIE):
            for segment in cookie.split(";"):
                segment = segment.strip()
                if segment.startswith(SESSION_PREFIX):
                    return segment
        return None

    @log_async_execution_time
    async def authenticate(self) -> None:
        """Log in with the connection's user name and password.

        Raises:
            ServerError: If the server refuses to create a session
        """
        headers = {USER: self.connection.user, PASSWORD: self.connection.password}
        async with self.transport.request(POST, "/user/auth/", headers=headers) as response:
            check_status(AUTHENTICATE, response.status)
            session = self._extract_session(response)

        if session is None:
            raise ServerError(
                AUTHENTICATE, response.status,
                ErrorKind.UNKNOWN_SERVER_ERROR, "session cookie missing"
            )

        self._session = session
        self.logger.info(
            "Authenticated",
            host=self.connection.host,
            user=self.connection.user,
            session=mask_secret(session, len(SESSION_PREFIX) + 4)
        )

    @log_async_execution_time
    async def end_session(self) -> None:
        """Log out and forget the session.

        The local token and the persisted session are dropped on success and
        on every failure except ``SESSION_NOT_TRANSMITTED``, which keeps the
        token so the logout can be attempted again.

        Raises:
            ServerError: If the server reports a failure
        """
        async with self.transport.request(
            GET, "/user/auth/logout/", headers=self._session_headers()
        ) as response:
            error = map_status(END_SESSION, response.status)

        # TODO: decide with the server team whether a 405 should really keep the token
        if error is not None and error.kind is ErrorKind.SESSION_NOT_TRANSMITTED:
            self.logger.warning("Logout failed, keeping session", status=error.status)
            raise error

        self._session = None
        self._remove_persisted_session()

        if error is not None:
            self.logger.warning("Logout failed, session dropped", status=error.status, error=str(error))
            raise error
        self.logger.info("Session ended", host=self.connection.host, user=self.connection.user)

    @log_async_execution_time
    async def fetch_file(self, path: str) -> Path:
        """Download a file into a fresh temporary file.

        The caller owns the returned file and has to move or delete it.

        Args:
            path: Path of the file on the server

        Returns:
            Path of the temporary file holding the contents

        Raises:
            ServerError: If the server does not deliver the file
        """
        async with self.transport.request(
            GET, f"/file/{path}/", headers=self._session_headers()
        ) as response:
            check_status(FETCH_FILE, response.status)

            self.temp_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(suffix=".tmp", dir=self.temp_dir)
            target = Path(name)
            try:
                with os.fdopen(fd, "wb") as out:
                    async for chunk in response.iter_chunks(self.buffer_size):
                        out.write(chunk)
            except Exception:
                self._discard(target)
                raise

        self.logger.info("File downloaded", path=path, target=str(target))
        return target

    @log_async_execution_time
    async def send_file(
        self,
        path: str,
        local_file: Union[str, Path],
        update: bool = False
    ) -> None:
        """Upload a local file.

        Args:
            path: Path of the file on the server
            local_file: File to read the contents from
            update: Replace an existing file instead of creating a new one

        Raises:
            ServerError: If the server rejects the upload
            OSError: If the local file cannot be read
        """
        local_file = Path(local_file)
        size = local_file.stat().st_size
        headers = self._session_headers()
        headers[CONTENT_LENGTH] = str(size)
        url_path = f"/file/{path}/update/" if update else f"/file/{path}/"

        self.logger.info("Uploading file", path=path, size=size, update=update)
        with open(local_file, "rb") as source:
            async with self.transport.request(
                PUT, url_path, headers=headers, body=self._read_chunks(source)
            ) as response:
                check_status(SEND_FILE, response.status)

        self.logger.info("Upload done", path=path)

    @log_async_execution_time
    async def delete_file(self, path: str) -> None:
        """Delete a file on the server.

        Raises:
            ServerError: If the file cannot be deleted
        """
        async with self.transport.request(
            DELETE, f"/file/{path}/", headers=self._session_headers()
        ) as response:
            check_status(DELETE_FILE, response.status)

        self.logger.info("File deleted", path=path)

    @log_async_execution_time
    async def list_files(self) -> List[RemoteFile]:
        """Retrieve the list of files stored on the server.

        The list is handed to every registered listener, in registration
        order, before it is returned.

        Raises:
            ServerError: If the listing cannot be retrieved
        """
        async with self.transport.request(
            GET, "/list/", headers=self._session_headers()
        ) as response:
            check_status(LIST_FILES, response.status)
            body = await response.read(self.buffer_size)

        text = body.decode(self.encoding, errors="replace")
        files = list(parse_listing(split_lines(text)))
        self.logger.info("File list retrieved", files=len(files))

        for listener in self._listeners:
            listener.receive_file_list(files)
        return files

    @log_async_execution_time
    async def register_user(self, confirmation: str) -> None:
        """Create a new account for the connection's user name and password.

        Args:
            confirmation: Repetition of the password

        Raises:
            ServerError: If the account cannot be created
        """
        headers = {
            USER: self.connection.user,
            PASSWORD: self.connection.password,
            CONFIRM: confirmation,
        }
        async with self.transport.request(POST, "/user/add/", headers=headers) as response:
            check_status(REGISTER_USER, response.status)

        self.logger.info("User registered", host=self.connection.host, user=self.connection.user)

    def store_session(self) -> None:
        """Persist the current session through the session store.

        Does nothing when not authenticated.

        Raises:
            SessionStoreError: If no store is configured or writing fails
        """
        if self._session is None:
            return
        if self.session_store is None:
            raise SessionStoreError("No session store configured")
        self.session_store.store(self)

    def _remove_persisted_session(self) -> None:
        if self.session_store is None:
            return
        try:
            self.session_store.remove()
        except SessionStoreError as e:
            self.logger.warning("Could not remove persisted session", error=str(e))

    async def _read_chunks(self, source: IO[bytes]) -> AsyncIterator[bytes]:
        while True:
            chunk = source.read(self.buffer_size)
            if not chunk:
                break
            yield chunk

    def _discard(self, target: Path) -> None:
        try:
            target.unlink()
        except OSError as e:
            self.logger.warning("Could not remove partial download", target=str(target), error=str(e))
