"""Transport implementation backed by aiohttp."""

from contextlib import asynccontextmanager
from typing import AsyncIterable, AsyncIterator, Mapping, Optional

import aiohttp

from .base import Transport, TransportResponse
from ..utils.logging import get_logger


class AiohttpResponse(TransportResponse):
    """TransportResponse wrapping an ``aiohttp.ClientResponse``."""

    def __init__(self, response: aiohttp.ClientResponse):
        super().__init__(response.status, response.headers)
        self._response = response

    async def iter_chunks(self, size: int) -> AsyncIterator[bytes]:
        async for chunk in self._response.content.iter_chunked(size):
            yield chunk


class AiohttpTransport(Transport):
    """Sends requests to one server through a lazily created ClientSession."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: Optional[float] = None,
        verify_ssl: bool = True
    ):
        """Initialize the transport.

        Args:
            base_url: Scheme, host and port of the server
            timeout_seconds: Total timeout per request, None for no limit
            verify_ssl: Whether to verify TLS certificates
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.verify_ssl = verify_ssl
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = get_logger(self.__class__.__name__)

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            connector = aiohttp.TCPConnector(ssl=None if self.verify_ssl else False)
            # The session cookie is attached by hand on every request
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=self.timeout,
                cookie_jar=aiohttp.DummyCookieJar(),
            )
        return self.session

    @asynccontextmanager
    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[AsyncIterable[bytes]] = None
    ) -> AsyncIterator[TransportResponse]:
        url = f"{self.base_url}{path}"
        self.logger.debug("Sending request", method=method, url=url)
        session = self._get_session()
        async with session.request(
            method, url, headers=dict(headers or {}), data=body
        ) as response:
            self.logger.debug("Received response", method=method, url=url, status=response.status)
            yield AiohttpResponse(response)

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None
