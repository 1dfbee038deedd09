"""Transport interface the connector issues its HTTP requests through."""

from abc import ABC, abstractmethod
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterable,
    AsyncIterator,
    List,
    Mapping,
    Optional,
)

GET = "GET"
POST = "POST"
PUT = "PUT"
DELETE = "DELETE"


class TransportResponse(ABC):
    """Status, headers and body stream of one HTTP response."""

    def __init__(self, status: int, headers: Mapping[str, str]):
        self.status = status
        self.headers = headers

    def header_values(self, name: str) -> List[str]:
        """Return every value sent for a header, matching names case-insensitively."""
        getall = getattr(self.headers, "getall", None)
        if getall is not None:
            return list(getall(name, []))
        return [
            value for key, value in self.headers.items()
            if key.lower() == name.lower()
        ]

    @abstractmethod
    def iter_chunks(self, size: int) -> AsyncIterator[bytes]:
        """Iterate over the response body in chunks of at most ``size`` bytes."""

    async def read(self, size: int = 65536) -> bytes:
        """Read the whole response body."""
        parts = []
        async for chunk in self.iter_chunks(size):
            parts.append(chunk)
        return b"".join(parts)


class Transport(ABC):
    """Executes HTTP requests against a single server."""

    @abstractmethod
    def request(
        self,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[AsyncIterable[bytes]] = None
    ) -> AsyncContextManager[TransportResponse]:
        """Send a request and expose its response.

        Args:
            method: HTTP method
            path: Request path relative to the server's base URL
            headers: Request headers
            body: Optional request body stream

        Returns:
            An async context manager yielding the response; leaving it
            releases the underlying connection whatever the outcome
        """

    async def close(self) -> None:
        """Release any resources held by the transport."""

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
