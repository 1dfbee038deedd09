"""Shared fixtures: an in-memory transport standing in for the server."""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from multidict import CIMultiDict

from cloudraid_connector.api_clients.base import Transport, TransportResponse
from cloudraid_connector.core.connector import ServerConnector
from cloudraid_connector.core.models import ServerConnection

SESSION = "JSESSIONID=0123456789ABCDEF"


class StubResponse(TransportResponse):
    """Canned response with an in-memory body."""

    def __init__(self, status: int, headers=None, body: bytes = b""):
        super().__init__(status, CIMultiDict(headers or {}))
        self.body = body
        self.released = False
        self.chunk_sizes: List[int] = []

    async def iter_chunks(self, size):
        for start in range(0, len(self.body), size):
            chunk = self.body[start:start + size]
            self.chunk_sizes.append(len(chunk))
            yield chunk


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: Optional[bytes] = None
    chunks: List[bytes] = field(default_factory=list)


class StubTransport(Transport):
    """Replays queued responses and records every request."""

    def __init__(self, *responses: StubResponse):
        self.responses = list(responses)
        self.requests: List[RecordedRequest] = []
        self.closed = False

    def queue(self, status: int, headers=None, body: bytes = b"") -> StubResponse:
        response = StubResponse(status, headers, body)
        self.responses.append(response)
        return response

    @asynccontextmanager
    async def request(self, method, path, headers=None, body=None):
        recorded = RecordedRequest(method, path, dict(headers or {}))
        if body is not None:
            async for chunk in body:
                recorded.chunks.append(chunk)
            recorded.body = b"".join(recorded.chunks)
        self.requests.append(recorded)

        response = self.responses.pop(0)
        try:
            yield response
        finally:
            response.released = True

    async def close(self):
        self.closed = True

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def connection():
    return ServerConnection(host="cloud.example.org", user="alice", password="s3cret", port=8080)


@pytest.fixture
def transport():
    return StubTransport()


@pytest.fixture
def connector(connection, transport, tmp_path):
    """Authenticated connector talking to the stub transport."""
    return ServerConnector(
        connection,
        transport=transport,
        session=SESSION,
        buffer_size=8,
        temp_dir=tmp_path / "downloads"
    )


@pytest.fixture
def anonymous_connector(connection, transport, tmp_path):
    """Connector that has not logged in yet."""
    return ServerConnector(
        connection,
        transport=transport,
        buffer_size=8,
        temp_dir=tmp_path / "downloads"
    )
