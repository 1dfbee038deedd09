"""HTTP transports the connector talks to the server through."""

from .base import Transport, TransportResponse, GET, POST, PUT, DELETE
from .aiohttp_transport import AiohttpTransport, AiohttpResponse

__all__ = [
    "Transport",
    "TransportResponse",
    "AiohttpTransport",
    "AiohttpResponse",
    "GET",
    "POST",
    "PUT",
    "DELETE"
]
