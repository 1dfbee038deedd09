"""Exceptions raised by the CloudRAID connector."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure kinds a CloudRAID server can report."""

    INVALID_CREDENTIALS = "invalid_credentials"
    ALREADY_AUTHENTICATED = "already_authenticated"
    SESSION_CREATION_FAILED = "session_creation_failed"
    NOT_AUTHENTICATED = "not_authenticated"
    SESSION_NOT_TRANSMITTED = "session_not_transmitted"
    SESSION_STORE_UNAVAILABLE = "session_store_unavailable"
    FILE_NOT_FOUND = "file_not_found"
    CONFLICT = "conflict"
    CONTENT_LENGTH_REQUIRED = "content_length_required"
    DELETE_FAILED = "delete_failed"
    LIST_FAILED = "list_failed"
    INVALID_REQUEST = "invalid_request"
    REGISTRATION_FAILED = "registration_failed"
    UNKNOWN_SERVER_ERROR = "unknown_server_error"


class ConnectorError(Exception):
    """Base exception for all connector errors."""


class ServerError(ConnectorError):
    """Raised when the server answers with anything but the expected status."""

    def __init__(self, operation: str, status: int, kind: ErrorKind, detail: str):
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.status = status
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return (
            f"ServerError(operation={self.operation!r}, status={self.status}, "
            f"kind={self.kind.name}, detail={self.detail!r})"
        )


class SessionStoreError(ConnectorError):
    """Raised when the persisted session cannot be written or read back."""


class ConfigurationError(ConnectorError):
    """Raised when connection settings are invalid."""
