"""Session persistence."""

from .session_store import SessionStore, SESSION_FILE_NAME

__all__ = ["SessionStore", "SESSION_FILE_NAME"]
