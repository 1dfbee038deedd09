"""Status code tables for every server operation.

Each operation has exactly one success status and a fixed set of failure
statuses. Anything not listed is an ``UNKNOWN_SERVER_ERROR`` carrying the raw
status code.
"""

from typing import Dict, Optional, Tuple

from .errors import ErrorKind, ServerError

NOT_LOGGED_IN = "not logged in"
FILE_NOT_FOUND = "file not found"
SESSION_NOT_TRANSMITTED = "session not transmitted"
ALREADY_LOGGED_IN = "already logged in"
CONFLICT = "conflict"
CONTENT_LENGTH_REQUIRED = "content-length required"
SESSION_DOES_NOT_EXIST = "session does not exist"
UNKNOWN_ERROR = "unknown error"

AUTHENTICATE = "authenticate"
END_SESSION = "end_session"
FETCH_FILE = "fetch_file"
SEND_FILE = "send_file"
DELETE_FILE = "delete_file"
LIST_FILES = "list_files"
REGISTER_USER = "register_user"

StatusTable = Dict[int, Tuple[ErrorKind, str]]

SUCCESS_STATUS: Dict[str, int] = {
    AUTHENTICATE: 202,
    END_SESSION: 200,
    FETCH_FILE: 200,
    SEND_FILE: 201,
    DELETE_FILE: 200,
    LIST_FILES: 200,
    REGISTER_USER: 200,
}

FAILURE_STATUS: Dict[str, StatusTable] = {
    AUTHENTICATE: {
        403: (ErrorKind.INVALID_CREDENTIALS, "pw/user wrong"),
        406: (ErrorKind.ALREADY_AUTHENTICATED, ALREADY_LOGGED_IN),
        503: (ErrorKind.SESSION_CREATION_FAILED, "session could not be created"),
    },
    END_SESSION: {
        401: (ErrorKind.NOT_AUTHENTICATED, NOT_LOGGED_IN),
        405: (ErrorKind.SESSION_NOT_TRANSMITTED, SESSION_NOT_TRANSMITTED),
        503: (ErrorKind.SESSION_STORE_UNAVAILABLE, SESSION_DOES_NOT_EXIST),
    },
    FETCH_FILE: {
        401: (ErrorKind.NOT_AUTHENTICATED, NOT_LOGGED_IN),
        404: (ErrorKind.FILE_NOT_FOUND, FILE_NOT_FOUND),
        405: (ErrorKind.SESSION_NOT_TRANSMITTED, SESSION_NOT_TRANSMITTED),
        503: (ErrorKind.SESSION_STORE_UNAVAILABLE, SESSION_DOES_NOT_EXIST),
    },
    SEND_FILE: {
        401: (ErrorKind.NOT_AUTHENTICATED, NOT_LOGGED_IN),
        404: (ErrorKind.FILE_NOT_FOUND, FILE_NOT_FOUND),
        405: (ErrorKind.SESSION_NOT_TRANSMITTED, SESSION_NOT_TRANSMITTED),
        409: (ErrorKind.CONFLICT, CONFLICT),
        411: (ErrorKind.CONTENT_LENGTH_REQUIRED, CONTENT_LENGTH_REQUIRED),
        503: (ErrorKind.SESSION_STORE_UNAVAILABLE, SESSION_DOES_NOT_EXIST),
    },
    DELETE_FILE: {
        401: (ErrorKind.NOT_AUTHENTICATED, NOT_LOGGED_IN),
        404: (ErrorKind.FILE_NOT_FOUND, FILE_NOT_FOUND),
        405: (ErrorKind.SESSION_NOT_TRANSMITTED, SESSION_NOT_TRANSMITTED),
        500: (ErrorKind.DELETE_FAILED, "error deleting the file"),
        503: (ErrorKind.SESSION_STORE_UNAVAILABLE, SESSION_DOES_NOT_EXIST),
    },
    LIST_FILES: {
        401: (ErrorKind.NOT_AUTHENTICATED, NOT_LOGGED_IN),
        405: (ErrorKind.SESSION_NOT_TRANSMITTED, SESSION_NOT_TRANSMITTED),
        500: (ErrorKind.LIST_FAILED, "error getting the file information"),
        503: (ErrorKind.SESSION_STORE_UNAVAILABLE, SESSION_DOES_NOT_EXIST),
    },
    REGISTER_USER: {
        400: (
            ErrorKind.INVALID_REQUEST,
            "user name and/or password and/or confirmation missing/wrong",
        ),
        406: (ErrorKind.ALREADY_AUTHENTICATED, ALREADY_LOGGED_IN),
        500: (ErrorKind.REGISTRATION_FAILED, "error while adding user to database"),
    },
}


def map_status(operation: str, status: int) -> Optional[ServerError]:
    """Translate a response status into the error it stands for.

    Args:
        operation: Operation name, one of the keys of ``SUCCESS_STATUS``
        status: HTTP status code returned by the server

    Returns:
        None for the operation's success status, a ServerError otherwise

    Raises:
        KeyError: If the operation has no status table
    """
    if status == SUCCESS_STATUS[operation]:
        return None
    kind, detail = FAILURE_STATUS[operation].get(
        status, (ErrorKind.UNKNOWN_SERVER_ERROR, UNKNOWN_ERROR)
    )
    return ServerError(operation, status, kind, detail)


def check_status(operation: str, status: int) -> None:
    """Raise the mapped ServerError unless ``status`` means success."""
    error = map_status(operation, status)
    if error is not None:
        raise error
