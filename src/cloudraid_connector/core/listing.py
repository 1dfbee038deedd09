"""Parser for the CloudRAID file listing format.

Every record sits on its own line::

    "name","hash","2012-05-31 10:42:07.0","UPLOADED"

Quotes and ampersands inside a field are escaped as ``&quot;`` and ``&amp;``.
Malformed records are dropped without failing the listing.
"""

import re
from datetime import datetime, timedelta
from typing import Iterable, Iterator, List, Optional

from .models import RemoteFile
from ..utils.logging import get_logger

logger = get_logger(__name__)

FIELD_SEPARATOR = '","'
FIELD_COUNT = 4

# yyyy-MM-dd hh:mm:ss.S
TIMESTAMP_PATTERN = re.compile(
    r"(\d{4})-(\d{1,2})-(\d{1,2}) (\d{1,2}):(\d{1,2}):(\d{1,2})\.(\d+)"
)


def unescape(value: str) -> str:
    """Undo the entity escaping the server applies to listing fields."""
    return value.replace("&quot;", '"').replace("&amp;", "&")


def parse_timestamp(value: str) -> datetime:
    """Parse a ``yyyy-MM-dd hh:mm:ss.S`` timestamp.

    The hour is the server's 12-hour field without an AM/PM marker, so ``12``
    stands for midnight; larger hours are taken as they are. The fraction is
    a count of milliseconds. Text after the fraction is ignored.

    Raises:
        ValueError: If the value does not match the format or lies outside
            the supported date range
    """
    match = TIMESTAMP_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Unparseable timestamp: {value!r}")

    year, month, day, hour, minute, second, millis = (int(g) for g in match.groups())
    if hour == 12:
        hour = 0
    try:
        return datetime(year, month, day, hour, minute, second) + timedelta(milliseconds=millis)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {value!r}") from e


def split_fields(line: str) -> List[str]:
    """Strip the outer quotes of a record and split it into raw fields."""
    fields = line[1:-1].split(FIELD_SEPARATOR)
    # Empty trailing fields do not count
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def parse_line(line: str) -> Optional[RemoteFile]:
    """Parse one listing record.

    Returns:
        The parsed RemoteFile, or None if the line is not a valid record
    """
    line = line.rstrip("\r\n")
    if len(line) < 3:
        return None

    fields = split_fields(line)
    if len(fields) != FIELD_COUNT:
        logger.debug("Skipping listing record", reason="field count", fields=len(fields))
        return None

    name, file_hash, timestamp, state = (unescape(f) for f in fields)
    try:
        last_modified = parse_timestamp(timestamp)
    except ValueError as e:
        logger.debug("Skipping listing record", reason="timestamp", error=str(e))
        return None

    return RemoteFile(name=name, hash=file_hash, last_modified=last_modified, state=state)


def parse_listing(lines: Iterable[str]) -> Iterator[RemoteFile]:
    """Yield the valid records of a listing in line order."""
    for line in lines:
        remote_file = parse_line(line)
        if remote_file is not None:
            yield remote_file


def split_lines(text: str) -> List[str]:
    """Split a listing body on ``\\n``, ``\\r\\n`` and ``\\r`` terminators."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
