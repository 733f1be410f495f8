"""
Calendar date <-> store key conversion.

A key is the Unix timestamp (seconds) of the date at 00:00:00 UTC packed
as an 8-byte big-endian unsigned integer, so byte order and date order
coincide and the store can range-scan days chronologically.
"""

import struct
from datetime import date, datetime, timezone
from typing import Union

from core.errors import DateParseError, DatabaseError

DATE_FORMAT = "%Y-%m-%d"
EARLIEST_DATE = date(1999, 1, 4)
KEY_SIZE = 8

_KEY = struct.Struct(">Q")
_EPOCH = date(1970, 1, 1)

DateLike = Union[str, date]


def parse_date(value: DateLike) -> date:
    """Parse an ISO calendar date (``YYYY-MM-DD``) or pass a date through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise DateParseError(value)
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise DateParseError(value) from None


def date_as_key(value: DateLike) -> bytes:
    """
    Encode a calendar date as an order-preserving 8-byte key.

    Args:
        value: ISO date string or datetime.date

    Returns:
        8-byte big-endian midnight-UTC timestamp

    Raises:
        DateParseError: If value is not a valid date, or is before 1970-01-01
            (negative timestamps would not sort correctly)

    Example:
        >>> date_as_key("1999-01-04")
        b'\\x00\\x00\\x00\\x006\\x90\\x04\\x80'
    """
    day = parse_date(value)
    if day < _EPOCH:
        raise DateParseError(value)
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return _KEY.pack(int(midnight.timestamp()))


def key_as_date(key: bytes) -> date:
    """Decode a key produced by date_as_key back into a date."""
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
        raise DatabaseError(f"invalid date key {key!r}")
    (seconds,) = _KEY.unpack(bytes(key))
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
