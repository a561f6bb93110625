from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional, Union

# Shared type for incoming timestamps which can be a date, datetime, or ISO8601 string
TimestampInput = Union[date, datetime, str]


# PUBLIC_INTERFACE
def normalize_timestamp(value: datetime) -> datetime:
    """
    Return value as an aware UTC datetime truncated to millisecond precision.
    Naive datetimes are read as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Current time as a normalized UTC timestamp."""
    return normalize_timestamp(datetime.now(timezone.utc))


# PUBLIC_INTERFACE
def parse_timestamp(value: Optional[Any]) -> Optional[datetime]:
    """
    Normalize timestamp input into an aware UTC datetime.
    - None, empty strings and falsy scalars (0, false) mean "no timestamp" and return None.
    - Strings are parsed as ISO8601 datetimes ('Z' suffix accepted); a bare date means midnight UTC.
    - A date (not datetime) is promoted to midnight UTC.
    - Anything else raises ValueError.
    """
    if value is None:
        return None

    if isinstance(value, (bool, int, float)) and not value:
        return None

    if isinstance(value, datetime):
        return normalize_timestamp(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s[-1] in "zZ":
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
            except ValueError as e:
                raise ValueError(f"Invalid timestamp: {value!r}") from e
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        try:
            return normalize_timestamp(parsed)
        except OverflowError as e:
            # offsets can push the instant outside the datetime range
            raise ValueError(f"Timestamp out of range: {value!r}") from e

    raise ValueError(f"Invalid timestamp type: {type(value).__name__}")


# PUBLIC_INTERFACE
def format_timestamp(value: datetime) -> str:
    """
    Serialize a timestamp for the wire, e.g. '2024-06-01T09:30:00.000Z'.

    The fixed width and UTC offset make lexical order equal chronological order,
    which the SQLite store relies on for ORDER BY.
    """
    return normalize_timestamp(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
