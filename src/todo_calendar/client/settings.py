from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


@dataclass(frozen=True)
class ClientSettings:
    """
    Client settings loaded from environment variables.

    Env vars:
    - TODO_API_URL: base URL of the todo API. Default 'http://127.0.0.1:8000'
    - TODO_TIMEZONE: 'local' (default), 'UTC', an IANA name, or a fixed offset like '+02:00'
    - TODO_HTTP_TIMEOUT: request timeout in seconds. Default 10
    """

    api_url: str
    timezone: tzinfo
    http_timeout: float


# PUBLIC_INTERFACE
def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve a timezone name into a tzinfo.

    "local" (or empty) resolves to the machine's local timezone; "UTC"/"Z" to
    timezone.utc; "+HH:MM"/"-HHMM" to a fixed offset; anything else through
    zoneinfo. Raises ValueError for unknown identifiers.
    """
    s = (name or "").strip()
    if not s or s.lower() in {"local", "system"}:
        return datetime.now().astimezone().tzinfo or timezone.utc
    if s.lower() in {"utc", "z", "gmt"}:
        return timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh, mm = int(hh_s), int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {s!r}")
        minutes = hh * 60 + mm
        return timezone(timedelta(minutes=minutes if sign_s == "+" else -minutes))

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as ex:
        raise ValueError(f"Invalid timezone identifier: {s!r}") from ex


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return default


# PUBLIC_INTERFACE
def get_client_settings() -> ClientSettings:
    """Return client settings loaded from environment variables."""
    return ClientSettings(
        api_url=(os.getenv("TODO_API_URL") or "http://127.0.0.1:8000").strip().rstrip("/"),
        timezone=resolve_timezone(os.getenv("TODO_TIMEZONE")),
        http_timeout=_parse_float(os.getenv("TODO_HTTP_TIMEOUT") or "10", 10.0),
    )
