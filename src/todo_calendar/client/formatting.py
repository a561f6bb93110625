"""
Display and input conversions shared by the list and the calendar.

A scheduled time whose local clock reads 00:00 is a date-only (all-day) todo.
"""
from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional, Sequence

ALL_DAY = "All day"
NO_TIME = "--:--"
NO_DATE = "No date set"


def to_local(value: datetime, tz: tzinfo) -> datetime:
    return value.astimezone(tz)


def is_date_only(value: datetime, tz: tzinfo) -> bool:
    local = to_local(value, tz)
    return local.hour == 0 and local.minute == 0


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=tz)


def same_local_day(value: datetime, day: date, tz: tzinfo) -> bool:
    return to_local(value, tz).date() == day


def format_time(value: Optional[datetime], tz: tzinfo) -> str:
    """Agenda label: 'All day' for midnight, otherwise 'HH:MM'."""
    if value is None:
        return NO_TIME
    if is_date_only(value, tz):
        return ALL_DAY
    return f"{to_local(value, tz):%H:%M}"


def format_date_time(value: Optional[datetime], tz: tzinfo) -> str:
    """List label: 'YYYY-MM-DD' for date-only todos, otherwise 'YYYY-MM-DD HH:MM'."""
    if value is None:
        return NO_DATE
    local = to_local(value, tz)
    if is_date_only(value, tz):
        return f"{local:%Y-%m-%d}"
    return f"{local:%Y-%m-%d %H:%M}"


def date_input_value(value: Optional[datetime], tz: tzinfo) -> str:
    return f"{to_local(value, tz):%Y-%m-%d}" if value is not None else ""


def time_input_value(value: Optional[datetime], tz: tzinfo) -> str:
    return f"{to_local(value, tz):%H:%M}" if value is not None else ""


def combine_date_time(date_str: str, time_str: str, tz: tzinfo) -> Optional[datetime]:
    """
    Combine form inputs ('YYYY-MM-DD', 'HH:MM') into an aware datetime in tz.

    No date means no schedule, whatever the time field holds. A date without a
    time means midnight, i.e. a date-only todo. Raises ValueError on malformed input.
    """
    if not date_str.strip():
        return None
    day = date.fromisoformat(date_str.strip())
    clock = time.fromisoformat(time_str.strip()) if time_str.strip() else time(0, 0)
    return datetime.combine(day, clock.replace(second=0, microsecond=0), tzinfo=tz)


def format_long_date(day: date) -> str:
    """e.g. 'Saturday, June 1, 2024'"""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_task_badge(count: int) -> str:
    if count <= 0:
        return ""
    return f"{count} task{'s' if count > 1 else ''}"


def week_caption(days: Sequence[date]) -> str:
    """'June 2024' when the week sits in one month, otherwise 'May - Jun 2024'."""
    first, last = days[0], days[-1]
    if (first.year, first.month) == (last.year, last.month):
        return f"{first:%B %Y}"
    return f"{first:%b} - {last:%b %Y}"


def month_caption(day: date) -> str:
    return f"{day:%B %Y}"
