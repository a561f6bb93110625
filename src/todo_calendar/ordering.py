"""
Total ordering of todos shared by the record stores and the client collection.

Scheduled todos come first in chronological order; unscheduled todos follow,
oldest first. Remaining ties fall back to creation time and then id so that
two stores holding the same records always agree on the order.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

SortKey = Tuple[int, datetime, datetime, str]


# PUBLIC_INTERFACE
def schedule_sort_key(scheduled_at: Optional[datetime], created_at: datetime, todo_id: str) -> SortKey:
    """Return the sort key placing a todo within the collection."""
    if scheduled_at is not None:
        return (0, scheduled_at, created_at, todo_id)
    return (1, created_at, created_at, todo_id)
