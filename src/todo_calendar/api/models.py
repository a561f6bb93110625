from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo record for the storage
    backends.

    Fields:
    - id: Opaque unique identifier (UUID4 string), never reused
    - text: Non-empty task text, stored as sent
    - scheduled_at: Optional point in time (aware UTC); midnight means date-only
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp assigned by the store
    """

    id: str
    text: str
    scheduled_at: Optional[datetime]
    completed: bool
    created_at: datetime
