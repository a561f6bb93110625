from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..ordering import SortKey, schedule_sort_key
from ..timestamps import parse_timestamp


# PUBLIC_INTERFACE
class Todo(BaseModel):
    """
    A todo as received from the API. Immutable; mutations go through the store
    and come back as new instances.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    text: str
    scheduled_at: Optional[datetime] = Field(default=None, alias="scheduledAt")
    completed: bool = False
    created_at: datetime = Field(..., alias="createdAt")

    @field_validator("scheduled_at", "created_at", mode="before")
    @classmethod
    def parse_wire_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v)

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_at is not None

    def sort_key(self) -> SortKey:
        return schedule_sort_key(self.scheduled_at, self.created_at, self.id)
