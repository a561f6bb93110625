from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..timestamps import format_timestamp, parse_timestamp

TEXT_REQUIRED = "Text is required"
INVALID_SCHEDULE = "Invalid date/time format"


# PUBLIC_INTERFACE
class TodoWrite(BaseModel):
    """
    Request body for creating a Todo or replacing an existing one.

    Update is a full replacement: an omitted or null scheduledAt clears the schedule.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "text": "Buy milk",
                "scheduledAt": "2024-06-01T00:00:00.000Z",
            }
        },
    )

    text: str = Field(..., description="Task text; must not be blank")
    scheduled_at: Optional[datetime] = Field(
        default=None,
        alias="scheduledAt",
        description=(
            "Optional ISO8601 date or datetime. Naive values are read as UTC, bare dates as "
            "midnight UTC. Midnight means the todo is date-only."
        ),
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """
        Reject empty text. Text is stored exactly as sent.
        """
        if not v:
            raise ValueError(TEXT_REQUIRED)
        return v

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def parse_scheduled_at(cls, v: Any) -> Optional[datetime]:
        """
        Normalize scheduledAt from str/date/datetime to an aware UTC datetime.
        """
        try:
            return parse_timestamp(v)
        except ValueError as e:
            raise ValueError(INVALID_SCHEDULE) from e


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "7b0d4a5e-3c1f-4f7e-9a51-1f0f3f4b8a2c",
                "text": "Buy milk",
                "scheduledAt": "2024-06-01T00:00:00.000Z",
                "completed": False,
                "createdAt": "2024-05-25T10:15:30.123Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    text: str = Field(..., description="Task text")
    scheduled_at: Optional[datetime] = Field(
        default=None, alias="scheduledAt", description="Scheduled time as an ISO8601 UTC timestamp"
    )
    completed: bool = Field(default=False, description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")

    @field_serializer("scheduled_at", "created_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value is not None else None


# PUBLIC_INTERFACE
class DeleteResult(BaseModel):
    """Acknowledgment returned after a successful delete."""

    success: bool = Field(True, description="Always true on success")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Error body returned for 400 and 404 responses."""

    error: str = Field(..., description="Human readable error message")
