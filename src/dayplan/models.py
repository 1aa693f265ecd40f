from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class TaskState(str, Enum):
    EXTRACTED = "extracted"
    ENRICHING = "enriching"
    CALENDAR_CREATED = "calendar_created"
    PERSISTED = "persisted"
    FAILED = "failed"


class OwnerProfile(BaseModel):
    display_name: str
    primary_email: str


class NewTask(BaseModel):
    """A task that has its calendar event and is ready to be written."""

    owner_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    timezone: Optional[str] = None
    calendar_event_id: Optional[str] = None
    base64_image: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @model_validator(mode="after")
    def end_not_before_start(self) -> "NewTask":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class TaskRecord(NewTask):
    id: UUID
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record) -> "TaskRecord":
        return cls(
            id=record["id"],
            owner_id=record["owner_id"],
            title=record["title"],
            description=record["description"],
            start_time=record["start_time"],
            end_time=record["end_time"],
            timezone=record["timezone"],
            calendar_event_id=record["calendar_event_id"],
            base64_image=record["base64_image"],
            completed=record["completed"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


class TaskOutcome(BaseModel):
    title: str
    success: bool
    error: Optional[str] = None
    state: TaskState
    failed_at: Optional[TaskState] = None
    task_id: Optional[UUID] = None
    calendar_event_id: Optional[str] = None
