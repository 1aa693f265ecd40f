from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

class ExtractedTask(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    start_time: datetime = Field(..., alias="startTime")
    end_time: datetime = Field(..., alias="endTime")
    timezone: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("description", mode="before")
    @classmethod
    def none_description_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("start_time", "end_time")
    @classmethod
    def require_offset(cls, v: datetime) -> datetime:
        # the timezone label is informational; only explicit offsets count
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("timestamp must carry a UTC offset")
        return v

    @model_validator(mode="after")
    def end_not_before_start(self) -> "ExtractedTask":
        if self.end_time < self.start_time:
            raise ValueError("endTime must not be before startTime")
        return self
