from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from quorum.schemas.common import ClockTime


class RecurrenceBase(BaseModel):
    day_of_week: int = Field(..., description="0 = Sunday ... 6 = Saturday")
    start_date: date
    end_date: Optional[date] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: Optional[str] = Field(default=None, max_length=500)


class RecurrenceCreate(RecurrenceBase):
    pass


class RecurrenceUpdate(RecurrenceBase):
    """Full replacement of the rule; existing exceptions are kept."""


class RecurrenceExceptionCreate(BaseModel):
    excluded_date: date


class RecurrenceExceptionRead(BaseModel):
    id: UUID
    recurrence_id: UUID
    excluded_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecurrenceRead(RecurrenceBase):
    id: UUID
    participant_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecurrenceWithExceptions(RecurrenceRead):
    exceptions: list[RecurrenceExceptionRead] = []
