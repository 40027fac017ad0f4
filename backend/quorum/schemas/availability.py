from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from quorum.schemas.common import ClockTime


class AvailabilityCreate(BaseModel):
    """One-off availability. Leaving both times empty means all day."""

    date: dt.date
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: Optional[str] = Field(default=None, max_length=1000)


class AvailabilityUpdate(BaseModel):
    """Partial update; an explicit ``null`` clears a time bound."""

    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: Optional[str] = Field(default=None, max_length=1000)


class AvailabilityRead(BaseModel):
    id: UUID
    participant_id: UUID
    participant_name: str
    date: dt.date
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
