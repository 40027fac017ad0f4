from __future__ import annotations

import datetime as dt
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from quorum.schemas.common import ClockTime


class ParticipantAvailabilitySummary(BaseModel):
    # None when the calendar locks participants and this is not the viewer
    participant_id: Optional[UUID] = None
    participant_name: str
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: Optional[str] = None


class DateAvailabilitySummary(BaseModel):
    date: dt.date
    total_count: int
    max_simultaneous: int
    is_viable: bool
    participants: list[ParticipantAvailabilitySummary]


class SlotRead(BaseModel):
    start: ClockTime
    end: ClockTime
    count: int
    participant_names: list[str]
    is_viable: bool


class CandidateWindowRead(BaseModel):
    start: ClockTime
    end: ClockTime
    min_count: int
    duration_minutes: int


class DateSlotsRead(BaseModel):
    date: dt.date
    kind: Literal["weekday", "holiday", "holiday_eve"]
    window_start: Optional[ClockTime] = None
    window_end: Optional[ClockTime] = None
    slots: list[SlotRead]
    candidate_windows: list[CandidateWindowRead]
