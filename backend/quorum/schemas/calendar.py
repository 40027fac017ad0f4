from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from quorum.schemas.common import ClockTime, TimeRange
from quorum.schemas.participant import ParticipantRead

HolidaysPolicyLiteral = Literal["ignore", "allow", "block"]


class CalendarBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    timezone: Optional[str] = None
    threshold: int = 1
    allowed_weekdays: Optional[list[int]] = Field(
        default=None, description="Weekday numbers, 0 = Sunday. Defaults to every day."
    )
    min_duration_hours: int = 0
    holidays_policy: HolidaysPolicyLiteral = "ignore"
    allow_holiday_eves: bool = False
    weekday_times: dict[int, TimeRange] = Field(default_factory=dict)
    holiday_min_time: Optional[ClockTime] = None
    holiday_max_time: Optional[ClockTime] = None
    holiday_eve_min_time: Optional[ClockTime] = None
    holiday_eve_max_time: Optional[ClockTime] = None
    lock_participants: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CalendarCreate(CalendarBase):
    participants: list[str] = Field(default_factory=list)


class CalendarUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    timezone: Optional[str] = None
    threshold: Optional[int] = None
    allowed_weekdays: Optional[list[int]] = None
    min_duration_hours: Optional[int] = None
    holidays_policy: Optional[HolidaysPolicyLiteral] = None
    allow_holiday_eves: Optional[bool] = None
    weekday_times: Optional[dict[int, TimeRange]] = None
    holiday_min_time: Optional[ClockTime] = None
    holiday_max_time: Optional[ClockTime] = None
    holiday_eve_min_time: Optional[ClockTime] = None
    holiday_eve_max_time: Optional[ClockTime] = None
    lock_participants: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CalendarRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    public_token: str
    timezone: str
    threshold: int
    allowed_weekdays: list[int]
    min_duration_hours: int
    holidays_policy: HolidaysPolicyLiteral
    allow_holiday_eves: bool
    weekday_times: dict[int, TimeRange] = Field(default_factory=dict)
    holiday_min_time: Optional[ClockTime] = None
    holiday_max_time: Optional[ClockTime] = None
    holiday_eve_min_time: Optional[ClockTime] = None
    holiday_eve_max_time: Optional[ClockTime] = None
    lock_participants: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    participants: list[ParticipantRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicParticipantRead(BaseModel):
    # Hidden for other participants when the calendar locks participants
    id: Optional[UUID] = None
    name: str


class PublicCalendarRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    timezone: str
    threshold: int
    allowed_weekdays: list[int]
    min_duration_hours: int
    holidays_policy: HolidaysPolicyLiteral
    allow_holiday_eves: bool
    weekday_times: dict[int, TimeRange] = Field(default_factory=dict)
    holiday_min_time: Optional[ClockTime] = None
    holiday_max_time: Optional[ClockTime] = None
    holiday_eve_min_time: Optional[ClockTime] = None
    holiday_eve_max_time: Optional[ClockTime] = None
    lock_participants: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    participants: list[PublicParticipantRead] = []

    model_config = ConfigDict(from_attributes=True)
