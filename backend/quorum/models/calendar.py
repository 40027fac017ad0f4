from __future__ import annotations

import secrets
from datetime import date, datetime, time
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


def generate_token() -> str:
    return secrets.token_hex(32)


class Calendar(SQLModel, table=True):
    """Calendar that collects participants' availability under one policy."""

    __tablename__ = "calendars"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    public_token: str = Field(
        default_factory=generate_token, max_length=64, index=True, unique=True
    )
    timezone: str = Field(default="Europe/Paris", max_length=64)
    threshold: int = Field(default=1)
    # Weekday numbers, Sunday = 0
    allowed_weekdays: list = Field(
        default_factory=lambda: list(range(7)), sa_column=Column(JSON, nullable=False)
    )
    min_duration_hours: int = Field(default=0)
    start_date: Optional[date] = Field(default=None, nullable=True)
    end_date: Optional[date] = Field(default=None, nullable=True)
    holidays_policy: str = Field(default="ignore", max_length=16)
    allow_holiday_eves: bool = Field(default=False)
    # Format: {"1": {"min_time": "09:00", "max_time": "18:00"}, ...}
    weekday_times: Optional[dict] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=True)
    )
    holiday_min_time: Optional[time] = Field(default=None, nullable=True)
    holiday_max_time: Optional[time] = Field(default=None, nullable=True)
    holiday_eve_min_time: Optional[time] = Field(default=None, nullable=True)
    holiday_eve_max_time: Optional[time] = Field(default=None, nullable=True)
    lock_participants: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
