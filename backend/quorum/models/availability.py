from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Availability(SQLModel, table=True):
    """One-off availability of a participant; overrides recurrences on its date."""

    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint("participant_id", "date", name="uq_availabilities_participant_date"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    participant_id: UUID = Field(foreign_key="participants.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    # Both empty means all day
    start_time: Optional[dt.time] = Field(default=None, nullable=True)
    end_time: Optional[dt.time] = Field(default=None, nullable=True)
    note: Optional[str] = Field(default=None, max_length=1000)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow, nullable=False)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = dt.datetime.utcnow()
