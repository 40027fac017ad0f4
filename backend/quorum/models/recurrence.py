from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Recurrence(SQLModel, table=True):
    """Weekly availability pattern bounded by [start_date, end_date]."""

    __tablename__ = "recurrences"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    participant_id: UUID = Field(foreign_key="participants.id", nullable=False, index=True)
    # 0 = Sunday ... 6 = Saturday
    day_of_week: int = Field(nullable=False)
    start_date: date = Field(nullable=False)
    end_date: Optional[date] = Field(default=None, nullable=True)
    start_time: Optional[time] = Field(default=None, nullable=True)
    end_time: Optional[time] = Field(default=None, nullable=True)
    note: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class RecurrenceException(SQLModel, table=True):
    """Single date suppressed from a recurrence."""

    __tablename__ = "recurrence_exceptions"
    __table_args__ = (
        UniqueConstraint(
            "recurrence_id", "excluded_date", name="uq_recurrence_exceptions_date"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    recurrence_id: UUID = Field(foreign_key="recurrences.id", nullable=False, index=True)
    excluded_date: date = Field(nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
