from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Participant(SQLModel, table=True):
    """Named participant of a calendar."""

    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("calendar_id", "name", name="uq_participants_calendar_name"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    calendar_id: UUID = Field(foreign_key="calendars.id", nullable=False, index=True)
    name: str = Field(max_length=100)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
