from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ParticipantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ParticipantUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ParticipantRead(BaseModel):
    id: UUID
    calendar_id: UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
