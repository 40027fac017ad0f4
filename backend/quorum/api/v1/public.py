from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from quorum.db import SessionDep
from quorum.schemas import PublicCalendarRead
from quorum.services import calendars as calendar_service

router = APIRouter()


@router.get(
    "/{token}",
    response_model=PublicCalendarRead,
    summary="Get calendar by public token",
)
def get_public_calendar(
    token: str,
    session: SessionDep,
    viewer_id: Optional[UUID] = Query(default=None, description="Participant viewing the calendar"),
) -> PublicCalendarRead:
    calendar = calendar_service.get_calendar_by_token(session, token)
    return calendar_service.serialize_public_calendar(session, calendar, viewer_id)
