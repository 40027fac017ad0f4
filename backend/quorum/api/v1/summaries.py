from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query

from quorum.api.deps import ResolverDep
from quorum.db import SessionDep
from quorum.schemas import DateAvailabilitySummary, DateSlotsRead
from quorum.services import summaries as summary_service

router = APIRouter()


@router.get(
    "/{token}/summary",
    response_model=List[DateAvailabilitySummary],
    summary="Who is available on each date of a range",
)
def read_range_summary(
    token: str,
    session: SessionDep,
    resolver: ResolverDep,
    start: date = Query(...),
    end: date = Query(...),
    viewer_id: Optional[UUID] = Query(default=None, description="Participant viewing the summary"),
) -> List[DateAvailabilitySummary]:
    return summary_service.range_summary(
        session, token, start, end, viewer_id=viewer_id, resolver=resolver
    )


@router.get(
    "/{token}/summary/{day}",
    response_model=DateAvailabilitySummary,
    summary="Who is available on one date",
)
def read_date_summary(
    token: str,
    day: date,
    session: SessionDep,
    resolver: ResolverDep,
    viewer_id: Optional[UUID] = Query(default=None),
) -> DateAvailabilitySummary:
    return summary_service.date_summary(
        session, token, day, viewer_id=viewer_id, resolver=resolver
    )


@router.get(
    "/{token}/slots",
    response_model=List[DateSlotsRead],
    summary="Per-slot participant counts and candidate windows",
)
def read_slot_summary(
    token: str,
    session: SessionDep,
    resolver: ResolverDep,
    start: date = Query(...),
    end: date = Query(...),
    slot_minutes: Optional[int] = Query(default=None, ge=1, le=1440),
) -> List[DateSlotsRead]:
    return summary_service.slot_summary(
        session, token, start, end, slot_minutes=slot_minutes, resolver=resolver
    )
