from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from quorum.api.deps import ResolverDep
from quorum.db import SessionDep
from quorum.schemas import AvailabilityCreate, AvailabilityRead, AvailabilityUpdate
from quorum.services import availability as availability_service

router = APIRouter()


@router.get(
    "/{token}/participants/{participant_id}/availabilities",
    response_model=List[AvailabilityRead],
    summary="List one-off availability of a participant",
)
def list_availabilities(
    token: str,
    participant_id: UUID,
    session: SessionDep,
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
) -> List[AvailabilityRead]:
    return availability_service.list_availabilities(session, token, participant_id, start, end)


@router.post(
    "/{token}/participants/{participant_id}/availabilities",
    response_model=AvailabilityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Mark a participant available on a date",
)
def create_availability(
    token: str,
    participant_id: UUID,
    payload: AvailabilityCreate,
    session: SessionDep,
    resolver: ResolverDep,
) -> AvailabilityRead:
    return availability_service.create_availability(
        session, token, participant_id, payload, resolver=resolver
    )


@router.patch(
    "/{token}/participants/{participant_id}/availabilities/{day}",
    response_model=AvailabilityRead,
    summary="Change times or note of a one-off availability",
)
def update_availability(
    token: str,
    participant_id: UUID,
    day: date,
    payload: AvailabilityUpdate,
    session: SessionDep,
    resolver: ResolverDep,
) -> AvailabilityRead:
    return availability_service.update_availability(
        session, token, participant_id, day, payload, resolver=resolver
    )


@router.delete(
    "/{token}/participants/{participant_id}/availabilities/{day}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a one-off availability",
    response_model=None,
)
def delete_availability(
    token: str,
    participant_id: UUID,
    day: date,
    session: SessionDep,
) -> None:
    availability_service.delete_availability(session, token, participant_id, day)
