from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, status

from quorum.db import SessionDep
from quorum.schemas import (
    CalendarCreate,
    CalendarRead,
    CalendarUpdate,
    ParticipantCreate,
    ParticipantRead,
    ParticipantUpdate,
)
from quorum.services import calendars as calendar_service

router = APIRouter()


@router.post(
    "/",
    response_model=CalendarRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create calendar",
)
def create_calendar(payload: CalendarCreate, session: SessionDep) -> CalendarRead:
    calendar = calendar_service.create_calendar(session, payload)
    return calendar_service.serialize_calendar(session, calendar)


@router.get(
    "/{calendar_id}",
    response_model=CalendarRead,
    summary="Get calendar by id",
)
def get_calendar(calendar_id: UUID, session: SessionDep) -> CalendarRead:
    calendar = calendar_service.get_calendar(session, calendar_id)
    return calendar_service.serialize_calendar(session, calendar)


@router.patch(
    "/{calendar_id}",
    response_model=CalendarRead,
    summary="Update calendar policy",
)
def update_calendar(
    calendar_id: UUID,
    payload: CalendarUpdate,
    session: SessionDep,
) -> CalendarRead:
    calendar = calendar_service.update_calendar(session, calendar_id, payload)
    return calendar_service.serialize_calendar(session, calendar)


@router.delete(
    "/{calendar_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete calendar",
    response_model=None,
)
def delete_calendar(calendar_id: UUID, session: SessionDep) -> None:
    calendar_service.delete_calendar(session, calendar_id)


@router.post(
    "/{calendar_id}/regenerate-token",
    response_model=CalendarRead,
    summary="Issue a new public token",
)
def regenerate_token(calendar_id: UUID, session: SessionDep) -> CalendarRead:
    calendar = calendar_service.regenerate_token(session, calendar_id)
    return calendar_service.serialize_calendar(session, calendar)


@router.post(
    "/{calendar_id}/participants",
    response_model=ParticipantRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add participant",
)
def add_participant(
    calendar_id: UUID,
    payload: ParticipantCreate,
    session: SessionDep,
) -> ParticipantRead:
    participant = calendar_service.add_participant(session, calendar_id, payload.name)
    return ParticipantRead.model_validate(participant)


@router.patch(
    "/{calendar_id}/participants/{participant_id}",
    response_model=ParticipantRead,
    summary="Rename participant",
)
def rename_participant(
    calendar_id: UUID,
    participant_id: UUID,
    payload: ParticipantUpdate,
    session: SessionDep,
) -> ParticipantRead:
    participant = calendar_service.rename_participant(
        session, calendar_id, participant_id, payload.name
    )
    return ParticipantRead.model_validate(participant)


@router.delete(
    "/{calendar_id}/participants/{participant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove participant and their availability",
    response_model=None,
)
def delete_participant(
    calendar_id: UUID,
    participant_id: UUID,
    session: SessionDep,
) -> None:
    calendar_service.delete_participant(session, calendar_id, participant_id)
