from __future__ import annotations

from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from quorum.db import SessionDep
from quorum.schemas import (
    RecurrenceCreate,
    RecurrenceExceptionCreate,
    RecurrenceExceptionRead,
    RecurrenceUpdate,
    RecurrenceWithExceptions,
)
from quorum.services import availability as availability_service

router = APIRouter()

_BASE = "/{token}/participants/{participant_id}/recurrences"


@router.get(
    _BASE,
    response_model=List[RecurrenceWithExceptions],
    summary="List weekly recurrences of a participant",
)
def list_recurrences(
    token: str,
    participant_id: UUID,
    session: SessionDep,
) -> List[RecurrenceWithExceptions]:
    return availability_service.list_recurrences(session, token, participant_id)


@router.post(
    _BASE,
    response_model=RecurrenceWithExceptions,
    status_code=status.HTTP_201_CREATED,
    summary="Create weekly recurrence",
)
def create_recurrence(
    token: str,
    participant_id: UUID,
    payload: RecurrenceCreate,
    session: SessionDep,
) -> RecurrenceWithExceptions:
    return availability_service.create_recurrence(session, token, participant_id, payload)


@router.put(
    _BASE + "/{recurrence_id}",
    response_model=RecurrenceWithExceptions,
    summary="Replace weekly recurrence",
)
def update_recurrence(
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    payload: RecurrenceUpdate,
    session: SessionDep,
) -> RecurrenceWithExceptions:
    return availability_service.update_recurrence(
        session, token, participant_id, recurrence_id, payload
    )


@router.delete(
    _BASE + "/{recurrence_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete weekly recurrence and its exceptions",
    response_model=None,
)
def delete_recurrence(
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    session: SessionDep,
) -> None:
    availability_service.delete_recurrence(session, token, participant_id, recurrence_id)


@router.post(
    _BASE + "/{recurrence_id}/exceptions",
    response_model=RecurrenceExceptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Skip one date of a recurrence",
)
def create_exception(
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    payload: RecurrenceExceptionCreate,
    session: SessionDep,
) -> RecurrenceExceptionRead:
    return availability_service.create_exception(
        session, token, participant_id, recurrence_id, payload
    )


@router.delete(
    _BASE + "/{recurrence_id}/exceptions/{excluded_date}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Restore a skipped date",
    response_model=None,
)
def delete_exception(
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    excluded_date: date,
    session: SessionDep,
) -> None:
    availability_service.delete_exception(
        session, token, participant_id, recurrence_id, excluded_date
    )
