"""
One-off availability, weekly recurrences and recurrence exceptions.

Writes are checked against the calendar policy: the date must be admissible
and explicit times are pulled inside the policy window for that date.
"""
from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, delete, select

from quorum.core.errors import ConflictError, NotFoundError, PolicyViolationError
from quorum.engine import PolicyResolver, TimeWindow
from quorum.engine.recurrence import ranges_overlap
from quorum.models import (
    Availability,
    Calendar,
    Participant,
    Recurrence,
    RecurrenceException,
)
from quorum.schemas import (
    AvailabilityCreate,
    AvailabilityRead,
    AvailabilityUpdate,
    RecurrenceCreate,
    RecurrenceExceptionCreate,
    RecurrenceExceptionRead,
    RecurrenceUpdate,
    RecurrenceWithExceptions,
)
from quorum.services.calendars import get_calendar_by_token, get_participant
from quorum.services.loaders import policy_from_calendar
from quorum.services.validation import (
    validate_date_range,
    validate_query_range,
    validate_time_range,
    validate_weekday,
)

logger = logging.getLogger(__name__)


def _clamped(
    window: Optional[TimeWindow], start: Optional[time], end: Optional[time]
) -> TimeWindow:
    """Pull explicit bounds inside ``window`` and reject what falls outside it."""
    window = window or TimeWindow()
    clamped = window.clamp(start, end)
    if clamped.duration_minutes <= 0 or not clamped.intersects(window):
        raise PolicyViolationError("time range falls outside the allowed hours for this date")
    return clamped


def _filled(window: TimeWindow, clamped: TimeWindow, min_duration_hours: float) -> TimeWindow:
    # Missing bounds take the policy window of the date
    filled = TimeWindow(
        clamped.start if clamped.start is not None else window.start,
        clamped.end if clamped.end is not None else window.end,
    )
    if (
        min_duration_hours > 0
        and filled.start is not None
        and filled.end is not None
        and filled.duration_minutes < min_duration_hours * 60
    ):
        raise PolicyViolationError(
            f"time range is shorter than the minimum duration of {min_duration_hours}h"
        )
    return filled


def _resolve_participant(
    session: Session, token: str, participant_id: UUID
) -> tuple[Calendar, Participant]:
    calendar = get_calendar_by_token(session, token)
    return calendar, get_participant(session, calendar, participant_id)


def serialize_availability(row: Availability, participant: Participant) -> AvailabilityRead:
    return AvailabilityRead(
        id=row.id,
        participant_id=row.participant_id,
        participant_name=participant.name,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        note=row.note,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _checked_window(
    calendar: Calendar,
    day: date,
    start: Optional[time],
    end: Optional[time],
    resolver: PolicyResolver,
) -> TimeWindow:
    validate_time_range(start, end)
    resolved = resolver.resolve(policy_from_calendar(calendar), day)
    if not resolved.admissible:
        raise PolicyViolationError(f"{day.isoformat()} is not an allowed date for this calendar")
    window = resolved.window or TimeWindow()
    return _filled(window, _clamped(window, start, end), calendar.min_duration_hours)


def list_availabilities(
    session: Session,
    token: str,
    participant_id: UUID,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[AvailabilityRead]:
    _, participant = _resolve_participant(session, token, participant_id)
    statement = select(Availability).where(Availability.participant_id == participant.id)
    if start is not None and end is not None:
        validate_query_range(start, end)
    if start is not None:
        statement = statement.where(Availability.date >= start)
    if end is not None:
        statement = statement.where(Availability.date <= end)
    rows = session.exec(statement.order_by(Availability.date)).all()
    return [serialize_availability(row, participant) for row in rows]


def create_availability(
    session: Session,
    token: str,
    participant_id: UUID,
    payload: AvailabilityCreate,
    resolver: Optional[PolicyResolver] = None,
) -> AvailabilityRead:
    resolver = resolver or PolicyResolver()
    calendar, participant = _resolve_participant(session, token, participant_id)

    existing = session.exec(
        select(Availability).where(
            Availability.participant_id == participant.id,
            Availability.date == payload.date,
        )
    ).first()
    if existing:
        raise ConflictError("availability already exists for this date")

    window = _checked_window(calendar, payload.date, payload.start_time, payload.end_time, resolver)
    row = Availability(
        participant_id=participant.id,
        date=payload.date,
        start_time=window.start,
        end_time=window.end,
        note=payload.note,
    )
    session.add(row)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("availability already exists for this date") from None
    session.refresh(row)
    logger.info(f"Participant {participant.id} available on {row.date.isoformat()}")
    return serialize_availability(row, participant)


def _get_availability(session: Session, participant: Participant, day: date) -> Availability:
    row = session.exec(
        select(Availability).where(
            Availability.participant_id == participant.id,
            Availability.date == day,
        )
    ).first()
    if not row:
        raise NotFoundError("Availability not found")
    return row


def update_availability(
    session: Session,
    token: str,
    participant_id: UUID,
    day: date,
    payload: AvailabilityUpdate,
    resolver: Optional[PolicyResolver] = None,
) -> AvailabilityRead:
    resolver = resolver or PolicyResolver()
    calendar, participant = _resolve_participant(session, token, participant_id)
    row = _get_availability(session, participant, day)

    fields = payload.model_fields_set
    start = payload.start_time if "start_time" in fields else row.start_time
    end = payload.end_time if "end_time" in fields else row.end_time
    window = _checked_window(calendar, row.date, start, end, resolver)

    row.start_time = window.start
    row.end_time = window.end
    if "note" in fields:
        row.note = payload.note
    row.touch()
    session.add(row)
    session.commit()
    session.refresh(row)
    return serialize_availability(row, participant)


def delete_availability(
    session: Session, token: str, participant_id: UUID, day: date
) -> None:
    _, participant = _resolve_participant(session, token, participant_id)
    row = _get_availability(session, participant, day)
    session.delete(row)
    session.commit()


def _exceptions_for(session: Session, recurrence_id: UUID) -> list[RecurrenceException]:
    return session.exec(
        select(RecurrenceException)
        .where(RecurrenceException.recurrence_id == recurrence_id)
        .order_by(RecurrenceException.excluded_date)
    ).all()


def serialize_recurrence(session: Session, row: Recurrence) -> RecurrenceWithExceptions:
    exceptions = [RecurrenceExceptionRead.model_validate(e) for e in _exceptions_for(session, row.id)]
    return RecurrenceWithExceptions.model_validate(row).model_copy(update={"exceptions": exceptions})


def _checked_recurrence(
    session: Session,
    calendar: Calendar,
    participant: Participant,
    payload: RecurrenceCreate | RecurrenceUpdate,
    exclude_id: Optional[UUID] = None,
) -> TimeWindow:
    validate_weekday(payload.day_of_week)
    validate_date_range(payload.start_date, payload.end_date)
    validate_time_range(payload.start_time, payload.end_time)

    policy = policy_from_calendar(calendar)
    if payload.day_of_week not in policy.allowed_weekdays:
        raise PolicyViolationError("this weekday is not allowed for this calendar")

    statement = select(Recurrence).where(
        Recurrence.participant_id == participant.id,
        Recurrence.day_of_week == payload.day_of_week,
    )
    if exclude_id:
        statement = statement.where(Recurrence.id != exclude_id)
    for other in session.exec(statement).all():
        if ranges_overlap(payload.start_date, payload.end_date, other.start_date, other.end_date):
            raise ConflictError("an overlapping recurrence already exists for this weekday")

    if payload.start_time is None and payload.end_time is None:
        # Open rules follow the weekday window at read time
        return TimeWindow()
    window = policy.weekday_window(payload.day_of_week)
    clamped = _clamped(window, payload.start_time, payload.end_time)
    return _filled(window, clamped, calendar.min_duration_hours)


def list_recurrences(
    session: Session, token: str, participant_id: UUID
) -> list[RecurrenceWithExceptions]:
    _, participant = _resolve_participant(session, token, participant_id)
    rows = session.exec(
        select(Recurrence)
        .where(Recurrence.participant_id == participant.id)
        .order_by(Recurrence.day_of_week, Recurrence.start_date)
    ).all()
    return [serialize_recurrence(session, row) for row in rows]


def create_recurrence(
    session: Session, token: str, participant_id: UUID, payload: RecurrenceCreate
) -> RecurrenceWithExceptions:
    calendar, participant = _resolve_participant(session, token, participant_id)
    window = _checked_recurrence(session, calendar, participant, payload)

    row = Recurrence(
        participant_id=participant.id,
        day_of_week=payload.day_of_week,
        start_date=payload.start_date,
        end_date=payload.end_date,
        start_time=window.start,
        end_time=window.end,
        note=payload.note,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info(f"Participant {participant.id} recurs on weekday {row.day_of_week}")
    return serialize_recurrence(session, row)


def _get_recurrence(session: Session, participant: Participant, recurrence_id: UUID) -> Recurrence:
    row = session.get(Recurrence, recurrence_id)
    if not row or row.participant_id != participant.id:
        raise NotFoundError("Recurrence not found")
    return row


def update_recurrence(
    session: Session,
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    payload: RecurrenceUpdate,
) -> RecurrenceWithExceptions:
    calendar, participant = _resolve_participant(session, token, participant_id)
    row = _get_recurrence(session, participant, recurrence_id)
    window = _checked_recurrence(session, calendar, participant, payload, exclude_id=row.id)

    row.day_of_week = payload.day_of_week
    row.start_date = payload.start_date
    row.end_date = payload.end_date
    row.start_time = window.start
    row.end_time = window.end
    row.note = payload.note
    session.add(row)
    session.commit()
    session.refresh(row)
    return serialize_recurrence(session, row)


def delete_recurrence(
    session: Session, token: str, participant_id: UUID, recurrence_id: UUID
) -> None:
    _, participant = _resolve_participant(session, token, participant_id)
    row = _get_recurrence(session, participant, recurrence_id)
    session.exec(delete(RecurrenceException).where(RecurrenceException.recurrence_id == row.id))
    session.delete(row)
    session.commit()


def create_exception(
    session: Session,
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    payload: RecurrenceExceptionCreate,
) -> RecurrenceExceptionRead:
    _, participant = _resolve_participant(session, token, participant_id)
    recurrence = _get_recurrence(session, participant, recurrence_id)

    existing = session.exec(
        select(RecurrenceException).where(
            RecurrenceException.recurrence_id == recurrence.id,
            RecurrenceException.excluded_date == payload.excluded_date,
        )
    ).first()
    if existing:
        raise ConflictError("this date is already excluded")

    row = RecurrenceException(recurrence_id=recurrence.id, excluded_date=payload.excluded_date)
    session.add(row)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("this date is already excluded") from None
    session.refresh(row)
    return RecurrenceExceptionRead.model_validate(row)


def delete_exception(
    session: Session,
    token: str,
    participant_id: UUID,
    recurrence_id: UUID,
    excluded_date: date,
) -> None:
    _, participant = _resolve_participant(session, token, participant_id)
    recurrence = _get_recurrence(session, participant, recurrence_id)
    row = session.exec(
        select(RecurrenceException).where(
            RecurrenceException.recurrence_id == recurrence.id,
            RecurrenceException.excluded_date == excluded_date,
        )
    ).first()
    if not row:
        raise NotFoundError("Recurrence exception not found")
    session.delete(row)
    session.commit()
