"""
Calendar and participant management.

Calendar settings are the policy the availability engine reads; every
change here applies retroactively to summaries since those are always
recomputed from stored rows.
"""
from __future__ import annotations

import logging
from datetime import time
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, delete, func, select

from quorum.core.config import settings
from quorum.core.errors import ConflictError, NotFoundError, ValidationError
from quorum.models import (
    Availability,
    Calendar,
    Participant,
    Recurrence,
    RecurrenceException,
)
from quorum.models.calendar import generate_token
from quorum.schemas import (
    CalendarCreate,
    CalendarRead,
    CalendarUpdate,
    ParticipantRead,
    PublicCalendarRead,
    PublicParticipantRead,
    TimeRange,
)
from quorum.services.loaders import list_calendar_participants
from quorum.services.validation import (
    ordered_times,
    validate_date_range,
    validate_timezone,
    validate_weekday,
    validate_weekdays,
)

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = {
    "description",
    "start_date",
    "end_date",
    "holiday_min_time",
    "holiday_max_time",
    "holiday_eve_min_time",
    "holiday_eve_max_time",
}


def _format(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def _weekday_times_json(weekday_times: dict[int, TimeRange]) -> dict:
    result = {}
    for day, bounds in weekday_times.items():
        validate_weekday(day)
        min_time, max_time = ordered_times(bounds.min_time, bounds.max_time)
        result[str(day)] = {"min_time": _format(min_time), "max_time": _format(max_time)}
    return result


def _validate_threshold(threshold: int, participant_count: int) -> None:
    if threshold < 1:
        raise ValidationError("threshold must be at least 1")
    if participant_count and threshold > participant_count:
        raise ValidationError(
            f"threshold ({threshold}) cannot exceed the number of participants ({participant_count})"
        )


def get_calendar(session: Session, calendar_id: UUID) -> Calendar:
    calendar = session.get(Calendar, calendar_id)
    if not calendar:
        raise NotFoundError("Calendar not found")
    return calendar


def get_calendar_by_token(session: Session, token: str) -> Calendar:
    calendar = session.exec(
        select(Calendar).where(Calendar.public_token == token)
    ).one_or_none()
    if not calendar:
        raise NotFoundError("Calendar not found")
    return calendar


def get_participant(session: Session, calendar: Calendar, participant_id: UUID) -> Participant:
    participant = session.get(Participant, participant_id)
    if not participant or participant.calendar_id != calendar.id:
        raise NotFoundError("Participant not found")
    return participant


def count_participants(session: Session, calendar_id: UUID) -> int:
    return session.exec(
        select(func.count()).select_from(Participant).where(Participant.calendar_id == calendar_id)
    ).one()


def serialize_calendar(session: Session, calendar: Calendar) -> CalendarRead:
    participants = [
        ParticipantRead.model_validate(p)
        for p in list_calendar_participants(session, calendar.id)
    ]
    return CalendarRead.model_validate(calendar).model_copy(update={"participants": participants})


def serialize_public_calendar(
    session: Session, calendar: Calendar, viewer_id: UUID | None = None
) -> PublicCalendarRead:
    participants = [
        PublicParticipantRead(
            id=p.id if not calendar.lock_participants or p.id == viewer_id else None,
            name=p.name,
        )
        for p in list_calendar_participants(session, calendar.id)
    ]
    return PublicCalendarRead.model_validate(calendar).model_copy(
        update={"participants": participants}
    )


def create_calendar(session: Session, payload: CalendarCreate) -> Calendar:
    names = [name.strip() for name in payload.participants]
    if any(not name for name in names):
        raise ValidationError("participant names must not be empty")
    if len(set(names)) != len(names):
        raise ConflictError("participant with this name already exists")

    _validate_threshold(payload.threshold, len(names))
    if payload.min_duration_hours < 0:
        raise ValidationError("min_duration_hours must not be negative")
    validate_date_range(payload.start_date, payload.end_date)
    timezone = payload.timezone or settings.DEFAULT_TIMEZONE
    validate_timezone(timezone)
    allowed = validate_weekdays(
        payload.allowed_weekdays if payload.allowed_weekdays is not None else list(range(7))
    )
    holiday_min, holiday_max = ordered_times(payload.holiday_min_time, payload.holiday_max_time)
    eve_min, eve_max = ordered_times(payload.holiday_eve_min_time, payload.holiday_eve_max_time)

    calendar = Calendar(
        name=payload.name,
        description=payload.description,
        timezone=timezone,
        threshold=payload.threshold,
        allowed_weekdays=allowed,
        min_duration_hours=payload.min_duration_hours,
        start_date=payload.start_date,
        end_date=payload.end_date,
        holidays_policy=payload.holidays_policy,
        allow_holiday_eves=payload.allow_holiday_eves,
        weekday_times=_weekday_times_json(payload.weekday_times),
        holiday_min_time=holiday_min,
        holiday_max_time=holiday_max,
        holiday_eve_min_time=eve_min,
        holiday_eve_max_time=eve_max,
        lock_participants=payload.lock_participants,
    )
    session.add(calendar)
    session.flush()

    for name in names:
        session.add(Participant(calendar_id=calendar.id, name=name))

    session.commit()
    session.refresh(calendar)
    logger.info(f"Created calendar {calendar.id} with {len(names)} participants")
    return calendar


def update_calendar(session: Session, calendar_id: UUID, payload: CalendarUpdate) -> Calendar:
    calendar = get_calendar(session, calendar_id)
    changes = {field: getattr(payload, field) for field in payload.model_fields_set}
    for field in list(changes):
        if changes[field] is None and field not in _NULLABLE_FIELDS:
            raise ValidationError(f"{field} must not be null")

    if "threshold" in changes:
        _validate_threshold(payload.threshold, count_participants(session, calendar.id))
    if "allowed_weekdays" in changes:
        changes["allowed_weekdays"] = validate_weekdays(payload.allowed_weekdays or [])
    if "timezone" in changes:
        validate_timezone(payload.timezone or "")
    if "min_duration_hours" in changes and (payload.min_duration_hours or 0) < 0:
        raise ValidationError("min_duration_hours must not be negative")
    if "weekday_times" in changes:
        changes["weekday_times"] = _weekday_times_json(payload.weekday_times or {})

    for field, value in changes.items():
        setattr(calendar, field, value)

    validate_date_range(calendar.start_date, calendar.end_date)
    calendar.holiday_min_time, calendar.holiday_max_time = ordered_times(
        calendar.holiday_min_time, calendar.holiday_max_time
    )
    calendar.holiday_eve_min_time, calendar.holiday_eve_max_time = ordered_times(
        calendar.holiday_eve_min_time, calendar.holiday_eve_max_time
    )

    calendar.touch()
    session.add(calendar)
    session.commit()
    session.refresh(calendar)
    return calendar


def _delete_participant_rows(session: Session, participant_ids: list[UUID]) -> None:
    if not participant_ids:
        return
    recurrence_ids = session.exec(
        select(Recurrence.id).where(Recurrence.participant_id.in_(participant_ids))
    ).all()
    if recurrence_ids:
        session.exec(
            delete(RecurrenceException).where(RecurrenceException.recurrence_id.in_(recurrence_ids))
        )
    session.exec(delete(Recurrence).where(Recurrence.participant_id.in_(participant_ids)))
    session.exec(delete(Availability).where(Availability.participant_id.in_(participant_ids)))
    session.exec(delete(Participant).where(Participant.id.in_(participant_ids)))


def delete_calendar(session: Session, calendar_id: UUID) -> None:
    calendar = get_calendar(session, calendar_id)
    participant_ids = [p.id for p in list_calendar_participants(session, calendar.id)]
    _delete_participant_rows(session, participant_ids)
    session.delete(calendar)
    session.commit()


def regenerate_token(session: Session, calendar_id: UUID) -> Calendar:
    calendar = get_calendar(session, calendar_id)
    calendar.public_token = generate_token()
    calendar.touch()
    session.add(calendar)
    session.commit()
    session.refresh(calendar)
    return calendar


def _ensure_unique_name(
    session: Session, calendar_id: UUID, name: str, exclude_id: UUID | None = None
) -> None:
    statement = select(Participant).where(
        Participant.calendar_id == calendar_id, Participant.name == name
    )
    if exclude_id:
        statement = statement.where(Participant.id != exclude_id)
    if session.exec(statement).first():
        raise ConflictError("participant with this name already exists")


def add_participant(session: Session, calendar_id: UUID, name: str) -> Participant:
    calendar = get_calendar(session, calendar_id)
    name = name.strip()
    if not name:
        raise ValidationError("participant name must not be empty")
    _ensure_unique_name(session, calendar.id, name)

    participant = Participant(calendar_id=calendar.id, name=name)
    session.add(participant)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("participant with this name already exists") from None
    session.refresh(participant)
    return participant


def rename_participant(
    session: Session, calendar_id: UUID, participant_id: UUID, name: str
) -> Participant:
    calendar = get_calendar(session, calendar_id)
    participant = get_participant(session, calendar, participant_id)
    name = name.strip()
    if not name:
        raise ValidationError("participant name must not be empty")
    _ensure_unique_name(session, calendar.id, name, exclude_id=participant.id)

    participant.name = name
    session.add(participant)
    session.commit()
    session.refresh(participant)
    return participant


def delete_participant(session: Session, calendar_id: UUID, participant_id: UUID) -> None:
    """Remove a participant with all of their availability records.

    When fewer participants than the threshold remain, the threshold is
    lowered to the remaining count so the calendar can still become viable.
    """
    calendar = get_calendar(session, calendar_id)
    participant = get_participant(session, calendar, participant_id)
    _delete_participant_rows(session, [participant.id])
    session.flush()

    remaining = count_participants(session, calendar.id)
    if 0 < remaining < calendar.threshold:
        logger.info(
            f"Lowering threshold of calendar {calendar.id} from {calendar.threshold} to {remaining}"
        )
        calendar.threshold = remaining
        calendar.touch()
        session.add(calendar)

    session.commit()
