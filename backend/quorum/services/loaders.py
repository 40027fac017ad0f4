"""Build engine inputs from stored calendar, participant and availability rows."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, time
from typing import Optional
from uuid import UUID

from sqlmodel import Session, or_, select

from quorum.engine.types import (
    CalendarPolicy,
    HolidaysPolicy,
    OneOffAvailability,
    ParticipantRecords,
    RecurrenceRule,
    TimeWindow,
    parse_time,
)
from quorum.models import Availability, Calendar, Participant, Recurrence, RecurrenceException


def _as_time(value) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    return parse_time(value)


def policy_from_calendar(calendar: Calendar) -> CalendarPolicy:
    weekday_times = {}
    for day, bounds in (calendar.weekday_times or {}).items():
        window = TimeWindow(_as_time(bounds.get("min_time")), _as_time(bounds.get("max_time")))
        if window.is_set:
            weekday_times[int(day)] = window

    return CalendarPolicy(
        timezone=calendar.timezone,
        threshold=calendar.threshold,
        allowed_weekdays=frozenset(calendar.allowed_weekdays or range(7)),
        min_duration_hours=calendar.min_duration_hours,
        start_date=calendar.start_date,
        end_date=calendar.end_date,
        holidays_policy=HolidaysPolicy(calendar.holidays_policy),
        allow_holiday_eves=calendar.allow_holiday_eves,
        weekday_times=weekday_times,
        holiday_window=TimeWindow(calendar.holiday_min_time, calendar.holiday_max_time),
        holiday_eve_window=TimeWindow(calendar.holiday_eve_min_time, calendar.holiday_eve_max_time),
    )


def list_calendar_participants(session: Session, calendar_id: UUID) -> list[Participant]:
    return session.exec(
        select(Participant)
        .where(Participant.calendar_id == calendar_id)
        .order_by(Participant.name)
    ).all()


def load_participant_records(
    session: Session,
    calendar_id: UUID,
    query_start: date,
    query_end: date,
) -> list[ParticipantRecords]:
    """Availability, recurrences and exceptions touching the query range."""
    participants = list_calendar_participants(session, calendar_id)
    if not participants:
        return []
    participant_ids = [p.id for p in participants]

    availabilities = session.exec(
        select(Availability).where(
            Availability.participant_id.in_(participant_ids),
            Availability.date >= query_start,
            Availability.date <= query_end,
        )
    ).all()

    recurrences = session.exec(
        select(Recurrence).where(
            Recurrence.participant_id.in_(participant_ids),
            Recurrence.start_date <= query_end,
            or_(Recurrence.end_date.is_(None), Recurrence.end_date >= query_start),
        )
    ).all()

    exceptions: dict[UUID, set[date]] = defaultdict(set)
    if recurrences:
        rows = session.exec(
            select(RecurrenceException).where(
                RecurrenceException.recurrence_id.in_([r.id for r in recurrences]),
                RecurrenceException.excluded_date >= query_start,
                RecurrenceException.excluded_date <= query_end,
            )
        ).all()
        for row in rows:
            exceptions[row.recurrence_id].add(row.excluded_date)

    records = {
        p.id: ParticipantRecords(participant_id=p.id, name=p.name) for p in participants
    }
    for row in availabilities:
        records[row.participant_id].availabilities.append(
            OneOffAvailability(
                date=row.date,
                start_time=row.start_time,
                end_time=row.end_time,
                note=row.note,
            )
        )
    for row in recurrences:
        participant = records[row.participant_id]
        participant.recurrences.append(
            RecurrenceRule(
                id=row.id,
                day_of_week=row.day_of_week,
                start_date=row.start_date,
                end_date=row.end_date,
                start_time=row.start_time,
                end_time=row.end_time,
                note=row.note,
            )
        )
        participant.exceptions = {
            **participant.exceptions,
            row.id: frozenset(exceptions.get(row.id, ())),
        }

    return [records[p.id] for p in participants]
