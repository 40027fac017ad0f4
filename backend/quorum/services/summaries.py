"""Read-side summaries for a calendar, always recomputed from stored rows."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlmodel import Session

from quorum.core.config import settings
from quorum.core.errors import ValidationError
from quorum.engine import PolicyResolver, aggregator
from quorum.models import Calendar
from quorum.schemas import (
    CandidateWindowRead,
    DateAvailabilitySummary,
    DateSlotsRead,
    ParticipantAvailabilitySummary,
    SlotRead,
)
from quorum.services.calendars import get_calendar_by_token
from quorum.services.loaders import load_participant_records, policy_from_calendar
from quorum.services.validation import validate_query_range

logger = logging.getLogger(__name__)


def _visible_id(calendar: Calendar, participant_id: UUID, viewer_id: Optional[UUID]) -> Optional[UUID]:
    if calendar.lock_participants and participant_id != viewer_id:
        return None
    return participant_id


def _date_summary_read(
    calendar: Calendar, summary: aggregator.DateSummary, viewer_id: Optional[UUID]
) -> DateAvailabilitySummary:
    return DateAvailabilitySummary(
        date=summary.date,
        total_count=summary.total_count,
        max_simultaneous=summary.max_simultaneous,
        is_viable=summary.is_viable,
        participants=[
            ParticipantAvailabilitySummary(
                participant_id=_visible_id(calendar, p.participant_id, viewer_id),
                participant_name=p.participant_name,
                start_time=p.start_time,
                end_time=p.end_time,
                note=p.note,
            )
            for p in summary.participants
        ],
    )


def range_summary(
    session: Session,
    token: str,
    start: date,
    end: date,
    viewer_id: Optional[UUID] = None,
    resolver: Optional[PolicyResolver] = None,
) -> list[DateAvailabilitySummary]:
    validate_query_range(start, end)
    calendar = get_calendar_by_token(session, token)
    records = load_participant_records(session, calendar.id, start, end)
    summaries = aggregator.summarize(
        policy_from_calendar(calendar),
        records,
        start,
        end,
        resolver=resolver,
        workers=settings.SUMMARY_WORKERS,
    )
    logger.debug(
        f"Summary for calendar {calendar.id} {start.isoformat()}..{end.isoformat()}: "
        f"{len(summaries)} dates"
    )
    return [_date_summary_read(calendar, s, viewer_id) for s in summaries]


def date_summary(
    session: Session,
    token: str,
    day: date,
    viewer_id: Optional[UUID] = None,
    resolver: Optional[PolicyResolver] = None,
) -> DateAvailabilitySummary:
    calendar = get_calendar_by_token(session, token)
    records = load_participant_records(session, calendar.id, day, day)
    summary = aggregator.date_summary(policy_from_calendar(calendar), records, day, resolver)
    return _date_summary_read(calendar, summary, viewer_id)


def slot_summary(
    session: Session,
    token: str,
    start: date,
    end: date,
    slot_minutes: Optional[int] = None,
    resolver: Optional[PolicyResolver] = None,
) -> list[DateSlotsRead]:
    slot_minutes = slot_minutes or settings.DEFAULT_SLOT_MINUTES
    if slot_minutes <= 0 or slot_minutes > 24 * 60:
        raise ValidationError("slot_minutes must be between 1 and 1440")
    validate_query_range(start, end)

    calendar = get_calendar_by_token(session, token)
    records = load_participant_records(session, calendar.id, start, end)
    days = aggregator.summarize_slots(
        policy_from_calendar(calendar),
        records,
        start,
        end,
        slot_minutes,
        resolver=resolver,
        workers=settings.SUMMARY_WORKERS,
    )
    return [
        DateSlotsRead(
            date=day.date,
            kind=day.kind.value,
            window_start=day.window.start,
            window_end=day.window.end,
            slots=[
                SlotRead(
                    start=slot.start,
                    end=slot.end,
                    count=slot.count,
                    participant_names=list(slot.participant_names),
                    is_viable=slot.is_viable,
                )
                for slot in day.slots
            ],
            candidate_windows=[
                CandidateWindowRead(
                    start=window.start,
                    end=window.end,
                    min_count=window.min_count,
                    duration_minutes=window.duration_minutes,
                )
                for window in day.candidate_windows
            ],
        )
        for day in days
    ]
