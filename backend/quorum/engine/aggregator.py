"""Cross-participant aggregation of merged availability.

Each participant's merged view is computed independently (optionally on a
thread pool) and then reduced on the calling thread into per-date and
per-slot summaries. Output ordering is fixed: dates ascending, then
participants by name.
"""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, time
from typing import Optional, Sequence
from uuid import UUID

from quorum.engine.merger import merged_availability
from quorum.engine.policy import PolicyResolver
from quorum.engine.types import (
    UNRESTRICTED,
    AvailabilityEntry,
    CalendarPolicy,
    DateKind,
    ParticipantRecords,
    TimeWindow,
    date_range,
    minutes_to_time,
)


@dataclass(frozen=True)
class ParticipantAvailability:
    participant_id: UUID
    participant_name: str
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    note: Optional[str] = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start_time, self.end_time)


@dataclass(frozen=True)
class DateSummary:
    date: date
    participants: tuple[ParticipantAvailability, ...]
    total_count: int
    max_simultaneous: int
    is_viable: bool


@dataclass(frozen=True)
class Slot:
    start: time
    end: time
    count: int
    participant_names: tuple[str, ...]
    is_viable: bool


@dataclass(frozen=True)
class CandidateWindow:
    start: time
    end: time
    min_count: int
    duration_minutes: int


@dataclass(frozen=True)
class DateSlots:
    date: date
    kind: DateKind
    window: TimeWindow
    slots: tuple[Slot, ...]
    candidate_windows: tuple[CandidateWindow, ...]


MergedView = tuple[ParticipantRecords, dict[date, AvailabilityEntry]]


def is_viable(count: int, policy: CalendarPolicy) -> bool:
    return count >= policy.threshold


def merge_all(
    policy: CalendarPolicy,
    participants: Sequence[ParticipantRecords],
    query_start: date,
    query_end: date,
    resolver: Optional[PolicyResolver] = None,
    workers: int = 1,
) -> list[MergedView]:
    resolver = resolver or PolicyResolver()

    def merge(records: ParticipantRecords) -> MergedView:
        return records, merged_availability(records, query_start, query_end, policy, resolver)

    if workers > 1 and len(participants) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="merge") as pool:
            return list(pool.map(merge, participants))
    return [merge(records) for records in participants]


def max_simultaneous(participants: Sequence[ParticipantAvailability]) -> int:
    """Largest number of participants whose windows all cover one segment."""
    windows = [p.window for p in participants]
    boundaries = sorted(
        {w.start_minutes for w in windows} | {w.end_minutes for w in windows}
    )
    best = 0
    for seg_start, seg_end in zip(boundaries, boundaries[1:]):
        count = sum(1 for w in windows if w.covers(seg_start, seg_end))
        best = max(best, count)
    return best


def _sort_key(participant: ParticipantAvailability):
    return participant.participant_name, str(participant.participant_id)


def summarize(
    policy: CalendarPolicy,
    participants: Sequence[ParticipantRecords],
    query_start: date,
    query_end: date,
    resolver: Optional[PolicyResolver] = None,
    workers: int = 1,
) -> list[DateSummary]:
    """Per-date summaries for every date with at least one available participant."""
    views = merge_all(policy, participants, query_start, query_end, resolver, workers)

    by_date: dict[date, list[ParticipantAvailability]] = defaultdict(list)
    for records, view in views:
        for day, entry in view.items():
            by_date[day].append(
                ParticipantAvailability(
                    participant_id=records.participant_id,
                    participant_name=records.name,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                    note=entry.note,
                )
            )

    summaries = []
    for day in sorted(by_date):
        people = tuple(sorted(by_date[day], key=_sort_key))
        summaries.append(
            DateSummary(
                date=day,
                participants=people,
                total_count=len(people),
                max_simultaneous=max_simultaneous(people),
                is_viable=is_viable(len(people), policy),
            )
        )
    return summaries


def date_summary(
    policy: CalendarPolicy,
    participants: Sequence[ParticipantRecords],
    day: date,
    resolver: Optional[PolicyResolver] = None,
) -> DateSummary:
    summaries = summarize(policy, participants, day, day, resolver)
    if summaries:
        return summaries[0]
    return DateSummary(
        date=day, participants=(), total_count=0, max_simultaneous=0, is_viable=False
    )


def candidate_windows(slots: Sequence[Slot], min_duration_hours: float) -> list[CandidateWindow]:
    """Maximal runs of consecutive viable slots that last long enough."""
    minimum = min_duration_hours * 60
    windows: list[CandidateWindow] = []
    run: list[Slot] = []

    def close_run() -> None:
        if not run:
            return
        start, end = run[0].start, run[-1].end
        duration = _minutes_between(start, end)
        if duration >= minimum:
            windows.append(
                CandidateWindow(
                    start=start,
                    end=end,
                    min_count=min(slot.count for slot in run),
                    duration_minutes=duration,
                )
            )
        run.clear()

    for slot in slots:
        if slot.is_viable and (not run or run[-1].end == slot.start):
            run.append(slot)
        else:
            close_run()
            if slot.is_viable:
                run.append(slot)
    close_run()
    return windows


def _minutes_between(start: time, end: time) -> int:
    return TimeWindow(start, end).duration_minutes


def summarize_slots(
    policy: CalendarPolicy,
    participants: Sequence[ParticipantRecords],
    query_start: date,
    query_end: date,
    slot_minutes: int,
    resolver: Optional[PolicyResolver] = None,
    workers: int = 1,
) -> list[DateSlots]:
    """Per-slot counts for every admissible date in the range.

    A participant counts toward a slot only when their merged interval for
    the date covers the whole slot. Raw counts are kept for every slot;
    ``candidate_windows`` lists only the viable runs that satisfy
    ``min_duration_hours``.
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be greater than 0")

    resolver = resolver or PolicyResolver()
    views = merge_all(policy, participants, query_start, query_end, resolver, workers)

    result = []
    for day in date_range(query_start, query_end):
        resolved = resolver.resolve(policy, day)
        if not resolved.admissible:
            continue
        window = resolved.window or UNRESTRICTED

        slots = []
        for start in range(window.start_minutes, window.end_minutes - slot_minutes + 1, slot_minutes):
            end = start + slot_minutes
            names = []
            for records, view in views:
                entry = view.get(day)
                if entry is not None and entry.window.covers(start, end):
                    names.append(records.name)
            names.sort()
            slots.append(
                Slot(
                    start=minutes_to_time(start),
                    end=minutes_to_time(end),
                    count=len(names),
                    participant_names=tuple(names),
                    is_viable=is_viable(len(names), policy),
                )
            )

        result.append(
            DateSlots(
                date=day,
                kind=resolved.kind,
                window=window,
                slots=tuple(slots),
                candidate_windows=tuple(candidate_windows(slots, policy.min_duration_hours)),
            )
        )
    return result
