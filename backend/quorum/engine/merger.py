from __future__ import annotations

from datetime import date
from typing import Optional

from quorum.engine.policy import PolicyResolver
from quorum.engine.recurrence import expand
from quorum.engine.types import AvailabilityEntry, CalendarPolicy, ParticipantRecords


def merged_availability(
    records: ParticipantRecords,
    query_start: date,
    query_end: date,
    policy: CalendarPolicy,
    resolver: Optional[PolicyResolver] = None,
) -> dict[date, AvailabilityEntry]:
    """Effective availability of one participant per date.

    Recurrence occurrences form the base layer and one-off rows are laid on
    top, so a one-off row always wins for its date. Dates the policy does not
    admit are left out, including stray one-off rows written before a policy
    change.
    """
    resolver = resolver or PolicyResolver()
    merged: dict[date, AvailabilityEntry] = {}

    rules = sorted(records.recurrences, key=lambda rule: (rule.start_date, str(rule.id)))
    for rule in rules:
        exceptions = records.exceptions.get(rule.id, frozenset())
        for occurrence in expand(rule, exceptions, query_start, query_end, policy, resolver):
            merged.setdefault(
                occurrence.date,
                AvailabilityEntry(
                    start_time=occurrence.start_time,
                    end_time=occurrence.end_time,
                    note=occurrence.note,
                    source="recurrence",
                    recurrence_id=occurrence.recurrence_id,
                ),
            )

    for availability in records.availabilities:
        if not query_start <= availability.date <= query_end:
            continue
        if not resolver.is_date_admissible(policy, availability.date):
            merged.pop(availability.date, None)
            continue
        merged[availability.date] = AvailabilityEntry(
            start_time=availability.start_time,
            end_time=availability.end_time,
            note=availability.note,
            source="manual",
        )

    return dict(sorted(merged.items()))
