from __future__ import annotations

from datetime import date, timedelta
from typing import Collection, Iterator, Optional

from quorum.engine.policy import PolicyResolver
from quorum.engine.types import CalendarPolicy, Occurrence, RecurrenceRule, weekday_of


def first_on_or_after(day: date, weekday: int) -> date:
    return day + timedelta(days=(weekday - weekday_of(day)) % 7)


class RecurrenceExpansion:
    """Concrete occurrences of a weekly rule within a query range.

    Iterating yields occurrences lazily; the object holds no iteration state,
    so it can be iterated again with the same result.
    """

    def __init__(
        self,
        rule: RecurrenceRule,
        exceptions: Collection[date],
        query_start: date,
        query_end: date,
        policy: CalendarPolicy,
        resolver: Optional[PolicyResolver] = None,
    ) -> None:
        self.rule = rule
        self.exceptions = frozenset(exceptions)
        self.query_start = query_start
        self.query_end = query_end
        self.policy = policy
        self.resolver = resolver or PolicyResolver()

    def __iter__(self) -> Iterator[Occurrence]:
        rule = self.rule
        stop = self.query_end
        if rule.end_date is not None and rule.end_date < stop:
            stop = rule.end_date

        current = first_on_or_after(max(rule.start_date, self.query_start), rule.day_of_week)
        while current <= stop:
            if current not in self.exceptions:
                resolved = self.resolver.resolve(self.policy, current)
                if resolved.admissible:
                    yield self._occurrence(current, resolved.window)
            current += timedelta(days=7)

    def _occurrence(self, day: date, window) -> Occurrence:
        rule = self.rule
        if rule.start_time is not None or rule.end_time is not None:
            start, end = rule.start_time, rule.end_time
        else:
            start, end = window.start, window.end
        return Occurrence(
            date=day,
            start_time=start,
            end_time=end,
            note=rule.note,
            recurrence_id=rule.id,
        )


def expand(
    rule: RecurrenceRule,
    exceptions: Collection[date],
    query_start: date,
    query_end: date,
    policy: CalendarPolicy,
    resolver: Optional[PolicyResolver] = None,
) -> RecurrenceExpansion:
    return RecurrenceExpansion(rule, exceptions, query_start, query_end, policy, resolver)


def ranges_overlap(
    start_a: date, end_a: Optional[date], start_b: date, end_b: Optional[date]
) -> bool:
    """Inclusive date-range overlap where a missing end extends forever."""
    if end_a is not None and end_a < start_b:
        return False
    if end_b is not None and end_b < start_a:
        return False
    return True
