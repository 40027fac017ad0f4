from datetime import date, time
from uuid import uuid4

from quorum.engine import (
    CalendarPolicy,
    OneOffAvailability,
    ParticipantRecords,
    PolicyResolver,
    RecurrenceRule,
    merged_availability,
)

from conftest import FakeHolidays


def monday_rule(**kwargs) -> RecurrenceRule:
    values = dict(
        id=uuid4(),
        day_of_week=1,
        start_date=date(2025, 1, 1),
        start_time=time(9, 0),
        end_time=time(12, 0),
    )
    values.update(kwargs)
    return RecurrenceRule(**values)


def test_one_off_overrides_recurrence_on_its_date():
    records = ParticipantRecords(
        participant_id=uuid4(),
        name="Alice",
        availabilities=[OneOffAvailability(date(2025, 2, 10), time(14, 0), time(16, 0))],
        recurrences=[monday_rule()],
    )

    merged = merged_availability(
        records, date(2025, 2, 1), date(2025, 2, 28), CalendarPolicy(), PolicyResolver(FakeHolidays())
    )

    override = merged[date(2025, 2, 10)]
    assert (override.start_time, override.end_time) == (time(14, 0), time(16, 0))
    assert override.source == "manual"
    regular = merged[date(2025, 2, 17)]
    assert (regular.start_time, regular.end_time) == (time(9, 0), time(12, 0))
    assert regular.source == "recurrence"
    assert list(merged) == sorted(merged)


def test_one_off_on_inadmissible_date_is_dropped():
    policy = CalendarPolicy(allowed_weekdays=frozenset({1}))
    records = ParticipantRecords(
        participant_id=uuid4(),
        name="Alice",
        # Tuesday, written before Tuesdays were disallowed
        availabilities=[OneOffAvailability(date(2025, 2, 11))],
    )

    merged = merged_availability(
        records, date(2025, 2, 1), date(2025, 2, 28), policy, PolicyResolver(FakeHolidays())
    )

    assert merged == {}


def test_excluded_recurrence_date_can_still_hold_one_off():
    rule = monday_rule()
    records = ParticipantRecords(
        participant_id=uuid4(),
        name="Alice",
        availabilities=[OneOffAvailability(date(2025, 2, 3), time(18, 0), time(20, 0))],
        recurrences=[rule],
        exceptions={rule.id: frozenset({date(2025, 2, 3)})},
    )

    merged = merged_availability(
        records, date(2025, 2, 3), date(2025, 2, 3), CalendarPolicy(), PolicyResolver(FakeHolidays())
    )

    assert merged[date(2025, 2, 3)].start_time == time(18, 0)


def test_earliest_recurrence_wins_when_rules_share_a_date():
    early = monday_rule(start_date=date(2024, 1, 1), end_date=date(2025, 6, 30))
    late = monday_rule(start_date=date(2025, 1, 1), start_time=time(15, 0), end_time=time(18, 0))
    records = ParticipantRecords(participant_id=uuid4(), name="Alice", recurrences=[late, early])

    merged = merged_availability(
        records, date(2025, 1, 6), date(2025, 1, 6), CalendarPolicy(), PolicyResolver(FakeHolidays())
    )

    assert merged[date(2025, 1, 6)].recurrence_id == early.id
