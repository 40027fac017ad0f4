from datetime import date, time

from quorum.engine import CalendarPolicy, DateKind, HolidaysPolicy, PolicyResolver, TimeWindow
from quorum.engine.holidays import country_for_timezone

from conftest import FakeHolidays

MON_WED = frozenset({1, 3})


def make_resolver(*days: date) -> PolicyResolver:
    return PolicyResolver(FakeHolidays(days))


def test_allowed_weekday_uses_weekday_window():
    window = TimeWindow(time(9, 0), time(18, 0))
    policy = CalendarPolicy(timezone="Europe/Paris", allowed_weekdays=MON_WED, weekday_times={1: window})

    resolved = make_resolver().resolve(policy, date(2025, 1, 6))

    assert resolved.admissible
    assert resolved.kind == DateKind.WEEKDAY
    assert resolved.window == window


def test_disallowed_weekday_is_excluded():
    policy = CalendarPolicy(timezone="Europe/Paris", allowed_weekdays=MON_WED)

    resolved = make_resolver().resolve(policy, date(2025, 1, 7))

    assert not resolved.admissible
    assert resolved.kind == DateKind.EXCLUDED
    assert resolved.window is None


def test_dates_outside_calendar_bounds_are_excluded():
    policy = CalendarPolicy(start_date=date(2025, 1, 10), end_date=date(2025, 1, 20))
    resolver = make_resolver()

    assert not resolver.is_date_admissible(policy, date(2025, 1, 9))
    assert resolver.is_date_admissible(policy, date(2025, 1, 10))
    assert resolver.is_date_admissible(policy, date(2025, 1, 20))
    assert not resolver.is_date_admissible(policy, date(2025, 1, 21))


def test_block_policy_rejects_holiday_on_allowed_weekday():
    policy = CalendarPolicy(
        timezone="Europe/Paris",
        allowed_weekdays=MON_WED,
        holidays_policy=HolidaysPolicy.BLOCK,
    )

    resolved = make_resolver(date(2025, 1, 1)).resolve(policy, date(2025, 1, 1))

    assert not resolved.admissible
    assert resolved.kind == DateKind.HOLIDAY


def test_allow_policy_admits_holiday_on_other_weekday_with_holiday_window():
    holiday_window = TimeWindow(time(10, 0), time(14, 0))
    policy = CalendarPolicy(
        timezone="Europe/Paris",
        allowed_weekdays=MON_WED,
        holidays_policy=HolidaysPolicy.ALLOW,
        holiday_window=holiday_window,
    )

    # 2025-05-01 is a Thursday
    resolved = make_resolver(date(2025, 5, 1)).resolve(policy, date(2025, 5, 1))

    assert resolved.admissible
    assert resolved.kind == DateKind.HOLIDAY
    assert resolved.window == holiday_window


def test_allow_policy_falls_back_to_weekday_window():
    weekday_window = TimeWindow(time(8, 0), time(12, 0))
    policy = CalendarPolicy(
        timezone="Europe/Paris",
        allowed_weekdays=MON_WED,
        holidays_policy=HolidaysPolicy.ALLOW,
        weekday_times={3: weekday_window},
    )

    resolved = make_resolver(date(2025, 1, 1)).resolve(policy, date(2025, 1, 1))

    assert resolved.kind == DateKind.HOLIDAY
    assert resolved.window == weekday_window


def test_ignore_policy_treats_holiday_as_regular_day():
    policy = CalendarPolicy(timezone="Europe/Paris", allowed_weekdays=MON_WED)

    resolved = make_resolver(date(2025, 5, 1)).resolve(policy, date(2025, 5, 1))

    assert not resolved.admissible


def test_holiday_eve_admitted_when_enabled():
    eve_window = TimeWindow(time(18, 0), None)
    policy = CalendarPolicy(
        timezone="Europe/Paris",
        allowed_weekdays=MON_WED,
        allow_holiday_eves=True,
        holiday_eve_window=eve_window,
    )
    # Friday 2025-05-02 is a holiday, so Thursday is its eve
    resolver = make_resolver(date(2025, 5, 2))

    resolved = resolver.resolve(policy, date(2025, 5, 1))

    assert resolved.admissible
    assert resolved.kind == DateKind.HOLIDAY_EVE
    assert resolved.window == eve_window
    assert not resolver.is_date_admissible(
        CalendarPolicy(timezone="Europe/Paris", allowed_weekdays=MON_WED), date(2025, 5, 1)
    )


def test_holiday_eve_on_allowed_weekday_keeps_weekday_window():
    weekday_window = TimeWindow(time(8, 0), time(12, 0))
    policy = CalendarPolicy(
        timezone="Europe/Paris",
        allowed_weekdays=MON_WED,
        weekday_times={3: weekday_window},
        allow_holiday_eves=True,
        holiday_eve_window=TimeWindow(time(18, 0), None),
    )
    # Thursday 2025-05-01 is a holiday, so Wednesday is both allowed and its eve
    resolved = make_resolver(date(2025, 5, 1)).resolve(policy, date(2025, 4, 30))

    assert resolved.admissible
    assert resolved.kind == DateKind.WEEKDAY
    assert resolved.window == weekday_window


def test_timezone_without_country_ignores_holidays():
    policy = CalendarPolicy(timezone="UTC", holidays_policy=HolidaysPolicy.BLOCK)
    holidays = FakeHolidays([date(2025, 1, 1)])

    assert PolicyResolver(holidays).is_date_admissible(policy, date(2025, 1, 1))
    assert holidays.calls == 0


def test_explicit_country_overrides_timezone():
    policy = CalendarPolicy(timezone="UTC", country="FR", holidays_policy=HolidaysPolicy.BLOCK)

    assert not make_resolver(date(2025, 1, 1)).is_date_admissible(policy, date(2025, 1, 1))


def test_country_for_timezone():
    assert country_for_timezone("Europe/Paris") == "FR"
    assert country_for_timezone("America/New_York") == "US"
    assert country_for_timezone("UTC") is None
    assert country_for_timezone(None) is None
