"""Calendar policy resolution for a single date.

The result is a ``DatePolicy``: whether the date is admissible, and which
time window restricts availability on it. Normal weekday rules take
precedence; holiday and holiday-eve rules only add admissibility to dates
that would otherwise be excluded. The one exception is an actual holiday
under the ``allow`` policy, which always uses the holiday window when one is
configured.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from quorum.engine.holidays import HolidayLookup, country_for_timezone, get_holiday_provider
from quorum.engine.types import (
    UNRESTRICTED,
    CalendarPolicy,
    DateKind,
    DatePolicy,
    HolidaysPolicy,
    TimeWindow,
    weekday_of,
)


class PolicyResolver:
    def __init__(self, holidays: HolidayLookup | None = None) -> None:
        self._holidays = holidays

    @property
    def holidays(self) -> HolidayLookup:
        if self._holidays is None:
            self._holidays = get_holiday_provider()
        return self._holidays

    def resolve(self, policy: CalendarPolicy, day: date) -> DatePolicy:
        if policy.start_date and day < policy.start_date:
            return DatePolicy.excluded()
        if policy.end_date and day > policy.end_date:
            return DatePolicy.excluded()

        weekday = weekday_of(day)
        weekday_allowed = weekday in policy.allowed_weekdays
        weekday_window = policy.weekday_window(weekday)
        country = policy.country or country_for_timezone(policy.timezone)

        if (
            country
            and policy.holidays_policy != HolidaysPolicy.IGNORE
            and self.holidays.is_holiday(country, day)
        ):
            if policy.holidays_policy == HolidaysPolicy.BLOCK:
                return DatePolicy(admissible=False, window=None, kind=DateKind.HOLIDAY)
            if policy.holiday_window.is_set:
                window = policy.holiday_window
            else:
                window = weekday_window if weekday_allowed else UNRESTRICTED
            return DatePolicy(admissible=True, window=window, kind=DateKind.HOLIDAY)

        if weekday_allowed:
            return DatePolicy(admissible=True, window=weekday_window, kind=DateKind.WEEKDAY)

        if (
            country
            and policy.allow_holiday_eves
            and len(policy.allowed_weekdays) < 7
            and self.holidays.is_holiday(country, day + timedelta(days=1))
        ):
            return DatePolicy(
                admissible=True,
                window=policy.holiday_eve_window,
                kind=DateKind.HOLIDAY_EVE,
            )

        return DatePolicy.excluded()

    def is_date_admissible(self, policy: CalendarPolicy, day: date) -> bool:
        return self.resolve(policy, day).admissible

    def time_window(self, policy: CalendarPolicy, day: date) -> Optional[TimeWindow]:
        """Window restricting availability on ``day``; ``None`` if inadmissible."""
        return self.resolve(policy, day).window
