from __future__ import annotations

from datetime import date, time
from typing import Optional

import pytz

from quorum.core.config import settings
from quorum.core.errors import ValidationError


def validate_time_range(start: Optional[time], end: Optional[time]) -> None:
    if start is not None and end is not None and start >= end:
        raise ValidationError("end time must be after start time")


def validate_date_range(start: Optional[date], end: Optional[date], label: str = "date") -> None:
    if start is not None and end is not None and end < start:
        raise ValidationError(f"end {label} must not be before start {label}")


def validate_query_range(start: date, end: date) -> None:
    validate_date_range(start, end)
    if (end - start).days + 1 > settings.MAX_QUERY_DAYS:
        raise ValidationError(
            f"query range must not exceed {settings.MAX_QUERY_DAYS} days"
        )


def validate_weekday(day: int) -> None:
    if not 0 <= day <= 6:
        raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")


def validate_weekdays(days: list[int]) -> list[int]:
    if not days:
        raise ValidationError("allowed_weekdays must not be empty")
    for day in days:
        validate_weekday(day)
    return sorted(set(days))


def validate_timezone(name: str) -> None:
    if name not in pytz.all_timezones_set:
        raise ValidationError(f"unknown timezone: {name}")


def ordered_times(
    start: Optional[time], end: Optional[time]
) -> tuple[Optional[time], Optional[time]]:
    """Policy bounds given as max/min are swapped into min/max order."""
    if start is not None and end is not None and start > end:
        return end, start
    return start, end
