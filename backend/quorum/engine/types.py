"""Value types shared by the availability engine.

These are plain dataclasses, decoupled from the SQLModel tables, so the
engine stays a pure function of its inputs. ``quorum.services.loaders``
builds them from database rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Mapping, Optional
from uuid import UUID

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"

# "23:59" is stored as the last minute of the day but means "until midnight"
END_OF_DAY = time(23, 59)
MINUTES_PER_DAY = 24 * 60


class HolidaysPolicy(str, Enum):
    IGNORE = "ignore"
    ALLOW = "allow"
    BLOCK = "block"


class DateKind(str, Enum):
    WEEKDAY = "weekday"
    HOLIDAY = "holiday"
    HOLIDAY_EVE = "holiday_eve"
    EXCLUDED = "excluded"


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_time(value: str) -> time:
    return datetime.strptime(value, TIME_FORMAT).time()


def format_time(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value is not None else None


def weekday_of(day: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def start_minutes(value: Optional[time]) -> int:
    if value is None:
        return 0
    return value.hour * 60 + value.minute


def end_minutes(value: Optional[time]) -> int:
    if value is None or value == END_OF_DAY:
        return MINUTES_PER_DAY
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    if minutes >= MINUTES_PER_DAY:
        return END_OF_DAY
    return time(minutes // 60, minutes % 60)


def date_range(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True)
class TimeWindow:
    """Time-of-day interval. A missing bound is open (00:00 / end of day)."""

    start: Optional[time] = None
    end: Optional[time] = None

    @property
    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def start_minutes(self) -> int:
        return start_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return end_minutes(self.end)

    @property
    def duration_minutes(self) -> int:
        return max(0, self.end_minutes - self.start_minutes)

    def covers(self, start: int, end: int) -> bool:
        return self.start_minutes <= start and self.end_minutes >= end

    def normalized(self) -> "TimeWindow":
        """Swap bounds given in reverse order."""
        if self.start is not None and self.end is not None and self.start > self.end:
            return TimeWindow(self.end, self.start)
        return self

    def intersects(self, other: "TimeWindow") -> bool:
        return max(self.start_minutes, other.start_minutes) < min(
            self.end_minutes, other.end_minutes
        )

    def clamp(self, start: Optional[time], end: Optional[time]) -> "TimeWindow":
        """Pull explicit bounds inside this window. Missing bounds stay open."""
        if start is not None and self.start is not None and start < self.start:
            start = self.start
        if end is not None and self.end is not None and end > self.end:
            end = self.end
        return TimeWindow(start, end)


UNRESTRICTED = TimeWindow()


@dataclass(frozen=True)
class CalendarPolicy:
    """Calendar-wide admissibility and time-window settings."""

    timezone: str = "UTC"
    threshold: int = 1
    allowed_weekdays: frozenset[int] = frozenset(range(7))
    min_duration_hours: float = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    holidays_policy: HolidaysPolicy = HolidaysPolicy.IGNORE
    allow_holiday_eves: bool = False
    weekday_times: Mapping[int, TimeWindow] = field(default_factory=dict)
    holiday_window: TimeWindow = UNRESTRICTED
    holiday_eve_window: TimeWindow = UNRESTRICTED
    # Overrides the country derived from ``timezone`` for holiday lookups
    country: Optional[str] = None

    def weekday_window(self, weekday: int) -> TimeWindow:
        return self.weekday_times.get(weekday, UNRESTRICTED)


@dataclass(frozen=True)
class DatePolicy:
    admissible: bool
    window: Optional[TimeWindow]
    kind: DateKind

    @classmethod
    def excluded(cls) -> "DatePolicy":
        return cls(admissible=False, window=None, kind=DateKind.EXCLUDED)


@dataclass(frozen=True)
class RecurrenceRule:
    id: UUID
    day_of_week: int
    start_date: date
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class OneOffAvailability:
    date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class Occurrence:
    date: date
    start_time: Optional[time]
    end_time: Optional[time]
    note: Optional[str] = None
    recurrence_id: Optional[UUID] = None


@dataclass(frozen=True)
class AvailabilityEntry:
    """The single effective availability of one participant on one date."""

    start_time: Optional[time]
    end_time: Optional[time]
    note: Optional[str] = None
    source: str = "manual"
    recurrence_id: Optional[UUID] = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start_time, self.end_time)


@dataclass
class ParticipantRecords:
    """Everything the engine needs to know about one participant."""

    participant_id: UUID
    name: str
    availabilities: list[OneOffAvailability] = field(default_factory=list)
    recurrences: list[RecurrenceRule] = field(default_factory=list)
    exceptions: Mapping[UUID, frozenset[date]] = field(default_factory=dict)
