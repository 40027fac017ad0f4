from .aggregator import (
    CandidateWindow,
    DateSlots,
    DateSummary,
    ParticipantAvailability,
    Slot,
    date_summary,
    summarize,
    summarize_slots,
)
from .holidays import HolidayProvider, country_for_timezone, get_holiday_provider
from .merger import merged_availability
from .policy import PolicyResolver
from .recurrence import RecurrenceExpansion, expand
from .types import (
    AvailabilityEntry,
    CalendarPolicy,
    DateKind,
    DatePolicy,
    HolidaysPolicy,
    OneOffAvailability,
    ParticipantRecords,
    RecurrenceRule,
    TimeWindow,
)

__all__ = [
    "AvailabilityEntry",
    "CalendarPolicy",
    "CandidateWindow",
    "DateKind",
    "DatePolicy",
    "DateSlots",
    "DateSummary",
    "HolidayProvider",
    "HolidaysPolicy",
    "OneOffAvailability",
    "ParticipantAvailability",
    "ParticipantRecords",
    "PolicyResolver",
    "RecurrenceExpansion",
    "RecurrenceRule",
    "Slot",
    "TimeWindow",
    "country_for_timezone",
    "date_summary",
    "expand",
    "get_holiday_provider",
    "merged_availability",
    "summarize",
    "summarize_slots",
]
