from .availability import AvailabilityCreate, AvailabilityRead, AvailabilityUpdate
from .calendar import (
    CalendarCreate,
    CalendarRead,
    CalendarUpdate,
    PublicCalendarRead,
    PublicParticipantRead,
)
from .common import TimeRange
from .participant import ParticipantCreate, ParticipantRead, ParticipantUpdate
from .recurrence import (
    RecurrenceCreate,
    RecurrenceExceptionCreate,
    RecurrenceExceptionRead,
    RecurrenceRead,
    RecurrenceUpdate,
    RecurrenceWithExceptions,
)
from .summary import (
    CandidateWindowRead,
    DateAvailabilitySummary,
    DateSlotsRead,
    ParticipantAvailabilitySummary,
    SlotRead,
)

__all__ = [
    "AvailabilityCreate",
    "AvailabilityRead",
    "AvailabilityUpdate",
    "CalendarCreate",
    "CalendarRead",
    "CalendarUpdate",
    "CandidateWindowRead",
    "DateAvailabilitySummary",
    "DateSlotsRead",
    "ParticipantAvailabilitySummary",
    "ParticipantCreate",
    "ParticipantRead",
    "ParticipantUpdate",
    "PublicCalendarRead",
    "PublicParticipantRead",
    "RecurrenceCreate",
    "RecurrenceExceptionCreate",
    "RecurrenceExceptionRead",
    "RecurrenceRead",
    "RecurrenceUpdate",
    "RecurrenceWithExceptions",
    "SlotRead",
    "TimeRange",
]
