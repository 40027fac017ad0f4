from .availability import Availability
from .calendar import Calendar
from .participant import Participant
from .recurrence import Recurrence, RecurrenceException

__all__ = [
    "Availability",
    "Calendar",
    "Participant",
    "Recurrence",
    "RecurrenceException",
]
