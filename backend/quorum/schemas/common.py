from __future__ import annotations

from datetime import time
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer

# Times of day travel as "HH:MM"
ClockTime = Annotated[
    time, PlainSerializer(lambda value: value.strftime("%H:%M"), return_type=str)
]


class TimeRange(BaseModel):
    """Allowed time range for a weekday, holiday or holiday eve."""

    min_time: Optional[ClockTime] = None
    max_time: Optional[ClockTime] = None
