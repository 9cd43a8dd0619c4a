from __future__ import annotations

import enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .note import DailyNote
from .revenue import DailyRevenueEntry


class DayTone(str, enum.Enum):
    """Colour class of a day number on the month grid."""

    REGULAR = "regular"
    SATURDAY = "saturday"
    HOLIDAY = "holiday"


class CalendarDay(BaseModel):
    day: int = Field(..., ge=1, le=31)
    date_key: str
    weekday: int = Field(..., ge=0, le=6, description="0 is Sunday, 6 is Saturday")
    is_holiday: bool = False
    is_today: bool = False
    tone: DayTone = DayTone.REGULAR
    revenue: int = Field(0, ge=0)
    has_note: bool = False


class CalendarMonth(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    leading_blanks: int = Field(..., ge=0, le=6)
    days: List[CalendarDay]
    total: int = Field(0, ge=0)
    selected_day: Optional[int] = None


class DaySummary(BaseModel):
    """Everything the day panel below the calendar shows."""

    date_key: str
    entries: List[DailyRevenueEntry] = Field(default_factory=list)
    total: int = Field(0, ge=0)
    month_total: int = Field(0, ge=0)
    notes: List[DailyNote] = Field(default_factory=list)
