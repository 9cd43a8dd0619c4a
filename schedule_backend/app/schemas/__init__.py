"""Expose Pydantic schemas for convenient imports."""

from .calendar import CalendarDay, CalendarMonth, DaySummary, DayTone
from .note import (
    NOTE_TYPE_NAMES,
    DailyNote,
    DayNotesResponse,
    NoteCreate,
    NoteType,
    NoteUpdate,
)
from .rate_profile import (
    LESSON_TYPE_NAMES,
    DayKind,
    LessonRates,
    LessonType,
    RateAmount,
    RateProfileBase,
    RateProfileCreate,
    RateProfileListResponse,
    RateProfileRead,
    RateProfileUpdate,
    RateSettings,
)
from .revenue import (
    DEFAULT_LESSON_DURATION,
    LESSON_DURATIONS,
    DailyRevenueEntry,
    DayRevenueResponse,
    LessonCounts,
    LessonDuration,
    MonthlyRevenueSummary,
    RevenueEntryWrite,
    empty_counts,
)

__all__ = [
    "CalendarDay",
    "CalendarMonth",
    "DaySummary",
    "DayTone",
    "NOTE_TYPE_NAMES",
    "DailyNote",
    "DayNotesResponse",
    "NoteCreate",
    "NoteType",
    "NoteUpdate",
    "LESSON_TYPE_NAMES",
    "DayKind",
    "LessonRates",
    "LessonType",
    "RateAmount",
    "RateProfileBase",
    "RateProfileCreate",
    "RateProfileListResponse",
    "RateProfileRead",
    "RateProfileUpdate",
    "RateSettings",
    "DEFAULT_LESSON_DURATION",
    "LESSON_DURATIONS",
    "DailyRevenueEntry",
    "DayRevenueResponse",
    "LessonCounts",
    "LessonDuration",
    "MonthlyRevenueSummary",
    "RevenueEntryWrite",
    "empty_counts",
]
