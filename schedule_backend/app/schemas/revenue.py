from __future__ import annotations

from typing import Annotated, Dict, List, Literal

from pydantic import AfterValidator, BaseModel, Field

from .rate_profile import LessonType

LessonDuration = Literal[20, 30, 60]
LESSON_DURATIONS: tuple[int, ...] = (20, 30, 60)
DEFAULT_LESSON_DURATION = 60


def empty_counts() -> Dict[LessonType, int]:
    return {lesson_type: 0 for lesson_type in LessonType}


def _complete_counts(value: Dict[LessonType, int]) -> Dict[LessonType, int]:
    return {**empty_counts(), **value}


LessonCounts = Annotated[
    Dict[LessonType, Annotated[int, Field(ge=0)]],
    AfterValidator(_complete_counts),
]


class DailyRevenueEntry(BaseModel):
    """Lesson counts and the total earned at one location on one date.

    ``location_name`` and ``total`` are snapshots taken when the entry was
    saved; later edits to the rate profile never rewrite them.
    """

    location_id: str
    location_name: str
    counts: LessonCounts = Field(default_factory=empty_counts)
    duration: LessonDuration = DEFAULT_LESSON_DURATION
    total: int = Field(0, ge=0)


class RevenueEntryWrite(BaseModel):
    """Counts submitted for a location; the server computes the total."""

    counts: LessonCounts = Field(default_factory=empty_counts)
    duration: LessonDuration = DEFAULT_LESSON_DURATION


class DayRevenueResponse(BaseModel):
    date_key: str
    entries: List[DailyRevenueEntry] = Field(default_factory=list)
    total: int = Field(0, ge=0)


class MonthlyRevenueSummary(BaseModel):
    month_key: str
    daily_totals: Dict[str, int] = Field(default_factory=dict)
    total: int = Field(0, ge=0)
