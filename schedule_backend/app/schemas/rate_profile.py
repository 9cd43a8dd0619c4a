from __future__ import annotations

import enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LessonType(str, enum.Enum):
    """Kinds of lessons a coach can bill for."""

    PRIVATE = "private"
    DUET = "duet"
    MAGIC = "magic"
    GROUP = "group"
    OTHER = "other"


LESSON_TYPE_NAMES: Dict[LessonType, str] = {
    LessonType.PRIVATE: "개인레슨",
    LessonType.DUET: "듀엣레슨",
    LessonType.MAGIC: "매직테니스",
    LessonType.GROUP: "그룹레슨",
    LessonType.OTHER: "기타",
}


class DayKind(str, enum.Enum):
    """Which tariff sheet of a rate profile applies to a date."""

    WEEKDAY = "weekday"
    WEEKEND = "weekend"


class RateAmount(BaseModel):
    amount: int = Field(0, ge=0, description="Hourly rate in currency units")


LessonRates = Dict[LessonType, RateAmount]


def _complete_rates(rates: LessonRates) -> LessonRates:
    return {lesson_type: rates.get(lesson_type) or RateAmount() for lesson_type in LessonType}


class RateSettings(BaseModel):
    """Weekday and weekend hourly rates, one entry per lesson type."""

    weekday: LessonRates = Field(default_factory=dict, validate_default=True)
    weekend: LessonRates = Field(default_factory=dict, validate_default=True)

    @field_validator("weekday", "weekend")
    @classmethod
    def _fill_missing_lesson_types(cls, value: LessonRates) -> LessonRates:
        return _complete_rates(value)

    def for_day(self, day_kind: DayKind) -> LessonRates:
        return self.weekend if day_kind is DayKind.WEEKEND else self.weekday


class RateProfileBase(BaseModel):
    name: str = Field(..., max_length=120, description="Location label shown to the coach")
    rates: RateSettings = Field(default_factory=RateSettings)


class RateProfileCreate(RateProfileBase):
    """Payload used to register a new teaching location."""

    pass


class RateProfileUpdate(RateProfileBase):
    """Full replacement of a profile's name and rates."""

    pass


class RateProfileRead(RateProfileBase):
    id: str

    model_config = ConfigDict(from_attributes=True)


class RateProfileListResponse(BaseModel):
    items: List[RateProfileRead]
    total: int = Field(..., ge=0)
