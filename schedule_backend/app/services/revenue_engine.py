"""Lesson revenue calculation for a single day at a single location."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from ..schemas import (
    LESSON_DURATIONS,
    DayKind,
    LessonRates,
    LessonType,
    RateAmount,
    RateSettings,
)

MINUTES_PER_HOUR = Decimal(60)
SATURDAY = 5
SUNDAY = 6


def day_kind_for(value: date) -> DayKind:
    """Saturday and Sunday use the weekend tariff, every other day the weekday one."""

    if value.weekday() in (SATURDAY, SUNDAY):
        return DayKind.WEEKEND
    return DayKind.WEEKDAY


def is_weekend(value: date) -> bool:
    return day_kind_for(value) is DayKind.WEEKEND


def select_rates(settings: RateSettings, value: date) -> LessonRates:
    return settings.for_day(day_kind_for(value))


def _hourly_rate(rates: Mapping[LessonType, RateAmount], lesson_type: LessonType) -> int:
    rate: Optional[RateAmount] = rates.get(lesson_type)
    return rate.amount if rate is not None else 0


def compute_total(
    counts: Mapping[LessonType, int],
    rates: Mapping[LessonType, RateAmount],
    duration_minutes: int,
) -> int:
    """Return ``round(sum(count * duration / 60 * hourly_rate))``, rounding half up.

    ``rates`` is the weekday or weekend map already chosen by the caller.
    Missing counts or rates contribute nothing.
    """

    if duration_minutes not in LESSON_DURATIONS:
        raise ValueError(f"Unsupported lesson duration: {duration_minutes}")

    minutes_billed = Decimal(0)
    for lesson_type in LessonType:
        count = counts.get(lesson_type, 0)
        hourly_rate = _hourly_rate(rates, lesson_type)
        if count <= 0 or hourly_rate <= 0:
            continue
        minutes_billed += Decimal(count * duration_minutes * hourly_rate)

    # one division at the end keeps half-unit totals exact before rounding
    total = minutes_billed / MINUTES_PER_HOUR
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_total_for_date(
    counts: Mapping[LessonType, int],
    settings: RateSettings,
    value: date,
    duration_minutes: int,
) -> int:
    return compute_total(counts, select_rates(settings, value), duration_minutes)
