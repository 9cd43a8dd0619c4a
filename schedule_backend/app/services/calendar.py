"""Month grid aggregation for the schedule calendar."""

from __future__ import annotations

from calendar import monthrange
from datetime import date
from typing import Mapping, Optional, Sequence

from .. import schemas
from ..date_keys import date_key
from ..holidays import is_holiday
from .note_ledger import has_notes
from .revenue_ledger import daily_total, monthly_total


def sunday_first_weekday(value: date) -> int:
    """Return 0 for Sunday through 6 for Saturday."""

    return (value.weekday() + 1) % 7


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _tone(weekday: int, holiday: bool) -> schemas.DayTone:
    # Saturday stays blue even on a public holiday
    if weekday == 6:
        return schemas.DayTone.SATURDAY
    if weekday == 0 or holiday:
        return schemas.DayTone.HOLIDAY
    return schemas.DayTone.REGULAR


def build_month_view(
    year: int,
    month: int,
    revenues: Mapping[str, Sequence[schemas.DailyRevenueEntry]],
    notes: Mapping[str, Sequence[schemas.DailyNote]],
    *,
    today: Optional[date] = None,
    selected_day: Optional[int] = None,
) -> schemas.CalendarMonth:
    _, days_in_month = monthrange(year, month)
    days = []
    for day in range(1, days_in_month + 1):
        current = date(year, month, day)
        key = date_key(year, month, day)
        weekday = sunday_first_weekday(current)
        holiday = is_holiday(year, month, day)
        days.append(
            schemas.CalendarDay(
                day=day,
                date_key=key,
                weekday=weekday,
                is_holiday=holiday,
                is_today=current == today,
                tone=_tone(weekday, holiday),
                revenue=daily_total(revenues, key),
                has_note=has_notes(notes, key),
            )
        )

    return schemas.CalendarMonth(
        year=year,
        month=month,
        leading_blanks=sunday_first_weekday(date(year, month, 1)),
        days=days,
        total=monthly_total(revenues, year, month),
        selected_day=selected_day,
    )
