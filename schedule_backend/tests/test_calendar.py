from __future__ import annotations

from datetime import date

from schedule_backend.app import schemas
from schedule_backend.app.services import build_month_view
from schedule_backend.app.services.calendar import shift_month, sunday_first_weekday

DayTone = schemas.DayTone


def _entry(total: int) -> schemas.DailyRevenueEntry:
    return schemas.DailyRevenueEntry(location_id="p1", location_name="강남", total=total)


def test_month_grid_starts_on_sunday():
    view = build_month_view(2025, 1, {}, {})

    # 2025-01-01 is a Wednesday
    assert view.leading_blanks == 3
    assert len(view.days) == 31
    assert view.days[0].date_key == "2025-01-01"
    assert view.days[0].weekday == 3
    assert view.total == 0


def test_day_tones_follow_weekday_and_holidays():
    days = {day.day: day for day in build_month_view(2025, 1, {}, {}).days}

    assert days[1].is_holiday and days[1].tone is DayTone.HOLIDAY
    assert days[2].tone is DayTone.REGULAR
    assert days[4].tone is DayTone.SATURDAY
    assert days[5].tone is DayTone.HOLIDAY
    assert not days[5].is_holiday


def test_saturday_holiday_keeps_saturday_tone():
    march_first = build_month_view(2025, 3, {}, {}).days[0]

    assert march_first.is_holiday
    assert march_first.tone is DayTone.SATURDAY


def test_revenue_and_notes_are_attached_per_day():
    revenues = {
        "2024-12-31": [_entry(70000)],
        "2025-01-15": [_entry(50000), _entry(30000)],
        "2025-01-18": [_entry(60000)],
        "2025-02-01": [_entry(10000)],
    }
    notes = {"2025-01-18": [schemas.DailyNote(id="note-1", memo="노쇼")], "2025-01-20": []}

    view = build_month_view(
        2025, 1, revenues, notes, today=date(2025, 1, 15), selected_day=18
    )
    days = {day.day: day for day in view.days}

    assert days[15].revenue == 80000
    assert days[15].is_today
    assert not days[16].is_today
    assert days[18].revenue == 60000
    assert days[18].has_note
    assert not days[20].has_note
    assert days[1].revenue == 0
    assert view.total == 140000
    assert view.selected_day == 18


def test_month_navigation_wraps_years():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2025, 6, 14) == (2026, 8)
    assert sunday_first_weekday(date(2025, 1, 19)) == 0
    assert sunday_first_weekday(date(2025, 1, 18)) == 6
