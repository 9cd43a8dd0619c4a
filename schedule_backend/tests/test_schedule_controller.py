from __future__ import annotations

from datetime import date

import pytest

from schedule_backend.app import schemas
from schedule_backend.app.services import (
    DocumentStoreError,
    MissingReferenceError,
    Overlay,
    ScheduleController,
    ScheduleValidationError,
)

TODAY = date(2025, 1, 15)

PRIVATE = schemas.LessonType.PRIVATE
WEEKDAY = schemas.DayKind.WEEKDAY
WEEKEND = schemas.DayKind.WEEKEND


def _add_location(controller: ScheduleController, name: str = "강남") -> schemas.RateProfileRead:
    assert controller.open_rate_setup().ok
    assert controller.set_rate_name(name).ok
    assert controller.set_rate(WEEKDAY, PRIVATE, 50000).ok
    assert controller.set_rate(WEEKEND, PRIVATE, 60000).ok
    assert controller.save_rate_profile().ok
    return controller.state.profiles[-1]


def _record(controller: ScheduleController, profile_id: str, count: int) -> None:
    assert controller.open_location_picker().ok
    assert controller.choose_location(profile_id).ok
    assert controller.set_lesson_count(PRIVATE, count).ok
    assert controller.save_revenue().ok


def test_initial_state_selects_today(controller):
    state = controller.state

    assert (state.year, state.month, state.selected_day) == (2025, 1, 15)
    assert state.overlay is Overlay.NONE
    assert state.profiles == ()
    assert controller.day_summary().date_key == "2025-01-15"


def test_month_navigation_reselects_today_only_in_current_month(controller):
    assert controller.change_month(1).ok
    assert (controller.state.year, controller.state.month) == (2025, 2)
    assert controller.state.selected_day is None
    assert controller.day_summary() is None

    assert controller.select_day(3).ok
    assert controller.change_month(-1).ok
    assert controller.state.selected_day == TODAY.day

    assert controller.change_month(-1).ok
    assert (controller.state.year, controller.state.month) == (2024, 12)
    assert controller.state.selected_day is None


def test_month_navigation_closes_open_overlays(controller):
    profile = _add_location(controller)
    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok

    assert controller.change_month(1).ok

    assert controller.state.overlay is Overlay.NONE
    assert controller.state.revenue_draft is None


def test_select_day_rejects_days_outside_the_month(controller):
    result = controller.select_day(32)

    assert not result.ok
    assert isinstance(result.error, ScheduleValidationError)
    assert controller.state.selected_day == 15


def test_add_location_from_picker_returns_to_picker(controller):
    assert controller.open_location_picker().ok
    assert controller.choose_add_location().ok
    assert controller.state.overlay is Overlay.RATE_SETUP
    assert controller.state.rate_draft.return_to is Overlay.LOCATION_PICKER

    assert controller.set_rate_name("잠실").ok
    assert controller.save_rate_profile().ok

    assert controller.state.overlay is Overlay.LOCATION_PICKER
    assert [profile.name for profile in controller.state.profiles] == ["잠실"]


def test_cancelling_rate_setup_returns_to_its_invoker(controller):
    assert controller.open_location_picker().ok
    assert controller.choose_add_location().ok
    assert controller.cancel().ok
    assert controller.state.overlay is Overlay.LOCATION_PICKER

    assert controller.cancel().ok
    assert controller.state.overlay is Overlay.NONE


def test_blank_location_name_is_reported_and_state_kept(controller):
    assert controller.open_rate_setup().ok
    before = controller.state

    result = controller.save_rate_profile()

    assert result.message == "지점명을 입력해주세요."
    assert controller.state is before


def test_revenue_flow_updates_day_and_month_totals(controller):
    profile = _add_location(controller)

    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok
    assert controller.state.overlay is Overlay.REVENUE_ENTRY
    assert controller.set_lesson_count(PRIVATE, 2).ok
    assert controller.preview_total() == 100000
    assert controller.set_duration(30).ok
    assert controller.preview_total() == 50000
    assert controller.save_revenue().ok

    assert controller.state.overlay is Overlay.NONE
    summary = controller.day_summary()
    assert summary.total == 50000
    assert summary.month_total == 50000
    assert summary.entries[0].location_name == "강남"

    assert controller.select_day(18).ok
    _record(controller, profile.id, 1)
    assert controller.day_summary().total == 60000

    view = controller.month_view()
    assert view.total == 110000
    days = {day.day: day for day in view.days}
    assert days[15].is_today
    assert days[18].revenue == 60000


def test_reopening_a_saved_location_prefills_the_form(controller):
    profile = _add_location(controller)
    _record(controller, profile.id, 3)

    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok

    draft = controller.state.revenue_draft
    assert draft.counts[PRIVATE] == 3
    assert draft.duration == 60


def test_invalid_counts_and_durations_are_rejected(controller):
    profile = _add_location(controller)
    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok

    assert not controller.set_lesson_count(PRIVATE, -1).ok
    assert not controller.set_duration(45).ok
    assert controller.state.revenue_draft.duration == 60


def test_deleted_location_cannot_be_opened(controller):
    profile = _add_location(controller)
    _record(controller, profile.id, 1)

    assert controller.delete_rate_profile(profile.id).ok
    result = controller.open_revenue_entry(profile.id)

    assert isinstance(result.error, MissingReferenceError)
    # history keeps the snapshot
    assert controller.day_summary().entries[0].location_name == "강남"


def test_delete_revenue_removes_the_day(controller):
    profile = _add_location(controller)
    _record(controller, profile.id, 1)

    assert controller.delete_revenue(profile.id).ok

    assert "2025-01-15" not in controller.state.revenues
    assert controller.day_summary().total == 0


def test_store_failure_keeps_previous_state(controller, store):
    profile = _add_location(controller)
    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok
    assert controller.set_lesson_count(PRIVATE, 2).ok
    before = controller.state

    store.fail_writes = True
    result = controller.save_revenue()

    assert isinstance(result.error, DocumentStoreError)
    assert result.message == "수익 정보 저장에 실패했습니다."
    assert controller.state is before
    assert controller.state.overlay is Overlay.REVENUE_ENTRY

    store.fail_writes = False
    assert controller.save_revenue().ok


def test_load_failure_is_reported(store):
    store.fail_reads = True
    schedule = ScheduleController(store, today=lambda: TODAY)

    result = schedule.load()

    assert result.message == "스케줄 데이터를 불러오지 못했습니다."
    assert schedule.state.profiles == ()


def test_saved_data_is_visible_after_reload(controller, store):
    profile = _add_location(controller)
    _record(controller, profile.id, 2)

    reloaded = ScheduleController(store, today=lambda: TODAY)
    assert reloaded.load().ok

    assert [p.name for p in reloaded.state.profiles] == ["강남"]
    assert reloaded.day_summary().total == 100000


def test_signed_out_controller_is_empty_and_read_only():
    schedule = ScheduleController(None, today=lambda: date(2025, 1, 15))

    assert schedule.load().ok
    assert schedule.month_view().total == 0
    assert schedule.open_rate_setup().ok
    assert schedule.set_rate_name("강남").ok

    result = schedule.save_rate_profile()

    assert result.message == "로그인이 필요합니다."
    assert schedule.state.profiles == ()


def test_note_workflow(controller):
    assert controller.add_note().ok
    assert controller.set_note_type(schemas.NoteType.NO_SHOW).ok
    assert controller.set_note_memo("김철수 회원 노쇼").ok
    assert controller.save_note().ok

    notes = controller.day_summary().notes
    assert len(notes) == 1
    assert notes[0].type is schemas.NoteType.NO_SHOW
    assert controller.state.note_draft is None
    assert {day.day: day for day in controller.month_view().days}[15].has_note

    assert controller.edit_note(notes[0].id).ok
    assert controller.state.note_draft.memo == "김철수 회원 노쇼"
    assert controller.set_note_memo("다음 주 보강").ok
    assert controller.set_note_type(schemas.NoteType.MAKEUP_CLASS).ok
    assert controller.save_note().ok
    updated = controller.day_summary().notes[0]
    assert (updated.type, updated.memo) == (schemas.NoteType.MAKEUP_CLASS, "다음 주 보강")

    assert controller.delete_note(updated.id).ok
    assert controller.day_summary().notes == []
    assert "2025-01-15" not in controller.state.notes


def test_blank_note_is_rejected(controller):
    assert controller.add_note().ok
    assert controller.set_note_memo("  ").ok

    result = controller.save_note()

    assert result.message == "메모 내용을 입력해주세요."
    assert controller.state.note_draft is not None


@pytest.mark.parametrize("day", [1, 31])
def test_cancel_note_discards_the_draft(controller, day):
    assert controller.select_day(day).ok
    assert controller.add_note().ok

    assert controller.cancel_note().ok

    assert controller.state.note_draft is None


def test_overlong_location_name_is_reported_and_state_kept(controller):
    assert controller.open_rate_setup().ok
    assert controller.set_rate_name("x" * 121).ok
    before = controller.state

    result = controller.save_rate_profile()

    assert not result.ok
    assert isinstance(result.error, ScheduleValidationError)
    assert "120" in result.message
    assert controller.state is before
    assert controller.state.profiles == ()


def test_overlong_memo_is_reported_and_state_kept(controller):
    assert controller.add_note().ok
    assert controller.set_note_memo("m" * 2001).ok
    before = controller.state

    result = controller.save_note()

    assert isinstance(result.error, ScheduleValidationError)
    assert "2000" in result.message
    assert controller.state is before
    assert "2025-01-15" not in controller.state.notes


def test_opening_an_overlay_closes_note_editing(controller):
    profile = _add_location(controller)
    assert controller.add_note().ok

    assert controller.open_location_picker().ok
    assert controller.state.note_draft is None

    assert controller.add_note().ok
    assert controller.open_rate_setup(profile.id).ok
    assert controller.state.note_draft is None

    assert controller.add_note().ok
    assert controller.open_revenue_entry(profile.id).ok
    assert controller.state.note_draft is None


def test_note_editing_closes_open_overlays(controller):
    profile = _add_location(controller)
    assert controller.open_location_picker().ok
    assert controller.choose_location(profile.id).ok

    assert controller.add_note().ok

    assert controller.state.overlay is Overlay.NONE
    assert controller.state.revenue_draft is None
    assert controller.state.note_draft is not None
