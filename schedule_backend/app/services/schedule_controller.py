"""State holder behind the schedule screen.

The controller keeps an immutable :class:`ScheduleState` (displayed month,
selected day, the open overlay, form drafts and the cached collections). Each
action runs as a command ``(state, input) -> new state``; the controller only
swaps in the new state when the command, including any store write, succeeds.
A failed command therefore leaves the previous state untouched and reports the
error through :class:`CommandResult`.
"""

from __future__ import annotations

import enum
import logging
from calendar import monthrange
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from .. import schemas
from ..date_keys import date_key
from .calendar import build_month_view, shift_month
from .document_store import DocumentStore
from .errors import (
    DocumentStoreError,
    MissingReferenceError,
    ScheduleError,
    ScheduleValidationError,
)
from .note_ledger import NoteLedgerService, clean_memo
from .rate_profiles import RateProfileService
from .revenue_engine import compute_total_for_date
from .revenue_ledger import RevenueLedgerService, daily_total, monthly_total

LOGGER = logging.getLogger(__name__)

FAILURE_MESSAGES: Dict[str, str] = {
    "load schedule": "스케줄 데이터를 불러오지 못했습니다.",
    "save rate profile": "지점 정보 저장에 실패했습니다.",
    "delete rate profile": "지점 정보 삭제에 실패했습니다.",
    "save revenue": "수익 정보 저장에 실패했습니다.",
    "delete revenue": "수익 기록 삭제에 실패했습니다.",
    "save note": "메모 저장에 실패했습니다.",
    "delete note": "메모 삭제에 실패했습니다.",
}


class Overlay(str, enum.Enum):
    """Modal shown on top of the calendar; at most one is open."""

    NONE = "none"
    LOCATION_PICKER = "location_picker"
    RATE_SETUP = "rate_setup"
    REVENUE_ENTRY = "revenue_entry"


@dataclass(frozen=True)
class RateSetupDraft:
    profile_id: Optional[str]
    name: str
    rates: schemas.RateSettings
    return_to: Overlay = Overlay.NONE


@dataclass(frozen=True)
class RevenueDraft:
    location_id: str
    counts: Dict[schemas.LessonType, int]
    duration: int = schemas.DEFAULT_LESSON_DURATION


@dataclass(frozen=True)
class NoteDraft:
    note_id: Optional[str]
    type: schemas.NoteType = schemas.NoteType.WORK
    memo: str = ""


@dataclass(frozen=True)
class ScheduleState:
    year: int
    month: int
    selected_day: Optional[int] = None
    overlay: Overlay = Overlay.NONE
    rate_draft: Optional[RateSetupDraft] = None
    revenue_draft: Optional[RevenueDraft] = None
    note_draft: Optional[NoteDraft] = None
    profiles: Tuple[schemas.RateProfileRead, ...] = ()
    revenues: Mapping[str, List[schemas.DailyRevenueEntry]] = field(default_factory=dict)
    notes: Mapping[str, List[schemas.DailyNote]] = field(default_factory=dict)

    @property
    def selected_date(self) -> Optional[date]:
        if self.selected_day is None:
            return None
        return date(self.year, self.month, self.selected_day)

    @property
    def selected_key(self) -> Optional[str]:
        if self.selected_day is None:
            return None
        return date_key(self.year, self.month, self.selected_day)

    def find_profile(self, profile_id: str) -> Optional[schemas.RateProfileRead]:
        return next((profile for profile in self.profiles if profile.id == profile_id), None)


@dataclass(frozen=True)
class CommandResult:
    state: ScheduleState
    error: Optional[ScheduleError] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _with_day(mapping: Mapping[str, list], key: str, items: list) -> Dict[str, list]:
    updated = dict(mapping)
    if items:
        updated[key] = items
    else:
        updated.pop(key, None)
    return updated


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    location = ".".join(str(part) for part in errors[0].get("loc", ()))
    message = errors[0].get("msg", str(exc))
    return f"{location}: {message}" if location else message


def _with_note_draft(state: ScheduleState, draft: NoteDraft) -> ScheduleState:
    # the note form replaces any open overlay
    return replace(
        state, overlay=Overlay.NONE, rate_draft=None, revenue_draft=None, note_draft=draft
    )


def _require_day(state: ScheduleState) -> Tuple[date, str]:
    if state.selected_day is None:
        raise ScheduleValidationError("날짜를 먼저 선택해주세요.")
    return state.selected_date, state.selected_key  # type: ignore[return-value]


class ScheduleController:
    """Drives the schedule screen for one user.

    ``store`` is ``None`` when nobody is signed in; the controller then holds
    empty collections and rejects every action that would write.
    """

    def __init__(
        self,
        store: Optional[DocumentStore],
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._today = today
        self.profiles = RateProfileService(store) if store is not None else None
        self.revenues = RevenueLedgerService(store) if store is not None else None
        self.notes = NoteLedgerService(store) if store is not None else None
        current = today()
        self.state = ScheduleState(year=current.year, month=current.month, selected_day=current.day)

    @property
    def is_signed_in(self) -> bool:
        return self.profiles is not None

    def _run(self, operation: str, command: Callable[..., ScheduleState], *args) -> CommandResult:
        try:
            new_state = command(self.state, *args)
        except DocumentStoreError as exc:
            LOGGER.error("Schedule action '%s' failed: %s", operation, exc)
            return CommandResult(self.state, exc, FAILURE_MESSAGES.get(operation, str(exc)))
        except ScheduleError as exc:
            LOGGER.info("Schedule action '%s' rejected: %s", operation, exc)
            return CommandResult(self.state, exc, str(exc))
        except ValidationError as exc:
            error = ScheduleValidationError(_first_error_message(exc))
            LOGGER.info("Schedule action '%s' rejected: %s", operation, error)
            return CommandResult(self.state, error, str(error))
        self.state = new_state
        return CommandResult(new_state)

    def _services(self) -> Tuple[RateProfileService, RevenueLedgerService, NoteLedgerService]:
        if self.profiles is None or self.revenues is None or self.notes is None:
            raise ScheduleValidationError("로그인이 필요합니다.")
        return self.profiles, self.revenues, self.notes

    # Loading -----------------------------------------------------------------

    def load(self) -> CommandResult:
        return self._run("load schedule", self._load)

    def _load(self, state: ScheduleState) -> ScheduleState:
        if not self.is_signed_in:
            return replace(state, profiles=(), revenues={}, notes={})
        profiles, revenues, notes = self._services()
        return replace(
            state,
            profiles=tuple(profiles.list_profiles()),
            revenues=revenues.load_all(),
            notes=notes.load_all(),
        )

    # Calendar navigation -----------------------------------------------------

    def change_month(self, delta: int) -> CommandResult:
        return self._run("change month", self._change_month, delta)

    def _change_month(self, state: ScheduleState, delta: int) -> ScheduleState:
        year, month = shift_month(state.year, state.month, delta)
        today = self._today()
        selected = today.day if (year, month) == (today.year, today.month) else None
        return replace(
            state,
            year=year,
            month=month,
            selected_day=selected,
            overlay=Overlay.NONE,
            rate_draft=None,
            revenue_draft=None,
            note_draft=None,
        )

    def select_day(self, day: int) -> CommandResult:
        return self._run("select day", self._select_day, day)

    def _select_day(self, state: ScheduleState, day: int) -> ScheduleState:
        _, days_in_month = monthrange(state.year, state.month)
        if not 1 <= day <= days_in_month:
            raise ScheduleValidationError(f"Day {day} is outside {state.year}-{state.month:02d}")
        return replace(state, selected_day=day, note_draft=None)

    # Location picker and rate setup ------------------------------------------

    def open_location_picker(self) -> CommandResult:
        return self._run("open location picker", self._open_location_picker)

    def _open_location_picker(self, state: ScheduleState) -> ScheduleState:
        _require_day(state)
        return replace(
            state,
            overlay=Overlay.LOCATION_PICKER,
            rate_draft=None,
            revenue_draft=None,
            note_draft=None,
        )

    def choose_location(self, location_id: str) -> CommandResult:
        return self.open_revenue_entry(location_id)

    def choose_add_location(self) -> CommandResult:
        return self.open_rate_setup()

    def open_rate_setup(self, profile_id: Optional[str] = None) -> CommandResult:
        return self._run("open rate setup", self._open_rate_setup, profile_id)

    def _open_rate_setup(self, state: ScheduleState, profile_id: Optional[str]) -> ScheduleState:
        return_to = (
            Overlay.LOCATION_PICKER if state.overlay is Overlay.LOCATION_PICKER else Overlay.NONE
        )
        if profile_id is None:
            draft = RateSetupDraft(None, "", schemas.RateSettings(), return_to)
        else:
            profile = state.find_profile(profile_id)
            if profile is None:
                raise MissingReferenceError(f"Rate profile {profile_id} not found")
            draft = RateSetupDraft(profile.id, profile.name, profile.rates, return_to)
        return replace(
            state, overlay=Overlay.RATE_SETUP, rate_draft=draft, revenue_draft=None, note_draft=None
        )

    def _require_rate_draft(self, state: ScheduleState) -> RateSetupDraft:
        if state.overlay is not Overlay.RATE_SETUP or state.rate_draft is None:
            raise ScheduleValidationError("Rate setup is not open")
        return state.rate_draft

    def set_rate_name(self, name: str) -> CommandResult:
        return self._run("edit rate name", self._set_rate_name, name)

    def _set_rate_name(self, state: ScheduleState, name: str) -> ScheduleState:
        draft = self._require_rate_draft(state)
        return replace(state, rate_draft=replace(draft, name=name))

    def set_rate(
        self, day_kind: schemas.DayKind, lesson_type: schemas.LessonType, amount: int
    ) -> CommandResult:
        return self._run("edit rate", self._set_rate, day_kind, lesson_type, amount)

    def _set_rate(
        self,
        state: ScheduleState,
        day_kind: schemas.DayKind,
        lesson_type: schemas.LessonType,
        amount: int,
    ) -> ScheduleState:
        draft = self._require_rate_draft(state)
        if amount < 0:
            raise ScheduleValidationError("Rates cannot be negative")
        sheet = {**draft.rates.for_day(day_kind), lesson_type: schemas.RateAmount(amount=amount)}
        rates = draft.rates.model_copy(update={day_kind.value: sheet})
        return replace(state, rate_draft=replace(draft, rates=rates))

    def save_rate_profile(self) -> CommandResult:
        return self._run("save rate profile", self._save_rate_profile)

    def _save_rate_profile(self, state: ScheduleState) -> ScheduleState:
        draft = self._require_rate_draft(state)
        if not draft.name.strip():
            raise ScheduleValidationError("지점명을 입력해주세요.")
        profiles, _, _ = self._services()
        payload = schemas.RateProfileBase(name=draft.name, rates=draft.rates)
        if draft.profile_id is not None:
            saved = profiles.update_profile(draft.profile_id, payload)
            updated = tuple(saved if p.id == saved.id else p for p in state.profiles)
        else:
            saved = profiles.create_profile(payload)
            updated = (*state.profiles, saved)
        return replace(state, profiles=updated, overlay=draft.return_to, rate_draft=None)

    def delete_rate_profile(self, profile_id: str) -> CommandResult:
        return self._run("delete rate profile", self._delete_rate_profile, profile_id)

    def _delete_rate_profile(self, state: ScheduleState, profile_id: str) -> ScheduleState:
        profiles, _, _ = self._services()
        profiles.delete_profile(profile_id)
        return replace(state, profiles=tuple(p for p in state.profiles if p.id != profile_id))

    # Revenue entry -----------------------------------------------------------

    def open_revenue_entry(self, location_id: str) -> CommandResult:
        return self._run("open revenue entry", self._open_revenue_entry, location_id)

    def _open_revenue_entry(self, state: ScheduleState, location_id: str) -> ScheduleState:
        _, key = _require_day(state)
        if state.find_profile(location_id) is None:
            raise MissingReferenceError(f"Rate profile {location_id} not found")
        existing = next(
            (entry for entry in state.revenues.get(key, []) if entry.location_id == location_id),
            None,
        )
        if existing is not None:
            draft = RevenueDraft(location_id, dict(existing.counts), existing.duration)
        else:
            draft = RevenueDraft(location_id, schemas.empty_counts())
        return replace(
            state,
            overlay=Overlay.REVENUE_ENTRY,
            revenue_draft=draft,
            rate_draft=None,
            note_draft=None,
        )

    def _require_revenue_draft(self, state: ScheduleState) -> RevenueDraft:
        if state.overlay is not Overlay.REVENUE_ENTRY or state.revenue_draft is None:
            raise ScheduleValidationError("Revenue entry is not open")
        return state.revenue_draft

    def set_lesson_count(self, lesson_type: schemas.LessonType, count: int) -> CommandResult:
        return self._run("edit lesson count", self._set_lesson_count, lesson_type, count)

    def _set_lesson_count(
        self, state: ScheduleState, lesson_type: schemas.LessonType, count: int
    ) -> ScheduleState:
        draft = self._require_revenue_draft(state)
        if count < 0:
            raise ScheduleValidationError("Lesson counts cannot be negative")
        counts = {**draft.counts, lesson_type: count}
        return replace(state, revenue_draft=replace(draft, counts=counts))

    def set_duration(self, duration: int) -> CommandResult:
        return self._run("edit lesson duration", self._set_duration, duration)

    def _set_duration(self, state: ScheduleState, duration: int) -> ScheduleState:
        draft = self._require_revenue_draft(state)
        if duration not in schemas.LESSON_DURATIONS:
            raise ScheduleValidationError(f"Unsupported lesson duration: {duration}")
        return replace(state, revenue_draft=replace(draft, duration=duration))

    def preview_total(self) -> int:
        """Total the open revenue form would save, or 0 when none is open."""

        state = self.state
        draft = state.revenue_draft
        selected = state.selected_date
        if draft is None or selected is None:
            return 0
        profile = state.find_profile(draft.location_id)
        if profile is None:
            return 0
        return compute_total_for_date(draft.counts, profile.rates, selected, draft.duration)

    def save_revenue(self) -> CommandResult:
        return self._run("save revenue", self._save_revenue)

    def _save_revenue(self, state: ScheduleState) -> ScheduleState:
        draft = self._require_revenue_draft(state)
        selected, key = _require_day(state)
        profile = state.find_profile(draft.location_id)
        if profile is None:
            raise MissingReferenceError(f"Rate profile {draft.location_id} not found")
        _, revenues, _ = self._services()
        entries = revenues.record(selected, profile, draft.counts, draft.duration)
        return replace(
            state,
            revenues=_with_day(state.revenues, key, entries),
            overlay=Overlay.NONE,
            revenue_draft=None,
        )

    def delete_revenue(self, location_id: str) -> CommandResult:
        return self._run("delete revenue", self._delete_revenue, location_id)

    def _delete_revenue(self, state: ScheduleState, location_id: str) -> ScheduleState:
        _, key = _require_day(state)
        _, revenues, _ = self._services()
        entries = revenues.delete_for_location(key, location_id)
        return replace(state, revenues=_with_day(state.revenues, key, entries))

    # Notes -------------------------------------------------------------------

    def add_note(self) -> CommandResult:
        return self._run("add note", self._add_note)

    def _add_note(self, state: ScheduleState) -> ScheduleState:
        _require_day(state)
        return _with_note_draft(state, NoteDraft(None))

    def edit_note(self, note_id: str) -> CommandResult:
        return self._run("edit note", self._edit_note, note_id)

    def _edit_note(self, state: ScheduleState, note_id: str) -> ScheduleState:
        _, key = _require_day(state)
        note = next((n for n in state.notes.get(key, []) if n.id == note_id), None)
        if note is None:
            raise MissingReferenceError(f"Note {note_id} not found")
        return _with_note_draft(state, NoteDraft(note.id, note.type, note.memo))

    def _require_note_draft(self, state: ScheduleState) -> NoteDraft:
        if state.note_draft is None:
            raise ScheduleValidationError("No note is being edited")
        return state.note_draft

    def set_note_type(self, note_type: schemas.NoteType) -> CommandResult:
        return self._run("edit note type", self._set_note_type, note_type)

    def _set_note_type(self, state: ScheduleState, note_type: schemas.NoteType) -> ScheduleState:
        draft = self._require_note_draft(state)
        return replace(state, note_draft=replace(draft, type=note_type))

    def set_note_memo(self, memo: str) -> CommandResult:
        return self._run("edit note memo", self._set_note_memo, memo)

    def _set_note_memo(self, state: ScheduleState, memo: str) -> ScheduleState:
        draft = self._require_note_draft(state)
        return replace(state, note_draft=replace(draft, memo=memo))

    def cancel_note(self) -> CommandResult:
        return self._run("cancel note", lambda state: replace(state, note_draft=None))

    def save_note(self) -> CommandResult:
        return self._run("save note", self._save_note)

    def _save_note(self, state: ScheduleState) -> ScheduleState:
        draft = self._require_note_draft(state)
        _, key = _require_day(state)
        clean_memo(draft.memo)
        _, _, notes = self._services()
        if draft.note_id is None:
            saved = notes.append(key, schemas.NoteCreate(type=draft.type, memo=draft.memo))
        else:
            patch = schemas.NoteUpdate(type=draft.type, memo=draft.memo)
            saved = notes.update(key, draft.note_id, patch)
        return replace(state, notes=_with_day(state.notes, key, saved), note_draft=None)

    def delete_note(self, note_id: str) -> CommandResult:
        return self._run("delete note", self._delete_note, note_id)

    def _delete_note(self, state: ScheduleState, note_id: str) -> ScheduleState:
        _, key = _require_day(state)
        _, _, notes = self._services()
        remaining = notes.delete(key, note_id)
        return replace(state, notes=_with_day(state.notes, key, remaining))

    # Overlays ----------------------------------------------------------------

    def cancel(self) -> CommandResult:
        return self._run("cancel", self._cancel)

    def _cancel(self, state: ScheduleState) -> ScheduleState:
        overlay = Overlay.NONE
        if state.overlay is Overlay.RATE_SETUP and state.rate_draft is not None:
            overlay = state.rate_draft.return_to
        return replace(state, overlay=overlay, rate_draft=None, revenue_draft=None)

    # Read models -------------------------------------------------------------

    def month_view(self) -> schemas.CalendarMonth:
        state = self.state
        return build_month_view(
            state.year,
            state.month,
            state.revenues,
            state.notes,
            today=self._today(),
            selected_day=state.selected_day,
        )

    def day_summary(self) -> Optional[schemas.DaySummary]:
        state = self.state
        key = state.selected_key
        if key is None:
            return None
        return schemas.DaySummary(
            date_key=key,
            entries=list(state.revenues.get(key, [])),
            total=daily_total(state.revenues, key),
            month_total=monthly_total(state.revenues, state.year, state.month),
            notes=list(state.notes.get(key, [])),
        )
