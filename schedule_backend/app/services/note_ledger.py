"""Categorised memos attached to calendar dates."""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Mapping, Optional, Sequence

from .. import schemas
from .document_store import NOTES_COLLECTION, DocumentStore
from .errors import MissingReferenceError, ScheduleValidationError

LOGGER = logging.getLogger(__name__)

NotesData = Dict[str, List[schemas.DailyNote]]


def clean_memo(memo: Optional[str]) -> str:
    if memo is None or not memo.strip():
        raise ScheduleValidationError("메모 내용을 입력해주세요.")
    return memo


def new_note_id(existing: Sequence[schemas.DailyNote]) -> str:
    taken = {note.id for note in existing}
    while True:
        candidate = f"note-{uuid.uuid4().hex}"
        if candidate not in taken:
            return candidate


def append_note(
    notes: Sequence[schemas.DailyNote], note_type: schemas.NoteType, memo: str
) -> List[schemas.DailyNote]:
    note = schemas.DailyNote(id=new_note_id(notes), type=note_type, memo=clean_memo(memo))
    return [*notes, note]


def patch_note(
    notes: Sequence[schemas.DailyNote], note_id: str, patch: schemas.NoteUpdate
) -> List[schemas.DailyNote]:
    if not any(note.id == note_id for note in notes):
        raise MissingReferenceError(f"Note {note_id} not found")
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    if "memo" in changes:
        clean_memo(changes["memo"])
    return [note.model_copy(update=changes) if note.id == note_id else note for note in notes]


def drop_note(notes: Sequence[schemas.DailyNote], note_id: str) -> List[schemas.DailyNote]:
    if not any(note.id == note_id for note in notes):
        raise MissingReferenceError(f"Note {note_id} not found")
    return [note for note in notes if note.id != note_id]


def has_notes(notes: Mapping[str, Sequence[schemas.DailyNote]], key: str) -> bool:
    return bool(notes.get(key))


def _parse_notes(document: Mapping | None) -> List[schemas.DailyNote]:
    raw_entries = (document or {}).get("entries")
    if not isinstance(raw_entries, list):
        return []
    return [schemas.DailyNote.model_validate(raw) for raw in raw_entries]


class NoteLedgerService:
    """Read-modify-write access to the ``notes`` collection of one user."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def load_all(self) -> NotesData:
        documents = self.store.get_all(NOTES_COLLECTION)
        return {key: _parse_notes(document) for key, document in documents.items()}

    def list_for_date(self, key: str) -> List[schemas.DailyNote]:
        return _parse_notes(self.store.get(NOTES_COLLECTION, key))

    def append(self, key: str, data: schemas.NoteCreate) -> List[schemas.DailyNote]:
        clean_memo(data.memo)
        notes = append_note(self.list_for_date(key), data.type, data.memo)
        self._write(key, notes)
        return notes

    def update(self, key: str, note_id: str, patch: schemas.NoteUpdate) -> List[schemas.DailyNote]:
        if patch.memo is not None:
            clean_memo(patch.memo)
        notes = patch_note(self.list_for_date(key), note_id, patch)
        self._write(key, notes)
        return notes

    def delete(self, key: str, note_id: str) -> List[schemas.DailyNote]:
        notes = drop_note(self.list_for_date(key), note_id)
        self._write(key, notes)
        LOGGER.debug("Deleted note %s on %s", note_id, key)
        return notes

    def _write(self, key: str, notes: List[schemas.DailyNote]) -> None:
        if not notes:
            self.store.delete(NOTES_COLLECTION, key)
            return
        self.store.set(
            NOTES_COLLECTION,
            key,
            {"entries": [note.model_dump(mode="json") for note in notes]},
        )
