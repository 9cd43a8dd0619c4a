"""Router exposing per-date schedule notes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from .. import schemas
from ..services import NoteLedgerService, ScheduleError, SqlDocumentStore
from .common import get_optional_store, get_user_store, to_http_exception, validate_date_key

router = APIRouter()


@router.get("/{date_key}", response_model=schemas.DayNotesResponse)
def list_notes(
    date_key: str = Depends(validate_date_key),
    store: Optional[SqlDocumentStore] = Depends(get_optional_store),
) -> schemas.DayNotesResponse:
    if store is None:
        return schemas.DayNotesResponse(date_key=date_key)
    try:
        items = NoteLedgerService(store).list_for_date(date_key)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.DayNotesResponse(date_key=date_key, items=items)


@router.post("/{date_key}", response_model=schemas.DayNotesResponse, status_code=status.HTTP_201_CREATED)
def add_note(
    payload: schemas.NoteCreate,
    date_key: str = Depends(validate_date_key),
    store: SqlDocumentStore = Depends(get_user_store),
) -> schemas.DayNotesResponse:
    try:
        items = NoteLedgerService(store).append(date_key, payload)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.DayNotesResponse(date_key=date_key, items=items)


@router.put("/{date_key}/{note_id}", response_model=schemas.DayNotesResponse)
def update_note(
    note_id: str,
    payload: schemas.NoteUpdate,
    date_key: str = Depends(validate_date_key),
    store: SqlDocumentStore = Depends(get_user_store),
) -> schemas.DayNotesResponse:
    try:
        items = NoteLedgerService(store).update(date_key, note_id, payload)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.DayNotesResponse(date_key=date_key, items=items)


@router.delete("/{date_key}/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: str,
    date_key: str = Depends(validate_date_key),
    store: SqlDocumentStore = Depends(get_user_store),
) -> None:
    try:
        NoteLedgerService(store).delete(date_key, note_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
