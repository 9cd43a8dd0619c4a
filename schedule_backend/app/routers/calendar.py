"""Router exposing the month calendar view."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path

from .. import schemas
from ..services import (
    NoteLedgerService,
    RevenueLedgerService,
    ScheduleError,
    SqlDocumentStore,
    build_month_view,
)
from .common import get_optional_store, to_http_exception

router = APIRouter()


@router.get("/{year}/{month}", response_model=schemas.CalendarMonth)
def get_month(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: Optional[SqlDocumentStore] = Depends(get_optional_store),
) -> schemas.CalendarMonth:
    """Return the day grid with holiday flags, daily revenue and note markers."""

    revenues: dict = {}
    notes: dict = {}
    if store is not None:
        try:
            revenues = RevenueLedgerService(store).load_all()
            notes = NoteLedgerService(store).load_all()
        except ScheduleError as exc:
            raise to_http_exception(exc) from exc
    return build_month_view(year, month, revenues, notes, today=date.today())
