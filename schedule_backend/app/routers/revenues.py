"""Router exposing the daily revenue ledger."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from .. import schemas
from ..date_keys import month_key, parse_date_key
from ..services import (
    RateProfileService,
    RevenueLedgerService,
    ScheduleError,
    SqlDocumentStore,
)
from .common import get_optional_store, get_user_store, to_http_exception, validate_date_key

router = APIRouter()


@router.get("/summary/{year}/{month}", response_model=schemas.MonthlyRevenueSummary)
def get_monthly_summary(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: Optional[SqlDocumentStore] = Depends(get_optional_store),
) -> schemas.MonthlyRevenueSummary:
    if store is None:
        return schemas.MonthlyRevenueSummary(month_key=month_key(year, month))
    try:
        return RevenueLedgerService(store).monthly_summary(year, month)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{date_key}", response_model=schemas.DayRevenueResponse)
def get_day_revenue(
    date_key: str = Depends(validate_date_key),
    store: Optional[SqlDocumentStore] = Depends(get_optional_store),
) -> schemas.DayRevenueResponse:
    if store is None:
        return schemas.DayRevenueResponse(date_key=date_key)
    try:
        entries = RevenueLedgerService(store).list_for_date(date_key)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.DayRevenueResponse(
        date_key=date_key,
        entries=entries,
        total=sum(entry.total for entry in entries),
    )


@router.put("/{date_key}/{location_id}", response_model=schemas.DayRevenueResponse)
def save_revenue(
    location_id: str,
    payload: schemas.RevenueEntryWrite,
    date_key: str = Depends(validate_date_key),
    store: SqlDocumentStore = Depends(get_user_store),
) -> schemas.DayRevenueResponse:
    """Compute the total for the location's applicable rates and upsert the entry."""

    try:
        profile = RateProfileService(store).get_profile(location_id)
        if profile is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Rate profile not found"
            )
        entries = RevenueLedgerService(store).record(
            parse_date_key(date_key), profile, payload.counts, payload.duration
        )
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.DayRevenueResponse(
        date_key=date_key,
        entries=entries,
        total=sum(entry.total for entry in entries),
    )


@router.delete("/{date_key}/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_revenue(
    location_id: str,
    date_key: str = Depends(validate_date_key),
    store: SqlDocumentStore = Depends(get_user_store),
) -> None:
    try:
        RevenueLedgerService(store).delete_for_location(date_key, location_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
