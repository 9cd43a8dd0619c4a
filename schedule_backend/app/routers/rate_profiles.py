"""Router exposing rate profile (teaching location) operations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from .. import schemas
from ..services import RateProfileService, ScheduleError, SqlDocumentStore
from .common import get_optional_store, get_user_store, to_http_exception

router = APIRouter()


@router.get("", response_model=schemas.RateProfileListResponse)
def list_rate_profiles(
    store: Optional[SqlDocumentStore] = Depends(get_optional_store),
) -> schemas.RateProfileListResponse:
    if store is None:
        return schemas.RateProfileListResponse(items=[], total=0)
    try:
        items = RateProfileService(store).list_profiles()
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    return schemas.RateProfileListResponse(items=items, total=len(items))


@router.post("", response_model=schemas.RateProfileRead, status_code=status.HTTP_201_CREATED)
def create_rate_profile(
    payload: schemas.RateProfileCreate, store: SqlDocumentStore = Depends(get_user_store)
) -> schemas.RateProfileRead:
    try:
        return RateProfileService(store).create_profile(payload)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{profile_id}", response_model=schemas.RateProfileRead)
def get_rate_profile(
    profile_id: str, store: SqlDocumentStore = Depends(get_user_store)
) -> schemas.RateProfileRead:
    try:
        profile = RateProfileService(store).get_profile(profile_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rate profile not found")
    return profile


@router.put("/{profile_id}", response_model=schemas.RateProfileRead)
def update_rate_profile(
    profile_id: str,
    payload: schemas.RateProfileUpdate,
    store: SqlDocumentStore = Depends(get_user_store),
) -> schemas.RateProfileRead:
    try:
        return RateProfileService(store).update_profile(profile_id, payload)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rate_profile(profile_id: str, store: SqlDocumentStore = Depends(get_user_store)) -> None:
    try:
        RateProfileService(store).delete_profile(profile_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
