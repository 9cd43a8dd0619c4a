"""Dependencies shared by the schedule routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..date_keys import parse_date_key
from ..security import UserIdentity, get_optional_user, require_user
from ..services import (
    DocumentStoreError,
    MissingReferenceError,
    ScheduleError,
    ScheduleValidationError,
    SqlDocumentStore,
)


def get_user_store(
    identity: UserIdentity = Depends(require_user), db: Session = Depends(get_db)
) -> SqlDocumentStore:
    return SqlDocumentStore(db, identity.user_id)


def get_optional_store(
    identity: Optional[UserIdentity] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> Optional[SqlDocumentStore]:
    """Store for the caller, or ``None`` so anonymous reads see empty collections."""

    if identity is None:
        return None
    return SqlDocumentStore(db, identity.user_id)


def validate_date_key(date_key: str) -> str:
    try:
        parse_date_key(date_key)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return date_key


def to_http_exception(exc: ScheduleError) -> HTTPException:
    if isinstance(exc, ScheduleValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, MissingReferenceError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, DocumentStoreError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not {exc.operation}",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
