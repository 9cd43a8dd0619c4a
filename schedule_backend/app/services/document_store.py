"""Persistence port for the schedule collections and its SQLAlchemy adapter."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from .errors import DocumentStoreError

LOGGER = logging.getLogger(__name__)

RATE_PROFILES_COLLECTION = "rateProfiles"
REVENUES_COLLECTION = "revenues"
NOTES_COLLECTION = "notes"

Document = Dict[str, Any]


class DocumentStore(Protocol):
    """Key/value access to named collections owned by a single user."""

    def get_all(self, collection: str) -> Dict[str, Document]:
        ...

    def get(self, collection: str, key: str) -> Optional[Document]:
        ...

    def set(self, collection: str, key: str, value: Document) -> None:
        ...

    def add(self, collection: str, value: Document) -> str:
        ...

    def delete(self, collection: str, key: str) -> None:
        ...


class SqlDocumentStore:
    """Stores every document as a JSON row scoped by ``owner_id``.

    Each mutation commits on its own; there is no cross-document transaction
    and no version check, so concurrent writers to the same key follow
    last-write-wins.
    """

    def __init__(self, db: Session, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("owner_id is required")
        self.db = db
        self.owner_id = owner_id

    def _query(self, collection: str):
        return self.db.query(models.ScheduleDocument).filter(
            models.ScheduleDocument.owner_id == self.owner_id,
            models.ScheduleDocument.collection == collection,
        )

    def _find(self, collection: str, key: str) -> Optional[models.ScheduleDocument]:
        return (
            self._query(collection)
            .filter(models.ScheduleDocument.document_key == key)
            .first()
        )

    def get_all(self, collection: str) -> Dict[str, Document]:
        try:
            rows = self._query(collection).order_by(models.ScheduleDocument.created_at).all()
        except SQLAlchemyError as exc:
            raise self._failure(f"load {collection}", exc) from exc
        return {row.document_key: dict(row.payload or {}) for row in rows}

    def get(self, collection: str, key: str) -> Optional[Document]:
        try:
            row = self._find(collection, key)
        except SQLAlchemyError as exc:
            raise self._failure(f"read {collection}/{key}", exc) from exc
        return dict(row.payload or {}) if row is not None else None

    def set(self, collection: str, key: str, value: Document) -> None:
        try:
            row = self._find(collection, key)
            if row is None:
                row = models.ScheduleDocument(
                    owner_id=self.owner_id,
                    collection=collection,
                    document_key=key,
                )
                self.db.add(row)
            row.payload = dict(value)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failure(f"write {collection}/{key}", exc) from exc

    def add(self, collection: str, value: Document) -> str:
        key = uuid.uuid4().hex
        self.set(collection, key, value)
        return key

    def delete(self, collection: str, key: str) -> None:
        try:
            row = self._find(collection, key)
            if row is not None:
                self.db.delete(row)
                self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failure(f"delete {collection}/{key}", exc) from exc

    def _failure(self, operation: str, exc: Exception) -> DocumentStoreError:
        self.db.rollback()
        LOGGER.exception("Schedule document store failed to %s for %s", operation, self.owner_id)
        return DocumentStoreError(operation, f"Document store failed to {operation}: {exc}")
