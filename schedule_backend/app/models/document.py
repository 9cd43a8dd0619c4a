"""SQLAlchemy model backing the per-user document collections."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, Index, String, UniqueConstraint, func
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON

from ..database import Base
from ..db_types import GUID


class ScheduleDocument(Base):
    """One JSON document stored under ``(owner, collection, key)``."""

    __tablename__ = "schedule_documents"
    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "collection",
            "document_key",
            name="schedule_documents_owner_collection_key",
        ),
    )

    id = Column("document_id", GUID(), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(128), nullable=False)
    collection = Column(String(64), nullable=False)
    document_key = Column(String(128), nullable=False)
    payload = Column(JSON().with_variant(SQLiteJSON(), "sqlite"), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


Index("schedule_documents_owner_collection_idx", ScheduleDocument.owner_id, ScheduleDocument.collection)
