from __future__ import annotations

import base64
import os
import sys
from datetime import date
from pathlib import Path
from typing import Generator

import pytest

# Ensure the project root (which exposes the ``schedule_backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "0")
os.environ.setdefault(
    "SCHEDULE_JWT_SECRET", base64.urlsafe_b64encode(b"\x07" * 32).decode("ascii")
)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from schedule_backend.app import models  # noqa: E402,F401
from schedule_backend.app import schemas  # noqa: E402
from schedule_backend.app.database import Base, get_db  # noqa: E402
from schedule_backend.app.main import app  # noqa: E402
from schedule_backend.app.security import create_access_token  # noqa: E402
from schedule_backend.app.services import (  # noqa: E402
    DocumentStoreError,
    ScheduleController,
    SqlDocumentStore,
)

COACH_ID = "coach-1"
TODAY = date(2025, 1, 15)  # a Wednesday

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class FailingDocumentStore(SqlDocumentStore):
    """Real store whose writes can be switched to fail like a dropped backend."""

    def __init__(self, db: Session, owner_id: str) -> None:
        super().__init__(db, owner_id)
        self.fail_writes = False
        self.fail_reads = False

    def get_all(self, collection):
        if self.fail_reads:
            raise DocumentStoreError(f"load {collection}")
        return super().get_all(collection)

    def set(self, collection, key, value):
        if self.fail_writes:
            raise DocumentStoreError(f"write {collection}/{key}")
        super().set(collection, key, value)

    def delete(self, collection, key):
        if self.fail_writes:
            raise DocumentStoreError(f"delete {collection}/{key}")
        super().delete(collection, key)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def store(db_session: Session) -> FailingDocumentStore:
    return FailingDocumentStore(db_session, COACH_ID)


@pytest.fixture
def controller(store: FailingDocumentStore) -> ScheduleController:
    schedule = ScheduleController(store, today=lambda: TODAY)
    assert schedule.load().ok
    return schedule


@pytest.fixture
def gangnam_rates() -> schemas.RateSettings:
    return schemas.RateSettings(
        weekday={schemas.LessonType.PRIVATE: {"amount": 50000}},
        weekend={schemas.LessonType.PRIVATE: {"amount": 60000}},
    )


def _override_db(db_session: Session):
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    return override_get_db


@pytest.fixture
def anonymous_client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db] = _override_db(db_session)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def client(anonymous_client: TestClient) -> TestClient:
    token = create_access_token(COACH_ID)
    anonymous_client.headers.update({"Authorization": f"Bearer {token}"})
    return anonymous_client
