"""Shared fixtures for the notification test suite."""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["PUSH_ENABLED"] = "false"

from sqlalchemy.orm import sessionmaker

from marketnotify.domain.entities import Notification, RecipientScope
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.infrastructure.database import Base, build_engine
from marketnotify.infrastructure import models  # noqa: F401
from marketnotify.infrastructure.repositories import NotificationRepository

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repository(session):
    return NotificationRepository(session)


@pytest.fixture
def cache():
    return NotificationCache(60)


@pytest.fixture
def user_scope():
    return RecipientScope(1, "user")


@pytest.fixture
def provider_scope():
    return RecipientScope(1, "provider")


class SteppingClock:
    """Return strictly increasing timestamps, one second apart."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return SteppingClock()


class RecordingPushSender:
    def __init__(self, result: bool = True, error: Exception | None = None, delay: float = 0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: list[tuple[int, str, str, str]] = []

    async def send(self, recipient_id, recipient_role, title, message):
        self.calls.append((recipient_id, recipient_role, title, message))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingBroadcaster:
    def __init__(self, result: bool = True):
        self.result = result
        self.payloads: list[tuple[int, str, dict]] = []

    async def emit(self, recipient_id, recipient_role, payload):
        self.payloads.append((recipient_id, recipient_role, payload))
        return self.result


def seed(repository, scope, title, *, created_at, message="Body", is_read=False):
    """Insert a notification with an explicit timestamp and optional read flag."""

    stored = repository.insert(
        Notification(
            id=None,
            recipient_id=scope.recipient_id,
            recipient_role=scope.recipient_role,
            title=title,
            message=message,
            created_at=created_at,
        )
    )
    if is_read:
        repository.update_read_state(scope, notification_ids=[stored.id])
        stored.is_read = True
    return stored


@pytest.fixture
def seed_notification(repository):
    def _seed(scope, title, *, created_at, message="Body", is_read=False):
        return seed(
            repository, scope, title, created_at=created_at, message=message, is_read=is_read
        )

    return _seed


@pytest.fixture
def push_sender_factory():
    return RecordingPushSender


@pytest.fixture
def broadcaster_factory():
    return RecordingBroadcaster
