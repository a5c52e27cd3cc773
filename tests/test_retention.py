"""Tests for the notification retention purge."""

from datetime import datetime, timedelta, timezone

import pytest

from marketnotify.application.use_cases.notifications import purge_expired_notifications
from marketnotify.domain.entities import NotificationFilter

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_purge_deletes_only_expired_notifications(
    session, repository, seed_notification, user_scope
):
    for days in (120, 100, 95):
        seed_notification(user_scope, "Old booking", created_at=NOW - timedelta(days=days))
    recent = seed_notification(user_scope, "Welcome", created_at=NOW - timedelta(days=10))

    deleted = purge_expired_notifications(session, retention_days=90, batch_size=2, now=NOW)

    assert deleted == 3
    remaining = repository.query(NotificationFilter(scope=user_scope))
    assert [item.id for item in remaining] == [recent.id]


def test_purge_with_nothing_to_delete(session, seed_notification, user_scope):
    seed_notification(user_scope, "Welcome", created_at=NOW)

    assert purge_expired_notifications(session, retention_days=30, now=NOW) == 0


@pytest.mark.parametrize(("retention_days", "batch_size"), [(0, 10), (30, 0)])
def test_purge_rejects_invalid_arguments(session, retention_days, batch_size):
    with pytest.raises(ValueError):
        purge_expired_notifications(
            session, retention_days=retention_days, batch_size=batch_size
        )
