"""Administrative purge of notifications past the retention window."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from marketnotify.infrastructure.repositories import NotificationRepository
from marketnotify.utils import now_utc

logger = logging.getLogger(__name__)


def purge_expired_notifications(
    session: Session,
    *,
    retention_days: int,
    batch_size: int = 1000,
    now: datetime | None = None,
) -> int:
    """Delete notifications older than ``retention_days`` in batches.

    Returns the total number of deleted rows. Cached reads may keep serving
    purged notifications until their TTL expires.
    """

    if retention_days <= 0:
        raise ValueError("retention_days must be positive")
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    cutoff = (now or now_utc()) - timedelta(days=retention_days)
    repository = NotificationRepository(session)
    total = 0
    while True:
        deleted = repository.delete_created_before(cutoff, limit=batch_size)
        total += deleted
        if deleted:
            logger.info("Purged batch of %s notifications (total: %s)", deleted, total)
        if deleted < batch_size:
            break
    logger.info("Notification purge finished, %s deleted before %s", total, cutoff.isoformat())
    return total


__all__ = ["purge_expired_notifications"]
