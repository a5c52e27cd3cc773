"""Apply read-state changes to notifications."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from marketnotify.domain.entities import MAX_NOTIFICATION_ID, RecipientScope
from marketnotify.domain.ports import NotificationStore
from marketnotify.infrastructure.cache import NotificationCache

logger = logging.getLogger(__name__)


class ReadStateTracker:
    """Mark notifications read and keep the cache consistent with the store."""

    def __init__(self, store: NotificationStore, cache: NotificationCache) -> None:
        self._store = store
        self._cache = cache

    def mark_read(self, notification_id: int, scope: RecipientScope) -> None:
        """Mark one notification read.

        Already-read, missing and out-of-scope ids all succeed silently so that
        racing clients never see an error for a read receipt.
        """

        self.mark_many_read([notification_id], scope)

    def mark_many_read(self, notification_ids: Iterable[int], scope: RecipientScope) -> int:
        ids = [
            notification_id
            for notification_id in dict.fromkeys(notification_ids)
            if 0 < notification_id <= MAX_NOTIFICATION_ID
        ]
        if not ids:
            return 0
        updated = self._store.update_read_state(scope, notification_ids=ids)
        self._cache.invalidate_scope(scope)
        logger.debug("Marked %s of %s notification(s) read for %s", updated, len(ids), scope)
        return updated

    def mark_all_read(self, scope: RecipientScope) -> int:
        """Mark every unread notification of ``scope`` read and return the count."""

        updated = self._store.update_read_state(scope)
        self._cache.invalidate_scope(scope)
        logger.info("Marked %s notification(s) read for %s", updated, scope)
        return updated


__all__ = ["ReadStateTracker"]
