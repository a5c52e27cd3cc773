"""Read models over the notification store: list, count, feed and history."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from marketnotify.domain.entities import (
    MAX_NOTIFICATION_ID,
    READ_STATUS_READ,
    READ_STATUS_UNREAD,
    FeedCursor,
    Notification,
    NotificationFilter,
    NotificationHistory,
    NotificationPage,
    NotificationStatistics,
    Pagination,
    RecentNotifications,
    RecipientScope,
)
from marketnotify.domain.errors import NotFoundError, ValidationError
from marketnotify.domain.ports import NotificationStore
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.utils import ensure_utc

DEFAULT_MAX_LIMIT: Final[int] = 100
DEFAULT_RECENT_BATCH_SIZE: Final[int] = 50
STATISTIC_CATEGORIES: Final[tuple[str, ...]] = ("booking", "rating", "report", "welcome")


class QueryFacade:
    """Serve the notification read models through the cache.

    * ``list_notifications``: newest first (``created_at`` then ``id``),
      optional case-insensitive title filter.
    * ``unread_count``: number of unread notifications in the scope.
    * ``recent_since``: notifications strictly newer than a cursor, in
      batches, for polling clients.
    * ``history``: the list with date and read-state filters plus
      per-category statistics.
    """

    def __init__(
        self,
        store: NotificationStore,
        cache: NotificationCache,
        *,
        max_limit: int = DEFAULT_MAX_LIMIT,
        recent_batch_size: int = DEFAULT_RECENT_BATCH_SIZE,
        statistics_ttl: float | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._max_limit = max_limit
        self._recent_batch_size = recent_batch_size
        self._statistics_ttl = statistics_ttl

    def list_notifications(
        self,
        scope: RecipientScope,
        *,
        page: int = 1,
        limit: int = 20,
        type_filter: str | None = None,
    ) -> NotificationPage:
        self._validate_pagination(page, limit)
        type_filter = _normalize_filter(type_filter)
        criteria = NotificationFilter(scope=scope, title_contains=type_filter)
        return self._cache.get_or_load(
            "list",
            scope,
            lambda: self._load_page(criteria, page, limit),
            page=page,
            limit=limit,
            type=type_filter,
        )

    def unread_count(self, scope: RecipientScope) -> int:
        criteria = NotificationFilter(scope=scope, is_read=False)
        return self._cache.get_or_load(
            "unread_count", scope, lambda: self._store.count(criteria)
        )

    def recent_since(
        self,
        scope: RecipientScope,
        since: datetime,
        *,
        since_id: int | None = None,
    ) -> RecentNotifications:
        """Return notifications created after the ``(since, since_id)`` cursor.

        The batch holds the oldest pending notifications, presented newest
        first, so advancing the cursor to the first item never skips anything
        when more than one batch is waiting.
        """

        since = ensure_utc(since)
        cursor = FeedCursor(since=since, since_id=since_id)
        criteria = NotificationFilter(scope=scope, created_after=since, after_id=since_id)

        def load() -> RecentNotifications:
            batch = self._store.query(
                criteria, limit=self._recent_batch_size, oldest_first=True
            )
            items = list(reversed(batch))
            next_cursor = (
                FeedCursor(since=items[0].created_at, since_id=items[0].id) if items else cursor
            )
            return RecentNotifications(items=items, since=cursor, next_cursor=next_cursor)

        return self._cache.get_or_load(
            "recent", scope, load, since=since.isoformat(), since_id=since_id
        )

    def history(
        self,
        scope: RecipientScope,
        *,
        page: int = 1,
        limit: int = 50,
        type_filter: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        read_status: str | None = None,
    ) -> NotificationHistory:
        self._validate_pagination(page, limit)
        type_filter = _normalize_filter(type_filter)
        date_from = ensure_utc(date_from)
        date_to = ensure_utc(date_to)
        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValidationError("dateFrom must not be later than dateTo")
        criteria = NotificationFilter(
            scope=scope,
            title_contains=type_filter,
            created_from=date_from,
            created_to=date_to,
            is_read=_parse_read_status(read_status),
        )
        notification_page = self._cache.get_or_load(
            "history",
            scope,
            lambda: self._load_page(criteria, page, limit),
            page=page,
            limit=limit,
            type=type_filter,
            date_from=date_from.isoformat() if date_from else None,
            date_to=date_to.isoformat() if date_to else None,
            read=criteria.is_read,
        )
        return NotificationHistory(page=notification_page, statistics=self.statistics(scope))

    def statistics(self, scope: RecipientScope) -> NotificationStatistics:
        return self._cache.get_or_load(
            "statistics",
            scope,
            lambda: self._store.statistics(scope, STATISTIC_CATEGORIES),
            ttl=self._statistics_ttl,
        )

    def get_notification(self, scope: RecipientScope, notification_id: int) -> Notification:
        if not 0 < notification_id <= MAX_NOTIFICATION_ID:
            raise NotFoundError("Notification not found")
        notification = self._store.get(scope, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        return notification

    def _load_page(
        self, criteria: NotificationFilter, page: int, limit: int
    ) -> NotificationPage:
        total_count = self._store.count(criteria)
        items = self._store.query(criteria, offset=(page - 1) * limit, limit=limit)
        return NotificationPage(
            items=items,
            pagination=Pagination.build(page=page, limit=limit, total_count=total_count),
        )

    def _validate_pagination(self, page: int, limit: int) -> None:
        if page < 1:
            raise ValidationError("page must be a positive integer")
        if limit < 1 or limit > self._max_limit:
            raise ValidationError(f"limit must be between 1 and {self._max_limit}")


def _normalize_filter(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_read_status(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    normalized = value.strip().lower()
    if normalized == READ_STATUS_READ:
        return True
    if normalized == READ_STATUS_UNREAD:
        return False
    raise ValidationError("readStatus must be 'read' or 'unread'")


__all__ = [
    "DEFAULT_MAX_LIMIT",
    "DEFAULT_RECENT_BATCH_SIZE",
    "QueryFacade",
    "STATISTIC_CATEGORIES",
]
