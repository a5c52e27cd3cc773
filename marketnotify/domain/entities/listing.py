"""Read model shapes returned by notification queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from math import ceil

from .notification import Notification


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    limit: int

    @classmethod
    def build(cls, *, page: int, limit: int, total_count: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=ceil(total_count / limit),
            total_count=total_count,
            limit=limit,
        )

    @property
    def has_more(self) -> bool:
        return self.current_page * self.limit < self.total_count


@dataclass(frozen=True)
class NotificationPage:
    items: list[Notification]
    pagination: Pagination


@dataclass(frozen=True)
class NotificationStatistics:
    """Aggregate counts per coarse category for a recipient scope."""

    total: int = 0
    unread: int = 0
    categories: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class NotificationHistory:
    page: NotificationPage
    statistics: NotificationStatistics


@dataclass(frozen=True)
class FeedCursor:
    """Position of the newest notification a polling client has seen."""

    since: datetime
    since_id: int | None = None


@dataclass(frozen=True)
class RecentNotifications:
    items: list[Notification]
    since: FeedCursor
    next_cursor: FeedCursor

    @property
    def count(self) -> int:
        return len(self.items)


__all__ = [
    "FeedCursor",
    "NotificationHistory",
    "NotificationPage",
    "NotificationStatistics",
    "Pagination",
    "RecentNotifications",
]
