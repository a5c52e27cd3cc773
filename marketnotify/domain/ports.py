"""Domain ports for notification storage and delivery channels."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from marketnotify.domain.entities import (
    ChannelOutcome,
    Notification,
    NotificationFilter,
    NotificationStatistics,
    RecipientScope,
)


class NotificationStore(Protocol):
    """Durable record of notifications, the single source of truth."""

    def insert(self, notification: Notification) -> Notification:
        ...

    def update_read_state(
        self, scope: RecipientScope, *, notification_ids: Sequence[int] | None = None
    ) -> int:
        ...

    def query(
        self,
        criteria: NotificationFilter,
        *,
        offset: int = 0,
        limit: int | None = None,
        oldest_first: bool = False,
    ) -> list[Notification]:
        ...

    def count(self, criteria: NotificationFilter) -> int:
        ...

    def get(self, scope: RecipientScope, notification_id: int) -> Notification | None:
        ...

    def statistics(
        self, scope: RecipientScope, categories: Sequence[str]
    ) -> NotificationStatistics:
        ...


class PushSender(Protocol):
    """Fire-and-forget mobile push provider."""

    async def send(
        self, recipient_id: int, recipient_role: str, title: str, message: str
    ) -> bool:
        ...


class RealtimeBroadcaster(Protocol):
    """Best-effort fan-out to connected sessions of a recipient scope."""

    async def emit(
        self, recipient_id: int, recipient_role: str, payload: dict[str, Any]
    ) -> bool:
        ...


class PushDeliveryRecorder(Protocol):
    """Keeps a log of push attempts for the recipient to review."""

    def record(
        self, scope: RecipientScope, title: str, body: str, outcome: ChannelOutcome
    ) -> Any:
        ...


__all__ = ["NotificationStore", "PushDeliveryRecorder", "PushSender", "RealtimeBroadcaster"]
