"""Create notifications durably and fan them out to secondary channels."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

from anyio import to_thread

from marketnotify.domain.entities import (
    CHANNEL_PUSH,
    CHANNEL_REALTIME,
    ChannelOutcome,
    ChannelStatus,
    DispatchResult,
    Notification,
    RecipientScope,
)
from marketnotify.domain.errors import PersistenceError, ValidationError
from marketnotify.domain.ports import (
    NotificationStore,
    PushDeliveryRecorder,
    PushSender,
    RealtimeBroadcaster,
)
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.infrastructure.notifications import notification_created_message
from marketnotify.utils import now_utc, truncate_to_millis

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_TIMEOUT = 5.0


class DeliveryCoordinator:
    """Record a notification, then attempt push and realtime delivery.

    Only the store write can fail a dispatch. Push and realtime run
    concurrently, each under its own timeout, and their failures end up in
    the returned :class:`DispatchResult` and the log. Push outcomes are
    also appended to the push delivery log when one is configured.
    """

    def __init__(
        self,
        store: NotificationStore,
        cache: NotificationCache,
        *,
        push_sender: PushSender | None = None,
        broadcaster: RealtimeBroadcaster | None = None,
        push_log: PushDeliveryRecorder | None = None,
        channel_timeout: float = DEFAULT_CHANNEL_TIMEOUT,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._store = store
        self._cache = cache
        self._push_sender = push_sender
        self._broadcaster = broadcaster
        self._push_log = push_log
        self._channel_timeout = channel_timeout
        self._clock = clock

    async def dispatch(
        self, recipient_id: int, recipient_role: str, title: str, message: str
    ) -> DispatchResult:
        scope = RecipientScope(recipient_id, recipient_role)
        title = (title or "").strip()
        message = (message or "").strip()
        if not title or not message:
            raise ValidationError("Notification title and message must not be empty")

        pending = Notification(
            id=None,
            recipient_id=scope.recipient_id,
            recipient_role=scope.recipient_role,
            title=title,
            message=message,
            is_read=False,
            created_at=truncate_to_millis(self._clock()),
        )
        stored = await to_thread.run_sync(self._store.insert, pending)
        self._cache.invalidate_scope(scope)
        logger.info("Stored notification %s for %s", stored.id, scope)

        push, realtime = await asyncio.gather(
            self._run_channel(CHANNEL_PUSH, self._push(stored)),
            self._run_channel(CHANNEL_REALTIME, self._broadcast(stored)),
        )
        if self._push_log is not None and push.status is not ChannelStatus.DISABLED:
            await to_thread.run_sync(self._record_push, scope, stored, push)
        return DispatchResult(stored=stored, push=push, realtime=realtime)

    def _record_push(
        self, scope: RecipientScope, notification: Notification, outcome: ChannelOutcome
    ) -> None:
        try:
            self._push_log.record(scope, notification.title, notification.message, outcome)
        except PersistenceError:
            logger.warning("Could not record push outcome for %s", scope, exc_info=True)

    def _push(self, notification: Notification) -> Awaitable[bool] | None:
        if self._push_sender is None:
            return None
        return self._push_sender.send(
            notification.recipient_id,
            notification.recipient_role,
            notification.title,
            notification.message,
        )

    def _broadcast(self, notification: Notification) -> Awaitable[bool] | None:
        if self._broadcaster is None:
            return None
        return self._broadcaster.emit(
            notification.recipient_id,
            notification.recipient_role,
            notification_created_message(notification),
        )

    async def _run_channel(
        self, channel: str, attempt: Awaitable[bool] | None
    ) -> ChannelOutcome:
        if attempt is None:
            return ChannelOutcome(channel, ChannelStatus.DISABLED)
        try:
            delivered = await asyncio.wait_for(attempt, timeout=self._channel_timeout)
        except asyncio.TimeoutError:
            logger.warning("%s delivery timed out after %ss", channel, self._channel_timeout)
            return ChannelOutcome(
                channel, ChannelStatus.TIMED_OUT, f"timed out after {self._channel_timeout}s"
            )
        except Exception as exc:
            logger.warning("%s delivery failed: %s", channel, exc, exc_info=True)
            return ChannelOutcome(channel, ChannelStatus.FAILED, str(exc) or type(exc).__name__)
        if delivered:
            return ChannelOutcome(channel, ChannelStatus.DELIVERED)
        return ChannelOutcome(channel, ChannelStatus.NOT_DELIVERED)


__all__ = ["DeliveryCoordinator", "DEFAULT_CHANNEL_TIMEOUT"]
