"""Serialization of notifications for realtime and push payloads."""

from __future__ import annotations

from typing import Any

from marketnotify.domain.entities import Notification
from marketnotify.utils import to_epoch_millis

NOTIFICATION_CREATED_EVENT = "notification_created"


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    created_at = notification.created_at
    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "recipient_role": notification.recipient_role,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "created_at": created_at.isoformat() if created_at else None,
        "created_at_ms": to_epoch_millis(created_at) if created_at else None,
    }


def notification_created_message(notification: Notification) -> dict[str, Any]:
    return {
        "type": NOTIFICATION_CREATED_EVENT,
        "data": {"notification": serialize_notification(notification)},
    }


__all__ = [
    "NOTIFICATION_CREATED_EVENT",
    "notification_created_message",
    "serialize_notification",
]
