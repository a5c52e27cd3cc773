"""Secondary delivery channels for the infrastructure layer."""

from .manager import NotificationConnectionManager
from .publisher import (
    NOTIFICATION_CREATED_EVENT,
    notification_created_message,
    serialize_notification,
)
from .push import ExpoPushSender, is_expo_push_token
from .realtime import WebSocketBroadcaster

__all__ = [
    "NotificationConnectionManager",
    "NOTIFICATION_CREATED_EVENT",
    "notification_created_message",
    "serialize_notification",
    "ExpoPushSender",
    "is_expo_push_token",
    "WebSocketBroadcaster",
]
