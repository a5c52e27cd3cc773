"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification core failures."""


class ValidationError(NotificationError, ValueError):
    """Input that the caller can fix (bad pagination, filters, or content)."""


class NotFoundError(NotificationError, LookupError):
    """The notification does not exist within the caller's scope."""


class PersistenceError(NotificationError, RuntimeError):
    """The notification store is unavailable or rejected a write."""


class DeliveryChannelError(NotificationError, RuntimeError):
    """A secondary channel (push or realtime) failed to deliver."""

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(f"{channel}: {message}")
        self.channel = channel


__all__ = [
    "NotificationError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "DeliveryChannelError",
]
