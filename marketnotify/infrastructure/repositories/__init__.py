"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .push_settings_repository import PushDeliveryRepository, PushSettingsRepository
from .push_token_repository import PushTokenRepository

__all__ = [
    "NotificationRepository",
    "PushDeliveryRepository",
    "PushSettingsRepository",
    "PushTokenRepository",
]
