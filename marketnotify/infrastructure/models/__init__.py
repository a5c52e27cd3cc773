"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .push_settings import PushDeliveryModel, PushSettingsModel
from .push_token import PushTokenModel

__all__ = [
    "NotificationModel",
    "PushDeliveryModel",
    "PushSettingsModel",
    "PushTokenModel",
]
