"""Notification delivery, read-state and query use cases."""

from .delivery import DEFAULT_CHANNEL_TIMEOUT, DeliveryCoordinator
from .push_settings import get_push_settings, list_push_deliveries, update_push_settings
from .push_tokens import (
    register_push_token,
    unregister_all_push_tokens,
    unregister_push_token,
)
from .queries import (
    DEFAULT_MAX_LIMIT,
    DEFAULT_RECENT_BATCH_SIZE,
    STATISTIC_CATEGORIES,
    QueryFacade,
)
from .read_state import ReadStateTracker
from .retention import purge_expired_notifications

__all__ = [
    "DEFAULT_CHANNEL_TIMEOUT",
    "DeliveryCoordinator",
    "get_push_settings",
    "list_push_deliveries",
    "update_push_settings",
    "register_push_token",
    "unregister_all_push_tokens",
    "unregister_push_token",
    "DEFAULT_MAX_LIMIT",
    "DEFAULT_RECENT_BATCH_SIZE",
    "STATISTIC_CATEGORIES",
    "QueryFacade",
    "ReadStateTracker",
    "purge_expired_notifications",
]
