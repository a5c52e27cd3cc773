"""Domain entities exposed by the application."""

from .delivery import (
    CHANNEL_PUSH,
    CHANNEL_REALTIME,
    ChannelOutcome,
    ChannelStatus,
    DispatchResult,
)
from .listing import (
    FeedCursor,
    NotificationHistory,
    NotificationPage,
    NotificationStatistics,
    Pagination,
    RecentNotifications,
)
from .notification import (
    MAX_NOTIFICATION_ID,
    READ_STATUS_READ,
    READ_STATUS_UNREAD,
    ROLE_ADMIN,
    ROLE_PROVIDER,
    ROLE_USER,
    VALID_ROLES,
    Notification,
    NotificationFilter,
    RecipientScope,
)
from .push_token import PushToken
from .push_settings import PushDelivery, PushDeliveryPage, PushPreferences

__all__ = [
    "CHANNEL_PUSH",
    "CHANNEL_REALTIME",
    "ChannelOutcome",
    "ChannelStatus",
    "DispatchResult",
    "FeedCursor",
    "NotificationHistory",
    "NotificationPage",
    "NotificationStatistics",
    "Pagination",
    "RecentNotifications",
    "READ_STATUS_READ",
    "READ_STATUS_UNREAD",
    "ROLE_ADMIN",
    "ROLE_PROVIDER",
    "ROLE_USER",
    "VALID_ROLES",
    "MAX_NOTIFICATION_ID",
    "Notification",
    "NotificationFilter",
    "RecipientScope",
    "PushToken",
    "PushDelivery",
    "PushDeliveryPage",
    "PushPreferences",
]
