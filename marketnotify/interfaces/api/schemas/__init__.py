from .common import ApiResponse, success
from .notification import (
    ChannelOutcomeRead,
    DispatchResultRead,
    MarkAllReadData,
    NotificationDispatchRequest,
    NotificationHistoryData,
    NotificationListData,
    NotificationRead,
    NotificationStatisticsRead,
    PaginationRead,
    PushTokenRead,
    PushTokenRegisterRequest,
    RecentNotificationsData,
    UnreadCountData,
)
from .push import (
    PushDeliveryHistoryData,
    PushDeliveryRead,
    PushSettingsRead,
    PushSettingsUpdate,
    PushTokensRemovedData,
)

__all__ = [
    "ApiResponse",
    "success",
    "ChannelOutcomeRead",
    "DispatchResultRead",
    "MarkAllReadData",
    "NotificationDispatchRequest",
    "NotificationHistoryData",
    "NotificationListData",
    "NotificationRead",
    "NotificationStatisticsRead",
    "PaginationRead",
    "PushTokenRead",
    "PushTokenRegisterRequest",
    "PushTokensRemovedData",
    "PushDeliveryHistoryData",
    "PushDeliveryRead",
    "PushSettingsRead",
    "PushSettingsUpdate",
    "RecentNotificationsData",
    "UnreadCountData",
]
