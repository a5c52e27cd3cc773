"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    title: str
    message: str
    is_read: bool
    role: str
    created_at: datetime
    created_at_ms: int = Field(description="created_at as epoch milliseconds, usable as a poll cursor")


class PaginationRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_count: int = Field(alias="totalCount")
    limit: int
    has_more: bool = Field(alias="hasMore")


class NotificationListData(BaseModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    unread_count: int = Field(alias="unreadCount")


class MarkAllReadData(BaseModel):
    updated: int


class NotificationStatisticsRead(BaseModel):
    total: int
    unread: int
    booking_notifications: int
    rating_notifications: int
    report_notifications: int
    welcome_notifications: int


class NotificationHistoryData(NotificationListData):
    statistics: NotificationStatisticsRead


class RecentNotificationsData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notifications: list[NotificationRead]
    count: int
    since: str = Field(description="The ``since`` value received, echoed back unchanged")
    next_since: int = Field(alias="nextSince")
    next_since_id: int | None = Field(default=None, alias="nextSinceId")


class NotificationDispatchRequest(BaseModel):
    recipient_id: int = Field(..., gt=0)
    recipient_role: str
    title: str = Field(..., min_length=1, max_length=120)
    message: str = Field(..., min_length=1)


class ChannelOutcomeRead(BaseModel):
    channel: str
    status: str
    detail: str | None = None


class DispatchResultRead(BaseModel):
    notification: NotificationRead
    push: ChannelOutcomeRead
    realtime: ChannelOutcomeRead


class PushTokenRegisterRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=255)
    device_info: dict[str, Any] = Field(default_factory=dict)


class PushTokenRead(BaseModel):
    id: int
    token: str
    is_active: bool
    device_info: dict[str, Any] = Field(default_factory=dict)
    last_seen_at: datetime | None = None


__all__ = [
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
    "RecentNotificationsData",
    "UnreadCountData",
]
