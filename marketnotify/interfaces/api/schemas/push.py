"""Pydantic models for push settings, push history and token removal."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, StrictBool

from .notification import PaginationRead


class PushSettingsRead(BaseModel):
    booking_updates: bool
    reminders: bool
    promotional: bool
    sound_enabled: bool
    vibration_enabled: bool


class PushSettingsUpdate(BaseModel):
    """Partial update; omitted settings keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    booking_updates: StrictBool | None = None
    reminders: StrictBool | None = None
    promotional: StrictBool | None = None
    sound_enabled: StrictBool | None = None
    vibration_enabled: StrictBool | None = None


class PushDeliveryRead(BaseModel):
    id: int
    title: str
    body: str
    status: str
    detail: str | None = None
    created_at: datetime | None = None


class PushDeliveryHistoryData(BaseModel):
    deliveries: list[PushDeliveryRead]
    pagination: PaginationRead


class PushTokensRemovedData(BaseModel):
    deactivated: int


__all__ = [
    "PushDeliveryHistoryData",
    "PushDeliveryRead",
    "PushSettingsRead",
    "PushSettingsUpdate",
    "PushTokensRemovedData",
]
