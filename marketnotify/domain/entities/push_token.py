"""Domain entity representing a registered mobile push token."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class PushToken:
    """Expo push token bound to a recipient scope."""

    id: int | None
    recipient_id: int
    recipient_role: str
    token: str
    device_info: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    created_at: datetime | None = None
    last_seen_at: datetime | None = None


__all__ = ["PushToken"]
