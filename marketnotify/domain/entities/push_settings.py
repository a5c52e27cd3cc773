"""Per-scope push preferences and the push delivery log."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime
from typing import Any

from marketnotify.domain.errors import ValidationError

from .listing import Pagination

# First match wins, so "Booking Reminder" is governed by ``reminders``.
_TITLE_PREFERENCES: tuple[tuple[str, str], ...] = (
    ("remind", "reminders"),
    ("promo", "promotional"),
    ("offer", "promotional"),
    ("booking", "booking_updates"),
)


@dataclass(frozen=True)
class PushPreferences:
    """Which push notifications a recipient scope wants, and how."""

    booking_updates: bool = True
    reminders: bool = True
    promotional: bool = False
    sound_enabled: bool = True
    vibration_enabled: bool = True

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "PushPreferences":
        """Build preferences from stored values, ignoring unknown keys."""

        known = {
            key: bool(value)
            for key, value in (values or {}).items()
            if key in cls.keys()
        }
        return cls(**known)

    def merged(self, changes: Mapping[str, Any]) -> "PushPreferences":
        unknown = sorted(set(changes) - set(self.keys()))
        if unknown:
            raise ValidationError(f"Unknown notification settings: {', '.join(unknown)}")
        for key, value in changes.items():
            if not isinstance(value, bool):
                raise ValidationError(f"Setting {key!r} must be a boolean")
        return replace(self, **dict(changes))

    def allows(self, title: str) -> bool:
        lowered = (title or "").lower()
        for fragment, preference in _TITLE_PREFERENCES:
            if fragment in lowered:
                return getattr(self, preference)
        return True

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


@dataclass
class PushDelivery:
    """One push attempt as recorded in the delivery log."""

    id: int | None
    recipient_id: int
    recipient_role: str
    title: str
    body: str
    status: str
    detail: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PushDeliveryPage:
    items: list[PushDelivery]
    pagination: Pagination


__all__ = ["PushDelivery", "PushDeliveryPage", "PushPreferences"]
