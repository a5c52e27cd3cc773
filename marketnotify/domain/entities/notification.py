"""Domain entities representing notifications and their recipient scope."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final

from marketnotify.domain.errors import ValidationError

ROLE_USER: Final[str] = "user"
ROLE_PROVIDER: Final[str] = "provider"
ROLE_ADMIN: Final[str] = "admin"
VALID_ROLES: Final[tuple[str, ...]] = (ROLE_USER, ROLE_PROVIDER, ROLE_ADMIN)

READ_STATUS_READ: Final[str] = "read"
READ_STATUS_UNREAD: Final[str] = "unread"

# Ids are stored as signed 64-bit integers.
MAX_NOTIFICATION_ID: Final[int] = 2**63 - 1


@dataclass(frozen=True)
class RecipientScope:
    """The ``(recipient_id, recipient_role)`` pair owning a notification stream.

    The same person acting as a user and as a provider has two disjoint
    streams, so every read and write is keyed by both values.
    """

    recipient_id: int
    recipient_role: str

    def __post_init__(self) -> None:
        if self.recipient_role not in VALID_ROLES:
            raise ValidationError(f"Invalid recipient role: {self.recipient_role!r}")


@dataclass
class Notification:
    """Message recorded for a single recipient scope."""

    id: int | None
    recipient_id: int
    recipient_role: str
    title: str
    message: str
    is_read: bool = False
    created_at: datetime | None = None

    @property
    def scope(self) -> RecipientScope:
        return RecipientScope(self.recipient_id, self.recipient_role)


@dataclass(frozen=True)
class NotificationFilter:
    """Criteria accepted by the notification store for queries and counts."""

    scope: RecipientScope
    title_contains: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    is_read: bool | None = None
    created_after: datetime | None = None
    after_id: int | None = None


__all__ = [
    "Notification",
    "NotificationFilter",
    "RecipientScope",
    "ROLE_ADMIN",
    "ROLE_PROVIDER",
    "ROLE_USER",
    "VALID_ROLES",
    "MAX_NOTIFICATION_ID",
    "READ_STATUS_READ",
    "READ_STATUS_UNREAD",
]
