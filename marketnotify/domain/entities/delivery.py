"""Outcome types produced when a notification is dispatched."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .notification import Notification

CHANNEL_PUSH = "push"
CHANNEL_REALTIME = "realtime"


class ChannelStatus(str, Enum):
    DELIVERED = "delivered"
    NOT_DELIVERED = "not_delivered"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    DISABLED = "disabled"


@dataclass(frozen=True)
class ChannelOutcome:
    """Result of a single best-effort delivery attempt."""

    channel: str
    status: ChannelStatus
    detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is ChannelStatus.DELIVERED


@dataclass(frozen=True)
class DispatchResult:
    """The stored notification plus what happened on each secondary channel.

    ``stored`` is authoritative; the channel outcomes are informational and
    never change whether the dispatch succeeded.
    """

    stored: Notification
    push: ChannelOutcome
    realtime: ChannelOutcome


__all__ = [
    "CHANNEL_PUSH",
    "CHANNEL_REALTIME",
    "ChannelStatus",
    "ChannelOutcome",
    "DispatchResult",
]
