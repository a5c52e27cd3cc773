"""Helpers for working with UTC datetimes and epoch-millisecond cursors."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Final

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_utc() -> datetime:
    """Return the current time in UTC truncated to millisecond precision.

    Notification timestamps double as polling cursors expressed in epoch
    milliseconds, so anything finer than a millisecond would not survive a
    round trip through a client.
    """

    return truncate_to_millis(datetime.now(tz=timezone.utc))


def truncate_to_millis(value: datetime) -> datetime:
    """Drop the sub-millisecond part of ``value``."""

    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how they are stored.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` in UTC without ``tzinfo`` for storage."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def from_epoch_millis(value: int) -> datetime:
    """Convert epoch milliseconds into an aware UTC datetime."""

    seconds, millis = divmod(int(value), 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=millis * 1000
    )


def to_epoch_millis(value: datetime) -> int:
    """Convert ``value`` into epoch milliseconds."""

    delta = ensure_utc(value) - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000
