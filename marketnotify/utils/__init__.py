"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_naive_utc,
    ensure_utc,
    from_epoch_millis,
    now_utc,
    to_epoch_millis,
    truncate_to_millis,
)

__all__ = [
    "ensure_naive_utc",
    "ensure_utc",
    "from_epoch_millis",
    "now_utc",
    "to_epoch_millis",
    "truncate_to_millis",
]
