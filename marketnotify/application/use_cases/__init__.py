"""Aggregate application use cases."""

from .notifications import (
    DeliveryCoordinator,
    QueryFacade,
    ReadStateTracker,
    purge_expired_notifications,
)

__all__ = [
    "DeliveryCoordinator",
    "QueryFacade",
    "ReadStateTracker",
    "purge_expired_notifications",
]
