"""Broadcast realtime events to connected websocket clients."""

from __future__ import annotations

import copy
from typing import Any

from marketnotify.domain.entities import RecipientScope

from .manager import NotificationConnectionManager


class WebSocketBroadcaster:
    """Deliver payloads to every websocket open for a recipient scope."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def emit(
        self, recipient_id: int, recipient_role: str, payload: dict[str, Any]
    ) -> bool:
        """Send ``payload`` and report whether any live connection received it."""

        if not recipient_id:
            return False
        delivered = await self._manager.send_to_scope(
            RecipientScope(recipient_id, recipient_role), copy.deepcopy(payload)
        )
        return delivered > 0


__all__ = ["WebSocketBroadcaster"]
