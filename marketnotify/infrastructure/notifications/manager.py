"""Registry of open notification websockets per recipient scope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from marketnotify.domain.entities import RecipientScope

logger = logging.getLogger(__name__)

GOING_AWAY = 1001


class NotificationConnectionManager:
    """Track the websockets of each recipient scope and fan messages out to them.

    A user and a provider with the same id never share sockets. Scopes with
    no open socket are removed so the registry only holds live clients.
    """

    def __init__(self) -> None:
        self._sockets: dict[RecipientScope, set[WebSocket]] = {}

    async def connect(self, scope: RecipientScope, websocket: WebSocket) -> int:
        """Accept ``websocket`` and return how many sockets ``scope`` now has open."""

        await websocket.accept()
        sockets = self._sockets.setdefault(scope, set())
        sockets.add(websocket)
        logger.debug("Websocket opened for %s (%s open)", scope, len(sockets))
        return len(sockets)

    def disconnect(self, scope: RecipientScope, websocket: WebSocket) -> bool:
        """Forget ``websocket``; return ``False`` when it was not registered."""

        sockets = self._sockets.get(scope)
        if not sockets or websocket not in sockets:
            return False
        sockets.remove(websocket)
        if not sockets:
            del self._sockets[scope]
        logger.debug("Websocket closed for %s", scope)
        return True

    def connection_count(self, scope: RecipientScope | None = None) -> int:
        if scope is not None:
            return len(self._sockets.get(scope, ()))
        return sum(len(sockets) for sockets in self._sockets.values())

    async def send_to_scope(self, scope: RecipientScope, message: dict[str, Any]) -> int:
        """Send ``message`` to every socket of ``scope`` and return how many took it.

        A socket whose send fails is dropped from the registry.
        """

        delivered = 0
        for websocket in tuple(self._sockets.get(scope, ())):
            try:
                await websocket.send_json(message)
            except Exception:
                logger.debug("Dropping broken websocket for %s", scope, exc_info=True)
                self.disconnect(scope, websocket)
            else:
                delivered += 1
        return delivered

    async def close_all(self, code: int = GOING_AWAY) -> int:
        """Close every registered socket, as done on shutdown."""

        closed = 0
        for scope, sockets in list(self._sockets.items()):
            for websocket in tuple(sockets):
                try:
                    await websocket.close(code=code)
                except Exception:
                    logger.debug("Websocket for %s was already closed", scope, exc_info=True)
                else:
                    closed += 1
        self._sockets.clear()
        if closed:
            logger.info("Closed %s notification websocket(s)", closed)
        return closed


__all__ = ["GOING_AWAY", "NotificationConnectionManager"]
