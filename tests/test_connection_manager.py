"""Tests for the websocket registry and the realtime broadcaster."""

import pytest

from marketnotify.domain.entities import RecipientScope
from marketnotify.infrastructure.notifications import (
    NotificationConnectionManager,
    WebSocketBroadcaster,
)

pytestmark = pytest.mark.anyio


class FakeWebSocket:
    def __init__(self, broken: bool = False) -> None:
        self.broken = broken
        self.accepted = False
        self.closed_with = None
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.broken:
            raise RuntimeError("socket is gone")
        self.sent.append(message)

    async def close(self, code=1000):
        self.closed_with = code


@pytest.fixture
def manager():
    return NotificationConnectionManager()


async def test_connect_accepts_and_counts_per_scope(manager, user_scope, provider_scope):
    first, second, other = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()

    assert await manager.connect(user_scope, first) == 1
    assert await manager.connect(user_scope, second) == 2
    await manager.connect(provider_scope, other)

    assert first.accepted and second.accepted
    assert manager.connection_count(user_scope) == 2
    assert manager.connection_count(provider_scope) == 1
    assert manager.connection_count() == 3


async def test_disconnect_forgets_socket_once(manager, user_scope):
    websocket = FakeWebSocket()
    await manager.connect(user_scope, websocket)

    assert manager.disconnect(user_scope, websocket) is True
    assert manager.disconnect(user_scope, websocket) is False
    assert manager.connection_count() == 0


async def test_broken_socket_is_dropped_while_others_receive(manager, user_scope):
    healthy, broken = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect(user_scope, healthy)
    await manager.connect(user_scope, broken)

    delivered = await manager.send_to_scope(user_scope, {"type": "ping"})

    assert delivered == 1
    assert healthy.sent == [{"type": "ping"}]
    assert manager.connection_count(user_scope) == 1


async def test_send_to_scope_without_sockets_delivers_nothing(manager, user_scope):
    assert await manager.send_to_scope(user_scope, {"type": "ping"}) == 0


async def test_close_all_empties_the_registry(manager, user_scope, provider_scope):
    sockets = [FakeWebSocket(), FakeWebSocket()]
    await manager.connect(user_scope, sockets[0])
    await manager.connect(provider_scope, sockets[1])

    assert await manager.close_all() == 2

    assert [websocket.closed_with for websocket in sockets] == [1001, 1001]
    assert manager.connection_count() == 0


async def test_broadcaster_targets_only_the_matching_role(manager):
    user_socket, provider_socket = FakeWebSocket(), FakeWebSocket()
    await manager.connect(RecipientScope(4, "user"), user_socket)
    await manager.connect(RecipientScope(4, "provider"), provider_socket)
    broadcaster = WebSocketBroadcaster(manager)
    payload = {"type": "notification_created", "data": {"id": 1}}

    assert await broadcaster.emit(4, "provider", payload) is True
    assert await broadcaster.emit(5, "provider", payload) is False

    assert provider_socket.sent == [payload]
    assert provider_socket.sent[0] is not payload
    assert user_socket.sent == []
