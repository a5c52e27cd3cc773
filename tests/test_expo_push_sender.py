"""Tests for Expo push delivery using a mocked HTTP transport."""

import json

import httpx
import pytest

from marketnotify.domain.errors import DeliveryChannelError
from marketnotify.infrastructure.notifications import ExpoPushSender, is_expo_push_token
from marketnotify.domain.entities import PushPreferences
from marketnotify.infrastructure.repositories import PushSettingsRepository, PushTokenRepository

pytestmark = pytest.mark.anyio

PUSH_URL = "https://push.test/send"
TOKEN = "ExponentPushToken[abc123]"
SECOND_TOKEN = "ExponentPushToken[def456]"


def _sender(session_factory, handler, access_token=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client, ExpoPushSender(
        client, session_factory, push_url=PUSH_URL, access_token=access_token
    )


async def test_send_posts_messages_for_active_tokens(session, session_factory, user_scope):
    PushTokenRepository(session).register(user_scope, TOKEN)
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"data": [{"status": "ok", "id": "ticket-1"}]})

    client, sender = _sender(session_factory, handler, access_token="expo-secret")
    async with client:
        delivered = await sender.send(1, "user", "Booking Confirmed", "See you soon")

    assert delivered is True
    assert len(requests) == 1
    assert requests[0].headers["Authorization"] == "Bearer expo-secret"
    body = json.loads(requests[0].content)
    assert body[0]["to"] == TOKEN
    assert body[0]["title"] == "Booking Confirmed"
    assert body[0]["body"] == "See you soon"


async def test_send_without_tokens_skips_the_request(session_factory, user_scope):
    def handler(request):
        raise AssertionError("no request expected")

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Welcome", "Hello") is False


async def test_unregistered_device_token_is_deactivated(session, session_factory, user_scope):
    PushTokenRepository(session).register(user_scope, TOKEN)

    def handler(request):
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "status": "error",
                        "message": "not registered",
                        "details": {"error": "DeviceNotRegistered"},
                    }
                ]
            },
        )

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Welcome", "Hello") is False

    session.expire_all()
    assert PushTokenRepository(session).list_active_tokens(user_scope) == []


async def test_http_error_raises_delivery_channel_error(session, session_factory, user_scope):
    PushTokenRepository(session).register(user_scope, TOKEN)

    def handler(request):
        return httpx.Response(503, json={"errors": ["unavailable"]})

    client, sender = _sender(session_factory, handler)
    async with client:
        with pytest.raises(DeliveryChannelError) as excinfo:
            await sender.send(1, "user", "Welcome", "Hello")

    assert excinfo.value.channel == "push"


async def test_tokens_of_other_roles_are_not_used(session, session_factory, provider_scope):
    PushTokenRepository(session).register(provider_scope, TOKEN)

    def handler(request):
        raise AssertionError("no request expected")

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Welcome", "Hello") is False


async def test_tickets_stay_aligned_with_tokens_when_one_is_malformed(
    session, session_factory, user_scope
):
    repository = PushTokenRepository(session)
    repository.register(user_scope, TOKEN)
    repository.register(user_scope, SECOND_TOKEN)
    repository.register(user_scope, TOKEN)
    sent_to = []

    def handler(request):
        sent_to.extend(message["to"] for message in json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "data": [
                    "garbage",
                    {"status": "error", "details": {"error": "DeviceNotRegistered"}},
                ]
            },
        )

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Welcome", "Hello") is False

    session.expire_all()
    assert len(sent_to) == 2
    assert repository.list_active_tokens(user_scope) == [sent_to[0]]


async def test_push_disallowed_by_settings_is_not_sent(session, session_factory, user_scope):
    PushTokenRepository(session).register(user_scope, TOKEN)
    PushSettingsRepository(session).save(user_scope, PushPreferences(reminders=False))

    def handler(request):
        raise AssertionError("no request expected")

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Booking Reminder", "Tomorrow at 10am") is False


async def test_sound_and_vibration_follow_settings(session, session_factory, user_scope):
    PushTokenRepository(session).register(user_scope, TOKEN)
    PushSettingsRepository(session).save(
        user_scope, PushPreferences(sound_enabled=False, vibration_enabled=False)
    )
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"data": [{"status": "ok"}]})

    client, sender = _sender(session_factory, handler)
    async with client:
        assert await sender.send(1, "user", "Booking Confirmed", "See you soon") is True

    message = bodies[0][0]
    assert message["sound"] is None
    assert message["data"] == {"role": "user", "vibrate": False}

@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("ExponentPushToken[xyz]", True),
        ("ExpoPushToken[xyz]", True),
        ("ExponentPushToken[]", False),
        ("fcm:abcdef", False),
        ("", False),
    ],
)
def test_is_expo_push_token(value, expected):
    assert is_expo_push_token(value) is expected
