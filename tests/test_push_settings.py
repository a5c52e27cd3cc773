"""Tests for push preferences and the push delivery log."""

from datetime import datetime, timezone

import pytest

from marketnotify.application.use_cases.notifications import (
    get_push_settings,
    list_push_deliveries,
    unregister_all_push_tokens,
    update_push_settings,
)
from marketnotify.domain.entities import ChannelOutcome, ChannelStatus, PushPreferences
from marketnotify.domain.errors import ValidationError
from marketnotify.infrastructure.models import PushDeliveryModel
from marketnotify.infrastructure.repositories import PushDeliveryRepository, PushTokenRepository


@pytest.mark.parametrize(
    ("preferences", "title", "expected"),
    [
        (PushPreferences(), "Booking Confirmed", True),
        (PushPreferences(), "Special Offer", False),
        (PushPreferences(booking_updates=False), "Booking Confirmed", False),
        (PushPreferences(booking_updates=False), "Booking Reminder", True),
        (PushPreferences(reminders=False), "Booking Reminder", False),
        (PushPreferences(promotional=True), "Promo: 20% off", True),
        (PushPreferences(booking_updates=False, reminders=False), "Welcome", True),
    ],
)
def test_allows_matches_title_to_preference(preferences, title, expected):
    assert preferences.allows(title) is expected


def test_from_mapping_ignores_unknown_keys():
    preferences = PushPreferences.from_mapping({"reminders": 0, "dark_mode": True})

    assert preferences == PushPreferences(reminders=False)


@pytest.mark.parametrize("changes", [{"dark_mode": True}, {"reminders": 1}])
def test_merged_rejects_invalid_changes(changes):
    with pytest.raises(ValidationError):
        PushPreferences().merged(changes)


def test_settings_default_then_persist_per_scope(session, user_scope, provider_scope):
    assert get_push_settings(session, scope=user_scope) == PushPreferences()

    update_push_settings(session, scope=user_scope, changes={"promotional": True})
    update_push_settings(session, scope=user_scope, changes={"vibration_enabled": False})

    stored = get_push_settings(session, scope=user_scope)
    assert stored.promotional is True
    assert stored.vibration_enabled is False
    assert get_push_settings(session, scope=provider_scope) == PushPreferences()


def test_empty_update_is_rejected(session, user_scope):
    with pytest.raises(ValidationError):
        update_push_settings(session, scope=user_scope, changes={})


def test_delivery_history_is_newest_first_and_paginated(session, user_scope, provider_scope):
    log = PushDeliveryRepository(session)
    for title in ("First", "Second", "Third"):
        log.record(
            user_scope, title, "Body", ChannelOutcome("push", ChannelStatus.FAILED, "Expo is down")
        )
    log.record(provider_scope, "Other", "Body", ChannelOutcome("push", ChannelStatus.DELIVERED))

    first_page = list_push_deliveries(session, scope=user_scope, page=1, limit=2)
    second_page = list_push_deliveries(session, scope=user_scope, page=2, limit=2)

    assert [item.title for item in first_page.items] == ["Third", "Second"]
    assert first_page.items[0].status == "failed"
    assert first_page.items[0].detail == "Expo is down"
    assert first_page.pagination.total_count == 3
    assert first_page.pagination.has_more is True
    assert [item.title for item in second_page.items] == ["First"]
    assert second_page.pagination.has_more is False


def test_delivery_history_orders_by_time_before_id(session, user_scope):
    log = PushDeliveryRepository(session)
    older = log.record(user_scope, "Older", "Body", ChannelOutcome("push", ChannelStatus.DELIVERED))
    log.record(user_scope, "Newer", "Body", ChannelOutcome("push", ChannelStatus.DELIVERED))
    session.query(PushDeliveryModel).filter(PushDeliveryModel.id == older.id).update(
        {PushDeliveryModel.created_at: datetime(2030, 1, 1)}
    )
    session.commit()

    page = list_push_deliveries(session, scope=user_scope)

    assert [item.title for item in page.items] == ["Older", "Newer"]
    assert page.items[0].created_at == datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(("page", "limit"), [(0, 20), (1, 0), (1, 101)])
def test_delivery_history_rejects_bad_pagination(session, user_scope, page, limit):
    with pytest.raises(ValidationError):
        list_push_deliveries(session, scope=user_scope, page=page, limit=limit)


def test_unregister_all_only_touches_the_scope(session, user_scope, provider_scope):
    tokens = PushTokenRepository(session)
    tokens.register(user_scope, "ExponentPushToken[one]")
    tokens.register(provider_scope, "ExponentPushToken[two]")

    assert unregister_all_push_tokens(session, scope=user_scope) == 1

    session.expire_all()
    assert tokens.list_active_tokens(user_scope) == []
    assert tokens.list_active_tokens(provider_scope) == ["ExponentPushToken[two]"]
