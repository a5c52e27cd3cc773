"""Unit tests for the per-scope notification cache."""

import pytest

from marketnotify.domain.entities import RecipientScope
from marketnotify.infrastructure.cache import NotificationCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def ttl_cache(fake_clock):
    return NotificationCache(5, clock=fake_clock)


def test_returns_cached_value_within_ttl(ttl_cache, fake_clock):
    scope = RecipientScope(1, "user")
    loader = CountingLoader(3)

    assert ttl_cache.get_or_load("unread_count", scope, loader) == 3
    fake_clock.now = 4.9
    assert ttl_cache.get_or_load("unread_count", scope, loader) == 3

    assert loader.calls == 1
    assert ttl_cache.stats()["hits"] == 1


def test_reloads_after_ttl_expires(ttl_cache, fake_clock):
    scope = RecipientScope(1, "user")
    loader = CountingLoader(3)

    ttl_cache.get_or_load("unread_count", scope, loader)
    fake_clock.now = 5.0
    ttl_cache.get_or_load("unread_count", scope, loader)

    assert loader.calls == 2


def test_per_call_ttl_overrides_default(ttl_cache, fake_clock):
    scope = RecipientScope(1, "user")
    loader = CountingLoader({"total": 0})

    ttl_cache.get_or_load("statistics", scope, loader, ttl=120)
    fake_clock.now = 60
    ttl_cache.get_or_load("statistics", scope, loader, ttl=120)

    assert loader.calls == 1


def test_params_are_part_of_the_key(ttl_cache):
    scope = RecipientScope(1, "user")
    first = CountingLoader(["page-1"])
    second = CountingLoader(["page-2"])

    assert ttl_cache.get_or_load("list", scope, first, page=1, limit=20) == ["page-1"]
    assert ttl_cache.get_or_load("list", scope, second, page=2, limit=20) == ["page-2"]
    assert ttl_cache.get_or_load("list", scope, second, limit=20, page=1) == ["page-1"]


def test_invalidate_scope_only_drops_that_scope(ttl_cache):
    user = RecipientScope(7, "user")
    provider = RecipientScope(7, "provider")
    user_loader = CountingLoader(1)
    provider_loader = CountingLoader(2)

    ttl_cache.get_or_load("unread_count", user, user_loader)
    ttl_cache.get_or_load("unread_count", provider, provider_loader)

    assert ttl_cache.invalidate_scope(user) == 1

    ttl_cache.get_or_load("unread_count", user, user_loader)
    ttl_cache.get_or_load("unread_count", provider, provider_loader)
    assert user_loader.calls == 2
    assert provider_loader.calls == 1


def test_empty_results_are_cached(ttl_cache):
    scope = RecipientScope(1, "user")
    loader = CountingLoader([])

    ttl_cache.get_or_load("recent", scope, loader, since="0")
    ttl_cache.get_or_load("recent", scope, loader, since="0")

    assert loader.calls == 1


def test_failed_load_is_not_cached(ttl_cache):
    scope = RecipientScope(1, "user")
    calls = []

    def failing():
        calls.append(1)
        raise RuntimeError("store down")

    for _ in range(2):
        with pytest.raises(RuntimeError):
            ttl_cache.get_or_load("unread_count", scope, failing)

    assert len(calls) == 2
    assert ttl_cache.stats()["size"] == 0


def test_invalidation_during_load_discards_the_result(ttl_cache):
    scope = RecipientScope(1, "user")

    def racing_loader():
        ttl_cache.invalidate_scope(scope)
        return "stale"

    assert ttl_cache.get_or_load("unread_count", scope, racing_loader) == "stale"

    fresh = CountingLoader("fresh")
    assert ttl_cache.get_or_load("unread_count", scope, fresh) == "fresh"
    assert fresh.calls == 1


def test_purge_expired_and_clear(ttl_cache, fake_clock):
    scope = RecipientScope(1, "user")
    ttl_cache.get_or_load("unread_count", scope, CountingLoader(1))
    ttl_cache.get_or_load("statistics", scope, CountingLoader(2), ttl=100)

    fake_clock.now = 10
    assert ttl_cache.purge_expired() == 1
    assert ttl_cache.stats()["size"] == 1

    ttl_cache.clear()
    stats = ttl_cache.stats()
    assert stats["size"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0


def test_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        NotificationCache(0)


def test_one_off_keys_are_swept_after_expiry(fake_clock):
    sweeping_cache = NotificationCache(5, clock=fake_clock, sweep_interval=10)

    for recipient_id in range(1, 101):
        sweeping_cache.get_or_load(
            "recent", RecipientScope(recipient_id, "user"), CountingLoader([]), since="0"
        )
        fake_clock.now += 10

    stats = sweeping_cache.stats()
    assert stats["size"] <= 10
    assert stats["scopes"] <= 10


def test_idle_scope_is_forgotten_after_invalidation(ttl_cache):
    scope = RecipientScope(1, "user")
    ttl_cache.get_or_load("unread_count", scope, CountingLoader(1))
    assert ttl_cache.stats()["scopes"] == 1

    ttl_cache.invalidate_scope(scope)

    assert ttl_cache.stats()["scopes"] == 0


def test_failed_load_does_not_leave_scope_state(ttl_cache):
    def failing():
        raise RuntimeError("store down")

    with pytest.raises(RuntimeError):
        ttl_cache.get_or_load("unread_count", RecipientScope(3, "provider"), failing)

    assert ttl_cache.stats()["scopes"] == 0


def test_rejects_non_positive_sweep_interval():
    with pytest.raises(ValueError):
        NotificationCache(5, sweep_interval=0)
