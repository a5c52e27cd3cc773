"""Process-local read-through cache for per-recipient notification queries."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, TypeVar

from marketnotify.domain.entities import RecipientScope

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, int, str, tuple[tuple[str, Hashable], ...]]
ScopeKey = tuple[int, str]

DEFAULT_SWEEP_INTERVAL = 256


@dataclass
class _Entry:
    value: Any
    expires_at: float


class NotificationCache:
    """TTL cache keyed by ``(operation, recipient_id, recipient_role, params)``.

    Every mutation of a scope drops all of its entries. A per-scope generation
    counter prevents a load that started before an invalidation from writing
    its (now stale) result back afterwards. The counter only lives while the
    scope has entries or loads in flight, and expired entries are swept every
    ``sweep_interval`` fills, so one-off keys do not accumulate.
    """

    def __init__(
        self,
        default_ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")
        self._default_ttl = default_ttl
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._lock = threading.RLock()
        self._entries: dict[CacheKey, _Entry] = {}
        self._scope_keys: dict[ScopeKey, set[CacheKey]] = {}
        self._generations: dict[ScopeKey, int] = {}
        self._inflight: dict[ScopeKey, int] = {}
        self._fills = 0
        self._hits = 0
        self._misses = 0

    @staticmethod
    def build_key(operation: str, scope: RecipientScope, **params: Hashable) -> CacheKey:
        return (
            operation,
            scope.recipient_id,
            scope.recipient_role,
            tuple(sorted(params.items())),
        )

    def get_or_load(
        self,
        operation: str,
        scope: RecipientScope,
        loader: Callable[[], T],
        *,
        ttl: float | None = None,
        **params: Hashable,
    ) -> T:
        """Return the cached value for the key or compute it with ``loader``.

        Nothing is stored when ``loader`` raises.
        """

        key = self.build_key(operation, scope, **params)
        scope_key = _scope_key(scope)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > self._clock():
                self._hits += 1
                return entry.value
            if entry is not None:
                self._drop(key)
            self._misses += 1
            generation = self._generations.setdefault(scope_key, 0)
            self._inflight[scope_key] = self._inflight.get(scope_key, 0) + 1

        try:
            value = loader()
        except BaseException:
            with self._lock:
                self._finish_load(scope_key)
                self._forget_if_idle(scope_key)
            raise

        with self._lock:
            self._finish_load(scope_key)
            if self._generations.get(scope_key, 0) != generation:
                logger.debug("Skipping cache fill for %s, scope changed while loading", key)
                self._forget_if_idle(scope_key)
                return value
            self._entries[key] = _Entry(value, self._clock() + (ttl or self._default_ttl))
            self._scope_keys.setdefault(scope_key, set()).add(key)
            self._fills += 1
            if self._fills % self._sweep_interval == 0:
                self._purge_expired_locked()
        return value

    def invalidate_scope(self, scope: RecipientScope) -> int:
        """Drop every entry of ``scope`` and return how many were removed."""

        scope_key = _scope_key(scope)
        with self._lock:
            keys = self._scope_keys.pop(scope_key, set())
            for key in keys:
                self._entries.pop(key, None)
            if self._inflight.get(scope_key):
                self._generations[scope_key] = self._generations.get(scope_key, 0) + 1
            else:
                self._generations.pop(scope_key, None)
        if keys:
            logger.debug("Invalidated %s cache entries for %s", len(keys), scope)
        return len(keys)

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired_locked()

    def clear(self) -> None:
        with self._lock:
            self._generations = {
                scope_key: self._generations.get(scope_key, 0) + 1 for scope_key in self._inflight
            }
            self._entries.clear()
            self._scope_keys.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "scopes": len(self._generations),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 4) if total else 0.0,
                "ttl_seconds": self._default_ttl,
            }

    def _purge_expired_locked(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._drop(key)
        if expired:
            logger.debug("Swept %s expired cache entries", len(expired))
        return len(expired)

    def _finish_load(self, scope_key: ScopeKey) -> None:
        remaining = self._inflight.get(scope_key, 1) - 1
        if remaining > 0:
            self._inflight[scope_key] = remaining
        else:
            self._inflight.pop(scope_key, None)

    def _forget_if_idle(self, scope_key: ScopeKey) -> None:
        if scope_key not in self._scope_keys and scope_key not in self._inflight:
            self._generations.pop(scope_key, None)

    def _drop(self, key: CacheKey) -> None:
        self._entries.pop(key, None)
        scope_key = (key[1], key[2])
        keys = self._scope_keys.get(scope_key)
        if keys is not None:
            keys.discard(key)
            if not keys:
                self._scope_keys.pop(scope_key, None)
                self._forget_if_idle(scope_key)


def _scope_key(scope: RecipientScope) -> ScopeKey:
    return (scope.recipient_id, scope.recipient_role)


__all__ = ["DEFAULT_SWEEP_INTERVAL", "NotificationCache"]
