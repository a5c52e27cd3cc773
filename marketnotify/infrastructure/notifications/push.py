"""Mobile push delivery through the Expo push API."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Final

import httpx
from anyio import to_thread
from sqlalchemy.orm import Session

from marketnotify.domain.entities import PushPreferences, RecipientScope
from marketnotify.domain.errors import DeliveryChannelError
from marketnotify.infrastructure.repositories import PushSettingsRepository, PushTokenRepository

logger = logging.getLogger(__name__)

EXPO_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^Expo(?:nent)?PushToken\[[^\]]+\]$")
_BATCH_SIZE: Final[int] = 100
_UNREGISTERED_ERROR: Final[str] = "DeviceNotRegistered"


def is_expo_push_token(value: str) -> bool:
    return bool(EXPO_TOKEN_PATTERN.match(value or ""))


class ExpoPushSender:
    """Send a notification to every active Expo token of a recipient scope."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        session_factory: Callable[[], Session],
        *,
        push_url: str,
        access_token: str | None = None,
    ) -> None:
        self._client = client
        self._session_factory = session_factory
        self._push_url = push_url
        self._access_token = access_token

    async def send(
        self, recipient_id: int, recipient_role: str, title: str, message: str
    ) -> bool:
        """Return ``True`` when the provider accepted at least one message."""

        scope = RecipientScope(recipient_id, recipient_role)
        tokens, preferences = await to_thread.run_sync(self._load_targets, scope)
        if not tokens:
            logger.debug("No active push tokens for %s", scope)
            return False
        if not preferences.allows(title):
            logger.info("Push for %s skipped by notification settings", scope)
            return False

        accepted = 0
        stale: list[str] = []
        for start in range(0, len(tokens), _BATCH_SIZE):
            batch = tokens[start : start + _BATCH_SIZE]
            tickets = await self._post(
                [
                    self._build_message(token, title, message, scope, preferences)
                    for token in batch
                ]
            )
            for token, ticket in zip(batch, tickets):
                if ticket.get("status") == "ok":
                    accepted += 1
                    continue
                details = ticket.get("details") or {}
                if details.get("error") == _UNREGISTERED_ERROR:
                    stale.append(token)
                logger.warning(
                    "Expo rejected push for %s: %s", scope, ticket.get("message") or details
                )

        if stale:
            await to_thread.run_sync(self._deactivate_tokens, stale)
        return accepted > 0

    async def _post(self, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        try:
            response = await self._client.post(self._push_url, json=messages, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise DeliveryChannelError(
                "push", f"Expo responded with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise DeliveryChannelError("push", f"Expo request failed: {exc}") from exc

        tickets = body.get("data") if isinstance(body, dict) else None
        if isinstance(tickets, dict):
            tickets = [tickets]
        if not isinstance(tickets, list):
            raise DeliveryChannelError("push", "Expo response did not include tickets")
        return [ticket if isinstance(ticket, dict) else {} for ticket in tickets]

    @staticmethod
    def _build_message(
        token: str,
        title: str,
        message: str,
        scope: RecipientScope,
        preferences: PushPreferences,
    ) -> dict[str, Any]:
        return {
            "to": token,
            "title": title,
            "body": message,
            "sound": "default" if preferences.sound_enabled else None,
            "priority": "high",
            "channelId": "default",
            "data": {
                "role": scope.recipient_role,
                "vibrate": preferences.vibration_enabled,
            },
        }

    def _load_targets(self, scope: RecipientScope) -> tuple[list[str], PushPreferences]:
        session = self._session_factory()
        try:
            tokens = PushTokenRepository(session).list_active_tokens(scope)
            if not tokens:
                return tokens, PushPreferences()
            return tokens, PushSettingsRepository(session).get(scope)
        finally:
            session.close()

    def _deactivate_tokens(self, tokens: list[str]) -> None:
        session = self._session_factory()
        try:
            PushTokenRepository(session).deactivate(tokens)
        finally:
            session.close()


__all__ = ["EXPO_TOKEN_PATTERN", "ExpoPushSender", "is_expo_push_token"]
