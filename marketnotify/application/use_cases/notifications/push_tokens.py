"""Use cases for managing Expo push tokens of a recipient scope."""

from typing import Any

from sqlalchemy.orm import Session

from marketnotify.domain.entities import PushToken, RecipientScope
from marketnotify.domain.errors import ValidationError
from marketnotify.infrastructure.notifications import is_expo_push_token
from marketnotify.infrastructure.repositories import PushTokenRepository


def register_push_token(
    session: Session,
    *,
    scope: RecipientScope,
    token: str,
    device_info: dict[str, Any] | None = None,
) -> PushToken:
    """Validate ``token`` and make it the active push token of ``scope``."""

    token = (token or "").strip()
    if not is_expo_push_token(token):
        raise ValidationError("Invalid Expo push token")
    return PushTokenRepository(session).register(scope, token, device_info=device_info)


def unregister_push_token(session: Session, *, scope: RecipientScope, token: str) -> None:
    """Deactivate ``token`` for ``scope``; unknown tokens are ignored."""

    PushTokenRepository(session).deactivate([token], scope=scope)


def unregister_all_push_tokens(session: Session, *, scope: RecipientScope) -> int:
    """Deactivate every token of ``scope``, as done on logout."""

    return PushTokenRepository(session).deactivate_all(scope)
