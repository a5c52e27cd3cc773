"""Persistence helpers for push token entities."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketnotify.domain.entities import PushToken, RecipientScope
from marketnotify.domain.errors import PersistenceError
from marketnotify.infrastructure.models import PushTokenModel
from marketnotify.utils import ensure_naive_utc, ensure_utc, now_utc

logger = logging.getLogger(__name__)


class PushTokenRepository:
    """Provide registration and lookup for :class:`PushToken` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def register(
        self, scope: RecipientScope, token: str, *, device_info: dict[str, Any] | None = None
    ) -> PushToken:
        """Activate ``token`` for ``scope``.

        A token seen before is refreshed; a new token replaces every other
        active token of the scope.
        """

        now = ensure_naive_utc(now_utc())
        try:
            model = (
                self._scoped(scope).filter(PushTokenModel.token == token).one_or_none()
            )
            if model is not None:
                model.is_active = True
                model.last_seen_at = now
                if device_info:
                    model.device_info = device_info
            else:
                self._scoped(scope).filter(PushTokenModel.is_active.is_(True)).update(
                    {PushTokenModel.is_active: False}, synchronize_session=False
                )
                model = PushTokenModel(
                    recipient_id=scope.recipient_id,
                    recipient_role=scope.recipient_role,
                    token=token,
                    device_info=device_info or {},
                    is_active=True,
                    created_at=now,
                    last_seen_at=now,
                )
                self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not register push token") from exc
        return self._to_entity(model)

    def list_active_tokens(self, scope: RecipientScope) -> list[str]:
        try:
            rows = (
                self.session.query(PushTokenModel.token)
                .filter(
                    PushTokenModel.recipient_id == scope.recipient_id,
                    PushTokenModel.recipient_role == scope.recipient_role,
                    PushTokenModel.is_active.is_(True),
                )
                .all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not load push tokens") from exc
        return [row[0] for row in rows]

    def deactivate(self, tokens: Iterable[str], *, scope: RecipientScope | None = None) -> int:
        """Mark ``tokens`` inactive, optionally only within ``scope``."""

        values = [token for token in tokens if token]
        if not values:
            return 0
        query = self.session.query(PushTokenModel).filter(PushTokenModel.token.in_(values))
        if scope is not None:
            query = query.filter(
                PushTokenModel.recipient_id == scope.recipient_id,
                PushTokenModel.recipient_role == scope.recipient_role,
            )
        try:
            updated = query.update(
                {PushTokenModel.is_active: False}, synchronize_session=False
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not deactivate push tokens") from exc
        if updated:
            logger.info("Deactivated %s push token(s)", updated)
        return int(updated or 0)

    def deactivate_all(self, scope: RecipientScope) -> int:
        """Mark every active token of ``scope`` inactive, as on logout."""

        query = self._scoped(scope).filter(PushTokenModel.is_active.is_(True))
        try:
            updated = query.update(
                {PushTokenModel.is_active: False}, synchronize_session=False
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not deactivate push tokens") from exc
        logger.info("Deactivated all %s push token(s) for %s", updated, scope)
        return int(updated or 0)

    def _scoped(self, scope: RecipientScope):
        return self.session.query(PushTokenModel).filter(
            PushTokenModel.recipient_id == scope.recipient_id,
            PushTokenModel.recipient_role == scope.recipient_role,
        )

    @staticmethod
    def _to_entity(model: PushTokenModel) -> PushToken:
        return PushToken(
            id=model.id,
            recipient_id=model.recipient_id,
            recipient_role=model.recipient_role,
            token=model.token,
            device_info=model.device_info or {},
            is_active=bool(model.is_active),
            created_at=ensure_utc(model.created_at),
            last_seen_at=ensure_utc(model.last_seen_at),
        )


__all__ = ["PushTokenRepository"]
