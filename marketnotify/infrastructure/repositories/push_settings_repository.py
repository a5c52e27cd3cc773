"""Persistence helpers for push preferences and push delivery records."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketnotify.domain.entities import (
    ChannelOutcome,
    PushDelivery,
    PushPreferences,
    RecipientScope,
)
from marketnotify.domain.errors import PersistenceError
from marketnotify.infrastructure.models import PushDeliveryModel, PushSettingsModel
from marketnotify.utils import ensure_naive_utc, ensure_utc, now_utc

logger = logging.getLogger(__name__)


class PushSettingsRepository:
    """Load and store :class:`PushPreferences` per recipient scope."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, scope: RecipientScope) -> PushPreferences:
        """Return the stored preferences, or the defaults when none were saved."""

        try:
            model = self._scoped(scope).one_or_none()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not load push settings") from exc
        if model is None:
            return PushPreferences()
        return PushPreferences.from_mapping(model.settings)

    def save(self, scope: RecipientScope, preferences: PushPreferences) -> PushPreferences:
        now = ensure_naive_utc(now_utc())
        try:
            model = self._scoped(scope).one_or_none()
            if model is None:
                model = PushSettingsModel(
                    recipient_id=scope.recipient_id,
                    recipient_role=scope.recipient_role,
                    created_at=now,
                )
                self.session.add(model)
            model.settings = preferences.as_dict()
            model.updated_at = now
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not save push settings") from exc
        return preferences

    def _scoped(self, scope: RecipientScope):
        return self.session.query(PushSettingsModel).filter(
            PushSettingsModel.recipient_id == scope.recipient_id,
            PushSettingsModel.recipient_role == scope.recipient_role,
        )


class PushDeliveryRepository:
    """Append-only log of push attempts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def record(
        self, scope: RecipientScope, title: str, body: str, outcome: ChannelOutcome
    ) -> PushDelivery:
        model = PushDeliveryModel(
            recipient_id=scope.recipient_id,
            recipient_role=scope.recipient_role,
            title=title,
            body=body,
            status=outcome.status.value,
            detail=outcome.detail,
            created_at=ensure_naive_utc(now_utc()),
        )
        try:
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not record push delivery") from exc
        return self._to_entity(model)

    def list_for_scope(
        self, scope: RecipientScope, *, offset: int = 0, limit: int = 20
    ) -> list[PushDelivery]:
        try:
            models = (
                self._scoped(scope)
                .order_by(PushDeliveryModel.created_at.desc(), PushDeliveryModel.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not load push deliveries") from exc
        return [self._to_entity(model) for model in models]

    def count_for_scope(self, scope: RecipientScope) -> int:
        try:
            total = self._scoped(scope).with_entities(func.count(PushDeliveryModel.id)).scalar()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not count push deliveries") from exc
        return int(total or 0)

    def _scoped(self, scope: RecipientScope):
        return self.session.query(PushDeliveryModel).filter(
            PushDeliveryModel.recipient_id == scope.recipient_id,
            PushDeliveryModel.recipient_role == scope.recipient_role,
        )

    @staticmethod
    def _to_entity(model: PushDeliveryModel) -> PushDelivery:
        return PushDelivery(
            id=model.id,
            recipient_id=model.recipient_id,
            recipient_role=model.recipient_role,
            title=model.title,
            body=model.body,
            status=model.status,
            detail=model.detail,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["PushDeliveryRepository", "PushSettingsRepository"]
