"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import and_, case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from marketnotify.domain.entities import (
    Notification,
    NotificationFilter,
    NotificationStatistics,
    RecipientScope,
)
from marketnotify.domain.errors import PersistenceError
from marketnotify.infrastructure.models import NotificationModel
from marketnotify.utils import ensure_naive_utc, ensure_utc, now_utc

logger = logging.getLogger(__name__)


class NotificationRepository:
    """SQLAlchemy implementation of the notification store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Notification store failed to %s", action, exc_info=True)
            raise PersistenceError(f"Could not {action}") from exc

    def insert(self, notification: Notification) -> Notification:
        model = NotificationModel(
            recipient_id=notification.recipient_id,
            recipient_role=notification.recipient_role,
            title=notification.title,
            message=notification.message,
            is_read=False,
            created_at=ensure_naive_utc(notification.created_at or now_utc()),
        )
        with self._guard("store notification"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def update_read_state(
        self, scope: RecipientScope, *, notification_ids: Sequence[int] | None = None
    ) -> int:
        """Flip unread notifications of ``scope`` to read and return how many changed.

        ``notification_ids`` narrows the update; ids outside the scope simply
        match nothing.
        """

        query = self._scoped(scope).filter(NotificationModel.is_read.is_(False))
        if notification_ids is not None:
            ids = [notification_id for notification_id in notification_ids if notification_id is not None]
            if not ids:
                return 0
            query = query.filter(NotificationModel.id.in_(ids))
        with self._guard("update read state"):
            updated = query.update(
                {NotificationModel.is_read: True}, synchronize_session=False
            )
            self.session.commit()
        return int(updated or 0)

    def query(
        self,
        criteria: NotificationFilter,
        *,
        offset: int = 0,
        limit: int | None = None,
        oldest_first: bool = False,
    ) -> list[Notification]:
        query = self._filtered(criteria)
        if oldest_first:
            query = query.order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
        else:
            query = query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        with self._guard("query notifications"):
            models = query.all()
        return [self._to_entity(model) for model in models]

    def count(self, criteria: NotificationFilter) -> int:
        query = self._filtered(criteria).with_entities(func.count(NotificationModel.id))
        with self._guard("count notifications"):
            total = query.scalar()
        return int(total or 0)

    def get(self, scope: RecipientScope, notification_id: int) -> Notification | None:
        query = self._scoped(scope).filter(NotificationModel.id == notification_id)
        with self._guard("load notification"):
            model = query.one_or_none()
        return self._to_entity(model) if model is not None else None

    def statistics(
        self, scope: RecipientScope, categories: Sequence[str]
    ) -> NotificationStatistics:
        """Return total, unread and per-category counts for ``scope``."""

        lowered_title = func.lower(NotificationModel.title)
        columns = [
            func.count(NotificationModel.id),
            func.coalesce(func.sum(case((NotificationModel.is_read.is_(False), 1), else_=0)), 0),
        ]
        for category in categories:
            columns.append(
                func.coalesce(
                    func.sum(
                        case(
                            (lowered_title.contains(category.lower(), autoescape=True), 1),
                            else_=0,
                        )
                    ),
                    0,
                )
            )
        query = self._scoped(scope).with_entities(*columns)
        with self._guard("compute notification statistics"):
            row = query.one()
        total, unread, *per_category = row
        return NotificationStatistics(
            total=int(total or 0),
            unread=int(unread or 0),
            categories={
                category: int(value or 0) for category, value in zip(categories, per_category)
            },
        )

    def delete_created_before(self, cutoff: datetime, *, limit: int) -> int:
        """Delete at most ``limit`` notifications created before ``cutoff``."""

        naive_cutoff = ensure_naive_utc(cutoff)
        with self._guard("purge notifications"):
            ids = [
                row[0]
                for row in self.session.query(NotificationModel.id)
                .filter(NotificationModel.created_at < naive_cutoff)
                .order_by(NotificationModel.id.asc())
                .limit(limit)
                .all()
            ]
            if not ids:
                return 0
            deleted = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id.in_(ids))
                .delete(synchronize_session=False)
            )
            self.session.commit()
        return int(deleted or 0)

    def _scoped(self, scope: RecipientScope) -> Query:
        return self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == scope.recipient_id,
            NotificationModel.recipient_role == scope.recipient_role,
        )

    def _filtered(self, criteria: NotificationFilter) -> Query:
        query = self._scoped(criteria.scope)
        if criteria.title_contains:
            query = query.filter(
                func.lower(NotificationModel.title).contains(
                    criteria.title_contains.lower(), autoescape=True
                )
            )
        if criteria.created_from is not None:
            query = query.filter(
                NotificationModel.created_at >= ensure_naive_utc(criteria.created_from)
            )
        if criteria.created_to is not None:
            query = query.filter(
                NotificationModel.created_at <= ensure_naive_utc(criteria.created_to)
            )
        if criteria.is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(criteria.is_read))
        if criteria.created_after is not None:
            after = ensure_naive_utc(criteria.created_after)
            if criteria.after_id is None:
                query = query.filter(NotificationModel.created_at > after)
            else:
                query = query.filter(
                    or_(
                        NotificationModel.created_at > after,
                        and_(
                            NotificationModel.created_at == after,
                            NotificationModel.id > criteria.after_id,
                        ),
                    )
                )
        return query

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            recipient_role=model.recipient_role,
            title=model.title,
            message=model.message,
            is_read=bool(model.is_read),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["NotificationRepository"]
