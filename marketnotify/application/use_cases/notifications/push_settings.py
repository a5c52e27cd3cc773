"""Use cases for push preferences and the push delivery history."""

from typing import Any, Mapping

from sqlalchemy.orm import Session

from marketnotify.domain.entities import (
    Pagination,
    PushDeliveryPage,
    PushPreferences,
    RecipientScope,
)
from marketnotify.domain.errors import ValidationError
from marketnotify.infrastructure.repositories import (
    PushDeliveryRepository,
    PushSettingsRepository,
)

from .queries import DEFAULT_MAX_LIMIT


def get_push_settings(session: Session, *, scope: RecipientScope) -> PushPreferences:
    return PushSettingsRepository(session).get(scope)


def update_push_settings(
    session: Session, *, scope: RecipientScope, changes: Mapping[str, Any]
) -> PushPreferences:
    """Apply ``changes`` over the stored preferences and persist the result."""

    if not changes:
        raise ValidationError("No notification settings provided")
    repository = PushSettingsRepository(session)
    preferences = repository.get(scope).merged(changes)
    return repository.save(scope, preferences)


def list_push_deliveries(
    session: Session,
    *,
    scope: RecipientScope,
    page: int = 1,
    limit: int = 20,
    max_limit: int = DEFAULT_MAX_LIMIT,
) -> PushDeliveryPage:
    """Return one page of ``scope``'s push deliveries, newest first."""

    if page < 1:
        raise ValidationError("page must be a positive integer")
    if limit < 1 or limit > max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}")
    repository = PushDeliveryRepository(session)
    total_count = repository.count_for_scope(scope)
    items = repository.list_for_scope(scope, offset=(page - 1) * limit, limit=limit)
    return PushDeliveryPage(
        items=items,
        pagination=Pagination.build(page=page, limit=limit, total_count=total_count),
    )
