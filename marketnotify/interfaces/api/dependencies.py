"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from marketnotify.application.use_cases.notifications import (
    DeliveryCoordinator,
    QueryFacade,
    ReadStateTracker,
)
from marketnotify.config import get_settings
from marketnotify.domain.entities import ROLE_ADMIN, RecipientScope
from marketnotify.domain.errors import ValidationError
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.infrastructure.database import get_db
from marketnotify.infrastructure.repositories import (
    NotificationRepository,
    PushDeliveryRepository,
)
from marketnotify.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_recipient_scope(token: str) -> RecipientScope:
    """Return the recipient scope carried by ``token``."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or not isinstance(role, str):
        raise _credentials_error()
    try:
        return RecipientScope(int(subject), role)
    except (TypeError, ValueError, ValidationError) as exc:
        raise _credentials_error() from exc


def get_current_scope(token: str = Depends(oauth2_scheme)) -> RecipientScope:
    """Return the authenticated recipient scope."""

    return resolve_recipient_scope(token)


def require_admin(scope: RecipientScope = Depends(get_current_scope)) -> RecipientScope:
    """Ensure the authenticated caller acts as an administrator."""

    if scope.recipient_role != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return scope


def get_notification_cache(request: Request) -> NotificationCache:
    return request.app.state.notification_cache


def get_query_facade(
    db: Session = Depends(get_db),
    cache: NotificationCache = Depends(get_notification_cache),
) -> QueryFacade:
    settings = get_settings()
    return QueryFacade(
        NotificationRepository(db),
        cache,
        max_limit=settings.list_max_limit,
        recent_batch_size=settings.recent_batch_size,
        statistics_ttl=settings.statistics_cache_ttl_seconds,
    )


def get_read_state_tracker(
    db: Session = Depends(get_db),
    cache: NotificationCache = Depends(get_notification_cache),
) -> ReadStateTracker:
    return ReadStateTracker(NotificationRepository(db), cache)


def get_delivery_coordinator(
    request: Request,
    db: Session = Depends(get_db),
    cache: NotificationCache = Depends(get_notification_cache),
) -> DeliveryCoordinator:
    state = request.app.state
    return DeliveryCoordinator(
        NotificationRepository(db),
        cache,
        push_sender=state.push_sender,
        push_log=PushDeliveryRepository(db) if state.push_sender is not None else None,
        broadcaster=state.realtime_broadcaster,
        channel_timeout=get_settings().channel_timeout_seconds,
    )
