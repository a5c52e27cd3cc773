"""Endpoints for registering mobile push tokens."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketnotify.application.use_cases.notifications import (
    register_push_token,
    unregister_all_push_tokens,
    unregister_push_token,
)
from marketnotify.domain.entities import RecipientScope
from marketnotify.infrastructure.database import get_db
from marketnotify.interfaces.api.dependencies import get_current_scope
from marketnotify.interfaces.api.schemas import (
    ApiResponse,
    PushTokenRead,
    PushTokenRegisterRequest,
    PushTokensRemovedData,
    success,
)

router = APIRouter(prefix="/push-tokens", tags=["push-tokens"])


@router.post(
    "",
    response_model=ApiResponse[PushTokenRead],
    status_code=status.HTTP_201_CREATED,
)
def register_token(
    payload: PushTokenRegisterRequest,
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[PushTokenRead]:
    """Register the caller's Expo push token, replacing older tokens."""

    token = register_push_token(
        db, scope=scope, token=payload.token, device_info=payload.device_info
    )
    return success(
        PushTokenRead(
            id=token.id or 0,
            token=token.token,
            is_active=token.is_active,
            device_info=token.device_info,
            last_seen_at=token.last_seen_at,
        ),
        "Push token registered",
    )


@router.delete("/{token}", response_model=ApiResponse[None])
def unregister_token(
    token: str,
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    unregister_push_token(db, scope=scope, token=token)
    return success(message="Push token removed")


@router.delete("", response_model=ApiResponse[PushTokensRemovedData])
def unregister_all_tokens(
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[PushTokensRemovedData]:
    """Deactivate every push token of the caller, used on logout."""

    deactivated = unregister_all_push_tokens(db, scope=scope)
    return success(
        PushTokensRemovedData(deactivated=deactivated), "Push tokens deactivated"
    )
