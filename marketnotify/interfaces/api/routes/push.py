"""Endpoints for push notification settings and push delivery history."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketnotify.application.use_cases.notifications import (
    get_push_settings,
    list_push_deliveries,
    update_push_settings,
)
from marketnotify.config import get_settings
from marketnotify.domain.entities import PushPreferences, RecipientScope
from marketnotify.infrastructure.database import get_db
from marketnotify.interfaces.api.dependencies import get_current_scope
from marketnotify.interfaces.api.schemas import (
    ApiResponse,
    PaginationRead,
    PushDeliveryHistoryData,
    PushDeliveryRead,
    PushSettingsRead,
    PushSettingsUpdate,
    success,
)

router = APIRouter(prefix="/push", tags=["push"])


def _settings_to_schema(preferences: PushPreferences) -> PushSettingsRead:
    return PushSettingsRead(**preferences.as_dict())


@router.get("/settings", response_model=ApiResponse[PushSettingsRead])
def read_settings(
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[PushSettingsRead]:
    return success(_settings_to_schema(get_push_settings(db, scope=scope)))


@router.put("/settings", response_model=ApiResponse[PushSettingsRead])
def update_settings(
    payload: PushSettingsUpdate,
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[PushSettingsRead]:
    """Update some of the caller's push settings."""

    preferences = update_push_settings(
        db, scope=scope, changes=payload.model_dump(exclude_unset=True)
    )
    return success(_settings_to_schema(preferences), "Notification settings updated")


@router.get("/history", response_model=ApiResponse[PushDeliveryHistoryData])
def read_history(
    page: int = Query(1),
    limit: int = Query(20),
    scope: RecipientScope = Depends(get_current_scope),
    db: Session = Depends(get_db),
) -> ApiResponse[PushDeliveryHistoryData]:
    """Return the caller's push deliveries, newest first."""

    result = list_push_deliveries(
        db,
        scope=scope,
        page=page,
        limit=limit,
        max_limit=get_settings().list_max_limit,
    )
    pagination = result.pagination
    return success(
        PushDeliveryHistoryData(
            deliveries=[
                PushDeliveryRead(
                    id=item.id or 0,
                    title=item.title,
                    body=item.body,
                    status=item.status,
                    detail=item.detail,
                    created_at=item.created_at,
                )
                for item in result.items
            ],
            pagination=PaginationRead(
                current_page=pagination.current_page,
                total_pages=pagination.total_pages,
                total_count=pagination.total_count,
                limit=pagination.limit,
                has_more=pagination.has_more,
            ),
        )
    )
