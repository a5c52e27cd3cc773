"""Endpoints and websocket handler for recipient notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from marketnotify.application.use_cases.notifications import (
    DeliveryCoordinator,
    QueryFacade,
    ReadStateTracker,
)
from marketnotify.domain.entities import (
    ChannelOutcome,
    DispatchResult,
    Notification,
    NotificationFilter,
    NotificationPage,
    NotificationStatistics,
    RecipientScope,
)
from marketnotify.domain.errors import ValidationError
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.infrastructure.database import SessionLocal
from marketnotify.infrastructure.notifications import serialize_notification
from marketnotify.infrastructure.repositories import NotificationRepository
from marketnotify.interfaces.api.dependencies import (
    get_current_scope,
    get_delivery_coordinator,
    get_query_facade,
    get_read_state_tracker,
    require_admin,
    resolve_recipient_scope,
)
from marketnotify.interfaces.api.schemas import (
    ApiResponse,
    ChannelOutcomeRead,
    DispatchResultRead,
    MarkAllReadData,
    NotificationDispatchRequest,
    NotificationHistoryData,
    NotificationListData,
    NotificationRead,
    NotificationStatisticsRead,
    PaginationRead,
    RecentNotificationsData,
    UnreadCountData,
    success,
)
from marketnotify.utils import from_epoch_millis, to_epoch_millis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        title=notification.title,
        message=notification.message,
        is_read=notification.is_read,
        role=notification.recipient_role,
        created_at=notification.created_at,
        created_at_ms=to_epoch_millis(notification.created_at),
    )


def _page_to_schema(page: NotificationPage) -> NotificationListData:
    pagination = page.pagination
    return NotificationListData(
        notifications=[_notification_to_schema(item) for item in page.items],
        pagination=PaginationRead(
            current_page=pagination.current_page,
            total_pages=pagination.total_pages,
            total_count=pagination.total_count,
            limit=pagination.limit,
            has_more=pagination.has_more,
        ),
    )


def _statistics_to_schema(statistics: NotificationStatistics) -> NotificationStatisticsRead:
    categories = statistics.categories
    return NotificationStatisticsRead(
        total=statistics.total,
        unread=statistics.unread,
        booking_notifications=categories.get("booking", 0),
        rating_notifications=categories.get("rating", 0),
        report_notifications=categories.get("report", 0),
        welcome_notifications=categories.get("welcome", 0),
    )


def _outcome_to_schema(outcome: ChannelOutcome) -> ChannelOutcomeRead:
    return ChannelOutcomeRead(
        channel=outcome.channel, status=outcome.status.value, detail=outcome.detail
    )


def _dispatch_to_schema(result: DispatchResult) -> DispatchResultRead:
    return DispatchResultRead(
        notification=_notification_to_schema(result.stored),
        push=_outcome_to_schema(result.push),
        realtime=_outcome_to_schema(result.realtime),
    )


def _parse_since(raw: str) -> datetime:
    try:
        millis = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("since must be an epoch timestamp in milliseconds") from exc
    if millis < 0:
        raise ValidationError("since must not be negative")
    try:
        return from_epoch_millis(millis)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValidationError("since is out of range") from exc


@router.get("", response_model=ApiResponse[NotificationListData])
def list_notifications(
    page: int = Query(1),
    limit: int = Query(20),
    type: str | None = Query(None),
    scope: RecipientScope = Depends(get_current_scope),
    queries: QueryFacade = Depends(get_query_facade),
) -> ApiResponse[NotificationListData]:
    """Return a page of notifications for the authenticated scope, newest first."""

    result = queries.list_notifications(scope, page=page, limit=limit, type_filter=type)
    return success(_page_to_schema(result))


@router.get("/unread-count", response_model=ApiResponse[UnreadCountData])
def unread_count(
    scope: RecipientScope = Depends(get_current_scope),
    queries: QueryFacade = Depends(get_query_facade),
) -> ApiResponse[UnreadCountData]:
    return success(UnreadCountData(unread_count=queries.unread_count(scope)))


@router.put("/mark-all-read", response_model=ApiResponse[MarkAllReadData])
def mark_all_read(
    scope: RecipientScope = Depends(get_current_scope),
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
) -> ApiResponse[MarkAllReadData]:
    updated = tracker.mark_all_read(scope)
    return success(MarkAllReadData(updated=updated), "All notifications marked as read")


@router.get("/history", response_model=ApiResponse[NotificationHistoryData])
def notification_history(
    page: int = Query(1),
    limit: int = Query(50),
    type: str | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    read_status: str | None = Query(None, alias="readStatus"),
    scope: RecipientScope = Depends(get_current_scope),
    queries: QueryFacade = Depends(get_query_facade),
) -> ApiResponse[NotificationHistoryData]:
    """Return filtered notifications together with per-category statistics."""

    history = queries.history(
        scope,
        page=page,
        limit=limit,
        type_filter=type,
        date_from=date_from,
        date_to=date_to,
        read_status=read_status,
    )
    listing = _page_to_schema(history.page)
    return success(
        NotificationHistoryData(
            notifications=listing.notifications,
            pagination=listing.pagination,
            statistics=_statistics_to_schema(history.statistics),
        )
    )


@router.get("/recent", response_model=ApiResponse[RecentNotificationsData])
def recent_notifications(
    since: str = Query("0"),
    since_id: int | None = Query(None, alias="sinceId"),
    scope: RecipientScope = Depends(get_current_scope),
    queries: QueryFacade = Depends(get_query_facade),
) -> ApiResponse[RecentNotificationsData]:
    """Polling endpoint: notifications created after the ``since`` cursor.

    Clients poll this frequently, so store failures degrade to an empty feed
    instead of an error.
    """

    since_at = _parse_since(since)
    try:
        feed = queries.recent_since(scope, since_at, since_id=since_id)
    except Exception:
        logger.exception("Recent notifications failed for %s, returning empty feed", scope)
        return success(
            RecentNotificationsData(
                notifications=[],
                count=0,
                since=since,
                next_since=to_epoch_millis(since_at),
                next_since_id=since_id,
            )
        )
    return success(
        RecentNotificationsData(
            notifications=[_notification_to_schema(item) for item in feed.items],
            count=feed.count,
            since=since,
            next_since=to_epoch_millis(feed.next_cursor.since),
            next_since_id=feed.next_cursor.since_id,
        )
    )


@router.post(
    "",
    response_model=ApiResponse[DispatchResultRead],
    status_code=status.HTTP_201_CREATED,
)
async def dispatch_notification(
    payload: NotificationDispatchRequest,
    _: RecipientScope = Depends(require_admin),
    coordinator: DeliveryCoordinator = Depends(get_delivery_coordinator),
) -> ApiResponse[DispatchResultRead]:
    """Record a notification for a recipient scope and fan it out."""

    result = await coordinator.dispatch(
        payload.recipient_id, payload.recipient_role, payload.title, payload.message
    )
    return success(_dispatch_to_schema(result), "Notification dispatched")


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated scope."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        scope = resolve_recipient_scope(token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    try:
        pending = await run_in_threadpool(_load_unread, scope)
    except Exception:
        logger.exception("Could not load pending notifications for %s", scope)
        await websocket.close(code=1011)
        return

    manager = websocket.app.state.connection_manager
    await manager.connect(scope, websocket)
    try:
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(n) for n in pending]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    valid_ids = [value for value in ids if isinstance(value, int)]
                    await run_in_threadpool(
                        _acknowledge, scope, valid_ids, websocket.app.state.notification_cache
                    )
                continue
    except WebSocketDisconnect:
        manager.disconnect(scope, websocket)
    except Exception:
        manager.disconnect(scope, websocket)
        raise


def _load_unread(scope: RecipientScope) -> list[Notification]:
    session = SessionLocal()
    try:
        return NotificationRepository(session).query(
            NotificationFilter(scope=scope, is_read=False), limit=50
        )
    finally:
        session.close()


def _acknowledge(scope: RecipientScope, ids: list[int], cache: NotificationCache) -> None:
    session = SessionLocal()
    try:
        ReadStateTracker(NotificationRepository(session), cache).mark_many_read(ids, scope)
    finally:
        session.close()


@router.get("/{notification_id}", response_model=ApiResponse[NotificationRead])
def get_notification(
    notification_id: int,
    scope: RecipientScope = Depends(get_current_scope),
    queries: QueryFacade = Depends(get_query_facade),
) -> ApiResponse[NotificationRead]:
    return success(_notification_to_schema(queries.get_notification(scope, notification_id)))


@router.put("/{notification_id}/mark-read", response_model=ApiResponse[None])
def mark_notification_read(
    notification_id: int,
    scope: RecipientScope = Depends(get_current_scope),
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
) -> ApiResponse[None]:
    """Mark one notification read; unknown ids succeed without effect."""

    tracker.mark_read(notification_id, scope)
    return success(message="Notification marked as read")
