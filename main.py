import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketnotify.config import get_settings
from marketnotify.infrastructure.cache import NotificationCache
from marketnotify.infrastructure.database import (
    SessionLocal,
    detect_store_capabilities,
    engine,
    initialize_database,
)
from marketnotify.infrastructure.notifications import (
    ExpoPushSender,
    NotificationConnectionManager,
    WebSocketBroadcaster,
)
from marketnotify.interfaces.api.errors import register_exception_handlers
from marketnotify.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and delivery channels, release them on shutdown."""

    settings = get_settings()
    initialize_database()
    capabilities = detect_store_capabilities()

    connection_manager = NotificationConnectionManager()
    app.state.store_capabilities = capabilities
    app.state.notification_cache = NotificationCache(settings.notification_cache_ttl_seconds)
    app.state.connection_manager = connection_manager
    app.state.realtime_broadcaster = WebSocketBroadcaster(connection_manager)

    http_client = httpx.AsyncClient(timeout=settings.channel_timeout_seconds)
    app.state.push_sender = None
    if settings.push_enabled and capabilities.push_tokens:
        app.state.push_sender = ExpoPushSender(
            http_client,
            SessionLocal,
            push_url=settings.expo_push_url,
            access_token=settings.expo_access_token,
        )
    elif settings.push_enabled:
        logger.warning("Push is enabled but the push token table is missing; push disabled")

    try:
        yield
    finally:
        await connection_manager.close_all()
        await http_client.aclose()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="marketnotify", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
