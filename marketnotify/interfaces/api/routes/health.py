from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    state = request.app.state
    return {
        "status": "success",
        "data": {
            "cache": state.notification_cache.stats(),
            "capabilities": {"push_tokens": state.store_capabilities.push_tokens},
            "push_enabled": state.push_sender is not None,
            "realtime_connections": state.connection_manager.connection_count(),
        },
    }
