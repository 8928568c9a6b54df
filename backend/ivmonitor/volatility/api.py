"""HTTP routes for reading, refreshing and configuring the monitor."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from ..errors import ConfigError, PersistenceError
from ..logs import RecentLogHandler
from .config import merge_config
from .notifier import MemoryNotificationSink
from .scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


def create_monitor_router(
    scheduler: RefreshScheduler,
    notifications: MemoryNotificationSink | None = None,
    log_handler: RecentLogHandler | None = None,
) -> APIRouter:
    """Create the monitor API router.

    The routes stand in for the messages a display surface or settings page
    would send: GET_IV_DATA is POST /api/iv/refresh and UPDATE_CONFIG is
    PUT /api/config.
    """
    router = APIRouter(prefix="/api", tags=["monitor"])

    @router.get("/iv")
    async def get_iv() -> dict[str, Any]:
        try:
            data = await scheduler.get_snapshot()
        except PersistenceError as e:
            logger.error("Failed to read snapshot: %s", e)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {"data": data}

    @router.post("/iv/refresh")
    async def refresh() -> dict[str, Any]:
        return await scheduler.refresh()

    @router.get("/config")
    async def get_config() -> dict[str, Any]:
        try:
            config = await scheduler.get_config()
        except PersistenceError as e:
            logger.error("Failed to read config: %s", e)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return config.to_dict()

    @router.put("/config")
    async def put_config(update: dict[str, Any] = Body(...)) -> dict[str, Any]:
        try:
            merge_config(await scheduler.get_config(), update)
        except ConfigError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except PersistenceError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        return await scheduler.update_config(update)

    @router.post("/config/reset")
    async def reset_config() -> dict[str, Any]:
        return await scheduler.reset_config()

    @router.get("/notifications")
    async def get_notifications() -> dict[str, Any]:
        items = notifications.recent() if notifications is not None else []
        return {"notifications": [n.to_dict() for n in items]}

    @router.get("/logs")
    async def get_logs() -> dict[str, Any]:
        if log_handler is None:
            return {"logs": [], "errors": []}
        return {"logs": log_handler.records(), "errors": log_handler.errors()}

    return router


def health_payload() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
