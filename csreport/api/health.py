"""Health endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check(request: Request) -> dict[str, Any]:
    """Report core dependency health."""
    mongodb_status = "disconnected"

    db = getattr(request.app.state, "mongo_db", None)
    if db is not None:
        try:
            await db.command("ping")
            mongodb_status = "connected"
        except Exception:  # noqa: BLE001
            mongodb_status = "disconnected"

    overall = "healthy" if mongodb_status == "connected" else "unhealthy"
    return {
        "status": overall,
        "mongodb": mongodb_status,
    }
