from __future__ import annotations

from datetime import datetime
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import DatabaseError
from db.database import check_db_connection, get_db
from db.repositories import post_repository
from schemas.responses import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"], response_model=HealthCheckResponse)
async def health(db: Annotated[AsyncSession, Depends(get_db)]) -> HealthCheckResponse:
    ok = await check_db_connection()
    database: dict[str, Any] = {"connected": ok}
    if ok:
        try:
            database["posts"] = await post_repository.count_posts(db)
        except DatabaseError as e:
            logger.warning("Health check could not count posts: %s", e)
            ok = False
    return HealthCheckResponse(
        success=ok,
        status="ok" if ok else "degraded",
        version=settings.api_version,
        database=database,
    )


@router.get("/api", tags=["Root"])
async def api_root() -> dict[str, Any]:
    return {
        "success": True,
        "message": f"Welcome to {settings.api_title}",
        "version": settings.api_version,
        "docs": "/docs",
        "health": "/health",
        "timestamp": datetime.utcnow().isoformat(),
    }
