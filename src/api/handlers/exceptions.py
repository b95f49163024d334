from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.responses import JSONResponse

from core.exceptions import BlogException, DatabaseError, map_exception_to_http
from schemas.responses import ErrorResponse

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(BlogException)
    async def blog_exception_handler(request: Request, exc: BlogException) -> JSONResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        if isinstance(exc, DatabaseError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.url.path, http_exc.status_code, exc)
        body = ErrorResponse(
            success=False,
            message=http_exc.detail,
            error={"type": exc.__class__.__name__, "code": exc.code},
        )
        return JSONResponse(status_code=http_exc.status_code, content=body.model_dump(mode="json"))
