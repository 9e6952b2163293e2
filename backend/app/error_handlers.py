"""
Custom exception handlers for FastAPI.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Generic error messages for upstream and 500 errors so GitLab error bodies
  and stack traces never reach the browser
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gitlab_dashboard.exceptions import UpstreamError
from gitlab_dashboard.logging import get_logger

logger = get_logger("backend.errors")


def _get_request_id(request: Request) -> str:
    """
    Get the request ID for server-side logging only - NOT exposed to clients.

    The generic handler runs outside the logging middleware, after the
    structlog context is cleared, so the id stored on the request wins.
    """
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    return {
        "detail": detail,
        "status_code": status_code,
    }


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            path=request.url.path,
            request_id=_get_request_id(request),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
        )

    @app.exception_handler(UpstreamError)
    async def upstream_exception_handler(request: Request, exc: UpstreamError):
        logger.error(
            "upstream_error",
            error=str(exc),
            path=request.url.path,
            request_id=_get_request_id(request),
        )
        return JSONResponse(
            status_code=502,
            content=_response_payload("GitLab is unavailable, please try again later", 502),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(request),
        )
        return JSONResponse(
            status_code=500,
            content=_response_payload("Internal server error", 500),
        )
