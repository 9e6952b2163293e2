"""
Structured logging configuration for GitLab Dashboard.

OAuth credentials never reach a log sink: every event passes through
``redact_secrets`` before rendering.
"""

import logging
import sys
import time
import uuid
from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog
from starlette.datastructures import Headers
from structlog.types import Processor

REQUEST_ID_HEADER = "X-Request-ID"

# Event keys whose values are OAuth credentials
SENSITIVE_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "token",
        "code",
        "client_secret",
        "accessToken",
        "refreshToken",
    }
)
REDACTED = "[REDACTED]"


def _add_app_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]:
    event_dict["app"] = "gitlab_dashboard"
    return event_dict


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values, including inside nested dicts such as token bodies."""
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = redact_secrets(logger, method_name, dict(value))
    return event_dict


def get_processors() -> list[Processor]:
    """Console output in development, JSON lines everywhere else."""
    from .config import is_development

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_app_context,
        redact_secrets,
    ]

    if is_development():
        return shared_processors + [
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        ]
    return shared_processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog on top of the stdlib root logger.

    Safe to call again: the root level is always updated, so an app created
    with ``DEBUG=true`` lowers it even after import-time loggers configured
    the defaults.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


# =============================================================================
# ASGI Integration
# =============================================================================


class RequestLoggingMiddleware:
    """
    Per-request id and access log.

    The id comes from the ``X-Request-ID`` header or is generated. It is
    stored in ``scope["state"]`` for exception handlers running outside this
    middleware, bound to the structlog context for everything logged while
    the request runs, and echoed on the response.
    """

    def __init__(self, app):
        self.app = app
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if self._logger is None:
            self._logger = get_logger("http")
        return self._logger

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        bind_context(request_id=request_id)

        path = scope.get("path", "")
        method = scope.get("method", "")
        start_time = time.perf_counter()
        status_code = 500

        self.logger.info("request_started", method=method, path=path)

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                message.setdefault("headers", []).append(
                    (REQUEST_ID_HEADER.lower().encode(), request_id.encode())
                )
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            self.logger.error("request_failed", method=method, path=path, error_type=type(e).__name__)
            raise
        finally:
            duration = time.perf_counter() - start_time
            if status_code >= 500:
                log_method = self.logger.error
            elif status_code >= 400:
                log_method = self.logger.warning
            else:
                log_method = self.logger.info

            log_method(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_seconds=round(duration, 3),
            )
            clear_context()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "redact_secrets",
    "RequestLoggingMiddleware",
]
