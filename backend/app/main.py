"""
FastAPI application entry point.

Uses structured logging from gitlab_dashboard.logging and wires controllers
through the dependency registry built in bootstrap.py.

Run with:
    uvicorn backend.app.main:create_app --factory
"""

from typing import Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from gitlab_dashboard.config import Settings
from gitlab_dashboard.container import Container
from gitlab_dashboard.exceptions import ConfigurationError
from gitlab_dashboard.http_client import HttpClient
from gitlab_dashboard.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .bootstrap import build_container
from .error_handlers import register_exception_handlers
from .middleware.security import SecurityHeadersMiddleware
from .routers import home as home_router
from .routers import user as user_router

logger = get_logger("api")

# Components resolved at startup so wiring mistakes fail fast
EAGER_COMPONENTS = ("HomeController", "UserController")


def validate_config_on_startup(settings: Settings) -> None:
    """Log configuration warnings; configuration errors are fatal in production."""
    errors, warnings = settings.validate_production_config()
    for warning in warnings:
        logger.warning("config_warning", message=warning)

    if not errors:
        logger.info("config_validation_passed")
        return

    for error in errors:
        logger.error("config_error", error=error)

    if settings.is_production:
        raise ConfigurationError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))
    logger.warning("config_validation_skipped", message="Configuration errors ignored outside production")


def create_app(container: Optional[Container] = None) -> FastAPI:
    container = container or build_container()
    settings: Settings = container.resolve("Settings")

    configure_logging(level="DEBUG" if settings.debug else "INFO")

    for name in EAGER_COMPONENTS:
        container.resolve(name)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.container = container

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    # Outermost user middleware so the request id is bound for everything below
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("app_startup", app_name=settings.app_name, gitlab=settings.base_url)
        validate_config_on_startup(settings)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")
        for name, instance in container.instances():
            if isinstance(instance, HttpClient):
                await instance.aclose()
                logger.info("http_client_closed", component=name)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    app.include_router(home_router.router)
    app.include_router(user_router.router)

    return app

