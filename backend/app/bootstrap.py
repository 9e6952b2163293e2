"""
Composition root.

Registers every component with the dependency registry and freezes it.
"""

from typing import Optional

import httpx

from gitlab_dashboard.config import Settings, get_settings
from gitlab_dashboard.container import Container
from gitlab_dashboard.http_client import HttpClient
from gitlab_dashboard.services import UserService

from .controllers import HomeController, UserController
from .views import JSONViewRenderer


def build_container(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Container:
    """
    Build the application registry.

    Args:
        settings: Settings to use instead of the environment-derived ones
        transport: httpx transport for the GitLab client (tests pass a MockTransport)
    """
    settings = settings or get_settings()
    container = Container()

    container.register("Settings", lambda: settings, singleton=True)

    container.register(
        "HttpClient",
        lambda cfg: HttpClient(timeout=cfg.http_timeout, transport=transport),
        dependencies=["Settings"],
        singleton=True,
    )

    container.register(
        "UserService",
        UserService,
        dependencies=["HttpClient", "Settings"],
        singleton=True,
    )

    container.register("ViewRenderer", JSONViewRenderer, singleton=True)

    container.register(
        "HomeController",
        HomeController,
        dependencies=["ViewRenderer"],
        singleton=True,
    )

    container.register(
        "UserController",
        UserController,
        dependencies=["UserService", "ViewRenderer"],
        singleton=True,
    )

    return container.freeze()
