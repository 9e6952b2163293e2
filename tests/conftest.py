"""
Pytest fixtures for GitLab Dashboard tests.

GitLab is replaced by an httpx.MockTransport so the real HTTP client,
service and controller code paths run without network access.
"""

import json
import os
import sys
from collections.abc import Callable
from typing import Any

import httpx
import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from gitlab_dashboard.config import Settings  # noqa: E402
from gitlab_dashboard.http_client import HttpClient  # noqa: E402
from gitlab_dashboard.services import UserService  # noqa: E402

GITLAB_URL = "https://gitlab.example.com"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeGitLab:
    """Programmable GitLab stand-in that records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Responder]] = {}

    def add(self, method: str, path: str, status_code: int = 200, payload: Any = None) -> None:
        """Queue a JSON response. The last queued response for a route repeats."""
        self.add_handler(method, path, lambda request: httpx.Response(status_code, json=payload))

    def add_handler(self, method: str, path: str, responder: Responder) -> None:
        self._routes.setdefault((method, path), []).append(responder)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responders = self._routes.get((request.method, request.url.path))
        if not responders:
            return httpx.Response(404, json={"message": "404 Not Found"})
        responder = responders.pop(0) if len(responders) > 1 else responders[0]
        return responder(request)

    def reset(self) -> None:
        """Forget queued responses and recorded requests."""
        self.requests.clear()
        self._routes.clear()

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENV="test",
        APP_ID="app-id",
        APP_SECRET="app-secret",
        REDIRECT_URI="http://localhost:3000/user/callback",
        REQUESTED_SCOPE="read_user read_api",
        GITLAB_BASE_URL=GITLAB_URL,
        SESSION_SECRET="s" * 48,
    )


@pytest.fixture
def gitlab() -> FakeGitLab:
    return FakeGitLab()


@pytest.fixture
def http_client(gitlab) -> HttpClient:
    return HttpClient(timeout=5.0, transport=gitlab.transport)


@pytest.fixture
def user_service(http_client, settings) -> UserService:
    return UserService(http_client, settings)


@pytest.fixture
def make_activity() -> Callable[..., dict]:
    """Factory for sample GitLab event payloads."""

    def _make(index: int, created_at: str = "2024-01-01T10:00:00.000Z") -> dict:
        return {
            "id": index,
            "action_name": "pushed to",
            "created_at": created_at,
            "target_title": f"Issue {index}",
            "target_type": "Issue",
            "author_id": 7,
        }

    return _make
