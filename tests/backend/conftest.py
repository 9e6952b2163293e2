from collections.abc import Iterator
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from backend.app.bootstrap import build_container
from backend.app.main import create_app


@pytest.fixture
def test_app_client(settings, gitlab) -> Iterator[TestClient]:
    container = build_container(settings, transport=gitlab.transport)
    app = create_app(container)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def logged_in_client(test_app_client, gitlab) -> TestClient:
    """A client that completed the OAuth flow with tokens access-1/refresh-1."""
    gitlab.add("POST", "/oauth/token", 200, {"access_token": "access-1", "refresh_token": "refresh-1"})

    resp = test_app_client.get("/user/login", follow_redirects=False)
    state = parse_qs(urlparse(resp.headers["location"]).query)["state"][0]
    resp = test_app_client.get(
        "/user/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "/user/profile"

    gitlab.reset()
    return test_app_client


def home(client: TestClient) -> dict:
    """Fetch the landing view, which reports login state and consumes the flash."""
    resp = client.get("/")
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture
def get_home():
    return home
