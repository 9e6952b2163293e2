import asyncio

import httpx
import pytest

from gitlab_dashboard.exceptions import UpstreamError
from gitlab_dashboard.http_client import HttpClient

GITLAB_URL = "https://gitlab.example.com"


def test_get_sends_bearer_token(http_client, gitlab):
    gitlab.add("GET", "/api/v4/user", 200, {"id": 1})

    response = asyncio.run(http_client.get(f"{GITLAB_URL}/api/v4/user", "tok"))

    assert response.status_code == 200
    assert gitlab.requests[0].headers["Authorization"] == "Bearer tok"


def test_post_sends_json_body(http_client, gitlab):
    gitlab.add("POST", "/oauth/token", 401, {"error": "invalid_grant"})

    response = asyncio.run(http_client.post(f"{GITLAB_URL}/oauth/token", {"grant_type": "x"}))

    # Status codes are returned, not raised
    assert response.status_code == 401
    assert gitlab.body(gitlab.requests[0]) == {"grant_type": "x"}
    assert "Authorization" not in gitlab.requests[0].headers


def test_timeout_raises_upstream_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = HttpClient(timeout=0.1, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError, match="timed out"):
        asyncio.run(client.get(f"{GITLAB_URL}/api/v4/user", "tok"))


def test_connection_error_raises_upstream_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = HttpClient(transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError):
        asyncio.run(client.post(f"{GITLAB_URL}/oauth/revoke", {}))


def test_graphql_returns_data(http_client, gitlab):
    gitlab.add("POST", "/api/graphql", 200, {"data": {"currentUser": {"groups": {"nodes": []}}}})

    data = asyncio.run(http_client.graphql(f"{GITLAB_URL}/api/graphql", "tok", "query { currentUser { id } }"))

    assert data == {"currentUser": {"groups": {"nodes": []}}}
    request = gitlab.requests[0]
    assert request.headers["Authorization"] == "Bearer tok"
    assert gitlab.body(request)["query"] == "query { currentUser { id } }"


def test_graphql_errors_raise(http_client, gitlab):
    gitlab.add("POST", "/api/graphql", 200, {"errors": [{"message": "boom"}], "data": None})

    with pytest.raises(UpstreamError):
        asyncio.run(http_client.graphql(f"{GITLAB_URL}/api/graphql", "tok", "query { x }"))


def test_graphql_non_200_raises(http_client, gitlab):
    gitlab.add("POST", "/api/graphql", 401, {"message": "401 Unauthorized"})

    with pytest.raises(UpstreamError):
        asyncio.run(http_client.graphql(f"{GITLAB_URL}/api/graphql", "tok", "query { x }"))


def test_graphql_html_body_raises(http_client, gitlab):
    gitlab.add_handler("POST", "/api/graphql", lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(UpstreamError, match="not JSON"):
        asyncio.run(http_client.graphql(f"{GITLAB_URL}/api/graphql", "tok", "query { x }"))


@pytest.mark.parametrize("payload", [[{"data": {}}], "ok", 42])
def test_graphql_non_object_body_raises(http_client, gitlab, payload):
    gitlab.add("POST", "/api/graphql", 200, payload)

    with pytest.raises(UpstreamError, match="not an object"):
        asyncio.run(http_client.graphql(f"{GITLAB_URL}/api/graphql", "tok", "query { x }"))
