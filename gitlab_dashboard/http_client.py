"""
Async HTTP client for the GitLab REST and GraphQL APIs.

Features:
- Shared httpx.AsyncClient with connection pooling
- Bounded timeout on every request
- Network failures surfaced as UpstreamError
"""

from typing import Any, Dict, Optional

import httpx

from .exceptions import UpstreamError
from .logging import get_logger

logger = get_logger("gitlab")


class HttpClient:
    """
    Thin wrapper around httpx.AsyncClient.

    Responses are returned as-is; callers decide how to interpret status
    codes. Only transport-level failures raise.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _perform(self, method: str, uri: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, uri, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("upstream_timeout", method=method, uri=uri, timeout=self.timeout)
            raise UpstreamError(f"Request to {uri} timed out") from e
        except httpx.HTTPError as e:
            logger.error("upstream_request_failed", method=method, uri=uri, error_type=type(e).__name__)
            raise UpstreamError(f"Request to {uri} failed: {e}") from e

    async def get(self, uri: str, token: str | None = None) -> httpx.Response:
        """GET with an optional bearer token."""
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return await self._perform("GET", uri, headers=headers)

    async def post(self, uri: str, body: Dict[str, Any]) -> httpx.Response:
        """POST a JSON body."""
        return await self._perform("POST", uri, json=body)

    async def graphql(
        self,
        endpoint: str,
        token: str | None,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Returns:
            The ``data`` object of the response

        Raises:
            UpstreamError: On transport failure, non-200 status, a body that is
                not a JSON object, or GraphQL errors
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = await self._perform(
            "POST",
            endpoint,
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )

        if response.status_code != 200:
            logger.error("graphql_request_failed", status_code=response.status_code)
            raise UpstreamError(f"GraphQL request failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("graphql_invalid_body", content_type=response.headers.get("content-type"))
            raise UpstreamError("GraphQL response was not JSON") from e
        if not isinstance(payload, dict):
            logger.error("graphql_invalid_body", payload_type=type(payload).__name__)
            raise UpstreamError("GraphQL response was not an object")

        if payload.get("errors"):
            logger.warning("graphql_errors", error_count=len(payload["errors"]))
            raise UpstreamError("GraphQL response contained errors")

        return payload.get("data") or {}


__all__ = ["HttpClient"]
