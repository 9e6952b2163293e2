"""
GitLab user service.

Shapes OAuth request bodies and performs the remote calls behind the
session controller: token exchange, token refresh, revocation, and the
profile, activity and group-project reads.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Dict, List
from urllib.parse import urlencode

import httpx

from ..config import Settings
from ..exceptions import AuthenticationFailure, ValidationError
from ..http_client import HttpClient
from ..logging import get_logger
from ..queries import GROUP_PROJECTS_QUERY

logger = get_logger("user_service")

AUTHORIZATION_CODE = "authorization_code"
REFRESH_TOKEN = "refresh_token"

# Remote profile key -> profile record key
PROFILE_FIELDS = {
    "id": "id",
    "username": "username",
    "name": "name",
    "state": "state",
    "avatar_url": "avatar",
    "bio": "bio",
    "last_activity_on": "last_activity_on",
    "email": "email",
}


class UserService:
    """Talks to GitLab on behalf of the signed-in user."""

    def __init__(self, http_client: HttpClient, settings: Settings):
        self.http = http_client
        self.settings = settings

    @property
    def token_url(self) -> str:
        return f"{self.settings.base_url}/oauth/token"

    @property
    def revoke_url(self) -> str:
        return f"{self.settings.base_url}/oauth/revoke"

    def authorization_url(self, state: str) -> str:
        """Build the GitLab authorize URL for the given state nonce."""
        params = {
            "client_id": self.settings.app_id,
            "redirect_uri": self.settings.redirect_uri,
            "response_type": "code",
            "scope": self.settings.requested_scope,
            "state": state,
        }
        return f"{self.settings.base_url}/oauth/authorize?{urlencode(params)}"

    def build_token_request_body(self, kind: str, source: Mapping[str, Any]) -> Dict[str, str]:
        """
        Construct the body for a token endpoint request.

        Args:
            kind: ``authorization_code`` or ``refresh_token``
            source: Mapping holding ``code`` or ``refreshToken``

        Raises:
            ValidationError: If the grant's credential is missing
        """
        body = {
            "client_id": self.settings.app_id,
            "client_secret": self.settings.app_secret,
            "redirect_uri": self.settings.redirect_uri,
            "grant_type": kind,
        }

        if kind == AUTHORIZATION_CODE:
            code = source.get("code")
            if not code:
                raise ValidationError("missing_code")
            body["code"] = code
        elif kind == REFRESH_TOKEN:
            refresh_token = source.get("refreshToken")
            if not refresh_token:
                raise ValidationError("missing_refresh_token")
            body["refresh_token"] = refresh_token
        else:
            raise ValidationError("unsupported_grant_type")

        return body

    async def exchange_code(self, code: str | None) -> httpx.Response:
        """Exchange an authorization code for a token pair. Status is not interpreted."""
        body = self.build_token_request_body(AUTHORIZATION_CODE, {"code": code})
        return await self.http.post(self.token_url, body)

    async def refresh(self, refresh_token: str | None) -> httpx.Response:
        """Mint a new token pair from a refresh token. Status is not interpreted."""
        body = self.build_token_request_body(REFRESH_TOKEN, {"refreshToken": refresh_token})
        return await self.http.post(self.token_url, body)

    async def revoke(self, access_token: str) -> httpx.Response:
        """Revoke an access token."""
        body = {
            "client_id": self.settings.app_id,
            "client_secret": self.settings.app_secret,
            "token": access_token,
        }
        return await self.http.post(self.revoke_url, body)

    async def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        """
        Fetch the current user's profile.

        Raises:
            AuthenticationFailure: If GitLab does not answer 200
        """
        response = await self.http.get(f"{self.settings.base_url}/api/v4/user", access_token)
        if response.status_code != 200:
            raise AuthenticationFailure("Profile request rejected", status_code=response.status_code)
        return self._map_profile(response.json())

    async def fetch_activities(self, access_token: str) -> List[Dict[str, Any]]:
        """
        Fetch the user's recent events across a fixed number of pages.

        Pages are requested concurrently and concatenated in page order. A page
        whose body is not a JSON array contributes nothing, and so does any
        item in it that is not an object.
        """
        per_page = self.settings.activity_per_page
        pages = range(1, self.settings.activity_pages + 1)

        results = await asyncio.gather(
            *(self._fetch_activity_page(access_token, page, per_page) for page in pages)
        )

        activities = []
        for page, page_items in zip(pages, results):
            for activity in page_items:
                if not isinstance(activity, Mapping):
                    logger.warning("activity_skipped", page=page, item_type=type(activity).__name__)
                    continue
                activities.append(self._map_activity(activity))

        return activities

    async def _fetch_activity_page(self, access_token: str, page: int, per_page: int) -> List[Any]:
        uri = f"{self.settings.base_url}/api/v4/events?per_page={per_page}&page={page}"
        response = await self.http.get(uri, access_token)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, list):
            logger.warning(
                "activities_page_skipped",
                page=page,
                status_code=response.status_code,
                payload_type=type(data).__name__,
            )
            return []
        return data

    async def fetch_group_projects(self, access_token: str) -> Dict[str, Any]:
        """Run the group-projects GraphQL query and return its data unchanged."""
        return await self.http.graphql(
            f"{self.settings.base_url}/api/graphql",
            access_token,
            GROUP_PROJECTS_QUERY,
        )

    @staticmethod
    def _map_activity(activity: Mapping[str, Any]) -> Dict[str, Any]:
        created_at = activity.get("created_at") or ""
        return {
            "action_name": activity.get("action_name"),
            "created_at": created_at[:19].replace("T", " "),
            "target_title": activity.get("target_title"),
            "target_type": activity.get("target_type"),
        }

    @staticmethod
    def _map_profile(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            record_key: data[remote_key]
            for remote_key, record_key in PROFILE_FIELDS.items()
            if remote_key in data
        }


__all__ = ["UserService", "AUTHORIZATION_CODE", "REFRESH_TOKEN"]
