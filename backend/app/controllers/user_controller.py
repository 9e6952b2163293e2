"""
User controller: the OAuth session lifecycle.

Session states are derived from the request session:
- Anonymous: no ``loggedIn``
- Authenticating: ``oauthState`` pending, redirect to GitLab issued
- Authenticated: ``loggedIn`` with a token pair
- Expired: token pair present but GitLab rejects it

Every protected page renews the access token first and only then runs the
page action. Failures in the callback or renewal never reach the generic
error handlers; they clear the session and redirect home.
"""

import secrets
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse

from gitlab_dashboard.exceptions import AuthenticationFailure, UpstreamError, ValidationError
from gitlab_dashboard.logging import get_logger
from gitlab_dashboard.services import UserService

from ..views import JSONViewRenderer

logger = get_logger("auth")

Action = Callable[[Request], Awaitable[Response]]

HOME_URL = "/"
PROFILE_URL = "/user/profile"

LOGIN_REQUIRED = "You need to be logged in to access that page."
PLEASE_LOG_IN = "Please log in to continue."
SESSION_EXPIRED = "Your session has expired. Please log in again."


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


def _flash(request: Request, text: str, type_: str = "danger") -> None:
    request.session["flash"] = {"type": type_, "text": text}


class UserController:
    """Login, callback, token renewal, protected pages and logout."""

    STATE_BYTES = 64

    def __init__(self, service: UserService, renderer: JSONViewRenderer):
        self._service = service
        self._renderer = renderer

    # =========================================================================
    # Session helpers
    # =========================================================================

    def _check_authenticated(self, request: Request) -> bool:
        if not request.session.get("loggedIn"):
            _flash(request, LOGIN_REQUIRED)
            return False
        return True

    def _initialize_session(self, request: Request, data: Mapping[str, Any]) -> None:
        """Store a complete token pair or raise without touching the session."""
        access_token = data.get("access_token")
        refresh_token = data.get("refresh_token")
        if not access_token or not refresh_token:
            raise AuthenticationFailure("Token response is missing the token pair")

        request.session["accessToken"] = access_token
        request.session["refreshToken"] = refresh_token
        request.session["loggedIn"] = True

    def _destroy_session(self, request: Request) -> None:
        request.session.clear()

    @staticmethod
    def _token_payload(response) -> Mapping[str, Any]:
        if response.status_code != 200:
            raise AuthenticationFailure("Token endpoint rejected the request", status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise AuthenticationFailure("Token endpoint returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise AuthenticationFailure("Token endpoint returned an unexpected body")
        return data

    # =========================================================================
    # OAuth flow
    # =========================================================================

    async def login(self, request: Request) -> Response:
        """Start the authorization-code flow with a fresh state nonce."""
        state = secrets.token_urlsafe(self.STATE_BYTES)
        request.session["oauthState"] = state
        return _redirect(self._service.authorization_url(state))

    async def callback(self, request: Request) -> Response:
        """
        Handle the GitLab redirect.

        The stored nonce is consumed whatever the outcome, so a state value
        can complete at most one login.
        """
        expected_state = request.session.pop("oauthState", None)
        received_state = request.query_params.get("state")

        if not expected_state or not received_state or not secrets.compare_digest(
            expected_state.encode(), received_state.encode()
        ):
            logger.warning(
                "oauth_state_mismatch",
                has_state=bool(received_state),
                had_pending_state=bool(expected_state),
            )
            self._destroy_session(request)
            return _redirect(HOME_URL)

        try:
            response = await self._service.exchange_code(request.query_params.get("code"))
            data = self._token_payload(response)
            self._initialize_session(request, data)
        except (ValidationError, AuthenticationFailure, UpstreamError) as e:
            logger.warning("token_exchange_failed", error=str(e), error_type=type(e).__name__)
            self._destroy_session(request)
            return _redirect(HOME_URL)

        logger.info("oauth_login_success")
        return _redirect(PROFILE_URL)

    async def renew_access_token(self, request: Request, action: Action) -> Response:
        """
        Refresh the token pair, then run ``action``.

        On any failure the session is cleared and the user is sent home;
        ``action`` is not called.
        """
        if not request.session.get("loggedIn"):
            _flash(request, PLEASE_LOG_IN)
            return _redirect(HOME_URL)

        try:
            response = await self._service.refresh(request.session.get("refreshToken"))
            data = self._token_payload(response)
            self._initialize_session(request, data)
        except (ValidationError, AuthenticationFailure, UpstreamError) as e:
            logger.warning("token_renewal_failed", error=str(e), error_type=type(e).__name__)
            self._destroy_session(request)
            _flash(request, SESSION_EXPIRED)
            return _redirect(HOME_URL)

        return await action(request)

    # =========================================================================
    # Protected pages
    # =========================================================================

    async def _render_protected(
        self,
        request: Request,
        view: str,
        load: Callable[[str], Awaitable[Any]],
        key: str,
    ) -> Response:
        if not self._check_authenticated(request):
            return _redirect(HOME_URL)

        try:
            data = await load(request.session.get("accessToken"))
        except AuthenticationFailure as e:
            logger.warning("protected_fetch_rejected", view=view, status_code=e.status_code)
            self._destroy_session(request)
            _flash(request, SESSION_EXPIRED)
            return _redirect(HOME_URL)

        return self._renderer.render(request, view, {key: data})

    async def profile(self, request: Request) -> Response:
        return await self._render_protected(
            request, "user/profile", self._service.fetch_profile, "viewData"
        )

    async def activities(self, request: Request) -> Response:
        return await self._render_protected(
            request, "user/activities", self._service.fetch_activities, "viewData"
        )

    async def group_projects(self, request: Request) -> Response:
        return await self._render_protected(
            request, "user/groupprojects", self._service.fetch_group_projects, "data"
        )

    # =========================================================================
    # Logout
    # =========================================================================

    async def logout(self, request: Request) -> Response:
        """Revoke the access token and end the session. Always redirects home."""
        access_token = request.session.get("accessToken")
        if not access_token:
            return _redirect(HOME_URL)

        try:
            response = await self._service.revoke(access_token)
            if response.status_code == 200:
                self._destroy_session(request)
                logger.info("logout_success")
            else:
                logger.warning("revoke_rejected", status_code=response.status_code)
        except Exception as e:
            logger.warning("revoke_failed", error=str(e), error_type=type(e).__name__)

        return _redirect(HOME_URL)
