"""
Home controller.
"""

from fastapi import Request, Response

from ..views import JSONViewRenderer


class HomeController:
    """Landing page."""

    def __init__(self, renderer: JSONViewRenderer):
        self._renderer = renderer

    async def index(self, request: Request) -> Response:
        """Render the landing page and consume any pending flash message."""
        return self._renderer.render(
            request,
            "home/index",
            {
                "isLoggedIn": bool(request.session.get("loggedIn")),
                "flash": request.session.pop("flash", None),
            },
        )
