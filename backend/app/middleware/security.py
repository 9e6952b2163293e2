from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from gitlab_dashboard.config import Settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    Headers added:
    - X-Frame-Options: DENY (Prevents clickjacking)
    - X-Content-Type-Options: nosniff (Prevents MIME sniffing)
    - Referrer-Policy: same-origin (keeps OAuth codes out of third-party referrers)
    - Strict-Transport-Security: (In production only)
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.is_production = settings.is_production

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "same-origin"

        if self.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
