"""
Error taxonomy for the dashboard.

OAuth flow errors (ValidationError, AuthenticationFailure, UpstreamError) are
handled by the session controller. Registry errors (ConfigurationError,
ResolutionError) indicate a wiring bug and are fatal at startup.
"""


class DashboardError(Exception):
    """Base class for dashboard errors."""

    pass


class ValidationError(DashboardError):
    """Raised when an OAuth request body cannot be built."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class AuthenticationFailure(DashboardError):
    """Raised when GitLab rejects credentials or the OAuth state does not match."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class UpstreamError(DashboardError):
    """Raised when a call to GitLab fails at the network or protocol level."""

    pass


class ConfigurationError(DashboardError):
    """Raised when the dependency registry is misused during registration."""

    pass


class ResolutionError(DashboardError):
    """Raised when a registry name cannot be resolved."""

    pass


__all__ = [
    "DashboardError",
    "ValidationError",
    "AuthenticationFailure",
    "UpstreamError",
    "ConfigurationError",
    "ResolutionError",
]
