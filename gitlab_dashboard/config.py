"""
Application configuration using Pydantic settings.

Usage:
    from gitlab_dashboard.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "CHANGE_ME"


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - APP_ID / APP_SECRET (GitLab OAuth application)
        - REDIRECT_URI (must match the OAuth application)
        - SESSION_SECRET (min 32 chars, signs the session cookie)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "GitLab Dashboard"
    env: str = Field(default="development", validation_alias="ENV")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # GitLab OAuth
    gitlab_base_url: str = Field(default="https://gitlab.lnu.se", validation_alias="GITLAB_BASE_URL")
    app_id: str = Field(default="", validation_alias="APP_ID")
    app_secret: str = Field(default="", validation_alias="APP_SECRET")
    redirect_uri: str = Field(default="http://localhost:3000/user/callback", validation_alias="REDIRECT_URI")
    requested_scope: str = Field(default="read_user read_api", validation_alias="REQUESTED_SCOPE")

    # Outbound HTTP
    http_timeout: float = Field(default=10.0, validation_alias="HTTP_TIMEOUT")

    # Activity listing
    activity_per_page: int = Field(default=60)
    activity_pages: int = Field(default=2)

    # Session cookie
    session_secret: str = Field(default=DEFAULT_SESSION_SECRET, validation_alias="SESSION_SECRET")
    session_cookie: str = Field(default="gitlab_dashboard_session")
    session_max_age: int = Field(default=60 * 60 * 24, validation_alias="SESSION_MAX_AGE")

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def base_url(self) -> str:
        """GitLab base URL without a trailing slash."""
        return self.gitlab_base_url.rstrip("/")

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if not self.app_id:
            errors.append("APP_ID is required for OAuth")
        if not self.app_secret:
            errors.append("APP_SECRET is required for OAuth")
        if not self.redirect_uri:
            errors.append("REDIRECT_URI is required for OAuth")

        if self.session_secret == DEFAULT_SESSION_SECRET:
            errors.append("SESSION_SECRET must be set")
        elif len(self.session_secret) < 32:
            warnings.append(
                f"SESSION_SECRET should be at least 32 characters (got {len(self.session_secret)})"
            )

        if self.redirect_uri.startswith("http://") and "localhost" not in self.redirect_uri:
            warnings.append("REDIRECT_URI is not HTTPS - OAuth codes will travel in plaintext")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def is_development() -> bool:
    """Check if running in development mode."""
    settings = get_settings()
    return settings.debug or settings.env.lower() in ("development", "dev")


__all__ = ["Settings", "get_settings", "is_development"]
