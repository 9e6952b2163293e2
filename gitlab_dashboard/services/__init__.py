"""Services that talk to GitLab."""

from .user_service import UserService

__all__ = ["UserService"]
