"""Controllers resolved by the routers through the dependency registry."""

from .home_controller import HomeController
from .user_controller import UserController

__all__ = ["HomeController", "UserController"]
