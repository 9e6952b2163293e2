"""
Home routes.
"""

from fastapi import APIRouter, Request

from ..controllers import HomeController

router = APIRouter(tags=["home"])


def resolve_home_controller(request: Request) -> HomeController:
    """Resolve the HomeController from the application registry."""
    return request.app.state.container.resolve("HomeController")


@router.get("/")
async def index(request: Request):
    return await resolve_home_controller(request).index(request)
