"""
User routes.

Protected pages renew the access token before the page action runs.
"""

from fastapi import APIRouter, Request

from ..controllers import UserController

router = APIRouter(prefix="/user", tags=["user"])


def resolve_user_controller(request: Request) -> UserController:
    """Resolve the UserController from the application registry."""
    return request.app.state.container.resolve("UserController")


@router.get("/login")
async def login(request: Request):
    """Redirect to GitLab for authorization."""
    return await resolve_user_controller(request).login(request)


@router.get("/callback")
async def callback(request: Request):
    """Complete the OAuth flow."""
    return await resolve_user_controller(request).callback(request)


@router.get("/profile")
async def profile(request: Request):
    controller = resolve_user_controller(request)
    return await controller.renew_access_token(request, controller.profile)


@router.get("/activities")
async def activities(request: Request):
    controller = resolve_user_controller(request)
    return await controller.renew_access_token(request, controller.activities)


@router.get("/groupprojects")
async def group_projects(request: Request):
    controller = resolve_user_controller(request)
    return await controller.renew_access_token(request, controller.group_projects)


@router.get("/logout")
async def logout(request: Request):
    return await resolve_user_controller(request).logout(request)
