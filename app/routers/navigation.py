# app/routers/navigation.py
from fastapi import APIRouter, Depends

from app.core.auth import get_auth_context
from app.schemas.auth import AuthContext
from app.schemas.navigation import NavigationResponse, RouteGuardResponse
from app.services.navigation_service import build_navigation, resolve_route_guard

router = APIRouter(prefix="/navigation", tags=["Navigation"])


@router.get("", response_model=NavigationResponse)
def read_navigation(
    path: str = "/",
    auth: AuthContext | None = Depends(get_auth_context),
):
    """
    Navigation shell for `path`.

    Public endpoint: guests get login/sign-up links.
    """
    return NavigationResponse(data=build_navigation(path, auth))


@router.get("/guard", response_model=RouteGuardResponse)
def read_route_guard(
    path: str = "/dashboard",
    require_auth: bool = True,
    auth: AuthContext | None = Depends(get_auth_context),
):
    """
    Whether a page at `path` can render for the caller, or where to
    redirect them.
    """
    return RouteGuardResponse(
        data=resolve_route_guard(path, is_authenticated=auth is not None, require_auth=require_auth)
    )
