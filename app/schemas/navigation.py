# app/schemas/navigation.py
from typing import Literal

from sqlmodel import SQLModel

GuardAction = Literal["render", "loading", "redirect"]


class NavLink(SQLModel):
    """A single link in the navigation shell."""

    href: str
    label: str
    icon: str | None = None
    active: bool = False


class NavAction(SQLModel):
    """A non-link control (e.g. logout)."""

    action: Literal["logout"]
    label: str
    icon: str | None = None


class NavigationRead(SQLModel):
    """
    Everything the shell renders for a given (path, auth state, role).

      - primary:        fixed link set, one marked active
      - admin:          present only for admins
      - auth_links:     login / sign up, for guests only
      - logout:         present only when authenticated
    """

    primary: list[NavLink]
    admin: NavLink | None = None
    auth_links: list[NavLink] = []
    logout: NavAction | None = None
    is_authenticated: bool


class NavigationResponse(SQLModel):
    success: Literal[True] = True
    data: NavigationRead


class RouteGuardRead(SQLModel):
    action: GuardAction
    redirect_to: str | None = None


class RouteGuardResponse(SQLModel):
    success: Literal[True] = True
    data: RouteGuardRead
