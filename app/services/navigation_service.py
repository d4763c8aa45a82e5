# app/services/navigation_service.py
from urllib.parse import quote

from app.schemas.auth import AuthContext
from app.schemas.navigation import NavAction, NavigationRead, NavLink, RouteGuardRead

# (href, label, icon)
PRIMARY_LINKS: list[tuple[str, str, str]] = [
    ("/", "Home", "home"),
    ("/report", "Report Issue", "plus-circle"),
    ("/map", "Map", "map"),
    ("/dashboard", "Dashboard", "layout-dashboard"),
    ("/voice-agent", "Voice Agent", "mic"),
    ("/team", "Team", "users"),
]

ADMIN_LINK = ("/admin", "Admin", "shield")

AUTH_LINKS: list[tuple[str, str]] = [
    ("/login", "Login"),
    ("/signup", "Sign Up"),
]

LOGIN_PATH = "/login"
DEFAULT_REDIRECT = "/dashboard"


def build_navigation(pathname: str, auth: AuthContext | None) -> NavigationRead:
    """
    Navigation shell for the current location.

    A primary link is active only on an exact path match.
    Guests get login/sign-up links; signed-in users get logout,
    plus the admin link when their role is admin.
    """
    primary = [
        NavLink(href=href, label=label, icon=icon, active=pathname == href)
        for href, label, icon in PRIMARY_LINKS
    ]

    if auth is None:
        return NavigationRead(
            primary=primary,
            auth_links=[NavLink(href=href, label=label) for href, label in AUTH_LINKS],
            is_authenticated=False,
        )

    admin = None
    if auth.is_admin:
        href, label, icon = ADMIN_LINK
        admin = NavLink(href=href, label=label, icon=icon, active=pathname == href)

    return NavigationRead(
        primary=primary,
        admin=admin,
        logout=NavAction(action="logout", label="Logout", icon="log-out"),
        is_authenticated=True,
    )


def resolve_route_guard(
    pathname: str | None,
    is_authenticated: bool,
    is_loading: bool = False,
    require_auth: bool = True,
) -> RouteGuardRead:
    """
    Decide what a protected page does.

      - auth still loading             -> loading
      - auth required, not signed in   -> redirect to login, remembering the page
      - otherwise                      -> render
    """
    if is_loading:
        return RouteGuardRead(action="loading")

    if require_auth and not is_authenticated:
        target = quote(pathname or DEFAULT_REDIRECT, safe="")
        return RouteGuardRead(action="redirect", redirect_to=f"{LOGIN_PATH}?redirect={target}")

    return RouteGuardRead(action="render")
