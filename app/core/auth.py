# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from app.core.config import get_settings
from app.core.supabase_client import supabase_public
from app.schemas.auth import AuthContext

settings = get_settings()
logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)

UNAUTHORIZED = "Unauthorized"


def _unauthorized() -> HTTPException:
    # Every auth failure looks the same to the client.
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - with SUPABASE_JWT_SECRET: signature (HS256 by default) and
        expiration (exp) are checked locally; audience is NOT verified
        (Supabase 'aud' may vary)
      - otherwise the token is sent to Supabase Auth (`auth.get_user`)

    Args:
        token: raw JWT from the Authorization header or auth cookie.

    Returns:
        Decoded JWT claims (at least `sub`, `email`, `app_metadata`).

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    if settings.SUPABASE_JWT_SECRET:
        try:
            return jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=[settings.SUPABASE_JWT_ALG],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.info("Rejected access token: %s", e)
            raise _unauthorized()

    try:
        response = supabase_public().auth.get_user(token)
    except Exception as e:
        logger.info("Supabase rejected access token: %s", e)
        raise _unauthorized()

    if response is None or response.user is None:
        raise _unauthorized()

    user = response.user
    return {
        "sub": user.id,
        "email": user.email,
        "app_metadata": user.app_metadata or {},
    }


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """Bearer header first, then the auth cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME) or None


def _role_from_claims(claims: dict[str, Any]) -> str:
    """
    Application role lives in `app_metadata.role` (set server-side only).
    The top-level `role` claim is Supabase's Postgres role, not ours.
    """
    app_metadata = claims.get("app_metadata") or {}
    role = app_metadata.get("role") or claims.get("user_role") or "user"
    return "admin" if role == "admin" else "user"


def context_from_claims(claims: dict[str, Any]) -> AuthContext:
    """
    Build the explicit auth context handed to services.

    Raises:
        HTTPException(401): if required claims are missing or malformed.
    """
    sub = claims.get("sub")
    email = claims.get("email")

    if not sub or not email:
        raise _unauthorized()

    # Supabase provides sub as a string; enforce UUID
    try:
        user_id = uuid.UUID(str(sub))
    except ValueError:
        raise _unauthorized()

    return AuthContext(user_id=user_id, email=email, role=_role_from_claims(claims))


def get_auth_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthContext | None:
    """
    Resolve the caller's identity from the request.

    Flow:
      1. No token => guest => return None.
      2. Verify token => claims.
      3. Build AuthContext from `sub`, `email`, `app_metadata.role`.

    No database access happens here.
    """
    token = _extract_token(request, credentials)
    if token is None:
        return None  # guest mode

    return context_from_claims(decode_access_token(token))


def require_auth(auth: AuthContext | None = Depends(get_auth_context)) -> AuthContext:
    """
    Enforce authentication.

    Declare this dependency before `get_session` on a route so guests
    are rejected before a DB session is opened.

    Raises:
        HTTPException(401): if the caller is a guest.
    """
    if auth is None:
        raise _unauthorized()
    return auth


def require_admin(auth: AuthContext = Depends(require_auth)) -> AuthContext:
    """
    Enforce admin role (`app_metadata.role == "admin"`).

    Raises:
        HTTPException(401): if the caller is a guest.
        HTTPException(403): if the caller is not an admin.
    """
    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return auth
