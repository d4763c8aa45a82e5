# app/routers/user.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.repositories.issue_repo import IssueRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.user_repo import UserRepository
from app.schemas.auth import AuthContext
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.issue import IssueListResponse
from app.schemas.profile import ProfileResponse, ProfileUpdate, ProfileUpdateResponse
from app.services.issue_service import IssueService
from app.services.profile_service import ProfileService

router = APIRouter(
    prefix="/user",
    tags=["User"],
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

issue_service = IssueService(IssueRepository())
profile_service = ProfileService(ProfileRepository(), UserRepository())

# NOTE: `auth` is declared before `session` on every route so that
# unauthenticated requests are rejected before a DB session is opened.


# -------- Issues --------


@router.get("/issues", response_model=IssueListResponse)
def list_my_issues(
    auth: AuthContext = Depends(require_auth),
    session: Session = Depends(get_session),
    status: str | None = None,
    category: str | None = None,
):
    """
    List the authenticated user's reported issues, newest first.

    Query params (optional, exact match):
      - status
      - category
    """
    return issue_service.list_my_issues(session, auth, status, category)


# -------- Profile --------


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    auth: AuthContext = Depends(require_auth),
    session: Session = Depends(get_session),
):
    """
    Return the authenticated user's profile and settings.

    A default profile is created on first access.
    """
    return ProfileResponse(data=profile_service.get_profile(session, auth))


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    payload: ProfileUpdate,
    auth: AuthContext = Depends(require_auth),
    session: Session = Depends(get_session),
):
    """
    Partially update the authenticated user's profile and settings.

    Only fields present in the body are written; `full_name` updates
    the account's display name.
    """
    profile = profile_service.update_profile(session, auth, payload)
    return ProfileUpdateResponse(message="Profile updated successfully", data=profile)


@router.delete("/profile", response_model=MessageResponse)
def delete_account(
    auth: AuthContext = Depends(require_auth),
    session: Session = Depends(get_session),
):
    """
    Delete the authenticated user's account and all associated data.
    """
    profile_service.delete_account(session, auth)
    return MessageResponse(message="Account deleted successfully")
