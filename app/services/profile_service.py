# app/services/profile_service.py
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.models.profile import UserProfile
from app.models.user import User
from app.repositories.profile_repo import ProfileRepository
from app.repositories.user_repo import UserRepository
from app.schemas.auth import AuthContext
from app.schemas.profile import ProfileRead, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Business logic for the caller's own profile and account.

    Responsibilities:
      - lazily materialize a default profile row on first read
      - apply partial updates across the User and UserProfile rows
      - delete the account (dependents cascade in the database)
      - map storage failures to generic 500s, logging the cause
    """

    def __init__(self, profile_repo: ProfileRepository, user_repo: UserRepository):
        self.profile_repo = profile_repo
        self.user_repo = user_repo

    # ----- Helpers -----

    @staticmethod
    def _failed(detail: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )

    @staticmethod
    def _flatten(profile: UserProfile, user: User) -> ProfileRead:
        """Merge identity fields into the profile representation."""
        return ProfileRead(
            **profile.model_dump(),
            full_name=user.name,
            email=user.email,
            avatar=user.avatar,
        )

    def _read_or_create(self, session: Session, auth: AuthContext) -> ProfileRead:
        row = self.profile_repo.get_with_identity(session, auth.user_id)
        if row is None:
            logger.info("Creating default profile for user %s", auth.user_id)
            self.profile_repo.insert_default(session, auth.user_id)
            row = self.profile_repo.get_with_identity(session, auth.user_id)

        if row is None:
            # Profile insert went through but the join found no User row.
            raise LookupError(f"No user row for {auth.user_id}")

        profile, user = row
        return self._flatten(profile, user)

    # ----- Operations -----

    def get_profile(self, session: Session, auth: AuthContext) -> ProfileRead:
        """
        Return the caller's profile, creating a default one if missing.

        Raises:
            HTTPException(500): on any storage failure.
        """
        try:
            return self._read_or_create(session, auth)
        except (SQLAlchemyError, LookupError):
            logger.exception("Error fetching profile for user %s", auth.user_id)
            raise self._failed("Failed to fetch profile")

    def update_profile(
        self,
        session: Session,
        auth: AuthContext,
        payload: ProfileUpdate,
    ) -> ProfileRead:
        """
        Apply a partial update, then return the re-read profile.

        Steps:
          1. If `full_name` is present, write it to the User row.
          2. If any profile field is present, upsert the profile row.
          3. Re-read the joined profile.

        An empty payload performs no writes.

        Raises:
            HTTPException(500): if a write or the re-read fails.
        """
        changes = payload.changes()

        try:
            if changes["user"]:
                self.user_repo.update_fields(session, auth.user_id, changes["user"])

            if changes["profile"]:
                self.profile_repo.upsert(session, auth.user_id, changes["profile"])

            return self._read_or_create(session, auth)
        except (SQLAlchemyError, LookupError):
            session.rollback()
            logger.exception("Error updating profile for user %s", auth.user_id)
            raise self._failed("Failed to update profile")

    def delete_account(self, session: Session, auth: AuthContext) -> None:
        """
        Delete the caller's User row with a single delete.

        Profile and issues go with it via ON DELETE CASCADE.

        Raises:
            HTTPException(500): if the delete fails.
        """
        try:
            self.user_repo.delete_by_id(session, auth.user_id)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Error deleting account for user %s", auth.user_id)
            raise self._failed("Failed to delete account")

        logger.info("Deleted account %s", auth.user_id)
