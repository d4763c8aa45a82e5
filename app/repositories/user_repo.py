# app/repositories/user_repo.py
import uuid

from sqlalchemy import delete, update
from sqlmodel import Session

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations
      - No FastAPI, no HTTP, no business logic
    """

    def update_fields(
        self,
        session: Session,
        user_id: uuid.UUID,
        values: dict[str, object],
    ) -> None:
        """Write the given columns on the user row (single UPDATE)."""
        stmt = update(User).where(User.id == user_id).values(**values)
        session.execute(stmt)
        session.commit()

    def delete_by_id(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Delete a User with a single DELETE statement.

        Dependent rows (profile, issues) are removed by the
        foreign keys' ON DELETE CASCADE.
        """
        stmt = delete(User).where(User.id == user_id)
        session.execute(stmt)
        session.commit()
