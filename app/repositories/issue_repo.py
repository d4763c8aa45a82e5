# app/repositories/issue_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.issue import Issue


class IssueRepository:
    """
    Read-only data access for issues reported by a user.
    """

    def count_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        """Number of issues reported by the user, ignoring filters."""
        stmt = select(func.count()).select_from(Issue).where(Issue.user_id == user_id)
        value = session.exec(stmt).one()
        return int(value or 0)

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        status: str | None = None,
        category: str | None = None,
    ) -> list[Issue]:
        """
        Issues reported by the user, newest first.

        Filters are exact, case-sensitive equality matches and are
        combined with AND when both are given.
        """
        stmt = select(Issue).where(Issue.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Issue.status == status)
        if category is not None:
            stmt = stmt.where(Issue.category == category)
        stmt = stmt.order_by(Issue.created_at.desc(), Issue.id.desc())
        return list(session.exec(stmt).all())
