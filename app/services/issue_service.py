# app/services/issue_service.py
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.repositories.issue_repo import IssueRepository
from app.schemas.auth import AuthContext
from app.schemas.issue import IssueFilters, IssueListMeta, IssueListResponse, IssueRead

logger = logging.getLogger(__name__)


class IssueService:
    """
    Read side of the issues a user has reported.
    """

    def __init__(self, repo: IssueRepository):
        self.repo = repo

    def list_my_issues(
        self,
        session: Session,
        auth: AuthContext,
        status_filter: str | None = None,
        category: str | None = None,
    ) -> IssueListResponse:
        """
        List the caller's issues, newest first, with optional filters.

        Empty filter values count as "not provided".

        Raises:
            HTTPException(500): if the read fails (detail is generic).
        """
        filters = IssueFilters(
            status=status_filter or None,
            category=category or None,
        )

        has_filters = filters.status is not None or filters.category is not None

        try:
            issues = self.repo.list_for_user(
                session,
                auth.user_id,
                status=filters.status,
                category=filters.category,
            )
            # Without filters the list is the unfiltered set itself.
            # With filters the count is a second read, so a concurrent
            # insert can make `filtered` true for that one response.
            unfiltered_total = (
                self.repo.count_for_user(session, auth.user_id) if has_filters else len(issues)
            )
        except SQLAlchemyError:
            logger.exception("Error fetching issues for user %s", auth.user_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch issues",
            )

        return IssueListResponse(
            data=[IssueRead.model_validate(issue, from_attributes=True) for issue in issues],
            meta=IssueListMeta(
                total=len(issues),
                filtered=len(issues) != unfiltered_total,
                filters=filters,
            ),
        )
