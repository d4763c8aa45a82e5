# app/schemas/issue.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel


class IssueRead(SQLModel):
    """
    Representation of a reported issue.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str | None
    category: str
    status: str
    priority: str
    address: str | None
    latitude: float | None
    longitude: float | None
    image_url: str | None
    upvotes: int
    created_at: datetime
    updated_at: datetime


class IssueFilters(SQLModel):
    """Echo of the filters that were applied (null = not applied)."""

    status: str | None = None
    category: str | None = None


class IssueListMeta(SQLModel):
    """
    Summary for a filtered issue list.

      - total:    number of issues returned (after filtering)
      - filtered: True iff filtering changed the result size
    """

    total: int
    filtered: bool
    filters: IssueFilters


class IssueListResponse(SQLModel):
    success: Literal[True] = True
    data: list[IssueRead]
    meta: IssueListMeta
