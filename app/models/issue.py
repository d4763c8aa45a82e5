# app/models/issue.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Issue(SQLModel, table=True):
    """
    A civic problem reported by a user.

    Rows are created by the report flow and only read here.
    Status moves through: open -> in_progress -> resolved / closed
    (changed by admin workflows, not by this API).
    """

    __tablename__ = "issues"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
        description="Reporting user",
    )

    title: str = Field(max_length=200)

    description: str | None = Field(default=None)

    # Free-form tag, e.g. "pothole", "streetlight", "garbage"
    category: str = Field(index=True, max_length=50)

    # open | in_progress | resolved | closed
    status: str = Field(
        default="open",
        index=True,
        description="Issue status lifecycle",
    )

    # low | medium | high | critical
    priority: str = Field(default="medium")

    address: str | None = Field(default=None)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)

    image_url: str | None = Field(default=None)

    upvotes: int = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )
