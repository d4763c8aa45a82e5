# app/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class UserProfile(SQLModel, table=True):
    """
    Per-user contact details and preferences.

    One-to-one with users:
      - user_id is unique, so at most one profile row per user
      - ON DELETE CASCADE removes the profile with its user

    Groups:
      - contact:       phone, address, city, state, pincode, bio, profile_image
      - notifications: 9 boolean flags
      - privacy:       profile_visibility + 5 boolean flags
      - system:        language, timezone, date_format, map_provider,
                       auto_refresh, refresh_interval
    """

    __tablename__ = "user_profiles"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        unique=True,
        index=True,
    )

    # ---- Contact ----
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    pincode: str | None = Field(default=None, max_length=10)
    bio: str | None = Field(default=None)
    profile_image: str | None = Field(
        default=None,
        description="Public image URL",
    )

    # ---- Notifications ----
    email_notifications: bool = Field(default=True)
    push_notifications: bool = Field(default=True)
    issue_updates: bool = Field(default=True)
    nearby_issues: bool = Field(default=True)
    weekly_digest: bool = Field(default=False)
    critical_alerts: bool = Field(default=True)
    resolution_updates: bool = Field(default=True)
    comment_replies: bool = Field(default=True)
    upvote_notifications: bool = Field(default=False)

    # ---- Privacy ----
    # public | private | community
    profile_visibility: str = Field(default="public")
    show_email: bool = Field(default=False)
    show_phone: bool = Field(default=False)
    show_location: bool = Field(default=True)
    allow_analytics: bool = Field(default=True)
    data_sharing: bool = Field(default=False)

    # ---- System ----
    language: str = Field(default="en", max_length=10)
    timezone: str = Field(default="Asia/Kolkata", max_length=64)
    date_format: str = Field(default="DD/MM/YYYY", max_length=20)
    # openstreetmap | google | mapbox
    map_provider: str = Field(default="openstreetmap")
    auto_refresh: bool = Field(default=True)
    refresh_interval: int = Field(
        default=30,
        description="Auto-refresh interval in seconds",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )
