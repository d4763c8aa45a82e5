# app/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal, NamedTuple

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

ProfileVisibility = Literal["public", "private", "community"]
MapProvider = Literal["openstreetmap", "google", "mapbox"]


class FieldTarget(NamedTuple):
    """Where a payload field is written: entity ("user" | "profile") + column."""

    entity: str
    column: str
    nullable: bool = False


def _profile(column: str, nullable: bool = False) -> FieldTarget:
    return FieldTarget("profile", column, nullable)


# Payload field -> target entity/column.
# `full_name` is the only field stored on the User row.
PROFILE_FIELD_MAP: dict[str, FieldTarget] = {
    "full_name": FieldTarget("user", "name"),
    # Contact
    "phone": _profile("phone", nullable=True),
    "address": _profile("address", nullable=True),
    "city": _profile("city", nullable=True),
    "state": _profile("state", nullable=True),
    "pincode": _profile("pincode", nullable=True),
    "bio": _profile("bio", nullable=True),
    "profile_image": _profile("profile_image", nullable=True),
    # Notifications
    "email_notifications": _profile("email_notifications"),
    "push_notifications": _profile("push_notifications"),
    "issue_updates": _profile("issue_updates"),
    "nearby_issues": _profile("nearby_issues"),
    "weekly_digest": _profile("weekly_digest"),
    "critical_alerts": _profile("critical_alerts"),
    "resolution_updates": _profile("resolution_updates"),
    "comment_replies": _profile("comment_replies"),
    "upvote_notifications": _profile("upvote_notifications"),
    # Privacy
    "profile_visibility": _profile("profile_visibility"),
    "show_email": _profile("show_email"),
    "show_phone": _profile("show_phone"),
    "show_location": _profile("show_location"),
    "allow_analytics": _profile("allow_analytics"),
    "data_sharing": _profile("data_sharing"),
    # System
    "language": _profile("language"),
    "timezone": _profile("timezone"),
    "date_format": _profile("date_format"),
    "map_provider": _profile("map_provider"),
    "auto_refresh": _profile("auto_refresh"),
    "refresh_interval": _profile("refresh_interval"),
}


class ProfileUpdate(SQLModel):
    """
    Partial update payload for PUT /user/profile.

    Semantics:
      - a field missing from the JSON body means "no change"
      - an explicit null clears a contact field
      - an explicit null on a flag/setting is rejected (422)

    Unknown keys are ignored: clients commonly send the whole profile
    object back, including read-only fields like `email` or `id`.
    """

    model_config = ConfigDict(extra="ignore")

    full_name: str | None = Field(default=None, max_length=100)

    # Contact
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    pincode: str | None = Field(default=None, max_length=10)
    bio: str | None = Field(default=None, max_length=500)
    profile_image: str | None = None

    # Notifications
    email_notifications: bool | None = None
    push_notifications: bool | None = None
    issue_updates: bool | None = None
    nearby_issues: bool | None = None
    weekly_digest: bool | None = None
    critical_alerts: bool | None = None
    resolution_updates: bool | None = None
    comment_replies: bool | None = None
    upvote_notifications: bool | None = None

    # Privacy
    profile_visibility: ProfileVisibility | None = None
    show_email: bool | None = None
    show_phone: bool | None = None
    show_location: bool | None = None
    allow_analytics: bool | None = None
    data_sharing: bool | None = None

    # System
    language: str | None = Field(default=None, max_length=10)
    timezone: str | None = Field(default=None, max_length=64)
    date_format: str | None = Field(default=None, max_length=20)
    map_provider: MapProvider | None = None
    auto_refresh: bool | None = None
    refresh_interval: int | None = Field(default=None, ge=5, le=3600)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v

    @model_validator(mode="after")
    def reject_null_settings(self) -> "ProfileUpdate":
        for name in self.model_fields_set:
            target = PROFILE_FIELD_MAP.get(name)
            if target and not target.nullable and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, dict[str, object]]:
        """
        Split the fields present in the payload by target entity.

        Returns:
            {"user": {column: value}, "profile": {column: value}}
            Either dict may be empty.
        """
        split: dict[str, dict[str, object]] = {"user": {}, "profile": {}}
        for name, value in self.model_dump(exclude_unset=True).items():
            target = PROFILE_FIELD_MAP[name]
            split[target.entity][target.column] = value
        return split


class ProfileRead(SQLModel):
    """
    Profile with identity fields flattened in.

    `full_name`, `email` and `avatar` come from the User row.
    """

    id: uuid.UUID
    user_id: uuid.UUID

    full_name: str
    email: str
    avatar: str | None

    phone: str | None
    address: str | None
    city: str | None
    state: str | None
    pincode: str | None
    bio: str | None
    profile_image: str | None

    email_notifications: bool
    push_notifications: bool
    issue_updates: bool
    nearby_issues: bool
    weekly_digest: bool
    critical_alerts: bool
    resolution_updates: bool
    comment_replies: bool
    upvote_notifications: bool

    profile_visibility: str
    show_email: bool
    show_phone: bool
    show_location: bool
    allow_analytics: bool
    data_sharing: bool

    language: str
    timezone: str
    date_format: str
    map_provider: str
    auto_refresh: bool
    refresh_interval: int

    created_at: datetime
    updated_at: datetime


class ProfileResponse(SQLModel):
    success: Literal[True] = True
    data: ProfileRead


class ProfileUpdateResponse(SQLModel):
    success: Literal[True] = True
    message: str
    data: ProfileRead
