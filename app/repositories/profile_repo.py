# app/repositories/profile_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from app.models.profile import UserProfile
from app.models.user import User

# Dialects that support INSERT ... ON CONFLICT
_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    try:
        return _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise RuntimeError(f"Upsert is not supported for dialect '{dialect}'")


class ProfileRepository:
    """
    Data access layer for user_profiles.

    Both writes are single INSERT ... ON CONFLICT (user_id) statements,
    so they are safe to run whether or not the row exists.
    """

    def get_with_identity(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> tuple[UserProfile, User] | None:
        """Return (profile, user) joined on user_id, or None if no profile."""
        stmt = (
            select(UserProfile, User)
            .join(User, User.id == UserProfile.user_id)
            .where(UserProfile.user_id == user_id)
        )
        return session.exec(stmt).first()

    def insert_default(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Insert an all-defaults profile row.

        A concurrent insert for the same user is absorbed by
        ON CONFLICT DO NOTHING; the caller re-reads afterwards.
        """
        insert = _insert_for(session)
        values = UserProfile(user_id=user_id).model_dump()
        stmt = insert(UserProfile).values(**values).on_conflict_do_nothing(
            index_elements=["user_id"],
        )
        session.execute(stmt)
        session.commit()

    def upsert(
        self,
        session: Session,
        user_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> None:
        """
        Write `changes` to the user's profile, creating it if missing.

        Columns not in `changes` keep their current (or default) values.
        `updated_at` is always stamped.
        """
        insert = _insert_for(session)
        now = datetime.now(timezone.utc)
        values = UserProfile(user_id=user_id, **changes).model_dump()
        values["updated_at"] = now

        stmt = insert(UserProfile).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**changes, "updated_at": now},
        )
        session.execute(stmt)
        session.commit()
