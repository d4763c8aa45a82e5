# app/schemas/auth.py
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict

# App-level roles. "guest" = no token, so there is no context at all.
Role = Literal["user", "admin"]


class AuthContext(BaseModel):
    """
    Authenticated caller, resolved from the access token.

    Passed explicitly into services instead of being looked up globally.
    """

    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    email: str
    role: Role = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
