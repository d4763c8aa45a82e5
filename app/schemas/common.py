# app/schemas/common.py
from typing import Any, Literal

from sqlmodel import SQLModel


class MessageResponse(SQLModel):
    """Envelope for operations that return no data."""

    success: Literal[True] = True
    message: str


class ErrorResponse(SQLModel):
    """
    Envelope for every error response.

    `error` is always a generic, client-safe message.
    """

    success: Literal[False] = False
    error: str
    details: list[Any] | None = None
