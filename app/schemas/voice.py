# app/schemas/voice.py
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from sqlmodel import SQLModel


class AgentState(str, Enum):
    """Connection lifecycle of a voice-agent call."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"

    @classmethod
    def coerce(cls, value: "AgentState | str | None") -> "AgentState":
        """A missing (None) state is treated as disconnected."""
        if value is None:
            return cls.DISCONNECTED
        return cls(value)


# ---- Events fed into the controller ----


class CallRequested(BaseModel):
    kind: Literal["call_requested"] = "call_requested"


class EndCallRequested(BaseModel):
    kind: Literal["end_call_requested"] = "end_call_requested"


class StatusChanged(BaseModel):
    """Status reported by the voice SDK."""

    kind: Literal["status_changed"] = "status_changed"
    status: AgentState | None


class MicrophoneDenied(BaseModel):
    kind: Literal["microphone_denied"] = "microphone_denied"


class SessionStartFailed(BaseModel):
    kind: Literal["session_start_failed"] = "session_start_failed"
    reason: str = ""


class SessionError(BaseModel):
    """Asynchronous error reported by the voice SDK."""

    kind: Literal["session_error"] = "session_error"
    reason: str = ""


VoiceEvent = Annotated[
    Union[
        CallRequested,
        EndCallRequested,
        StatusChanged,
        MicrophoneDenied,
        SessionStartFailed,
        SessionError,
    ],
    Field(discriminator="kind"),
]


# ---- API ----


class VoiceAgentRead(SQLModel):
    """Agent configuration handed to clients starting a call."""

    agent_id: str
    name: str
    description: str
    connection_type: Literal["webrtc", "websocket"] = "webrtc"


class VoiceAgentResponse(SQLModel):
    success: Literal[True] = True
    data: VoiceAgentRead
