# app/routers/voice_agent.py
from fastapi import APIRouter, Depends

from app.core.auth import require_auth
from app.core.config import get_settings
from app.schemas.common import ErrorResponse
from app.schemas.voice import VoiceAgentResponse
from app.services.voice_session import agent_from_settings

router = APIRouter(
    prefix="/voice-agent",
    tags=["Voice Agent"],
    responses={401: {"model": ErrorResponse}},
)


@router.get(
    "",
    response_model=VoiceAgentResponse,
    dependencies=[Depends(require_auth)],
)
def read_voice_agent():
    """
    Agent configuration for starting a voice call (authenticated users).
    """
    return VoiceAgentResponse(data=agent_from_settings(get_settings()))
