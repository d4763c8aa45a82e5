# app/services/voice_session.py
"""
Client-side controller for a voice-agent call.

The conversational SDK and the microphone are injected, so the
controller runs anywhere a client can provide them (browser bridge,
desktop app, tests). Every state change goes through `dispatch()`;
user actions and SDK callbacks are turned into events first.

    disconnected --call--> connecting --sdk status--> connected
         ^                     |                          |
         +--- denied/failed ---+                          |
         +------------------- end call / sdk error -------+
"""
import asyncio
import logging
import math
from typing import Callable, Protocol

from app.core.config import DEFAULT_VOICE_AGENT_ID, Settings
from app.schemas.voice import (
    AgentState,
    CallRequested,
    EndCallRequested,
    MicrophoneDenied,
    SessionError,
    SessionStartFailed,
    StatusChanged,
    VoiceAgentRead,
    VoiceEvent,
)

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Please enable microphone permissions in your browser."

# Display curve for the amplitude indicator: sqrt boosts quiet input,
# the gain makes normal speech reach the top of the range.
VOLUME_EXPONENT = 0.5
VOLUME_GAIN = 2.5

# ~30 samples per second
VOLUME_POLL_INTERVAL = 1 / 30


class MicrophonePermissionDenied(Exception):
    """The user or platform refused microphone access."""


class MicrophoneAccess(Protocol):
    async def request(self) -> None:
        """Ask for microphone access; raise MicrophonePermissionDenied if refused."""


class ConversationTransport(Protocol):
    """The subset of the conversational SDK the controller relies on."""

    async def start_session(
        self,
        *,
        agent_id: str,
        connection_type: str,
        on_status_change: Callable[[str | None], None],
        on_error: Callable[[object], None],
    ) -> None: ...

    def end_session(self) -> None: ...

    def get_input_volume(self) -> float | None: ...

    def get_output_volume(self) -> float | None: ...


StateListener = Callable[[AgentState, AgentState, VoiceEvent], None]


def agent_from_settings(settings: Settings) -> VoiceAgentRead:
    """Configured agent; a blank VOICE_AGENT_ID falls back to the default agent."""
    return VoiceAgentRead(
        agent_id=settings.VOICE_AGENT_ID.strip() or DEFAULT_VOICE_AGENT_ID,
        name=settings.VOICE_AGENT_NAME,
        description=settings.VOICE_AGENT_DESCRIPTION,
    )


def normalize_volume(raw: float | None) -> float:
    """
    Map a raw SDK volume to [0, 1] for display.

        min(1, raw ** 0.5 * 2.5)

    Missing, negative or NaN readings count as silence.
    """
    if raw is None or math.isnan(raw) or raw <= 0:
        return 0.0
    return min(1.0, math.pow(raw, VOLUME_EXPONENT) * VOLUME_GAIN)


def transition(
    state: AgentState | None,
    error_message: str | None,
    event: VoiceEvent,
) -> tuple[AgentState, str | None]:
    """
    Pure transition function: (state, message, event) -> (state, message).

    Rules:
      - call_requested:       disconnected -> connecting, clears the message
      - end_call_requested:   connected -> disconnected
      - status_changed:       adopt the SDK's status
      - microphone_denied:    -> disconnected with a remediation message
      - session_start_failed: -> disconnected, message untouched
      - session_error:        -> disconnected from any state

    Events that do not apply to the current state leave it unchanged.
    """
    current = AgentState.coerce(state)

    if isinstance(event, CallRequested):
        if current is AgentState.DISCONNECTED:
            return AgentState.CONNECTING, None
        return current, error_message

    if isinstance(event, EndCallRequested):
        if current is AgentState.CONNECTED:
            return AgentState.DISCONNECTED, error_message
        return current, error_message

    if isinstance(event, StatusChanged):
        return AgentState.coerce(event.status), error_message

    if isinstance(event, MicrophoneDenied):
        return AgentState.DISCONNECTED, PERMISSION_DENIED_MESSAGE

    if isinstance(event, (SessionStartFailed, SessionError)):
        return AgentState.DISCONNECTED, error_message

    raise TypeError(f"Unknown voice event: {event!r}")


class VoiceSessionController:
    """
    Drives one voice-agent call.

    Usage:

        controller = VoiceSessionController(transport, microphone, agent)
        await controller.handle_call()   # start
        ...
        await controller.handle_call()   # end
    """

    def __init__(
        self,
        transport: ConversationTransport,
        microphone: MicrophoneAccess,
        agent: VoiceAgentRead,
    ):
        self.transport = transport
        self.microphone = microphone
        self.agent = agent
        self.state = AgentState.DISCONNECTED
        self.error_message: str | None = None
        self._listeners: list[StateListener] = []

    # ----- Event channel -----

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, event: VoiceEvent) -> AgentState:
        previous = self.state
        self.state, self.error_message = transition(previous, self.error_message, event)

        if self.state is not previous:
            logger.info("Voice session %s -> %s (%s)", previous.value, self.state.value, event.kind)

        for listener in list(self._listeners):
            listener(previous, self.state, event)
        return self.state

    # ----- SDK callbacks -----

    def on_status_change(self, status: str | None) -> None:
        try:
            state = AgentState.coerce(status)
        except ValueError:
            logger.warning("Unknown voice agent status %r, treating as disconnected", status)
            state = AgentState.DISCONNECTED
        self.dispatch(StatusChanged(status=state))

    def on_error(self, error: object) -> None:
        logger.error("Voice agent error: %s", error)
        self.dispatch(SessionError(reason=str(error)))

    # ----- User actions -----

    async def handle_call(self) -> None:
        """
        The call button.

          - disconnected: start a call
          - connected:    end the call
          - connecting / disconnecting: ignored (button is disabled)
        """
        if self.state is AgentState.DISCONNECTED:
            self.dispatch(CallRequested())
            await self._start_session()
        elif self.state is AgentState.CONNECTED:
            self.transport.end_session()
            self.dispatch(EndCallRequested())

    async def _start_session(self) -> None:
        try:
            await self.microphone.request()
            await self.transport.start_session(
                agent_id=self.agent.agent_id,
                connection_type=self.agent.connection_type,
                on_status_change=self.on_status_change,
                on_error=self.on_error,
            )
        except MicrophonePermissionDenied:
            logger.warning("Microphone permission denied")
            self.dispatch(MicrophoneDenied())
        except Exception as e:
            logger.exception("Error starting conversation")
            self.dispatch(SessionStartFailed(reason=str(e)))

    # ----- Volume telemetry -----

    def input_volume(self) -> float:
        return normalize_volume(self.transport.get_input_volume())

    def output_volume(self) -> float:
        return normalize_volume(self.transport.get_output_volume())

    async def poll_volume(
        self,
        on_sample: Callable[[float, float], None],
        interval: float = VOLUME_POLL_INTERVAL,
    ) -> None:
        """
        Feed (input, output) volume samples to `on_sample` while a
        session is open. Returns once the session closes.
        """
        while self.is_session_open:
            on_sample(self.input_volume(), self.output_volume())
            await asyncio.sleep(interval)

    # ----- Derived display state -----

    @property
    def is_session_open(self) -> bool:
        return self.state in (AgentState.CONNECTING, AgentState.CONNECTED)

    @property
    def is_call_active(self) -> bool:
        return self.state is AgentState.CONNECTED

    @property
    def is_transitioning(self) -> bool:
        return self.state in (AgentState.CONNECTING, AgentState.DISCONNECTING)

    @property
    def button_disabled(self) -> bool:
        return self.is_transitioning

    @property
    def orb_state(self) -> str | None:
        if self.state is AgentState.CONNECTED:
            return "talking"
        if self.state is AgentState.CONNECTING:
            return "thinking"
        return None

    @property
    def status_label(self) -> str:
        if self.error_message:
            return self.error_message
        if self.state is AgentState.DISCONNECTED:
            return self.agent.description
        return self.state.value.capitalize()
