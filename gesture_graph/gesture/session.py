# gesture_graph/gesture/session.py
"""
Gesture session lifecycle.

States:
IDLE -> CONNECTING -> STREAMING -> CLOSED
IDLE -> CLOSED, CONNECTING -> CLOSED (failed or cancelled connect)

The session owns every resource acquired for streaming (capture streams,
frame timers, the recognizer connection). close() releases all of them
in reverse acquisition order on every exit path, including a failed
connect, and is idempotent.

The recognizer transport is supplied by the caller; this package ships
none. It is duck-typed:
    transport.connect(on_message, tools, system_instruction) -> connection
    connection.send_tool_response(response)
    connection.close()
"""

import itertools
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .tools import (
    SYSTEM_INSTRUCTION,
    UPDATE_CONTROL_TOOL,
    ToolCall,
    function_calls,
    handle_tool_call,
)
from ..control.smoother import ControlSmoother
from ..logging import get_gesture_logger

logger = get_gesture_logger()

_session_ids = itertools.count(1)


class SessionState(Enum):
    """Gesture session states."""
    IDLE = "IDLE"
    CONNECTING = "CONNECTING"
    STREAMING = "STREAMING"
    CLOSED = "CLOSED"


# Valid state transitions
TRANSITIONS: Dict[SessionState, Set[SessionState]] = {
    SessionState.IDLE: {SessionState.CONNECTING, SessionState.CLOSED},
    SessionState.CONNECTING: {SessionState.STREAMING, SessionState.CLOSED},
    SessionState.STREAMING: {SessionState.CLOSED},
    SessionState.CLOSED: set(),  # Terminal
}


class GestureSessionError(Exception):
    """Raised on invalid transitions or when the recognizer cannot be reached."""
    pass


class GestureSession:
    """
    Connects the gesture recognizer to a ControlSmoother.

    Usage:
        with GestureSession(transport, smoother) as session:
            session.acquire("camera", camera.stop)
            session.connect()
            ...
        # every acquired resource has been released here
    """

    def __init__(self, transport: Any, smoother: ControlSmoother):
        self.transport = transport
        self.smoother = smoother
        self.state = SessionState.IDLE
        self._resources: List[Tuple[str, Callable[[], None]]] = []
        self._connection: Optional[Any] = None
        self.session_id = next(_session_ids)
        self._log = logger.bind(session_id=self.session_id)

    def __enter__(self) -> "GestureSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_streaming(self) -> bool:
        return self.state == SessionState.STREAMING

    def _transition(self, to_state: SessionState) -> None:
        if to_state not in TRANSITIONS[self.state]:
            raise GestureSessionError(
                f"Invalid transition: {self.state.value} -> {to_state.value}. "
                f"Valid transitions: {sorted(s.value for s in TRANSITIONS[self.state])}"
            )
        self._log.info("gesture_session_transition", from_state=self.state.value, to_state=to_state.value)
        self.state = to_state

    def acquire(self, name: str, release: Callable[[], None]) -> None:
        """Register a resource to release on close()."""
        if self.state == SessionState.CLOSED:
            release()
            raise GestureSessionError(f"Session closed; released {name} immediately")
        self._resources.append((name, release))

    def connect(self) -> None:
        """
        Open the recognizer connection and start streaming.

        Raises:
            GestureSessionError: If not IDLE, or the transport fails (the
                session is closed and all resources released first)
        """
        self._transition(SessionState.CONNECTING)
        try:
            connection = self.transport.connect(
                on_message=self.handle_message,
                tools=[UPDATE_CONTROL_TOOL],
                system_instruction=SYSTEM_INSTRUCTION,
            )
        except Exception as e:
            self._log.error("gesture_session_connect_failed", error=str(e))
            self.close()
            raise GestureSessionError(f"Failed to connect gesture session: {e}") from e

        if self.state != SessionState.CONNECTING:
            # Closed by a callback while connecting
            connection.close()
            raise GestureSessionError("Gesture session closed while connecting")

        self._connection = connection
        self._resources.append(("connection", connection.close))
        self._transition(SessionState.STREAMING)

    def handle_message(self, message: Any) -> List[Dict[str, Any]]:
        """
        Handle one server message; apply and acknowledge its tool calls.

        Returns:
            The tool responses produced
        """
        if self.state == SessionState.CLOSED:
            return []

        responses = []
        for payload in function_calls(message):
            response = handle_tool_call(ToolCall.from_payload(payload), self.smoother)
            if response is None:
                continue
            responses.append(response)
            if self._connection is not None:
                try:
                    self._connection.send_tool_response(response)
                except Exception as e:
                    self._log.error("tool_response_failed", call_id=response["id"], error=str(e))
        return responses

    def handle_error(self, error: Any) -> None:
        """Transport error callback: tear everything down."""
        self._log.error("gesture_session_error", error=str(error))
        self.close()

    def close(self) -> None:
        """Release every acquired resource. Safe to call repeatedly."""
        if self.state == SessionState.CLOSED:
            return
        self._transition(SessionState.CLOSED)

        resources, self._resources = self._resources, []
        for name, release in reversed(resources):
            try:
                release()
            except Exception as e:
                self._log.error("gesture_resource_release_failed", resource=name, error=str(e))
        self._connection = None
