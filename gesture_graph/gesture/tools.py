# gesture_graph/gesture/tools.py
"""
Tool protocol between the gesture recognizer and the control smoother.

The recognizer watches the camera feed and calls `updateGraphControl`
a few times per second. Every call becomes one smoother sample and is
acknowledged with {"result": "ok"}.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..control.smoother import ControlSample, ControlSmoother
from ..logging import get_gesture_logger

logger = get_gesture_logger()

UPDATE_CONTROL_TOOL_NAME = "updateGraphControl"

UPDATE_CONTROL_TOOL: Dict[str, Any] = {
    "name": UPDATE_CONTROL_TOOL_NAME,
    "description": "Update the graph visualization based on hand gestures.",
    "parameters": {
        "type": "object",
        "properties": {
            "expansion": {
                "type": "number",
                "description": "Distance between hands (0.0 to 1.0). 0 is touching, 1 is wide apart.",
            },
            "tension": {
                "type": "number",
                "description": "Hand tension (0.0 to 1.0). 0 is open palm, 1 is closed fist.",
            },
        },
        "required": ["expansion", "tension"],
    },
}

SYSTEM_INSTRUCTION = """You are a gesture controller for a 3D graph.
Continuously analyze the video feed.
- If hands move apart, increase 'expansion' (0 to 1).
- If fists clench, increase 'tension' (0 to 1).
- If hands are close/relaxed, lower values.
Call 'updateGraphControl' frequently (e.g., 2-5 times per second) to update state.
Do not speak. Only use the tool."""


@dataclass
class ToolCall:
    """One function call issued by the recognizer."""
    id: str
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ToolCall":
        args = payload.get("args")
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            args=args if isinstance(args, dict) else {},
        )


def function_calls(message: Any) -> List[Dict[str, Any]]:
    """
    Function-call payloads in a recognizer message.

    Expects {"toolCall": {"functionCalls": [...]}}. Any other shape,
    at any level, contributes nothing.
    """
    if not isinstance(message, dict):
        return []
    tool_call = message.get("toolCall")
    if not isinstance(tool_call, dict):
        return []
    calls = tool_call.get("functionCalls")
    if not isinstance(calls, list):
        return []
    return [call for call in calls if isinstance(call, dict)]


def handle_tool_call(call: ToolCall, smoother: ControlSmoother) -> Optional[Dict[str, Any]]:
    """
    Apply a tool call to the smoother.

    Returns:
        The function response to send back, or None for unknown tools
    """
    if call.name != UPDATE_CONTROL_TOOL_NAME:
        logger.warning("unknown_tool_call", tool=call.name, call_id=call.id)
        return None

    smoother.update(ControlSample.from_payload(call.args))
    return {
        "id": call.id,
        "name": call.name,
        "response": {"result": "ok"},
    }
