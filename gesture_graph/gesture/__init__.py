# Gesture module - recognizer session lifecycle and tool protocol
from .session import GestureSession, GestureSessionError, SessionState, TRANSITIONS
from .tools import UPDATE_CONTROL_TOOL, SYSTEM_INSTRUCTION, ToolCall, function_calls, handle_tool_call

__all__ = [
    "GestureSession",
    "GestureSessionError",
    "SessionState",
    "TRANSITIONS",
    "UPDATE_CONTROL_TOOL",
    "SYSTEM_INSTRUCTION",
    "ToolCall",
    "function_calls",
    "handle_tool_call",
]
