# gesture_graph/api/routes_control.py
"""
Control signal routes.

The gesture recognizer (or anything standing in for it) posts samples
or raw tool-call messages here; the renderer reads the smoothed state.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..control.smoother import ControlSample, ControlSmoother, get_control_smoother
from ..gesture.tools import ToolCall, function_calls, handle_tool_call

router = APIRouter(prefix="/control", tags=["control"])


class ControlStateResponse(BaseModel):
    expansion: float
    tension: float


class ToolCallMessage(BaseModel):
    """Server message carrying recognizer tool calls; malformed shapes are ignored."""
    toolCall: Optional[Any] = None


class ToolCallResponse(BaseModel):
    responses: List[Dict[str, Any]]
    state: ControlStateResponse


@router.get("", response_model=ControlStateResponse)
async def get_control_state(
    smoother: ControlSmoother = Depends(get_control_smoother),
) -> ControlStateResponse:
    """Current smoothed control state."""
    return ControlStateResponse(**smoother.state.to_dict())


@router.post("/sample", response_model=ControlStateResponse)
async def post_sample(
    payload: Optional[Dict[str, Any]] = None,
    smoother: ControlSmoother = Depends(get_control_smoother),
) -> ControlStateResponse:
    """
    Apply one raw sample {expansion?, tension?}.

    Missing or non-numeric fields count as 0.
    """
    state = smoother.update(ControlSample.from_payload(payload))
    return ControlStateResponse(**state.to_dict())


@router.post("/tool-call", response_model=ToolCallResponse)
async def post_tool_call(
    message: ToolCallMessage,
    smoother: ControlSmoother = Depends(get_control_smoother),
) -> ToolCallResponse:
    """Apply every updateGraphControl call in a recognizer message."""
    responses = []
    for payload in function_calls({"toolCall": message.toolCall}):
        response = handle_tool_call(ToolCall.from_payload(payload), smoother)
        if response is not None:
            responses.append(response)
    return ToolCallResponse(
        responses=responses,
        state=ControlStateResponse(**smoother.state.to_dict()),
    )


@router.post("/reset", response_model=ControlStateResponse)
async def reset_control(
    smoother: ControlSmoother = Depends(get_control_smoother),
) -> ControlStateResponse:
    """Return the control state to its initial value."""
    return ControlStateResponse(**smoother.reset().to_dict())
