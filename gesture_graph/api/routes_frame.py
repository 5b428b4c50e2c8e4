# gesture_graph/api/routes_frame.py
"""
Frame routes.

Computes one animation tick for the active graph. Renderers normally
call TransformEngine in-process; this endpoint serves remote or
debugging clients.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ..animation.engine import TransformEngine, get_transform_engine
from ..control.smoother import ControlSmoother, get_control_smoother
from ..graph.store import GraphStore, get_graph_store

router = APIRouter(prefix="/frame", tags=["frame"])


@router.get("")
async def get_frame(
    elapsed: float = Query(default=0.0, ge=0.0, description="Renderer clock, seconds"),
    store: GraphStore = Depends(get_graph_store),
    smoother: ControlSmoother = Depends(get_control_smoother),
    engine: TransformEngine = Depends(get_transform_engine),
) -> Dict[str, Any]:
    """Poses and scene cues for every node at `elapsed`."""
    frame = engine.compute_frame(store.snapshot, smoother.state, elapsed)
    return frame.to_dict()
