"""API routes package."""

from .routes_graph import router as graph_router
from .routes_control import router as control_router
from .routes_frame import router as frame_router

__all__ = [
    "graph_router",
    "control_router",
    "frame_router",
]
