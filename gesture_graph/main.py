# gesture_graph/main.py
"""
Gesture Graph - Main Application

Serves a property graph and the gesture-driven animation state for a 3D
renderer: graph ingestion from a Quine Cypher endpoint, smoothed control
samples from the gesture recognizer, and per-tick node poses.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from simulation.demo_graph import generate_demo_graph

from .settings import settings
from .graph.models import GraphModel
from .graph.store import get_graph_store
from .ingestion.loader import get_graph_loader
from .ingestion.quine import INITIAL_QUERY
from .logging import get_logger
from .api import graph_router, control_router, frame_router

logger = get_logger(__name__)


def load_initial_graph() -> None:
    """Replace the seeded demo graph with the initial query's result, if it has one."""
    result = get_graph_loader().load(INITIAL_QUERY)
    if not result.success:
        logger.warning("initial_query_failed", error=result.error)
    elif result.warning:
        logger.warning("initial_query_empty", warning=result.warning)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Seeds the demo graph so the renderer has something to show, then
    optionally replaces it with the initial query's result. The query
    blocks (with retries) so it runs in the threadpool.
    """
    store = get_graph_store()
    if store.snapshot.is_empty:
        store.replace(GraphModel.from_dict(generate_demo_graph(settings.demo_node_count)))
        logger.info("demo_graph_seeded", nodes=settings.demo_node_count)

    if settings.quine_autoload:
        await run_in_threadpool(load_initial_graph)

    yield

    logger.info("shutdown")


app = FastAPI(
    title="Gesture Graph",
    description="""
    Graph ingestion and gesture-driven animation engine.

    - Normalizes Cypher query results into a node/link graph
    - Smooths noisy gesture samples (expansion, tension)
    - Computes per-tick node poses with expansion, jitter and pulse
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Server"] = "Gesture Graph"
        return response

app.add_middleware(SecurityHeadersMiddleware)

app.include_router(graph_router)
app.include_router(control_router)
app.include_router(frame_router)


@app.get("/health")
async def health_check():
    """Basic health check."""
    store = get_graph_store()
    return {
        "status": "ok",
        "service": "gesture-graph",
        "nodes": store.snapshot.node_count,
    }


def run():
    """Run the server (entry point for CLI)."""
    import uvicorn
    uvicorn.run(
        "gesture_graph.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    run()
