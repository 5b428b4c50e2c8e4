# gesture_graph/api/routes_graph.py
"""
Graph API routes.

Endpoints for reading the active graph and replacing it from a query,
the demo generator, or an externally produced graph.
"""

from typing import Dict, Any, Optional, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from simulation.demo_graph import generate_demo_graph

from ..animation.engine import link_segments
from ..graph.models import GraphModel
from ..graph.store import GraphStore, get_graph_store
from ..ingestion.loader import GraphLoader, get_graph_loader
from ..ingestion.quine import INITIAL_QUERY
from ..llm.cypher import generate_cypher_query
from ..logging import get_api_logger

logger = get_api_logger()

router = APIRouter(prefix="/graph", tags=["graph"])


class GraphResponse(BaseModel):
    """Active graph in renderer shape."""
    nodes: List[Dict[str, Any]]
    links: List[Dict[str, Any]]
    node_count: int
    link_count: int


class QueryRequest(BaseModel):
    """Cypher query to run against the query service."""
    query: str = INITIAL_QUERY
    parameters: Dict[str, Any] = Field(default_factory=dict)
    url: Optional[str] = None  # Defaults to QUINE_URL


class LoadResponse(BaseModel):
    """Outcome of a graph load."""
    ticket: int
    success: bool
    published: bool
    superseded: bool
    node_count: int
    link_count: int
    error: Optional[str] = None
    warning: Optional[str] = None
    completed_at: str


class DemoRequest(BaseModel):
    """Demo graph parameters."""
    count: int = Field(default=100, ge=0, le=5000)
    seed: Optional[int] = None


class GenerateQueryRequest(BaseModel):
    """Natural-language request for a Cypher query."""
    prompt: str


class GenerateQueryResponse(BaseModel):
    query: str


def _graph_response(model: GraphModel) -> GraphResponse:
    data = model.to_dict()
    return GraphResponse(
        nodes=data["nodes"],
        links=data["links"],
        node_count=model.node_count,
        link_count=model.link_count,
    )


@router.get("", response_model=GraphResponse)
async def get_graph(store: GraphStore = Depends(get_graph_store)) -> GraphResponse:
    """Return the active graph snapshot."""
    return _graph_response(store.snapshot)


@router.get("/segments")
async def get_link_segments(store: GraphStore = Depends(get_graph_store)) -> Dict[str, Any]:
    """Static line segments for the active graph's links."""
    segments = link_segments(store.snapshot)
    return {
        "segments": [{"source": list(a), "target": list(b)} for a, b in segments],
        "count": len(segments),
    }


@router.post("/query", response_model=LoadResponse)
def run_query(
    request: QueryRequest,
    loader: GraphLoader = Depends(get_graph_loader),
) -> LoadResponse:
    """
    Run a Cypher query and publish the resulting graph.

    The previous graph stays active when the query fails, returns no
    nodes, or is overtaken by a newer request.

    Raises:
        HTTPException 502: If the query service fails
    """
    result = loader.load(request.query, request.parameters, url=request.url)
    if not result.success:
        raise HTTPException(status_code=502, detail=result.error)
    return LoadResponse(**result.to_dict())


@router.post("/demo", response_model=GraphResponse)
async def load_demo_graph(
    request: DemoRequest,
    store: GraphStore = Depends(get_graph_store),
) -> GraphResponse:
    """Replace the active graph with a generated demo graph."""
    model = GraphModel.from_dict(generate_demo_graph(request.count, seed=request.seed))
    store.replace(model)
    logger.info("demo_graph_loaded", nodes=model.node_count, links=model.link_count)
    return _graph_response(model)


@router.put("", response_model=GraphResponse)
async def put_graph(
    data: Dict[str, Any],
    store: GraphStore = Depends(get_graph_store),
) -> GraphResponse:
    """
    Replace the active graph with an externally produced one.

    Raises:
        HTTPException 422: If a node is malformed or a link dangles
    """
    try:
        model = GraphModel.from_dict(data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid graph: {e}")
    store.replace(model)
    return _graph_response(model)


@router.post("/generate-query", response_model=GenerateQueryResponse)
def generate_query(request: GenerateQueryRequest) -> GenerateQueryResponse:
    """Generate a Cypher query from a natural-language prompt."""
    return GenerateQueryResponse(query=generate_cypher_query(request.prompt))
