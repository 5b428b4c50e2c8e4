# Graph module - canonical node/link model, ingestion and snapshot store
from .models import GraphNode, GraphLink, GraphModel
from .ingestor import (
    GraphIngestor,
    UniformCubePositions,
    NodeItem,
    RelationshipItem,
    Unrecognized,
    classify_item,
    ingest,
)
from .store import GraphStore, get_graph_store

__all__ = [
    # Models
    "GraphNode",
    "GraphLink",
    "GraphModel",
    # Ingestion
    "GraphIngestor",
    "UniformCubePositions",
    "NodeItem",
    "RelationshipItem",
    "Unrecognized",
    "classify_item",
    "ingest",
    # Store
    "GraphStore",
    "get_graph_store",
]
