# gesture_graph/graph/ingestor.py
"""
Normalizes raw Cypher query results into a GraphModel.

Payload shape (Quine /api/v1/query/cypher):
    {"results": [row, ...]}, row = [column, ...],
    column = item | [item, ...] | None

Each item is classified exactly once:
- NodeItem: has "id" and a "labels" list
- RelationshipItem: has "start" and "end"
- Unrecognized: anything else (scalars, nulls, odd shapes), skipped

Nodes dedupe by id (first write wins). Links are NOT deduplicated.
Relationship endpoints never seen as nodes get placeholder nodes so
that no link dangles.
"""

import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .models import (
    DEFAULT_GROUP,
    DEFAULT_VAL,
    PLACEHOLDER_VAL,
    UNKNOWN_GROUP,
    GraphLink,
    GraphModel,
    GraphNode,
    Vector3,
)
from ..logging import get_ingestion_logger

logger = get_ingestion_logger("graph")

# Half-width of the cube initial positions are drawn from
LAYOUT_HALF_WIDTH = 20.0

PositionSource = Callable[[], Vector3]


class UniformCubePositions:
    """
    Draws positions uniformly inside a cube centered at the origin.

    Pass a seed (or a random.Random) for reproducible layouts.
    """

    def __init__(
        self,
        half_width: float = LAYOUT_HALF_WIDTH,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.half_width = half_width
        self.rng = rng or random.Random(seed)

    def __call__(self) -> Vector3:
        h = self.half_width
        return (
            self.rng.uniform(-h, h),
            self.rng.uniform(-h, h),
            self.rng.uniform(-h, h),
        )


@dataclass(frozen=True)
class NodeItem:
    id: str
    labels: Sequence[Any]
    position: Optional[Vector3] = None


@dataclass(frozen=True)
class RelationshipItem:
    start: str
    end: str


@dataclass(frozen=True)
class Unrecognized:
    value: Any = None


ClassifiedItem = Union[NodeItem, RelationshipItem, Unrecognized]


def _explicit_position(item: Dict[str, Any]) -> Optional[Vector3]:
    """Return (x, y, z) if the item or its properties carry all three as finite numbers."""
    for source in (item, item.get("properties")):
        if not isinstance(source, dict):
            continue
        coords = [source.get(axis) for axis in ("x", "y", "z")]
        if all(
            isinstance(c, (int, float)) and not isinstance(c, bool) and math.isfinite(c)
            for c in coords
        ):
            return (float(coords[0]), float(coords[1]), float(coords[2]))
    return None


def classify_item(item: Any) -> ClassifiedItem:
    """
    Classify one result element.

    An element that looks like both a node and a relationship is treated
    as a node.
    """
    if not isinstance(item, dict):
        return Unrecognized(item)

    labels = item.get("labels")
    if item.get("id") is not None and isinstance(labels, (list, tuple)):
        return NodeItem(
            id=str(item["id"]),
            labels=labels,
            position=_explicit_position(item),
        )

    if item.get("start") is not None and item.get("end") is not None:
        return RelationshipItem(start=str(item["start"]), end=str(item["end"]))

    return Unrecognized(item)


def iter_items(raw: Any):
    """Yield result elements in row, column, path-element order."""
    if not isinstance(raw, dict):
        return
    rows = raw.get("results")
    if not isinstance(rows, list):
        return
    for row in rows:
        if not isinstance(row, (list, tuple)):
            continue
        for column in row:
            if isinstance(column, (list, tuple)):
                yield from column
            else:
                yield column


class GraphIngestor:
    """
    Builds a GraphModel from a raw query result in a single linear pass.

    Usage:
        ingestor = GraphIngestor(position_source=UniformCubePositions(seed=7))
        model = ingestor.ingest(client.execute(query))
    """

    def __init__(self, position_source: Optional[PositionSource] = None):
        self.position_source = position_source or UniformCubePositions()

    def ingest(self, raw: Any) -> GraphModel:
        """
        Normalize a raw result into a GraphModel.

        Empty or malformed payloads yield an empty model, never an error.
        """
        nodes: Dict[str, GraphNode] = {}
        links: List[GraphLink] = []
        skipped = 0
        placeholders = 0

        for item in iter_items(raw):
            classified = classify_item(item)

            if isinstance(classified, NodeItem):
                if classified.id not in nodes:
                    labels = classified.labels
                    nodes[classified.id] = GraphNode(
                        id=classified.id,
                        position=classified.position or self.position_source(),
                        val=DEFAULT_VAL,
                        group=labels[0] if len(labels) > 0 else DEFAULT_GROUP,
                    )

            elif isinstance(classified, RelationshipItem):
                links.append(GraphLink(source=classified.start, target=classified.end))
                for endpoint in (classified.start, classified.end):
                    if endpoint not in nodes:
                        nodes[endpoint] = GraphNode(
                            id=endpoint,
                            position=self.position_source(),
                            val=PLACEHOLDER_VAL,
                            group=UNKNOWN_GROUP,
                            placeholder=True,
                        )
                        placeholders += 1

            else:
                skipped += 1

        model = GraphModel(nodes=nodes, links=links)
        logger.debug(
            "graph_ingested",
            nodes=model.node_count,
            placeholders=placeholders,
            links=model.link_count,
            skipped_items=skipped,
        )
        return model


def ingest(raw: Any, position_source: Optional[PositionSource] = None) -> GraphModel:
    """Convenience wrapper around GraphIngestor.ingest."""
    return GraphIngestor(position_source=position_source).ingest(raw)
