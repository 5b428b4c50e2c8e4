# gesture_graph/graph/models.py
"""
Graph models for the rendered property graph.

Core entities:
- GraphNode: Immutable vertex with a fixed base position
- GraphLink: Directed link between two node ids
- GraphModel: Complete snapshot handed to the renderer
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

Vector3 = Tuple[float, float, float]
Group = Union[str, int]

DEFAULT_GROUP = "Default"
UNKNOWN_GROUP = "Unknown"
DEFAULT_VAL = 1.0
PLACEHOLDER_VAL = DEFAULT_VAL / 2


@dataclass(frozen=True)
class GraphNode:
    """
    Immutable graph node.

    The position is the base position captured at ingestion; animation
    offsets are computed per frame and never written back.
    """
    id: str
    position: Vector3
    val: float = DEFAULT_VAL
    group: Group = DEFAULT_GROUP
    color: Optional[str] = None
    placeholder: bool = False

    def to_dict(self) -> Dict[str, Any]:
        x, y, z = self.position
        return {
            "id": self.id,
            "x": x,
            "y": y,
            "z": z,
            "val": self.val,
            "group": self.group,
            "color": self.color,
        }


@dataclass(frozen=True)
class GraphLink:
    """Directed link. Both ends must name nodes in the same model."""
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


@dataclass
class GraphModel:
    """
    Snapshot of the graph shown by the renderer.

    Built in one step by an ingestion or a generator and then only ever
    replaced wholesale. Links must not dangle.
    """
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    links: List[GraphLink] = field(default_factory=list)

    def __post_init__(self):
        for link in self.links:
            for end in (link.source, link.target):
                if end not in self.nodes:
                    raise ValueError(
                        f"Link {link.source} -> {link.target} references unknown node {end!r}"
                    )

    @classmethod
    def empty(cls) -> "GraphModel":
        return cls()

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[GraphNode],
        links: Iterable[GraphLink] = (),
    ) -> "GraphModel":
        """Build a model from node/link sequences; duplicate ids keep the first node."""
        node_map: Dict[str, GraphNode] = {}
        for node in nodes:
            node_map.setdefault(node.id, node)
        return cls(nodes=node_map, links=list(links))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphModel":
        """
        Build a model from the renderer shape.

        Accepts {"nodes": [{id, x, y, z, val, group, color}], "links": [{source, target}]},
        which is what the demo generator and external producers emit.

        Raises:
            ValueError: If the shape is wrong (non-list collections, non-object
                entries, missing ids or endpoints, non-numeric fields), a val
                is not positive, or a link dangles
        """
        if not isinstance(data, dict):
            raise ValueError("Graph must be an object with nodes and links")

        nodes = []
        for raw in _entries(data, "nodes"):
            if raw.get("id") is None:
                raise ValueError("Node without id")
            node_id = str(raw["id"])
            val = _number(raw, "val", DEFAULT_VAL, node_id)
            if val <= 0:
                raise ValueError(f"Node {node_id!r} has non-positive val {val}")
            nodes.append(GraphNode(
                id=node_id,
                position=(
                    _number(raw, "x", 0.0, node_id),
                    _number(raw, "y", 0.0, node_id),
                    _number(raw, "z", 0.0, node_id),
                ),
                val=val,
                group=raw.get("group", DEFAULT_GROUP),
                color=raw.get("color"),
            ))

        links = []
        for raw in _entries(data, "links"):
            if raw.get("source") is None or raw.get("target") is None:
                raise ValueError(f"Link without source or target: {raw!r}")
            links.append(GraphLink(source=str(raw["source"]), target=str(raw["target"])))

        return cls.from_nodes(nodes, links)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def link_count(self) -> int:
        return len(self.links)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self.nodes.get(node_id)

    def placeholders(self) -> List[GraphNode]:
        """Nodes synthesized for relationship endpoints never seen as nodes."""
        return [n for n in self.nodes.values() if n.placeholder]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "links": [link.to_dict() for link in self.links],
        }


def _entries(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """The `key` collection of a renderer-shape graph; every entry must be an object."""
    entries = data.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError(f"{key!r} must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"{key!r} entries must be objects, got {entry!r}")
    return entries


def _number(raw: Dict[str, Any], key: str, default: float, node_id: str) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"Node {node_id!r} field {key!r} must be a finite number, got {value!r}")
    return float(value)
