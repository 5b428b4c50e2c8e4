# tests/conftest.py
"""
Pytest configuration and fixtures.

Nothing here touches the network: the query service is replaced by fake
clients or httpx.MockTransport, and random sources are seeded.
"""

import random

import pytest

from gesture_graph.control.smoother import ControlSmoother
from gesture_graph.graph.ingestor import GraphIngestor, UniformCubePositions
from gesture_graph.graph.models import GraphModel, GraphNode
from gesture_graph.graph.store import GraphStore
from gesture_graph.ingestion.quine import QueryServiceError


class SequentialPositions:
    """Position source handing out (i, i, i) for i = 1, 2, 3, ..."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return (float(self.calls), float(self.calls), float(self.calls))


class FakeQuineClient:
    """Stands in for QuineClient; returns a canned payload or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def execute(self, cypher, parameters=None):
        self.calls.append((cypher, parameters))
        if self.error is not None:
            raise self.error
        return self.payload


def node_item(node_id, *labels, **extra):
    return {"id": node_id, "labels": list(labels), "properties": {}, **extra}


def rel_item(start, end, name="KNOWS"):
    return {"start": start, "end": end, "name": name, "properties": {}}


@pytest.fixture
def positions() -> SequentialPositions:
    return SequentialPositions()


@pytest.fixture
def ingestor(positions) -> GraphIngestor:
    return GraphIngestor(position_source=positions)


@pytest.fixture
def seeded_ingestor() -> GraphIngestor:
    return GraphIngestor(position_source=UniformCubePositions(seed=1234))


@pytest.fixture
def people_result():
    """Two people and one relationship in one row."""
    return {
        "results": [
            [node_item("1", "Person"), rel_item("1", "2"), node_item("2", "Person")],
        ]
    }


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def smoother() -> ControlSmoother:
    return ControlSmoother()


@pytest.fixture
def small_model() -> GraphModel:
    return GraphModel.from_dict({
        "nodes": [
            {"id": "a", "x": 3.0, "y": 0.0, "z": 4.0, "val": 1.0, "group": "A"},
            {"id": "b", "x": 0.0, "y": 0.0, "z": 0.0, "val": 2.0, "group": "B"},
            {"id": "c", "x": -1.0, "y": 2.0, "z": -2.0, "val": 0.5, "group": "A"},
        ],
        "links": [
            {"source": "a", "target": "b"},
            {"source": "b", "target": "c"},
        ],
    })


@pytest.fixture
def rng() -> random.Random:
    return random.Random(99)


@pytest.fixture
def fake_client_factory():
    """Returns (factory, holder) where holder["client"] is used for every URL."""
    holder = {"client": FakeQuineClient(payload={"results": []}), "urls": []}

    def factory(url):
        holder["urls"].append(url)
        return holder["client"]

    return factory, holder


@pytest.fixture
def service_error():
    return QueryServiceError("Quine API Error 500: boom", status_code=500)


def make_node(node_id, position=(1.0, 1.0, 1.0), val=1.0, group="Default") -> GraphNode:
    return GraphNode(id=node_id, position=position, val=val, group=group)
