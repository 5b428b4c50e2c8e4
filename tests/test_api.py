# tests/test_api.py
"""
Test the HTTP surface with FastAPI's TestClient.

Process-wide singletons are swapped for fresh instances through
dependency_overrides. Only TestStartup enters the client as a context
manager, which runs the lifespan (demo seeding, autoload).
"""

import asyncio
import random

import pytest
from fastapi.testclient import TestClient

from gesture_graph.animation.engine import TransformEngine, get_transform_engine
from gesture_graph.control.smoother import ControlSmoother, get_control_smoother
from gesture_graph.graph.ingestor import GraphIngestor
from gesture_graph.graph.store import GraphStore, get_graph_store
from gesture_graph.ingestion.loader import GraphLoader, get_graph_loader
from gesture_graph import main
from gesture_graph.main import app

from conftest import FakeQuineClient


@pytest.fixture
def api(store, smoother, fake_client_factory, positions):
    factory, holder = fake_client_factory
    loader = GraphLoader(
        store=store,
        default_url="http://quine:8082",
        ingestor=GraphIngestor(position_source=positions),
        client_factory=factory,
    )
    app.dependency_overrides[get_graph_store] = lambda: store
    app.dependency_overrides[get_control_smoother] = lambda: smoother
    app.dependency_overrides[get_transform_engine] = lambda: TransformEngine(rng=random.Random(0))
    app.dependency_overrides[get_graph_loader] = lambda: loader
    yield TestClient(app), holder
    app.dependency_overrides.clear()


class TestGraphRoutes:
    """Tests for /graph."""

    def test_empty_graph(self, api):
        client, _ = api
        response = client.get("/graph")
        assert response.status_code == 200
        assert response.json() == {"nodes": [], "links": [], "node_count": 0, "link_count": 0}

    def test_query_publishes(self, api, people_result):
        client, holder = api
        holder["client"] = FakeQuineClient(payload=people_result)

        response = client.post("/graph/query", json={"query": "MATCH (n) RETURN n"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["published"] is True
        assert body["node_count"] == 2

        graph = client.get("/graph").json()
        assert sorted(n["id"] for n in graph["nodes"]) == ["1", "2"]

    def test_query_failure_is_502(self, api, service_error):
        client, holder = api
        holder["client"] = FakeQuineClient(error=service_error)

        response = client.post("/graph/query", json={})
        assert response.status_code == 502
        assert response.json()["detail"] == "Quine API Error 500: boom"

    def test_empty_query_result_warns(self, api):
        client, _ = api
        body = client.post("/graph/query", json={}).json()
        assert body["published"] is False
        assert body["warning"].startswith("Query returned 0 nodes")

    def test_demo_graph(self, api):
        client, _ = api
        response = client.post("/graph/demo", json={"count": 25, "seed": 4})
        assert response.status_code == 200
        assert response.json()["node_count"] == 25
        assert client.get("/graph").json()["node_count"] == 25

    def test_demo_count_bounds(self, api):
        client, _ = api
        assert client.post("/graph/demo", json={"count": -1}).status_code == 422

    def test_put_graph(self, api):
        client, _ = api
        data = {
            "nodes": [{"id": "a", "x": 1, "y": 2, "z": 3}, {"id": "b"}],
            "links": [{"source": "a", "target": "b"}],
        }
        response = client.put("/graph", json=data)
        assert response.status_code == 200
        assert response.json()["link_count"] == 1

        segments = client.get("/graph/segments").json()
        assert segments["count"] == 1
        assert segments["segments"][0] == {"source": [1.0, 2.0, 3.0], "target": [0.0, 0.0, 0.0]}

    def test_put_dangling_graph_rejected(self, api, store):
        client, _ = api
        data = {"nodes": [{"id": "a"}], "links": [{"source": "a", "target": "ghost"}]}
        response = client.put("/graph", json=data)
        assert response.status_code == 422
        assert store.snapshot.is_empty

    @pytest.mark.parametrize("data", [
        {"nodes": ["a"], "links": []},
        {"nodes": [{"id": "a"}], "links": ["a->b"]},
        {"nodes": [{"id": "a", "x": None}]},
        {"nodes": [{"id": "a"}], "links": [{"source": "a"}]},
        {"nodes": "a,b"},
    ])
    def test_put_malformed_graph_rejected(self, api, store, data):
        """Wrong entry shapes are a 422, and the active graph is untouched."""
        client, _ = api
        response = client.put("/graph", json=data)
        assert response.status_code == 422
        assert response.json()["detail"].startswith("Invalid graph:")
        assert store.snapshot.is_empty


class TestControlRoutes:
    """Tests for /control."""

    def test_sample_is_smoothed(self, api):
        client, _ = api
        response = client.post("/control/sample", json={"expansion": 1.0, "tension": 0.5})
        assert response.json() == pytest.approx({"expansion": 0.5, "tension": 0.25})

    def test_bad_sample_counts_as_zero(self, api, smoother):
        client, _ = api
        client.post("/control/sample", json={"expansion": 1.0, "tension": 1.0})
        body = client.post("/control/sample", json={"expansion": "wide"}).json()
        assert body == pytest.approx({"expansion": 0.25, "tension": 0.25})

    def test_tool_call_message(self, api):
        client, _ = api
        message = {"toolCall": {"functionCalls": [
            {"id": "1", "name": "updateGraphControl", "args": {"expansion": 1.0, "tension": 0.0}},
            {"id": "2", "name": "somethingElse", "args": {}},
        ]}}
        body = client.post("/control/tool-call", json=message).json()

        assert body["responses"] == [
            {"id": "1", "name": "updateGraphControl", "response": {"result": "ok"}},
        ]
        assert body["state"]["expansion"] == pytest.approx(0.5)

    @pytest.mark.parametrize("message", [
        {"toolCall": {"functionCalls": 5}},
        {"toolCall": {"functionCalls": {"id": "1"}}},
        {"toolCall": ["updateGraphControl"]},
        {"toolCall": "updateGraphControl"},
        {},
    ])
    def test_malformed_tool_call_message_ignored(self, api, smoother, message):
        client, _ = api
        response = client.post("/control/tool-call", json=message)

        assert response.status_code == 200
        assert response.json()["responses"] == []
        assert smoother.state.expansion == 0.0

    def test_reset(self, api):
        client, _ = api
        client.post("/control/sample", json={"expansion": 1.0, "tension": 1.0})
        assert client.post("/control/reset").json() == {"expansion": 0.0, "tension": 0.0}


class TestFrameRoute:
    """Tests for /frame."""

    def test_frame(self, api):
        client, _ = api
        client.put("/graph", json={"nodes": [{"id": "o"}, {"id": "p", "x": 0, "y": 0, "z": 2}]})
        client.post("/control/sample", json={"expansion": 1.0, "tension": 0.0})

        frame = client.get("/frame", params={"elapsed": 1.5}).json()

        assert frame["elapsed"] == 1.5
        assert frame["poses"]["o"] == {"x": 0.0, "y": 0.0, "z": 0.0, "scale": 1.5}
        assert frame["poses"]["p"]["z"] == pytest.approx(12.0)
        assert frame["cues"]["auto_rotate"] is True

    def test_negative_elapsed_rejected(self, api):
        client, _ = api
        assert client.get("/frame", params={"elapsed": -1}).status_code == 422


class TestStartup:
    """Tests for the lifespan hook."""

    @pytest.fixture
    def startup(self, monkeypatch, store, fake_client_factory, positions):
        factory, holder = fake_client_factory
        loader = GraphLoader(
            store=store,
            default_url="http://quine:8082",
            ingestor=GraphIngestor(position_source=positions),
            client_factory=factory,
        )
        monkeypatch.setattr(main, "get_graph_store", lambda: store)
        monkeypatch.setattr(main, "get_graph_loader", lambda: loader)
        monkeypatch.setattr(main.settings, "demo_node_count", 10)
        return holder

    def test_seeds_demo_graph(self, startup, store, monkeypatch):
        monkeypatch.setattr(main.settings, "quine_autoload", False)
        with TestClient(app):
            pass
        assert store.snapshot.node_count == 10

    def test_autoload_runs_off_the_event_loop(self, startup, store, people_result, monkeypatch):
        """The blocking initial query must not run on the loop thread."""
        monkeypatch.setattr(main.settings, "quine_autoload", True)
        on_loop = []

        class RecordingClient(FakeQuineClient):
            def execute(self, cypher, parameters=None):
                try:
                    asyncio.get_running_loop()
                    on_loop.append(True)
                except RuntimeError:
                    on_loop.append(False)
                return super().execute(cypher, parameters)

        startup["client"] = RecordingClient(payload=people_result)
        with TestClient(app):
            pass

        assert on_loop == [False]
        assert sorted(store.snapshot.nodes) == ["1", "2"]

    def test_autoload_failure_keeps_demo_graph(self, startup, store, service_error, monkeypatch):
        monkeypatch.setattr(main.settings, "quine_autoload", True)
        startup["client"] = FakeQuineClient(error=service_error)
        with TestClient(app):
            pass
        assert store.snapshot.node_count == 10


class TestHealth:
    def test_health(self, api):
        client, _ = api
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
