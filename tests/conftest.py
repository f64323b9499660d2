"""Pytest configuration and fixtures."""

from typing import Callable

import pytest

from kgviz.config import Settings, get_test_settings
from kgviz.graph import GraphModel
from kgviz.layout import ForceSimulation
from kgviz.models import Edge, Node
from kgviz.session import GraphSession


class FrameQueue:
    """Stand-in for a host's request_frame primitive.

    Callbacks are queued and only run when the test pumps the queue.
    """

    def __init__(self) -> None:
        self.callbacks: list[Callable[[], None]] = []
        self.requested = 0

    def __call__(self, callback: Callable[[], None]) -> None:
        self.requested += 1
        self.callbacks.append(callback)

    def __len__(self) -> int:
        return len(self.callbacks)

    def pump(self, limit: int = 10_000) -> int:
        """Deliver frames until none are pending; returns frames delivered."""
        delivered = 0
        while self.callbacks and delivered < limit:
            callback = self.callbacks.pop(0)
            callback()
            delivered += 1
        return delivered


@pytest.fixture
def test_settings() -> Settings:
    """Settings tuned for tests."""
    return get_test_settings()


@pytest.fixture
def sample_snapshot() -> dict:
    """Two nodes joined by one edge."""
    return {
        "nodes": [
            {"id": "a", "name": "AI"},
            {"id": "b", "name": "ML", "type": "Concept"},
        ],
        "edges": [
            {"source": "a", "target": "b", "relationship": "relatedTo"},
        ],
    }


@pytest.fixture
def tech_snapshot() -> dict:
    """Small mixed-type graph with properties and an isolated node."""
    return {
        "nodes": [
            {
                "id": "py",
                "name": "Python",
                "type": "Technology",
                "description": "General purpose programming language",
                "properties": {"paradigm": ["object-oriented", "functional"], "year": 1991},
            },
            {"id": "np", "name": "NumPy", "type": "Technology", "description": "Array computing"},
            {"id": "arr", "name": "Array", "type": "Data Structure"},
            {"id": "gvr", "name": "Guido van Rossum", "type": "Person"},
            {"id": "psf", "name": "Python Software Foundation", "type": "Organization"},
            {"id": "lonely", "name": "Orphan", "type": "Widget"},
        ],
        "edges": [
            {"source": "np", "target": "py", "relationship": "built_on"},
            {"source": "np", "target": "arr", "relationship": "provides"},
            {"source": "gvr", "target": "py", "relationship": "created"},
            {"source": "psf", "target": "py", "type": "stewards"},
        ],
    }


@pytest.fixture
def sample_model(sample_snapshot: dict) -> GraphModel:
    """Model built from the two-node snapshot."""
    return GraphModel.from_snapshot(sample_snapshot)


@pytest.fixture
def tech_model(tech_snapshot: dict) -> GraphModel:
    """Model built from the mixed-type snapshot."""
    return GraphModel.from_snapshot(tech_snapshot)


@pytest.fixture
def placed_model() -> GraphModel:
    """Three nodes at fixed seed positions; a-b linked, c isolated."""
    return GraphModel.build(
        [
            Node(id="a", name="Alpha", type="Concept", x=100.0, y=100.0),
            Node(id="b", name="Beta", type="Concept", x=200.0, y=100.0),
            Node(id="c", name="Gamma", type="Person", x=400.0, y=400.0),
        ],
        [Edge(source="a", target="b", relationship="links")],
    )


@pytest.fixture
def placed_simulation(placed_model: GraphModel, test_settings: Settings) -> ForceSimulation:
    """Simulation over placed_model that has not ticked yet."""
    return ForceSimulation(placed_model, seed=test_settings.random_seed)


@pytest.fixture
def frame_queue() -> FrameQueue:
    """Manually pumped request_frame."""
    return FrameQueue()


@pytest.fixture
def session(test_settings: Settings, sample_snapshot: dict) -> GraphSession:
    """Session with the two-node snapshot loaded."""
    session = GraphSession(config=test_settings)
    session.load_snapshot(sample_snapshot)
    return session
