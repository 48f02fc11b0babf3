"""Shared fixtures for the graph-engine test suite."""
import os

# Set env vars BEFORE any graph_engine imports
os.environ.setdefault("GRAPH_SERVICE_TOKEN", "test-graph-token")

import pytest
from fastapi.testclient import TestClient

from graph_engine import config
from graph_engine.main import create_app
from graph_engine.store import GraphStore


config.GRAPH_SERVICE_TOKEN = os.environ["GRAPH_SERVICE_TOKEN"]


# ── Edge sets ──

TRIANGLE = [
    {"user_id": "a", "target_user_id": "b", "priority": 1.0},
    {"user_id": "b", "target_user_id": "c", "priority": 0.5},
    {"user_id": "c", "target_user_id": "a", "priority": 0.75},
]

PAIR_WITH_GAP = [
    {"user_id": "a", "target_user_id": "b", "priority": 1.0},
    {"user_id": "b", "target_user_id": "a", "priority": None},
]

DISCONNECTED = [
    {"user_id": "a", "target_user_id": "b", "priority": 1},
    {"user_id": "c", "target_user_id": "d", "priority": 2},
]

NAMES = {"a": "Alice", "b": "Bruno", "c": "Chiara", "d": "Dario"}


def ring(n, priority=1.0, prefix="p"):
    """Directed ring p0 -> p1 -> ... -> p(n-1) -> p0."""
    return [
        {"user_id": f"{prefix}{i}", "target_user_id": f"{prefix}{(i + 1) % n}", "priority": priority}
        for i in range(n)
    ]


# ── Store fixtures ──

@pytest.fixture
def store():
    return GraphStore()


@pytest.fixture
def triangle_store(store):
    store.load(TRIANGLE, NAMES)
    return store


# ── FastAPI app fixtures ──

@pytest.fixture
def app_with_store(store):
    """Fresh app whose graph store is the ``store`` fixture."""
    return create_app(store)


@pytest.fixture
def client(app_with_store):
    """TestClient without the service token."""
    return TestClient(app_with_store, raise_server_exceptions=False)


@pytest.fixture
def auth_client(app_with_store):
    """TestClient sending the service token on every request."""
    return TestClient(
        app_with_store, raise_server_exceptions=False,
        headers={config.TOKEN_HEADER: config.GRAPH_SERVICE_TOKEN},
    )
