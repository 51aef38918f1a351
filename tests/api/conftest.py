"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from config import load_settings
    from core.buffer_store import BufferStore
    from main import app

    settings = load_settings({})
    buffer_store = BufferStore(max_buffers=10)

    # Set app state (normally done by lifespan)
    app.state.buffer_store = buffer_store
    app.state.settings = settings
    app.state.config = settings.to_dict()

    # Create test client without running lifespan
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    # Cleanup
    buffer_store.clear()


@pytest.fixture
def canvas_id(client):
    """Create an opaque black 32x32 buffer and return its ID"""
    response = client.post(
        "/api/buffers", json={"width": 32, "height": 32, "fill": "#000000", "name": "canvas"}
    )
    return response.json()["id"]
