"""
Pytest configuration for API integration tests
"""

import base64

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from config import get_settings
    from core.image.backends import get_backend
    from core.image.loader import ImageLoader
    from main import app

    app.state.backend = get_backend("opencv")
    app.state.loader = ImageLoader()
    app.state.config = get_settings().to_dict()

    # Create test client (no context manager to avoid running the lifespan)
    yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def png_base64(png_bytes):
    """PNG test image as a bare base64 string"""
    return base64.b64encode(png_bytes).decode()
