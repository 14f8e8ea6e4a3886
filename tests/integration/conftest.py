"""Integration test fixtures for SpeechCollect.

Provides an async HTTP client bound to a fresh application whose
settings point at a temporary dataset directory.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
