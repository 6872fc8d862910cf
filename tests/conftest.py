"""Pytest configuration and fixtures for mcp-server-deep-research tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mcp_server_deep_research.client import ResearchClient
from mcp_server_deep_research.handlers import ResearchHandlers


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: End-to-end tests requiring a real Gemini API key")


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_client() -> MagicMock:
    """Test double with the ResearchClient surface."""
    client = MagicMock(spec=ResearchClient)
    client.agent = "deep-research-test-agent"
    client.model = "gemini-test-flash"
    client.create_interaction = AsyncMock()
    client.get_interaction = AsyncMock()
    client.generate_grounded = AsyncMock()
    return client


@pytest.fixture
def handlers(fake_client) -> ResearchHandlers:
    return ResearchHandlers(fake_client)
