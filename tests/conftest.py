"""Pytest configuration and shared fixtures for agent-mesh tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a populated store.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from agent_mesh import create_app
from agent_mesh.config import AgentMeshSettings
from agent_mesh.registry import AgentRegistration, AgentStore, ResourceGrant


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with an isolated temporary data directory.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        AgentMeshSettings: Settings instance configured for testing.
    """
    return AgentMeshSettings(
        host="127.0.0.1",
        port=8766,
        data_dir=str(tmp_path),
        db_file="registry.db",
        mesh_base_url="http://mesh.test/",
        delegation_timeout=5.0,
        max_delegation_depth=5,
        semantic_search_url=None,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def store(tmp_path):
    """Create an empty AgentStore backed by a temporary database."""
    return AgentStore(tmp_path / "store" / "registry.db")


@pytest.fixture
def populated_store(store):
    """Create a store holding three agents with overlapping capabilities."""
    store.register(
        AgentRegistration(
            name="search-agent",
            description="Web search and indexing",
            capabilities=["search", "index"],
            endpoint="http://localhost:4001/task",
        )
    )
    store.register(
        AgentRegistration(
            name="code-agent",
            description="Code generation and review",
            capabilities=["code", "review"],
            endpoint="http://localhost:4002/task",
        )
    )
    store.register(
        AgentRegistration(
            name="data-agent",
            description="Data analysis and search",
            capabilities=["data", "search"],
            endpoint="http://localhost:4003/task",
            resources=[ResourceGrant(uri="file://vm1/srv/data/*", type="filesystem")],
        )
    )
    return store
