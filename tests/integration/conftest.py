"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures: agents registered
through the API and a mock agent network the delegation client talks to.
"""

import httpx
import pytest
import pytest_asyncio

from agent_mesh.delegation import DelegationClient

AGENTS = [
    {
        "name": "search-agent",
        "description": "Web search and indexing",
        "capabilities": ["search", "index"],
        "endpoint": "http://search.agents/task",
    },
    {
        "name": "code-agent",
        "description": "Code generation and review",
        "capabilities": ["code", "review"],
        "endpoint": "http://code.agents/task",
        "auth": {"type": "bearer", "token": "code-secret"},
    },
    {
        "name": "data-agent",
        "description": "Data analysis and search",
        "capabilities": ["data", "search"],
        "endpoint": "http://data.agents/task",
        "resources": [{"uri": "file://vm1/srv/data/*", "type": "filesystem"}],
    },
]


class AgentNetwork:
    """Mock agents keyed by host; records every request they receive."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.handlers = {}

    def route(self, host, handler):
        self.handlers[host] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(request.url.host)
        if handler is None:
            return httpx.Response(200, json={"result": f"{request.url.host} done"})
        return handler(request)


@pytest_asyncio.fixture
async def registered_agents(async_client):
    """Register the standard three agents through the API."""
    for agent in AGENTS:
        response = await async_client.post("/api/v1/agents", json=agent)
        assert response.status_code == 201
    return AGENTS


@pytest_asyncio.fixture
async def agent_network(async_client, test_app):
    """Point the app's delegation client at a mock agent network.

    Must be requested after async_client so the lifespan has already run.
    """
    network = AgentNetwork()
    client = DelegationClient(
        mesh_base_url="http://mesh.test",
        timeout=1.0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(network)),
    )
    test_app.state.delegation_client = client
    yield network
    await client._client.aclose()
