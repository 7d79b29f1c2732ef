"""Integration tests for agent registry API endpoints."""

import pytest


@pytest.mark.asyncio
async def test_register_agent(async_client):
    """Test registering a new agent."""
    response = await async_client.post(
        "/api/v1/agents",
        json={
            "name": "summarizer",
            "description": "Summarizes documents",
            "capabilities": ["summarize"],
            "endpoint": "http://localhost:5001/task",
            "resources": [
                {"uri": "github:acme/docs", "type": "git", "access": "read"}
            ],
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "summarizer"
    assert data["capabilities"] == ["summarize"]
    assert data["protocol"] == "http"
    assert data["resources"][0]["uri"] == "github:acme/docs"
    assert data["resources"][0]["access"] == "read"
    assert data["auth"] is None
    assert data["registered_at"]
    assert data["last_seen"] == data["registered_at"]


@pytest.mark.asyncio
async def test_register_hides_credentials(async_client):
    """Test that tokens are stored but never returned."""
    response = await async_client.post(
        "/api/v1/agents",
        json={
            "name": "secure",
            "endpoint": "http://localhost:5002/task",
            "auth": {"type": "header", "token": "k", "header_name": "X-Key"},
        },
    )

    assert response.status_code == 201
    assert response.json()["auth"] == {"type": "header"}

    fetched = await async_client.get("/api/v1/agents/secure")
    assert "token" not in fetched.text
    assert fetched.json()["auth"] == {"type": "header"}


@pytest.mark.asyncio
async def test_register_update_keeps_registered_at(async_client, registered_agents):
    """Test that re-registering by name updates fields in place."""
    before = (await async_client.get("/api/v1/agents/search-agent")).json()

    response = await async_client.post(
        "/api/v1/agents",
        json={
            "name": "search-agent",
            "description": "Enterprise search",
            "capabilities": ["search"],
            "endpoint": "http://search2.agents/task",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["endpoint"] == "http://search2.agents/task"
    assert data["description"] == "Enterprise search"
    assert data["registered_at"] == before["registered_at"]

    listed = (await async_client.get("/api/v1/agents")).json()["agents"]
    assert len(listed) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"endpoint": "http://localhost:1/task"},
        {"name": "x"},
        {"name": "", "endpoint": "http://localhost:1/task"},
        {"name": "x", "endpoint": "http://localhost:1/task", "auth": {"type": "magic"}},
    ],
)
async def test_register_invalid_body(async_client, body):
    """Test that incomplete registrations are rejected by validation."""
    response = await async_client.post("/api/v1/agents", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_blank_name_rejected(async_client):
    """Test that whitespace-only names are rejected by the store."""
    response = await async_client.post(
        "/api/v1/agents", json={"name": "   ", "endpoint": "http://localhost:1/task"}
    )

    assert response.status_code == 400
    assert "name" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_agents_sorted(async_client, registered_agents):
    """Test that agents are listed by name."""
    response = await async_client.get("/api/v1/agents")

    assert response.status_code == 200
    names = [a["name"] for a in response.json()["agents"]]
    assert names == ["code-agent", "data-agent", "search-agent"]


@pytest.mark.asyncio
async def test_list_agents_empty(async_client):
    """Test listing with an empty registry."""
    response = await async_client.get("/api/v1/agents")

    assert response.status_code == 200
    assert response.json() == {"agents": []}


@pytest.mark.asyncio
async def test_get_agent(async_client, registered_agents):
    """Test retrieving a single agent."""
    response = await async_client.get("/api/v1/agents/data-agent")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "data-agent"
    assert data["resources"][0]["uri"] == "file://vm1/srv/data/*"


@pytest.mark.asyncio
async def test_get_nonexistent_agent(async_client):
    """Test that unknown agents return 404."""
    response = await async_client.get("/api/v1/agents/ghost")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


@pytest.mark.asyncio
async def test_unregister_agent(async_client, registered_agents):
    """Test removing an agent."""
    response = await async_client.delete("/api/v1/agents/code-agent")

    assert response.status_code == 200
    assert response.json() == {"ok": True}

    assert (await async_client.get("/api/v1/agents/code-agent")).status_code == 404
    second = await async_client.delete("/api/v1/agents/code-agent")
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_heartbeat(async_client, registered_agents):
    """Test that a heartbeat refreshes last_seen only."""
    before = (await async_client.get("/api/v1/agents/code-agent")).json()

    response = await async_client.post("/api/v1/agents/code-agent/heartbeat")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    after = (await async_client.get("/api/v1/agents/code-agent")).json()
    assert after["last_seen"] >= before["last_seen"]
    assert after["registered_at"] == before["registered_at"]


@pytest.mark.asyncio
async def test_heartbeat_unknown_agent(async_client):
    """Test that heartbeats for unknown agents return 404."""
    response = await async_client.post("/api/v1/agents/ghost/heartbeat")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_register_publishes_to_remote_provider(async_client, test_app):
    """Test that registration publishes capabilities when search is remote."""
    from unittest.mock import AsyncMock

    from agent_mesh.discovery import RemoteDiscoveryProvider

    remote = RemoteDiscoveryProvider("http://search.test", test_app.state.agent_store)
    remote.publish_capabilities = AsyncMock(return_value=False)
    test_app.state.discovery_provider = remote

    response = await async_client.post(
        "/api/v1/agents",
        json={"name": "pub", "endpoint": "http://localhost:1/task", "capabilities": ["x"]},
    )

    assert response.status_code == 201
    remote.publish_capabilities.assert_awaited_once()
    assert remote.publish_capabilities.await_args.args[0].name == "pub"
    await remote.close()
