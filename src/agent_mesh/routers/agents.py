"""Agents router for registry CRUD operations.

This module provides REST API endpoints for:
- Registering and updating agents
- Listing all agents
- Retrieving a single agent
- Unregistering agents
- Recording agent heartbeats

Credentials are stored but never returned; responses only carry the
credential type.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from agent_mesh.dependencies import get_agent_store, get_discovery_provider
from agent_mesh.discovery import DiscoveryProvider, RemoteDiscoveryProvider
from agent_mesh.models.agents import (
    AgentListResponse,
    AgentResponse,
    OkResponse,
    RegisterAgentRequest,
)
from agent_mesh.registry import AgentAuth, AgentRegistration, AgentStore, ResourceGrant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])


@router.get("", response_model=AgentListResponse, summary="List all agents")
async def list_agents(
    store: Annotated[AgentStore, Depends(get_agent_store)],
) -> AgentListResponse:
    """List all registered agents ordered by name."""
    agents = store.list()
    return AgentListResponse(agents=[AgentResponse.from_descriptor(a) for a in agents])


@router.post(
    "",
    response_model=AgentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an agent",
)
async def register_agent(
    request: RegisterAgentRequest,
    store: Annotated[AgentStore, Depends(get_agent_store)],
    provider: Annotated[DiscoveryProvider, Depends(get_discovery_provider)],
) -> AgentResponse:
    """Register a new agent or update an existing one by name.

    When a remote discovery provider is active the agent's capabilities are
    also published to it; a failed publish does not fail the registration.

    Args:
        request: Agent registration parameters
        store: Injected AgentStore
        provider: Injected discovery provider

    Returns:
        The stored agent

    Raises:
        HTTPException: 400 if name or endpoint is blank
    """
    registration = AgentRegistration(
        name=request.name,
        endpoint=request.endpoint,
        description=request.description,
        capabilities=request.capabilities,
        resources=[
            ResourceGrant(
                uri=r.uri, type=r.type, description=r.description, access=r.access
            )
            for r in request.resources
        ],
        protocol=request.protocol,
        auth=(
            AgentAuth(
                type=request.auth.type,
                token=request.auth.token,
                header_name=request.auth.header_name,
            )
            if request.auth
            else None
        ),
    )

    try:
        agent = store.register(registration)
    except ValueError as e:
        logger.warning(f"Agent registration failed: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if isinstance(provider, RemoteDiscoveryProvider):
        await provider.publish_capabilities(agent)

    return AgentResponse.from_descriptor(agent)


@router.get("/{name}", response_model=AgentResponse, summary="Get an agent")
async def get_agent(
    name: str,
    store: Annotated[AgentStore, Depends(get_agent_store)],
) -> AgentResponse:
    """Get a single agent by name.

    Raises:
        HTTPException: 404 if the agent is not registered
    """
    agent = store.get(name)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Agent {name} not found"
        )
    return AgentResponse.from_descriptor(agent)


@router.delete("/{name}", response_model=OkResponse, summary="Unregister an agent")
async def unregister_agent(
    name: str,
    store: Annotated[AgentStore, Depends(get_agent_store)],
) -> OkResponse:
    """Remove an agent from the registry.

    Raises:
        HTTPException: 404 if the agent is not registered
    """
    if not store.unregister(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Agent {name} not found"
        )
    return OkResponse()


@router.post(
    "/{name}/heartbeat", response_model=OkResponse, summary="Record a heartbeat"
)
async def heartbeat(
    name: str,
    store: Annotated[AgentStore, Depends(get_agent_store)],
) -> OkResponse:
    """Refresh an agent's last_seen timestamp.

    Raises:
        HTTPException: 404 if the agent is not registered
    """
    if not store.heartbeat(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Agent {name} not found"
        )
    return OkResponse()
