"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject the shared store, discovery provider and
delegation orchestrator created at startup.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from agent_mesh.config import AgentMeshSettings
from agent_mesh.discovery import DiscoveryProvider
from agent_mesh.registry import AgentStore
from agent_mesh.services import DelegationOrchestrator


@lru_cache
def get_settings() -> AgentMeshSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the AGENT_MESH_ prefix.

    Returns:
        AgentMeshSettings: The application configuration settings.
    """
    return AgentMeshSettings()


def _get_state(request: Request, name: str, label: str):
    if not hasattr(request.app.state, name):
        raise HTTPException(status_code=503, detail=f"{label} not initialized")
    return getattr(request.app.state, name)


def get_agent_store(request: Request) -> AgentStore:
    """Get the agent store from app state.

    Raises:
        HTTPException: If the store is not initialized (503 Service Unavailable).
    """
    return _get_state(request, "agent_store", "Agent store")


def get_discovery_provider(request: Request) -> DiscoveryProvider:
    """Get the active discovery provider from app state.

    Raises:
        HTTPException: If discovery is not initialized (503 Service Unavailable).
    """
    return _get_state(request, "discovery_provider", "Discovery provider")


def get_orchestrator(request: Request) -> DelegationOrchestrator:
    """Get a DelegationOrchestrator bound to the shared app objects.

    Creates a new orchestrator for each request from the store, discovery
    provider and delegation client held in app state.

    Raises:
        HTTPException: If any of them is not initialized (503 Service Unavailable).
    """
    return DelegationOrchestrator(
        store=get_agent_store(request),
        provider=get_discovery_provider(request),
        client=_get_state(request, "delegation_client", "Delegation client"),
    )
