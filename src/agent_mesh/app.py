"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_mesh.config import AgentMeshSettings
from agent_mesh.delegation import DelegationClient
from agent_mesh.discovery import (
    DiscoveryEngine,
    LocalDiscoveryProvider,
    RemoteDiscoveryProvider,
)
from agent_mesh.registry import AgentStore
from agent_mesh.routers import agents, delegations, discovery, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The agent store, discovery provider and delegation client are created
    once at startup and stored in app.state for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: AgentMeshSettings = app.state.settings

    store = AgentStore(settings.resolved_db_path)
    app.state.agent_store = store
    logger.info(f"Opened agent store at {settings.resolved_db_path}")

    local = LocalDiscoveryProvider(
        store, DiscoveryEngine(resource_boost=settings.resource_boost)
    )
    provider: LocalDiscoveryProvider | RemoteDiscoveryProvider = local
    if settings.semantic_search_url:
        provider = RemoteDiscoveryProvider(
            settings.semantic_search_url,
            store,
            api_key=settings.semantic_search_api_key,
            fallback=local,
        )
    app.state.discovery_provider = provider
    logger.info(f"Using {provider.name} discovery provider")

    client = DelegationClient(
        mesh_base_url=settings.callback_base_url,
        timeout=settings.delegation_timeout,
        max_depth=settings.max_delegation_depth,
    )
    app.state.delegation_client = client

    yield

    # Shutdown: Clean up resources
    await client.close()
    if isinstance(provider, RemoteDiscoveryProvider):
        await provider.close()
    logger.info("Delegation client and discovery provider closed")


def create_app(settings: AgentMeshSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional AgentMeshSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from agent_mesh.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="agent-mesh",
        description="Capability-based discovery and task delegation for agent meshes",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(agents.router)
    app.include_router(discovery.router)
    app.include_router(delegations.router)

    return app
