"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from agent_mesh.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of agent-mesh, along with
    the registered agent count and the active discovery provider when the
    store has been initialized.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    agent_count = None
    provider = None

    if hasattr(request.app.state, "agent_store"):
        try:
            agent_count = len(request.app.state.agent_store.list())
        except Exception as e:
            logger.warning(f"Agent store check failed: {e}")

    if hasattr(request.app.state, "discovery_provider"):
        provider = request.app.state.discovery_provider.name

    return HealthResponse(
        status="ok",
        version="0.1.0",
        agent_count=agent_count,
        discovery_provider=provider,
    )
