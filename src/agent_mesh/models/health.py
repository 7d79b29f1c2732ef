"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of agent-mesh.
        agent_count: Number of registered agents, if the store is available.
        discovery_provider: Active discovery provider ("local" or "remote").
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of agent-mesh")
    agent_count: int | None = Field(
        default=None,
        description="Number of registered agents",
    )
    discovery_provider: str | None = Field(
        default=None,
        description="Active discovery provider",
    )
