"""Pydantic models for discovery responses."""

from pydantic import BaseModel

from agent_mesh.discovery import DiscoveryResult
from agent_mesh.models.agents import AgentResponse, ResourceGrantModel


class DiscoveryResultResponse(BaseModel):
    """A ranked agent."""

    agent: AgentResponse
    score: float
    matched_capabilities: list[str]
    matched_resources: list[ResourceGrantModel]

    @classmethod
    def from_result(cls, result: DiscoveryResult) -> "DiscoveryResultResponse":
        return cls(
            agent=AgentResponse.from_descriptor(result.agent),
            score=result.score,
            matched_capabilities=list(result.matched_capabilities),
            matched_resources=[
                ResourceGrantModel(
                    uri=r.uri, type=r.type, description=r.description, access=r.access
                )
                for r in result.matched_resources
            ],
        )


class DiscoverResponse(BaseModel):
    """Response model for a discovery query."""

    query: str
    provider: str
    results: list[DiscoveryResultResponse]
