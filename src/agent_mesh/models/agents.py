"""Pydantic models for agent API requests and responses."""

from pydantic import BaseModel, Field

from agent_mesh.registry import AgentDescriptor


class AgentAuthRequest(BaseModel):
    """Credential the mesh presents when delegating to the agent."""

    type: str = Field(
        "none", pattern="^(bearer|header|none)$", description="bearer, header or none"
    )
    token: str | None = Field(None, description="Token or header value")
    header_name: str | None = Field(
        None, description="Header name when type is 'header'"
    )


class ResourceGrantModel(BaseModel):
    """A resource the agent can access."""

    uri: str = Field(
        ..., description="URI, repo slug, path or service name; '/*' suffix for globs"
    )
    type: str | None = Field(
        None, description="filesystem, git, api, database or service"
    )
    description: str | None = None
    access: str | None = Field(None, description="read, write or admin")


class RegisterAgentRequest(BaseModel):
    """Request body for registering an agent."""

    name: str = Field(..., min_length=1, description="Unique agent name")
    endpoint: str = Field(..., min_length=1, description="Task endpoint URL")
    description: str = Field("", description="What this agent does")
    capabilities: list[str] = Field(
        default_factory=list, description="Capability tags"
    )
    resources: list[ResourceGrantModel] = Field(
        default_factory=list, description="Resources the agent can access"
    )
    protocol: str = Field("http", description="Transport protocol")
    auth: AgentAuthRequest | None = Field(None, description="Optional credential")


class AgentAuthResponse(BaseModel):
    """Credential type only; tokens are never returned."""

    type: str


class AgentResponse(BaseModel):
    """Response model for a single agent."""

    name: str
    description: str
    capabilities: list[str]
    resources: list[ResourceGrantModel]
    endpoint: str
    protocol: str
    auth: AgentAuthResponse | None = None
    registered_at: str
    last_seen: str

    @classmethod
    def from_descriptor(cls, agent: AgentDescriptor) -> "AgentResponse":
        return cls(
            name=agent.name,
            description=agent.description,
            capabilities=list(agent.capabilities),
            resources=[
                ResourceGrantModel(
                    uri=r.uri, type=r.type, description=r.description, access=r.access
                )
                for r in agent.resources
            ],
            endpoint=agent.endpoint,
            protocol=agent.protocol,
            auth=AgentAuthResponse(type=agent.auth.type) if agent.auth else None,
            registered_at=agent.registered_at,
            last_seen=agent.last_seen,
        )


class AgentListResponse(BaseModel):
    """Response model for listing agents."""

    agents: list[AgentResponse]


class OkResponse(BaseModel):
    """Acknowledgement for operations without a body."""

    ok: bool = True
