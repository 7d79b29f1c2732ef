"""Pydantic models for delegation API requests and responses."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from agent_mesh.registry import DelegationRecord


class DelegateRequest(BaseModel):
    """Request body for delegating a task.

    Either target_name or query must be given. With a query, the best
    discovery match becomes the target.
    """

    model_config = ConfigDict(populate_by_name=True)

    task: str = Field(..., min_length=1, description="Task for the target agent")
    target_name: str | None = Field(None, description="Name of the target agent")
    query: str | None = Field(None, description="Discovery query to pick a target")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Context forwarded to the agent"
    )
    source_agent: str = Field("api", description="Name of the delegating agent")
    async_: bool = Field(
        False,
        alias="async",
        description="Ask the agent to POST its result to the callback URL",
    )


class DelegateResponse(BaseModel):
    """Outcome of a delegation call."""

    id: str
    target_agent: str
    status: str
    success: bool
    result: str | None = None
    error: str | None = None
    latency_ms: int


class DelegationResultRequest(BaseModel):
    """Asynchronous result POSTed back by an agent."""

    status: Literal["completed", "failed"] = "completed"
    result: str | None = None
    error: str | None = None


class DelegationRecordResponse(BaseModel):
    """A delegation ledger entry."""

    id: str
    source_agent: str
    target_agent: str
    task: str
    status: str
    result: str | None = None
    error: str | None = None
    latency_ms: int | None = None
    created_at: str
    updated_at: str

    @classmethod
    def from_record(cls, record: DelegationRecord) -> "DelegationRecordResponse":
        return cls(
            id=record.id,
            source_agent=record.source_agent,
            target_agent=record.target_agent,
            task=record.task,
            status=record.status.value,
            result=record.result,
            error=record.error,
            latency_ms=record.latency_ms,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DelegationListResponse(BaseModel):
    """Response model for listing delegations."""

    delegations: list[DelegationRecordResponse]
    limit: int
    offset: int
