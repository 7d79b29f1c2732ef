"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from agent_mesh.models.agents import (
    AgentAuthRequest,
    AgentAuthResponse,
    AgentListResponse,
    AgentResponse,
    OkResponse,
    RegisterAgentRequest,
    ResourceGrantModel,
)
from agent_mesh.models.delegations import (
    DelegateRequest,
    DelegateResponse,
    DelegationListResponse,
    DelegationRecordResponse,
    DelegationResultRequest,
)
from agent_mesh.models.discovery import DiscoverResponse, DiscoveryResultResponse
from agent_mesh.models.health import HealthResponse

__all__ = [
    "AgentAuthRequest",
    "AgentAuthResponse",
    "AgentListResponse",
    "AgentResponse",
    "DelegateRequest",
    "DelegateResponse",
    "DelegationListResponse",
    "DelegationRecordResponse",
    "DelegationResultRequest",
    "DiscoverResponse",
    "DiscoveryResultResponse",
    "HealthResponse",
    "OkResponse",
    "RegisterAgentRequest",
    "ResourceGrantModel",
]
