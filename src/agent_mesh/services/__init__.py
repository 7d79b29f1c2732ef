"""Business logic services for agent-mesh.

This package contains the orchestration that sits between the HTTP API and
the discovery, delegation and registry components.
"""

from agent_mesh.services.orchestrator import (
    AgentNotFoundError,
    DelegationDispatch,
    DelegationNotFoundError,
    DelegationOrchestrator,
)

__all__ = [
    "AgentNotFoundError",
    "DelegationDispatch",
    "DelegationNotFoundError",
    "DelegationOrchestrator",
]
