"""Agent registry for agent-mesh.

This package provides the agent store, the delegation ledger and the
record types agents advertise.
"""

from agent_mesh.registry.store import AgentStore
from agent_mesh.registry.types import (
    FINALIZED_STATUSES,
    AgentAuth,
    AgentDescriptor,
    AgentRegistration,
    DelegationConflictError,
    DelegationRecord,
    DelegationStatus,
    ResourceGrant,
)

__all__ = [
    # Store
    "AgentStore",
    # Agent types
    "AgentAuth",
    "AgentDescriptor",
    "AgentRegistration",
    "ResourceGrant",
    # Ledger types
    "DelegationConflictError",
    "DelegationRecord",
    "DelegationStatus",
    "FINALIZED_STATUSES",
]
