"""Task delegation for agent-mesh.

This package provides the async DelegationClient that hands a task to one
target agent, and the context and outcome types that travel with it.
"""

from agent_mesh.delegation.client import (
    DEFAULT_TIMEOUT,
    MAX_DEPTH,
    DelegationClient,
    auth_headers,
)
from agent_mesh.delegation.types import (
    DelegationContext,
    DelegationOutcome,
    DelegationRequest,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "MAX_DEPTH",
    "DelegationClient",
    "DelegationContext",
    "DelegationOutcome",
    "DelegationRequest",
    "auth_headers",
]
