"""Data types for the agent registry and delegation ledger.

This module defines the records advertised by agents (descriptors, resource
grants, credentials) and the audit rows written for each delegation.
"""

from dataclasses import dataclass, field
from enum import Enum


class DelegationStatus(str, Enum):
    """Lifecycle states of a delegation ledger entry."""

    PENDING = "pending"
    RUNNING = "running"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"


# A second async delivery for these states is a conflict
FINALIZED_STATUSES = frozenset({DelegationStatus.COMPLETED, DelegationStatus.FAILED})


@dataclass(frozen=True)
class AgentAuth:
    """Credential descriptor used when calling an agent's endpoint."""

    type: str = "none"  # bearer | header | none
    token: str | None = None
    header_name: str | None = None


@dataclass(frozen=True)
class ResourceGrant:
    """A scoped resource an agent can access.

    Attributes:
        uri: scheme://host/path string, repo slug, plain path or service name.
             A trailing "/*" grants everything beneath the prefix.
        type: Resource kind (filesystem, git, api, database, service).
        description: Optional human description.
        access: Optional access level (read, write, admin).
    """

    uri: str
    type: str | None = None
    description: str | None = None
    access: str | None = None


@dataclass(frozen=True)
class AgentDescriptor:
    """An agent as advertised in the registry."""

    name: str
    description: str
    capabilities: list[str] = field(default_factory=list)
    resources: list[ResourceGrant] = field(default_factory=list)
    endpoint: str = ""
    protocol: str = "http"
    auth: AgentAuth | None = None
    registered_at: str = ""
    last_seen: str = ""


@dataclass
class AgentRegistration:
    """Input for registering or updating an agent."""

    name: str
    endpoint: str
    description: str = ""
    capabilities: list[str] = field(default_factory=list)
    resources: list[ResourceGrant] = field(default_factory=list)
    protocol: str = "http"
    auth: AgentAuth | None = None


@dataclass
class DelegationRecord:
    """An audit row for one delegation attempt."""

    id: str
    source_agent: str
    target_agent: str
    task: str
    status: DelegationStatus = DelegationStatus.PENDING
    result: str | None = None
    error: str | None = None
    latency_ms: int | None = None
    created_at: str = ""
    updated_at: str = ""


class DelegationConflictError(Exception):
    """Raised when a result is delivered for an already finalized delegation."""
