"""Type definitions for task delegation.

This module contains the context carried across delegation hops, the
request sent to a target agent and the outcome of one delegation call.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from agent_mesh.registry.types import DelegationStatus


@dataclass(frozen=True)
class DelegationContext:
    """Context passed along a delegation chain.

    Attributes:
        depth: Number of delegation hops already traversed
        extra: Caller-defined fields forwarded unchanged
    """

    depth: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "DelegationContext":
        """Build a context from a JSON object.

        The "depth" key becomes the typed depth (0 when absent or null);
        every other key is kept in extra.

        Raises:
            ValueError: If depth is present but not a finite number
        """
        if not data:
            return cls()

        extra = {k: v for k, v in data.items() if k != "depth"}
        depth = data.get("depth")
        if depth is None:
            depth = 0
        elif isinstance(depth, bool) or not isinstance(depth, int):
            try:
                depth = int(depth)
            except (TypeError, ValueError, OverflowError) as e:
                raise ValueError(f"Invalid delegation depth: {depth!r}") from e
        return cls(depth=max(depth, 0), extra=extra)

    def next_hop(self) -> "DelegationContext":
        """Return a copy of this context one hop deeper."""
        return DelegationContext(depth=self.depth + 1, extra=dict(self.extra))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON object sent to agents."""
        return {**self.extra, "depth": self.depth}


@dataclass(frozen=True)
class DelegationRequest:
    """The body POSTed to a target agent's endpoint."""

    delegation_id: str
    task: str
    context: DelegationContext
    callback_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "delegationId": self.delegation_id,
            "task": self.task,
            "context": self.context.to_dict(),
        }
        if self.callback_url:
            payload["callbackUrl"] = self.callback_url
        return payload


@dataclass(frozen=True)
class DelegationOutcome:
    """The result of a single delegation call.

    Attributes:
        status: completed, accepted, failed or timeout
        result: Result text for completed calls
        error: Error description for failed and timed out calls
        latency_ms: Wall time spent on the call, 0 if no call was made
    """

    status: DelegationStatus
    result: str | None = None
    error: str | None = None
    latency_ms: int = 0

    @property
    def success(self) -> bool:
        return self.status in (DelegationStatus.COMPLETED, DelegationStatus.ACCEPTED)
