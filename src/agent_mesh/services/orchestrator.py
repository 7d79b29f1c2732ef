"""Delegation orchestration service.

This module provides the DelegationOrchestrator, which ties discovery, the
delegation client and the ledger together: it resolves a target agent,
records the attempt, performs the call and records the outcome.
"""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from agent_mesh.delegation import DelegationClient, DelegationContext, DelegationOutcome
from agent_mesh.discovery import DiscoveryProvider
from agent_mesh.registry import (
    AgentDescriptor,
    AgentStore,
    DelegationRecord,
    DelegationStatus,
)

logger = logging.getLogger(__name__)


class AgentNotFoundError(LookupError):
    """Raised when no agent can be resolved for a delegation."""


class DelegationNotFoundError(LookupError):
    """Raised when a result arrives for an unknown delegation."""


@dataclass(frozen=True)
class DelegationDispatch:
    """A delegation as seen by the caller: its ledger id, target and outcome."""

    id: str
    target_agent: str
    outcome: DelegationOutcome


class DelegationOrchestrator:
    """Runs delegations end to end and keeps the ledger current.

    Attributes:
        store: Agent store and delegation ledger
        provider: Discovery provider used when no target is named
        client: Client that performs the delegation call
    """

    def __init__(
        self,
        store: AgentStore,
        provider: DiscoveryProvider,
        client: DelegationClient,
    ):
        self.store = store
        self.provider = provider
        self.client = client

    async def resolve_target(
        self, target_name: str | None = None, query: str | None = None
    ) -> AgentDescriptor:
        """Find the agent a task should go to.

        Args:
            target_name: Explicit agent name, takes precedence
            query: Discovery query; the top-ranked agent is chosen

        Returns:
            The target AgentDescriptor

        Raises:
            AgentNotFoundError: If the named agent is unknown or nothing matches
            ValueError: If neither target_name nor query is given
        """
        if target_name:
            agent = self.store.get(target_name)
            if agent is None:
                raise AgentNotFoundError(f'Agent "{target_name}" not found')
            return agent

        if query:
            results = await self.provider.discover(query, limit=1)
            if not results:
                raise AgentNotFoundError("No agent found matching query")
            # Remote providers may name agents that were never registered here
            agent = self.store.get(results[0].agent.name)
            if agent is None:
                raise AgentNotFoundError(
                    f'Agent "{results[0].agent.name}" is not registered'
                )
            return agent

        raise ValueError("target_name or query is required")

    async def delegate(
        self,
        task: str,
        target_name: str | None = None,
        query: str | None = None,
        context: DelegationContext | Mapping[str, Any] | None = None,
        source_agent: str = "api",
        async_: bool = False,
    ) -> DelegationDispatch:
        """Delegate a task to a named or discovered agent.

        Raises:
            AgentNotFoundError: If no target can be resolved
            ValueError: If neither target_name nor query is given
        """
        agent = await self.resolve_target(target_name, query)
        delegation_id = str(uuid.uuid4())

        self.store.record(
            DelegationRecord(
                id=delegation_id,
                source_agent=source_agent,
                target_agent=agent.name,
                task=task,
                status=DelegationStatus.PENDING,
            )
        )
        self.store.update(delegation_id, DelegationStatus.RUNNING)
        logger.info(f"Delegation {delegation_id}: {source_agent} -> {agent.name}")

        try:
            outcome = await self.client.delegate(
                agent.endpoint,
                delegation_id,
                task,
                context=context,
                auth=agent.auth,
                async_=async_,
            )
        except Exception as e:
            self.store.update(
                delegation_id,
                DelegationStatus.FAILED,
                error=f"Delegation error: {str(e) or type(e).__name__}",
                keep_finalized=True,
            )
            raise

        # An async result may already have landed via the callback route
        self.store.update(
            delegation_id,
            outcome.status,
            result=outcome.result,
            error=outcome.error,
            latency_ms=outcome.latency_ms,
            keep_finalized=True,
        )
        return DelegationDispatch(id=delegation_id, target_agent=agent.name, outcome=outcome)

    def deliver_result(
        self,
        delegation_id: str,
        status: DelegationStatus,
        result: str | None = None,
        error: str | None = None,
    ) -> DelegationRecord:
        """Apply an asynchronous result posted back by an agent.

        Raises:
            DelegationNotFoundError: If the delegation is unknown
            DelegationConflictError: If the delegation is already finalized
        """
        record = self.store.deliver_result(delegation_id, status, result, error)
        if record is None:
            raise DelegationNotFoundError(f"Delegation {delegation_id} not found")
        return record
