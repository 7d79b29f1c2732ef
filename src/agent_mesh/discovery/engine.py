"""Capability and resource aware agent discovery.

This module provides the DiscoveryEngine, which ranks a snapshot of agent
descriptors against a free-text query and optional resource requirements.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from agent_mesh.discovery.matcher import matches
from agent_mesh.registry.types import AgentDescriptor, ResourceGrant

DEFAULT_RESOURCE_BOOST = 0.2

_TOKEN_SPLIT = re.compile(r"[\s\W]+")


@dataclass(frozen=True)
class ResourceRequirement:
    """A resource the caller needs the agent to have access to."""

    uri: str
    type: str | None = None


@dataclass
class DiscoveryResult:
    """An agent ranked against a query.

    Attributes:
        agent: The matching agent descriptor
        score: Relevance in [0, 1]
        matched_capabilities: Query tokens found in the agent's text
        matched_resources: Grants that satisfied the resource requirements,
                           one per requirement, in requirement order
    """

    agent: AgentDescriptor
    score: float
    matched_capabilities: list[str] = field(default_factory=list)
    matched_resources: list[ResourceGrant] = field(default_factory=list)


def tokenize(query: str) -> list[str]:
    """Lower-case a query and split it on whitespace and non-word characters."""
    return [token for token in _TOKEN_SPLIT.split(query.lower()) if token]


class DiscoveryEngine:
    """Ranks agents by capability text overlap and resource coverage.

    Tokens match as substrings of the agent's description and capability
    tags, so "index" also finds "indexing". Very short tokens can therefore
    match unrelated words.

    Attributes:
        resource_boost: Score added when every resource requirement is met,
                        scaled by the fraction of requirements matched
    """

    def __init__(self, resource_boost: float = DEFAULT_RESOURCE_BOOST) -> None:
        self.resource_boost = resource_boost

    def discover(
        self,
        query: str,
        candidates: Iterable[AgentDescriptor],
        limit: int | None = None,
        required_resources: Sequence[ResourceRequirement] | None = None,
    ) -> list[DiscoveryResult]:
        """Rank candidates against a query.

        Agents that match no query token are excluded. When resource
        requirements are given, agents lacking a grant for any one of them
        are excluded too.

        Args:
            query: Free-text description of the work
            candidates: Snapshot of agents to rank
            limit: Optional maximum number of results
            required_resources: Optional resources every result must cover

        Returns:
            list[DiscoveryResult]: Results by descending score; ties keep
            candidate order
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        requirements = list(required_resources or [])
        results: list[DiscoveryResult] = []

        for agent in candidates:
            search_text = " ".join(
                [agent.description.lower(), *(c.lower() for c in agent.capabilities)]
            )
            matched_capabilities = [token for token in tokens if token in search_text]
            if not matched_capabilities:
                continue

            matched_resources = self._match_resources(agent, requirements)
            if matched_resources is None:
                continue

            score = len(matched_capabilities) / len(tokens)
            if requirements:
                score += len(matched_resources) / len(requirements) * self.resource_boost

            results.append(
                DiscoveryResult(
                    agent=agent,
                    score=min(score, 1.0),
                    matched_capabilities=matched_capabilities,
                    matched_resources=matched_resources,
                )
            )

        # list.sort is stable, so equal scores keep candidate order
        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit] if limit else results

    @staticmethod
    def _match_resources(
        agent: AgentDescriptor, requirements: list[ResourceRequirement]
    ) -> list[ResourceGrant] | None:
        """Find a covering grant for every requirement, or None if one is missing."""
        matched: list[ResourceGrant] = []
        for requirement in requirements:
            grant = next(
                (r for r in agent.resources if matches(r.uri, requirement.uri)), None
            )
            if grant is None:
                return None
            matched.append(grant)
        return matched
