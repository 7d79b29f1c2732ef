"""Discovery providers.

A provider answers discovery queries against the registry. The local
provider ranks the store's agents with the DiscoveryEngine; the remote
provider asks a semantic-search service and falls back to the local
provider whenever that service cannot answer.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from agent_mesh.discovery.engine import (
    DiscoveryEngine,
    DiscoveryResult,
    ResourceRequirement,
)
from agent_mesh.registry import AgentDescriptor, AgentStore

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_LIMIT = 10
DEFAULT_REMOTE_SCORE = 0.5


class DiscoveryProvider(ABC):
    """Common interface for discovery sources."""

    name: str = "provider"

    @abstractmethod
    async def discover(
        self,
        query: str,
        limit: int | None = None,
        required_resources: Sequence[ResourceRequirement] | None = None,
    ) -> list[DiscoveryResult]:
        """Rank registered agents against a query."""


class LocalDiscoveryProvider(DiscoveryProvider):
    """Token-overlap discovery over a snapshot of the agent store."""

    name = "local"

    def __init__(self, store: AgentStore, engine: DiscoveryEngine | None = None) -> None:
        self.store = store
        self.engine = engine or DiscoveryEngine()

    async def discover(
        self,
        query: str,
        limit: int | None = None,
        required_resources: Sequence[ResourceRequirement] | None = None,
    ) -> list[DiscoveryResult]:
        results = self.engine.discover(
            query, self.store.list(), limit=limit, required_resources=required_resources
        )
        logger.debug(f"Local discovery for {query!r} returned {len(results)} results")
        return results


class RemoteDiscoveryProvider(DiscoveryProvider):
    """Discovery backed by a remote semantic-search service.

    The service exposes lessons ({title, content, tags, score}); each lesson
    title names an agent. Agents are published to the service with
    publish_capabilities().

    Attributes:
        base_url: Service base URL without trailing slashes
        store: Agent store used to resolve lesson titles to descriptors
        fallback: Provider used when the service cannot answer
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        store: AgentStore,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        fallback: DiscoveryProvider | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.fallback = fallback or LocalDiscoveryProvider(store)
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        logger.info(f"RemoteDiscoveryProvider initialized with base URL: {self.base_url}")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def discover(
        self,
        query: str,
        limit: int | None = None,
        required_resources: Sequence[ResourceRequirement] | None = None,
    ) -> list[DiscoveryResult]:
        # The service knows nothing about resource grants
        if required_resources:
            return await self.fallback.discover(query, limit, required_resources)

        try:
            return await self._discover_remote(query, limit)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Remote discovery failed, using local fallback: {e}")
            return await self.fallback.discover(query, limit)

    async def _discover_remote(self, query: str, limit: int | None) -> list[DiscoveryResult]:
        response = await self._client.post(
            f"{self.base_url}/v1/lessons/search",
            headers=self._headers(),
            json={"query": query, "limit": limit or DEFAULT_REMOTE_LIMIT},
        )
        response.raise_for_status()

        lessons = response.json()["lessons"]
        results = [self._lesson_to_result(lesson) for lesson in lessons]
        logger.debug(f"Remote discovery for {query!r} returned {len(results)} results")
        return results[:limit] if limit else results

    def _lesson_to_result(self, lesson: dict[str, Any]) -> DiscoveryResult:
        title = lesson["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"Lesson title must be a non-empty string, got {title!r}")
        tags = [str(tag) for tag in lesson.get("tags") or []]

        agent = self.store.get(title)
        if agent is None:
            agent = AgentDescriptor(
                name=title,
                description=lesson.get("content") or "",
                capabilities=tags,
                protocol="mcp",
            )

        score = lesson.get("score")
        score = DEFAULT_REMOTE_SCORE if score is None else float(score)

        return DiscoveryResult(
            agent=agent,
            score=min(max(score, 0.0), 1.0),
            matched_capabilities=tags,
        )

    async def publish_capabilities(self, agent: AgentDescriptor) -> bool:
        """Publish an agent's description and capabilities to the service.

        Args:
            agent: The agent to publish

        Returns:
            bool: True if the service accepted the agent
        """
        payload = {
            "title": agent.name,
            "content": f"{agent.description}. Capabilities: {', '.join(agent.capabilities)}",
            "tags": list(agent.capabilities),
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/v1/lessons", headers=self._headers(), json=payload
            )
        except httpx.HTTPError as e:
            logger.warning(f"Failed to publish agent {agent.name}: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"Publishing agent {agent.name} returned {response.status_code}"
            )
        return response.is_success

    async def close(self) -> None:
        """Close the underlying HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()
