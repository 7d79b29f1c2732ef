"""Async HTTP client for delegating tasks to agents.

Any agent exposing a POST endpoint that accepts a delegation request can
receive work. The client makes exactly one attempt per call and always
returns a DelegationOutcome, whatever happens on the wire.
"""

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from agent_mesh.delegation.types import (
    DelegationContext,
    DelegationOutcome,
    DelegationRequest,
)
from agent_mesh.registry.types import AgentAuth, DelegationStatus

logger = logging.getLogger(__name__)

MAX_DEPTH = 5
DEFAULT_TIMEOUT = 120.0


def auth_headers(auth: AgentAuth | None) -> dict[str, str]:
    """Build request headers for an agent's credential descriptor."""
    if auth is None or not auth.token:
        return {}
    if auth.type == "bearer":
        return {"Authorization": f"Bearer {auth.token}"}
    if auth.type == "header" and auth.header_name:
        return {auth.header_name: auth.token}
    return {}


class DelegationClient:
    """Delegates tasks to agents via their HTTP callback endpoint.

    The hop depth travels in the request context: each call sends depth + 1,
    and a call whose incoming depth has reached max_depth fails without
    touching the network.

    Attributes:
        mesh_base_url: Base URL agents POST asynchronous results back to
        timeout: Default deadline in seconds for one delegation call
        max_depth: Hop-depth ceiling
    """

    def __init__(
        self,
        mesh_base_url: str = "http://localhost:8766",
        timeout: float = DEFAULT_TIMEOUT,
        max_depth: int = MAX_DEPTH,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the delegation client.

        Args:
            mesh_base_url: Public base URL of this mesh
            timeout: Default per-call deadline in seconds
            max_depth: Hop-depth ceiling
            client: Optional pre-configured httpx.AsyncClient
        """
        self.mesh_base_url = mesh_base_url.rstrip("/")
        self.timeout = timeout
        self.max_depth = max_depth
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None
        logger.info(
            f"DelegationClient initialized (timeout={timeout}s, max_depth={max_depth})"
        )

    def callback_url(self, delegation_id: str) -> str:
        """Get the URL an agent should POST an asynchronous result to."""
        return f"{self.mesh_base_url}/api/v1/delegations/{delegation_id}/result"

    async def delegate(
        self,
        endpoint: str,
        delegation_id: str,
        task: str,
        context: DelegationContext | Mapping[str, Any] | None = None,
        auth: AgentAuth | None = None,
        timeout: float | None = None,
        async_: bool = False,
    ) -> DelegationOutcome:
        """Delegate a task to an agent's endpoint.

        Args:
            endpoint: URL of the target agent's task endpoint
            delegation_id: Caller-generated id for this delegation
            task: Task description
            context: Incoming context; its depth is the hops already made
            auth: Target agent's credential descriptor
            timeout: Deadline in seconds (defaults to the client timeout)
            async_: Ask the agent to POST its result to the callback URL

        Returns:
            DelegationOutcome: completed with the agent's result, accepted when
            the agent will answer asynchronously, failed, or timeout
        """
        if not isinstance(context, DelegationContext):
            try:
                context = DelegationContext.from_mapping(context)
            except ValueError as e:
                logger.warning(f"Delegation {delegation_id} rejected: {e}")
                return DelegationOutcome(
                    status=DelegationStatus.FAILED, error=str(e), latency_ms=0
                )

        if context.depth >= self.max_depth:
            logger.warning(
                f"Delegation {delegation_id} rejected at depth {context.depth}"
            )
            return DelegationOutcome(
                status=DelegationStatus.FAILED,
                error=f"Delegation depth {context.depth} exceeds max {self.max_depth}",
                latency_ms=0,
            )

        deadline = self.timeout if timeout is None else timeout
        request = DelegationRequest(
            delegation_id=delegation_id,
            task=task,
            context=context.next_hop(),
            callback_url=self.callback_url(delegation_id) if async_ else None,
        )
        headers = {"Content-Type": "application/json", **auth_headers(auth)}

        logger.debug(f"Delegating {delegation_id} to {endpoint} (depth {context.depth})")
        start = time.monotonic()

        try:
            response = await asyncio.wait_for(
                self._client.post(
                    endpoint,
                    headers=headers,
                    json=request.to_payload(),
                    timeout=deadline,
                ),
                timeout=deadline,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            outcome = DelegationOutcome(
                status=DelegationStatus.TIMEOUT,
                error=f"Timed out after {deadline}s",
                latency_ms=_elapsed_ms(start),
            )
        # ValueError covers headers httpx cannot encode
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, OSError) as e:
            outcome = DelegationOutcome(
                status=DelegationStatus.FAILED,
                error=f"Request to {endpoint} failed: {str(e) or type(e).__name__}",
                latency_ms=_elapsed_ms(start),
            )
        else:
            outcome = self._interpret(response, _elapsed_ms(start))

        logger.info(
            f"Delegation {delegation_id} -> {outcome.status.value} in {outcome.latency_ms}ms"
        )
        return outcome

    @staticmethod
    def _interpret(response: httpx.Response, latency_ms: int) -> DelegationOutcome:
        """Map an agent's HTTP response onto a delegation outcome."""
        # 202 means the agent will POST its result to the callback URL
        if response.status_code == 202:
            return DelegationOutcome(
                status=DelegationStatus.ACCEPTED, latency_ms=latency_ms
            )

        if not response.is_success:
            return DelegationOutcome(
                status=DelegationStatus.FAILED,
                error=f"Agent returned {response.status_code}: {response.text}",
                latency_ms=latency_ms,
            )

        try:
            data = response.json()
        except ValueError:
            return DelegationOutcome(
                status=DelegationStatus.COMPLETED,
                result=response.text,
                latency_ms=latency_ms,
            )

        if isinstance(data, dict) and data.get("status") == "accepted":
            return DelegationOutcome(
                status=DelegationStatus.ACCEPTED, latency_ms=latency_ms
            )

        if isinstance(data, dict) and "result" in data:
            result = data["result"]
            if not isinstance(result, str):
                result = json.dumps(result)
        else:
            result = json.dumps(data)

        return DelegationOutcome(
            status=DelegationStatus.COMPLETED, result=result, latency_ms=latency_ms
        )

    async def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_client:
            await self._client.aclose()
        logger.debug("DelegationClient closed")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
