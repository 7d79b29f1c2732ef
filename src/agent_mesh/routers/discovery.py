"""Discovery endpoint router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agent_mesh.dependencies import get_discovery_provider
from agent_mesh.discovery import DiscoveryProvider, ResourceRequirement
from agent_mesh.models.discovery import DiscoverResponse, DiscoveryResultResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["discovery"])


@router.get("/discover", response_model=DiscoverResponse, summary="Discover agents")
async def discover(
    provider: Annotated[DiscoveryProvider, Depends(get_discovery_provider)],
    query: Annotated[str, Query(description="Free-text description of the work")] = "",
    limit: Annotated[int | None, Query(ge=1, description="Maximum results")] = None,
    resource: Annotated[
        list[str],
        Query(description="Resource every result must have access to (repeatable)"),
    ] = [],
) -> DiscoverResponse:
    """Rank registered agents against a query.

    Args:
        provider: Injected discovery provider
        query: Free-text query
        limit: Optional maximum number of results
        resource: Required resource URIs, slugs, paths or service names

    Returns:
        Ranked results, best first

    Raises:
        HTTPException: 400 if the query is missing
    """
    if not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="query parameter required",
        )

    requirements = [ResourceRequirement(uri=uri) for uri in resource]
    results = await provider.discover(query, limit=limit, required_resources=requirements)
    logger.debug(f"Discovery for {query!r} returned {len(results)} results")

    return DiscoverResponse(
        query=query,
        provider=provider.name,
        results=[DiscoveryResultResponse.from_result(r) for r in results],
    )
