"""Delegations router for task delegation and the delegation ledger.

This module provides REST API endpoints for:
- Delegating a task to a named or discovered agent
- Receiving asynchronous results posted back by agents
- Listing and retrieving delegation records
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agent_mesh.dependencies import get_agent_store, get_orchestrator
from agent_mesh.models.agents import OkResponse
from agent_mesh.models.delegations import (
    DelegateRequest,
    DelegateResponse,
    DelegationListResponse,
    DelegationRecordResponse,
    DelegationResultRequest,
)
from agent_mesh.registry import AgentStore, DelegationConflictError, DelegationStatus
from agent_mesh.services import (
    AgentNotFoundError,
    DelegationNotFoundError,
    DelegationOrchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["delegations"])


@router.post("/delegate", response_model=DelegateResponse, summary="Delegate a task")
async def delegate(
    request: DelegateRequest,
    orchestrator: Annotated[DelegationOrchestrator, Depends(get_orchestrator)],
) -> DelegateResponse:
    """Delegate a task to an agent.

    The target is either named explicitly or chosen as the best discovery
    match for the query. The delegation is recorded in the ledger before
    the call and updated with its outcome afterwards. Failures of the call
    itself are reported in the response body, not as HTTP errors.

    Args:
        request: Delegation parameters
        orchestrator: Injected DelegationOrchestrator

    Returns:
        The delegation id, target and outcome

    Raises:
        HTTPException: 400 if neither target_name nor query is given
        HTTPException: 404 if the target cannot be resolved
    """
    try:
        dispatch = await orchestrator.delegate(
            request.task,
            target_name=request.target_name,
            query=request.query,
            context=request.context,
            source_agent=request.source_agent,
            async_=request.async_,
        )
    except AgentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Delegation failed unexpectedly: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    outcome = dispatch.outcome
    return DelegateResponse(
        id=dispatch.id,
        target_agent=dispatch.target_agent,
        status=outcome.status.value,
        success=outcome.success,
        result=outcome.result,
        error=outcome.error,
        latency_ms=outcome.latency_ms,
    )


@router.post(
    "/delegations/{delegation_id}/result",
    response_model=OkResponse,
    summary="Deliver an asynchronous result",
)
async def deliver_result(
    delegation_id: str,
    request: DelegationResultRequest,
    orchestrator: Annotated[DelegationOrchestrator, Depends(get_orchestrator)],
) -> OkResponse:
    """Accept the result of a delegation that was answered with 202.

    Args:
        delegation_id: The delegation the result belongs to
        request: Final status with optional result or error
        orchestrator: Injected DelegationOrchestrator

    Raises:
        HTTPException: 404 if the delegation is unknown
        HTTPException: 409 if the delegation is already finalized
    """
    try:
        orchestrator.deliver_result(
            delegation_id,
            DelegationStatus(request.status),
            result=request.result,
            error=request.error,
        )
    except DelegationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DelegationConflictError as e:
        logger.warning(f"Rejected duplicate result: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return OkResponse()


@router.get(
    "/delegations",
    response_model=DelegationListResponse,
    summary="List delegations",
)
async def list_delegations(
    store: Annotated[AgentStore, Depends(get_agent_store)],
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> DelegationListResponse:
    """List delegation records, newest first."""
    records = store.list_delegations(limit=limit, offset=offset)
    return DelegationListResponse(
        delegations=[DelegationRecordResponse.from_record(r) for r in records],
        limit=limit,
        offset=offset,
    )


@router.get(
    "/delegations/{delegation_id}",
    response_model=DelegationRecordResponse,
    summary="Get a delegation",
)
async def get_delegation(
    delegation_id: str,
    store: Annotated[AgentStore, Depends(get_agent_store)],
) -> DelegationRecordResponse:
    """Get a single delegation record.

    Raises:
        HTTPException: 404 if the delegation is unknown
    """
    record = store.get_delegation(delegation_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Delegation {delegation_id} not found",
        )
    return DelegationRecordResponse.from_record(record)
