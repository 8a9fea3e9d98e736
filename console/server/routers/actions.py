"""
AI actions API router: request, inspect and decide on agent actions.

Approve and reject are human decisions; the caller's role must be allowed
to approve/reject ai_action and must be an approver role for the resource.
"""

from fastapi import APIRouter, HTTPException, Query as QueryParam

from docwarden.permission.exceptions import (
    ActionNotFoundError,
    ApproverNotAllowedError,
    InvalidRequestMetadataError,
    InvalidTransitionError,
)
from docwarden.permission.models import Action, ActionStatus
from docwarden.permission.rbac import HumanAction, Resource, has_permission
from docwarden.utils.logging import set_request_context

from server.dependencies import get_permission_engine
from server.routers.evaluate import decision_to_response
from server.schemas import (
    ActionRequestBody,
    ActionRequestResponse,
    ActionResponse,
    ActionTransitionResponse,
    ApproveRequest,
    FailRequest,
    RejectRequest,
)

router = APIRouter(prefix="/api/actions", tags=["actions"])


def _action_to_response(action: Action) -> ActionResponse:
    return ActionResponse(
        id=action.id,
        agent_id=action.agent_id,
        action_type=action.action_type,
        resource_type=action.resource_type,
        resource_id=action.resource_id,
        status=action.status.value,
        requires_approval=action.requires_approval,
        requested_at=action.requested_at.isoformat(),
        completed_at=action.completed_at.isoformat() if action.completed_at else None,
        requested_by=action.requested_by,
        approved_by=action.approved_by,
        rejected_by=action.rejected_by,
        metadata=action.metadata.model_dump(mode="json"),
        result=action.result,
        history=[
            ActionTransitionResponse(
                status=h.status.value,
                at=h.at.isoformat(),
                actor=h.actor,
                note=h.note,
            )
            for h in action.history
        ],
    )


def _require_decision_right(user_role: str, decision: HumanAction) -> None:
    if not has_permission(user_role, decision.value, Resource.AI_ACTION.value):
        raise HTTPException(
            status_code=403,
            detail=f"Role '{user_role}' may not {decision.value} AI actions",
        )


@router.get("", response_model=list[ActionResponse])
async def list_actions(
    status: str | None = None,
    resource_id: str | None = QueryParam(default=None),
    agent_id: str | None = QueryParam(default=None),
) -> list[ActionResponse]:
    """List actions, newest first, optionally filtered."""
    engine = get_permission_engine()
    status_enum = None
    if status is not None:
        try:
            status_enum = ActionStatus(status)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
    actions = await engine.actions.list_actions(
        status=status_enum, resource_id=resource_id, agent_id=agent_id
    )
    return [_action_to_response(a) for a in actions]


@router.get("/{action_id}", response_model=ActionResponse)
async def get_action(action_id: str) -> ActionResponse:
    engine = get_permission_engine()
    try:
        action = await engine.lifecycle.get_action(action_id)
    except ActionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _action_to_response(action)


@router.post("", response_model=ActionRequestResponse)
async def request_action(body: ActionRequestBody) -> ActionRequestResponse:
    """
    Request an action on behalf of an agent.

    Denials and generation failures are reported in the body with
    success=false, not as HTTP errors.
    """
    set_request_context(agent_id=body.agent_id)
    engine = get_permission_engine()
    try:
        outcome = await engine.request_action(
            body.agent_id,
            body.action_type,
            body.resource_type,
            body.resource_id,
            body.metadata.model_dump(exclude_none=True),
            title=body.title,
            content=body.content,
        )
    except InvalidRequestMetadataError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ActionRequestResponse(
        success=outcome.success,
        message=outcome.message,
        decision=decision_to_response(outcome.decision),
        action=_action_to_response(outcome.action) if outcome.action else None,
    )


@router.post("/{action_id}/approve", response_model=ActionResponse)
async def approve_action(action_id: str, body: ApproveRequest) -> ActionResponse:
    _require_decision_right(body.user_role, HumanAction.APPROVE)
    set_request_context(user_id=body.user_id)
    engine = get_permission_engine()
    try:
        action = await engine.approve_action(
            action_id,
            body.user_id,
            approver_role=body.user_role,
            execute=body.execute,
        )
    except ActionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ApproverNotAllowedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _action_to_response(action)


@router.post("/{action_id}/reject", response_model=ActionResponse)
async def reject_action(action_id: str, body: RejectRequest) -> ActionResponse:
    _require_decision_right(body.user_role, HumanAction.REJECT)
    set_request_context(user_id=body.user_id)
    engine = get_permission_engine()
    try:
        action = await engine.reject_action(
            action_id,
            body.user_id,
            approver_role=body.user_role,
            reason=body.reason,
        )
    except ActionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ApproverNotAllowedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _action_to_response(action)


@router.post("/{action_id}/fail", response_model=ActionResponse)
async def fail_action(action_id: str, body: FailRequest) -> ActionResponse:
    """Record that a permitted action could not be executed."""
    engine = get_permission_engine()
    try:
        action = await engine.fail_action(action_id, body.error)
    except ActionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _action_to_response(action)
