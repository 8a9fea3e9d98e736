"""
Permission evaluation API router.
"""

from fastapi import APIRouter

from docwarden.permission.models import Decision

from server.dependencies import get_permission_engine
from server.schemas import DecisionResponse, EvaluateRequest

router = APIRouter(prefix="/api/evaluate", tags=["evaluate"])


def decision_to_response(decision: Decision) -> DecisionResponse:
    return DecisionResponse(
        permitted=decision.permitted,
        requires_approval=decision.requires_approval,
        permission_level=decision.permission_level.value,
        reason=decision.reason,
    )


@router.post("", response_model=DecisionResponse)
async def evaluate(body: EvaluateRequest) -> DecisionResponse:
    """Dry-run a permission check; unknown agents and actions are denials."""
    engine = get_permission_engine()
    decision = await engine.evaluate(
        body.agent_id, body.action, body.resource_type, body.resource_id
    )
    return decision_to_response(decision)
