"""
AI agents CRUD API router.
"""

from fastapi import APIRouter, HTTPException

from docwarden.permission.exceptions import AgentNotFoundError
from docwarden.permission.models import Agent, AgentDescriptor

from server.dependencies import get_permission_engine
from server.schemas import AgentCreate, AgentResponse, AgentUpdate

router = APIRouter(prefix="/api/agents", tags=["agents"])


def _agent_to_response(agent: Agent) -> AgentResponse:
    return AgentResponse(
        id=agent.id,
        name=agent.name,
        description=agent.description,
        role=agent.role.value,
        capabilities=[c.value for c in agent.capabilities],
        is_active=agent.is_active,
        created_by=agent.created_by,
        created_at=agent.created_at.isoformat(),
        updated_at=agent.updated_at.isoformat(),
    )


@router.get("", response_model=list[AgentResponse])
async def list_agents() -> list[AgentResponse]:
    """List all registered AI agents."""
    engine = get_permission_engine()
    agents = await engine.list_agents()
    return [_agent_to_response(a) for a in agents]


@router.post("", response_model=AgentResponse, status_code=201)
async def create_agent(body: AgentCreate) -> AgentResponse:
    """Register a new AI agent; the id is generated from its role."""
    engine = get_permission_engine()
    created = await engine.agents.create(AgentDescriptor(**body.model_dump()))
    return _agent_to_response(created)


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(agent_id: str) -> AgentResponse:
    engine = get_permission_engine()
    agent = await engine.agents.get(agent_id)
    if agent is None:
        raise HTTPException(status_code=404, detail="Agent not found")
    return _agent_to_response(agent)


@router.put("/{agent_id}", response_model=AgentResponse)
async def update_agent(agent_id: str, body: AgentUpdate) -> AgentResponse:
    """Update an agent's descriptor; omitted fields keep their value."""
    engine = get_permission_engine()
    existing = await engine.agents.get(agent_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Agent not found")

    updates = body.model_dump(exclude_none=True)
    try:
        updated = await engine.agents.update(existing.model_copy(update=updates))
    except AgentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _agent_to_response(updated)


@router.post("/{agent_id}/toggle", response_model=AgentResponse)
async def toggle_agent(agent_id: str) -> AgentResponse:
    """Flip an agent between active and inactive."""
    engine = get_permission_engine()
    try:
        agent = await engine.agents.toggle_active(agent_id)
    except AgentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _agent_to_response(agent)


@router.delete("/{agent_id}", status_code=204)
async def delete_agent(agent_id: str) -> None:
    """Delete an agent. Its action records are kept."""
    engine = get_permission_engine()
    deleted = await engine.agents.delete(agent_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Agent not found")
