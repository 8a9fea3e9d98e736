"""
API-layer Pydantic models for request/response serialization.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docwarden.permission.capabilities import Capability, PermissionLevel
from docwarden.permission.models import AgentRole, DocumentChanges


# ── Agents ──────────────────────────────────────────────────────────────


class AgentCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    role: AgentRole
    capabilities: list[Capability] = Field(default_factory=list)
    is_active: bool = True
    created_by: str


class AgentUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    role: AgentRole | None = None
    capabilities: list[Capability] | None = None
    is_active: bool | None = None


class AgentResponse(BaseModel):
    id: str
    name: str
    description: str
    role: str
    capabilities: list[str]
    is_active: bool
    created_by: str
    created_at: str
    updated_at: str


# ── Permission settings ─────────────────────────────────────────────────


class PermissionSettingBody(BaseModel):
    id: str | None = None
    resource_type: str
    resource_id: str | None = None
    resource_name: str | None = None
    permission_level: PermissionLevel
    requires_approval: bool
    approver_roles: list[str] = Field(default_factory=list)


class PermissionSettingResponse(PermissionSettingBody):
    is_default: bool


# ── Evaluation ──────────────────────────────────────────────────────────


class EvaluateRequest(BaseModel):
    agent_id: str
    action: str
    resource_type: str
    resource_id: str | None = None


class DecisionResponse(BaseModel):
    permitted: bool
    requires_approval: bool
    permission_level: str
    reason: str


# ── Actions ─────────────────────────────────────────────────────────────


class ActionTransitionResponse(BaseModel):
    status: str
    at: str
    actor: str | None = None
    note: str | None = None


class ActionResponse(BaseModel):
    id: str
    agent_id: str
    action_type: str
    resource_type: str
    resource_id: str
    status: str
    requires_approval: bool
    requested_at: str
    completed_at: str | None = None
    requested_by: str
    approved_by: str | None = None
    rejected_by: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    result: str | None = None
    history: list[ActionTransitionResponse] = Field(default_factory=list)


class ActionRequestMetadata(BaseModel):
    """Caller metadata; keys other than reason and changes are kept as extras."""

    model_config = ConfigDict(extra="allow")

    reason: str | None = None
    changes: DocumentChanges | None = None


class ActionRequestBody(BaseModel):
    agent_id: str
    action_type: str
    resource_type: str = "document"
    resource_id: str
    title: str = ""
    content: str = ""
    metadata: ActionRequestMetadata = Field(default_factory=ActionRequestMetadata)


class ActionRequestResponse(BaseModel):
    success: bool
    message: str
    decision: DecisionResponse
    action: ActionResponse | None = None


class ApproveRequest(BaseModel):
    user_id: str
    user_role: str
    execute: bool = True


class RejectRequest(BaseModel):
    user_id: str
    user_role: str
    reason: str | None = None


class FailRequest(BaseModel):
    error: str = Field(min_length=1)
