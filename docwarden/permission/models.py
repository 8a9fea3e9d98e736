"""
Permission engine data models.

Defines the records owned by the registries and the lifecycle manager:
Agent, PermissionSetting, Action (with its typed metadata), and the
evaluator's Decision.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from docwarden.permission.capabilities import Capability, PermissionLevel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AgentRole(str, Enum):
    ASSISTANT = "assistant"
    ANALYZER = "analyzer"
    EDITOR = "editor"
    ADMIN = "admin"


class ActionStatus(str, Enum):
    """Status of an AI action record."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {ActionStatus.REJECTED, ActionStatus.COMPLETED, ActionStatus.FAILED}
)


# ── Agents ──────────────────────────────────────────────────────────────


class AgentDescriptor(BaseModel):
    """Fields supplied by an administrator when registering an agent."""

    name: str
    description: str = ""
    role: AgentRole
    capabilities: list[Capability] = Field(default_factory=list)
    is_active: bool = True
    created_by: str


class Agent(AgentDescriptor):
    """Registered AI agent."""

    id: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# ── Permission settings ─────────────────────────────────────────────────


class PermissionSetting(BaseModel):
    """
    AI permission posture for a resource.

    A setting without `resource_id` is the default for its resource type.
    """

    id: str | None = None
    resource_type: str
    resource_id: str | None = None
    resource_name: str | None = None  # display only
    permission_level: PermissionLevel
    requires_approval: bool
    approver_roles: list[str] = Field(default_factory=list)

    @property
    def is_default(self) -> bool:
        return self.resource_id is None


# ── Action metadata (tagged union) ──────────────────────────────────────


class DocumentChanges(BaseModel):
    """Proposed replacement title/content for a document."""

    title: str
    content: str


class RequestMetadata(BaseModel):
    """Metadata as supplied by the caller when the action was requested."""

    kind: Literal["request"] = "request"
    reason: str | None = None
    changes: DocumentChanges | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class GeneratedMetadata(BaseModel):
    """Metadata after the content generator produced a result."""

    kind: Literal["generated"] = "generated"
    reason: str | None = None
    result: str
    changes: DocumentChanges | None = None
    fallback: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


class FailureMetadata(BaseModel):
    """Metadata for an action whose execution failed after it was permitted."""

    kind: Literal["failure"] = "failure"
    reason: str | None = None
    error: str
    extra: dict[str, Any] = Field(default_factory=dict)


ActionMetadata = Annotated[
    Union[RequestMetadata, GeneratedMetadata, FailureMetadata],
    Field(discriminator="kind"),
]


# ── Actions ─────────────────────────────────────────────────────────────


class ActionTransition(BaseModel):
    """One entry of an action's audit history."""

    status: ActionStatus
    at: datetime = Field(default_factory=utc_now)
    actor: str | None = None  # human user id, or agent id for the initial entry
    note: str | None = None


class Action(BaseModel):
    """Persisted record of one agent's attempted operation and its outcome."""

    id: str
    agent_id: str
    action_type: str
    resource_type: str
    resource_id: str
    status: ActionStatus = ActionStatus.PENDING
    requires_approval: bool = True
    requested_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None
    requested_by: str
    approved_by: str | None = None
    rejected_by: str | None = None
    metadata: ActionMetadata = Field(default_factory=RequestMetadata)
    result: str | None = None
    history: list[ActionTransition] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


# ── Evaluator output ────────────────────────────────────────────────────


class Decision(BaseModel):
    """Permission decision for (agent, action, resource)."""

    permitted: bool
    requires_approval: bool
    permission_level: PermissionLevel
    reason: str = ""

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(
            permitted=False,
            requires_approval=True,
            permission_level=PermissionLevel.NO_ACCESS,
            reason=reason,
        )


class ActionRequestResult(BaseModel):
    """Outcome of request_action, reported to the caller."""

    success: bool
    message: str
    decision: Decision
    action: Action | None = None


__all__ = [
    "utc_now",
    "AgentRole",
    "ActionStatus",
    "TERMINAL_STATUSES",
    "AgentDescriptor",
    "Agent",
    "PermissionSetting",
    "DocumentChanges",
    "RequestMetadata",
    "GeneratedMetadata",
    "FailureMetadata",
    "ActionMetadata",
    "ActionTransition",
    "Action",
    "Decision",
    "ActionRequestResult",
]
