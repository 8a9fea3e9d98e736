"""
Permission engine for AI agents acting on documents.

Capabilities, per-resource permission settings, the pure evaluator and the
stores behind them. The lifecycle manager and engine factory live in
docwarden.permission.lifecycle and docwarden.permission.factory.
"""

from docwarden.permission.agent_registry import (
    AgentRegistry,
    AgentStore,
    InMemoryAgentStore,
    SQLiteAgentStore,
)
from docwarden.permission.action_store import (
    ActionStore,
    InMemoryActionStore,
    SQLiteActionStore,
)
from docwarden.permission.capabilities import (
    ACTION_REQUIREMENTS,
    ActionType,
    Capability,
    PermissionLevel,
)
from docwarden.permission.evaluator import PermissionEvaluator, evaluate_permission
from docwarden.permission.exceptions import (
    ActionNotFoundError,
    AgentNotFoundError,
    ApproverNotAllowedError,
    InvalidTransitionError,
    NotFoundError,
    PermissionEngineError,
    InvalidRequestMetadataError,
    SettingValidationError,
    UpstreamGenerationError,
)
from docwarden.permission.models import (
    Action,
    ActionRequestResult,
    ActionStatus,
    Agent,
    AgentDescriptor,
    AgentRole,
    Decision,
    PermissionSetting,
)
from docwarden.permission.rbac import has_permission
from docwarden.permission.setting_store import (
    InMemoryPermissionSettingStore,
    PermissionSettingStore,
    SQLitePermissionSettingStore,
)

__all__ = [
    "ACTION_REQUIREMENTS",
    "Action",
    "ActionNotFoundError",
    "ActionRequestResult",
    "ActionStatus",
    "ActionStore",
    "ActionType",
    "Agent",
    "AgentDescriptor",
    "AgentNotFoundError",
    "AgentRegistry",
    "AgentRole",
    "AgentStore",
    "ApproverNotAllowedError",
    "Capability",
    "Decision",
    "InMemoryActionStore",
    "InMemoryAgentStore",
    "InMemoryPermissionSettingStore",
    "InvalidTransitionError",
    "NotFoundError",
    "PermissionEngineError",
    "PermissionEvaluator",
    "PermissionLevel",
    "PermissionSetting",
    "PermissionSettingStore",
    "SQLiteActionStore",
    "SQLiteAgentStore",
    "SQLitePermissionSettingStore",
    "InvalidRequestMetadataError",
    "SettingValidationError",
    "UpstreamGenerationError",
    "evaluate_permission",
    "has_permission",
]
