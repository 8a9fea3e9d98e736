"""
Docwarden - permission engine for AI agents editing documents

Usage:
    from docwarden import create_permission_engine

    engine = create_permission_engine(storage_type="memory")

    decision = await engine.evaluate("ai-editor-1", "edit_document", "document", "2")
    result = await engine.request_action(
        "ai-assistant-1", "improve_document", "document", "1",
        title="Getting Started Guide", content="...",
    )
    await engine.approve_action(result.action.id, "admin-id", approver_role="admin")
"""

from docwarden.permission.factory import (
    PermissionEngine,
    create_permission_engine,
    get_permission_engine,
    reset_permission_engine,
)
from docwarden.permission.capabilities import ActionType, Capability, PermissionLevel
from docwarden.permission.models import Action, ActionStatus, Agent, Decision, PermissionSetting

__all__ = [
    "Action",
    "ActionStatus",
    "ActionType",
    "Agent",
    "Capability",
    "Decision",
    "PermissionEngine",
    "PermissionLevel",
    "PermissionSetting",
    "create_permission_engine",
    "get_permission_engine",
    "reset_permission_engine",
]
