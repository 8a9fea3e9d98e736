"""
Static role table for human users.

The console consults it before a human approves or rejects an AI action.
Documents are open to their owner; agents and the admin panel are
admin-only.
"""

from enum import Enum
from typing import Any


class HumanRole(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Resource(str, Enum):
    DOCUMENT = "document"
    ADMIN_PANEL = "admin_panel"
    AI_AGENT = "ai_agent"
    AI_ACTION = "ai_action"


class HumanAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"


_EDITOR_DOCUMENT_ACTIONS = frozenset(
    {HumanAction.CREATE.value, HumanAction.READ.value, HumanAction.UPDATE.value}
)
_ACTION_DECISIONS = frozenset({HumanAction.APPROVE.value, HumanAction.REJECT.value})


def has_permission(
    user_role: str,
    action: str,
    resource_type: str,
    resource_attributes: dict[str, Any] | None = None,
) -> bool:
    """
    Check whether a human with user_role may perform action on resource_type.

    resource_attributes may carry "user_id" and "owner_id"; a document owner
    may do anything with their own document.
    """
    attrs = resource_attributes or {}

    if user_role == HumanRole.ADMIN.value:
        return True

    if resource_type == Resource.DOCUMENT.value:
        user_id = attrs.get("user_id")
        if user_id and attrs.get("owner_id") == user_id:
            return True
        if user_role == HumanRole.EDITOR.value:
            return action in _EDITOR_DOCUMENT_ACTIONS
        if user_role == HumanRole.VIEWER.value:
            return action == HumanAction.READ.value
        return False

    if resource_type in (Resource.ADMIN_PANEL.value, Resource.AI_AGENT.value):
        return False

    if resource_type == Resource.AI_ACTION.value and action in _ACTION_DECISIONS:
        return user_role in (HumanRole.ADMIN.value, HumanRole.EDITOR.value)

    return False


__all__ = ["HumanRole", "Resource", "HumanAction", "has_permission"]
