"""
Canonical seed data: the demo agents, permission settings and actions the
console starts with, and that reset-to-defaults restores.
"""

from datetime import timedelta

from docwarden.permission.capabilities import Capability, PermissionLevel
from docwarden.permission.models import (
    Action,
    ActionStatus,
    ActionTransition,
    Agent,
    AgentRole,
    DocumentChanges,
    GeneratedMetadata,
    PermissionSetting,
    RequestMetadata,
    utc_now,
)

SYSTEM_ADMIN_ID = "admin-id"


def default_agents() -> list[Agent]:
    return [
        Agent(
            id="ai-assistant-1",
            name="Document Assistant",
            description="Helps with document organization and basic tasks",
            role=AgentRole.ASSISTANT,
            capabilities=[
                Capability.READ_DOCUMENTS,
                Capability.SUGGEST_EDITS,
                Capability.SUMMARIZE_CONTENT,
            ],
            created_by=SYSTEM_ADMIN_ID,
        ),
        Agent(
            id="ai-editor-1",
            name="Content Editor",
            description="AI that can edit and improve document content",
            role=AgentRole.EDITOR,
            capabilities=[
                Capability.READ_DOCUMENTS,
                Capability.EDIT_DOCUMENTS,
                Capability.GENERATE_CONTENT,
            ],
            created_by=SYSTEM_ADMIN_ID,
        ),
        Agent(
            id="ai-analyzer-1",
            name="Document Analyzer",
            description="Analyzes document content and provides insights",
            role=AgentRole.ANALYZER,
            capabilities=[
                Capability.READ_DOCUMENTS,
                Capability.ANALYZE_CONTENT,
                Capability.SUMMARIZE_CONTENT,
            ],
            created_by=SYSTEM_ADMIN_ID,
        ),
    ]


def default_permission_settings() -> list[PermissionSetting]:
    return [
        PermissionSetting(
            id="1",
            resource_type="document",
            permission_level=PermissionLevel.READ_ONLY,
            requires_approval=False,
            approver_roles=["admin", "editor"],
        ),
        PermissionSetting(
            id="2",
            resource_type="document",
            resource_id="1",
            resource_name="Getting Started Guide",
            permission_level=PermissionLevel.SUGGEST_ONLY,
            requires_approval=True,
            approver_roles=["admin"],
        ),
        PermissionSetting(
            id="3",
            resource_type="document",
            resource_id="2",
            resource_name="Security Policy",
            permission_level=PermissionLevel.FULL_ACCESS,
            requires_approval=False,
            approver_roles=["admin"],
        ),
    ]


def default_actions() -> list[Action]:
    now = utc_now()
    one_day_ago = now - timedelta(days=1)
    two_days_ago = now - timedelta(days=2)
    return [
        Action(
            id="action-1",
            agent_id="ai-editor-1",
            action_type="improve_document",
            resource_type="document",
            resource_id="1",
            status=ActionStatus.PENDING,
            requires_approval=True,
            requested_at=now,
            requested_by="ai-editor-1",
            metadata=GeneratedMetadata(
                reason="Improving clarity and readability",
                result="Document improvement suggestions generated",
                changes=DocumentChanges(
                    title="Updated Getting Started Guide",
                    content="This is an AI-suggested improvement to the getting started guide.",
                ),
            ),
            history=[
                ActionTransition(
                    status=ActionStatus.PENDING, at=now, actor="ai-editor-1"
                )
            ],
        ),
        Action(
            id="action-2",
            agent_id="ai-assistant-1",
            action_type="summarize_document",
            resource_type="document",
            resource_id="2",
            status=ActionStatus.COMPLETED,
            requires_approval=False,
            requested_at=one_day_ago,
            completed_at=one_day_ago + timedelta(minutes=6),
            requested_by="ai-assistant-1",
            metadata=RequestMetadata(reason="User requested summary"),
            result=(
                "This document outlines the security policies including access "
                "control, data protection, and compliance requirements."
            ),
            history=[
                ActionTransition(
                    status=ActionStatus.PENDING, at=one_day_ago, actor="ai-assistant-1"
                ),
                ActionTransition(
                    status=ActionStatus.COMPLETED,
                    at=one_day_ago + timedelta(minutes=6),
                ),
            ],
        ),
        Action(
            id="action-3",
            agent_id="ai-analyzer-1",
            action_type="analyze_document",
            resource_type="document",
            resource_id="3",
            status=ActionStatus.REJECTED,
            requires_approval=True,
            requested_at=two_days_ago,
            requested_by="ai-analyzer-1",
            rejected_by="user-id",
            metadata=RequestMetadata(
                reason="Automated content analysis",
                extra={"analysis_type": "sentiment and key topics"},
            ),
            history=[
                ActionTransition(
                    status=ActionStatus.PENDING, at=two_days_ago, actor="ai-analyzer-1"
                ),
                ActionTransition(
                    status=ActionStatus.REJECTED,
                    at=two_days_ago + timedelta(hours=1),
                    actor="user-id",
                ),
            ],
        ),
    ]


__all__ = [
    "SYSTEM_ADMIN_ID",
    "default_agents",
    "default_permission_settings",
    "default_actions",
]
