"""
PermissionEvaluator - decides whether an AI agent may act on a resource.

`evaluate_permission` is the pure decision function; `PermissionEvaluator`
resolves the agent and setting from their stores and delegates to it.
"""

from docwarden.permission.agent_registry import AgentRegistry
from docwarden.permission.capabilities import (
    ActionType,
    PermissionLevel,
    has_capability_for,
    is_mutating,
    is_read_class,
    parse_action,
)
from docwarden.permission.models import Agent, Decision, PermissionSetting
from docwarden.permission.setting_store import PermissionSettingStore
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


def evaluate_permission(
    agent: Agent | None,
    setting: PermissionSetting | None,
    action: str | ActionType,
) -> Decision:
    """
    Combine an agent's capabilities with a resource's permission setting.

    Decision logic, each step short-circuiting to a denial:
    1. Missing or inactive agent → deny
    2. No setting for the resource → deny (deny-by-default)
    3. Agent lacks every capability that satisfies the action → deny,
       regardless of permission level
    4. permitted from the level: no_access never, read_only only for
       read-class actions, suggest_only and full_access always
    5. requires_approval from the stored flag, forced True for writes under
       suggest_only and forced False for reads under read_only

    Args:
        agent: Resolved agent, or None if unknown
        setting: Resolved permission setting, or None if none applies
        action: Action tag; tags outside the vocabulary are always denied

    Returns:
        Decision: permitted / requires_approval / permission_level + reason
    """
    if agent is None:
        return Decision.deny("Unknown AI agent")
    if not agent.is_active:
        return Decision.deny(f"AI agent {agent.id} is inactive")

    if setting is None:
        return Decision.deny("No AI permission setting applies to this resource")

    action_type = parse_action(action)
    if action_type is None:
        return Decision.deny(f"Unknown action '{action}'")

    if not has_capability_for(agent.capabilities, action_type):
        return Decision.deny(
            f"AI agent {agent.id} lacks the capability for '{action_type.value}'"
        )

    level = setting.permission_level
    if level == PermissionLevel.NO_ACCESS:
        permitted = False
    elif level == PermissionLevel.READ_ONLY:
        permitted = is_read_class(action_type)
    else:
        permitted = True

    requires_approval = setting.requires_approval
    if level == PermissionLevel.SUGGEST_ONLY and is_mutating(action_type):
        requires_approval = True
    if level == PermissionLevel.READ_ONLY and is_read_class(action_type):
        requires_approval = False

    if not permitted:
        reason = f"Permission level '{level.value}' does not allow '{action_type.value}'"
    elif requires_approval:
        reason = f"Permitted under '{level.value}', pending human approval"
    else:
        reason = f"Permitted under '{level.value}'"

    return Decision(
        permitted=permitted,
        requires_approval=requires_approval,
        permission_level=level,
        reason=reason,
    )


class PermissionEvaluator:
    """Repository-backed front for evaluate_permission."""

    def __init__(
        self, agents: AgentRegistry, settings: PermissionSettingStore
    ) -> None:
        self._agents = agents
        self._settings = settings

    async def evaluate(
        self,
        agent_id: str,
        action: str | ActionType,
        resource_type: str,
        resource_id: str | None = None,
    ) -> Decision:
        """
        Evaluate one permission check.

        Unknown agents are a denial, not an error.
        """
        agent = await self._agents.get(agent_id)
        setting = None
        if agent is not None and agent.is_active:
            setting = await self._settings.lookup(resource_type, resource_id)

        decision = evaluate_permission(agent, setting, action)

        logger.info(
            "permission_evaluated",
            agent_id=agent_id,
            action=str(getattr(action, "value", action)),
            resource_type=resource_type,
            resource_id=resource_id,
            permitted=decision.permitted,
            requires_approval=decision.requires_approval,
            permission_level=decision.permission_level.value,
            setting_id=setting.id if setting else None,
        )
        return decision


__all__ = ["evaluate_permission", "PermissionEvaluator"]
