"""Tests for the permission evaluator."""

import pytest

from docwarden.permission.agent_registry import AgentRegistry, InMemoryAgentStore
from docwarden.permission.capabilities import ActionType, Capability, PermissionLevel
from docwarden.permission.evaluator import PermissionEvaluator, evaluate_permission
from docwarden.permission.models import Agent, AgentRole, PermissionSetting
from docwarden.permission.setting_store import InMemoryPermissionSettingStore


def _agent(
    id: str = "editor-1",
    capabilities: list[Capability] | None = None,
    is_active: bool = True,
) -> Agent:
    return Agent(
        id=id,
        name=id,
        role=AgentRole.EDITOR,
        capabilities=capabilities if capabilities is not None else list(Capability),
        is_active=is_active,
        created_by="admin-id",
    )


def _setting(
    level: PermissionLevel,
    requires_approval: bool = False,
    resource_id: str | None = None,
) -> PermissionSetting:
    return PermissionSetting(
        resource_type="document",
        resource_id=resource_id,
        permission_level=level,
        requires_approval=requires_approval,
        approver_roles=["admin"],
    )


ALL_ACTIONS = list(ActionType)


class TestDenials:
    def test_unknown_agent(self):
        decision = evaluate_permission(None, _setting(PermissionLevel.FULL_ACCESS), "read")
        assert decision.permitted is False
        assert decision.requires_approval is True
        assert decision.permission_level == PermissionLevel.NO_ACCESS
        assert decision.reason

    @pytest.mark.parametrize("level", list(PermissionLevel))
    @pytest.mark.parametrize("action", ALL_ACTIONS)
    def test_inactive_agent_always_denied(self, level, action):
        agent = _agent(is_active=False)
        decision = evaluate_permission(agent, _setting(level), action)
        assert decision.permitted is False

    def test_no_setting(self):
        decision = evaluate_permission(_agent(), None, "read")
        assert decision.permitted is False
        assert decision.permission_level == PermissionLevel.NO_ACCESS

    def test_unknown_action(self):
        decision = evaluate_permission(
            _agent(), _setting(PermissionLevel.FULL_ACCESS), "publish"
        )
        assert decision.permitted is False

    @pytest.mark.parametrize("action", ALL_ACTIONS)
    def test_no_access_denies_everything(self, action):
        decision = evaluate_permission(_agent(), _setting(PermissionLevel.NO_ACCESS), action)
        assert decision.permitted is False

    def test_capability_gating_dominates_full_access(self):
        agent = _agent(capabilities=[Capability.READ_DOCUMENTS, Capability.ANALYZE_CONTENT])
        decision = evaluate_permission(agent, _setting(PermissionLevel.FULL_ACCESS), "update")
        assert decision.permitted is False
        assert decision.permission_level == PermissionLevel.NO_ACCESS


class TestReadOnly:
    @pytest.mark.parametrize("action", ["create", "update", "delete", "improve_document"])
    def test_writes_denied(self, action):
        decision = evaluate_permission(_agent(), _setting(PermissionLevel.READ_ONLY), action)
        assert decision.permitted is False
        assert decision.permission_level == PermissionLevel.READ_ONLY

    @pytest.mark.parametrize("action", ["read", "analyze_document", "summarize_document"])
    def test_reads_never_need_approval(self, action):
        setting = _setting(PermissionLevel.READ_ONLY, requires_approval=True)
        decision = evaluate_permission(_agent(), setting, action)
        assert decision.permitted is True
        assert decision.requires_approval is False

    def test_translate_is_not_read_class(self):
        decision = evaluate_permission(
            _agent(), _setting(PermissionLevel.READ_ONLY), "translate_document"
        )
        assert decision.permitted is False


class TestSuggestOnly:
    @pytest.mark.parametrize("action", ["create", "update", "delete", "improve_document"])
    def test_mutating_forced_to_approval(self, action):
        setting = _setting(PermissionLevel.SUGGEST_ONLY, requires_approval=False)
        decision = evaluate_permission(_agent(), setting, action)
        assert decision.permitted is True
        assert decision.requires_approval is True

    def test_read_keeps_stored_flag(self):
        setting = _setting(PermissionLevel.SUGGEST_ONLY, requires_approval=False)
        decision = evaluate_permission(_agent(), setting, "read")
        assert decision.permitted is True
        assert decision.requires_approval is False

        setting = _setting(PermissionLevel.SUGGEST_ONLY, requires_approval=True)
        assert evaluate_permission(_agent(), setting, "read").requires_approval is True


class TestFullAccess:
    @pytest.mark.parametrize("action", ALL_ACTIONS)
    def test_everything_permitted_with_capability(self, action):
        decision = evaluate_permission(_agent(), _setting(PermissionLevel.FULL_ACCESS), action)
        assert decision.permitted is True
        assert decision.requires_approval is False

    def test_stored_approval_flag_is_kept(self):
        setting = _setting(PermissionLevel.FULL_ACCESS, requires_approval=True)
        decision = evaluate_permission(_agent(), setting, "delete")
        assert decision.permitted is True
        assert decision.requires_approval is True


@pytest.fixture
def evaluator():
    agents = AgentRegistry(
        InMemoryAgentStore(
            [
                _agent("editor-1", [Capability.EDIT_DOCUMENTS]),
                _agent("assistant-1", [Capability.READ_DOCUMENTS]),
                _agent("sleeper-1", list(Capability), is_active=False),
            ]
        )
    )
    settings = InMemoryPermissionSettingStore(
        [
            _setting(PermissionLevel.READ_ONLY, requires_approval=True),
            _setting(PermissionLevel.SUGGEST_ONLY, requires_approval=False, resource_id="1"),
            _setting(PermissionLevel.FULL_ACCESS, resource_id="42"),
        ]
    )
    return PermissionEvaluator(agents, settings)


class TestPermissionEvaluator:
    @pytest.mark.asyncio
    async def test_suggest_only_override(self, evaluator):
        decision = await evaluator.evaluate("editor-1", "update", "document", "1")
        assert decision.permitted is True
        assert decision.requires_approval is True
        assert decision.permission_level == PermissionLevel.SUGGEST_ONLY

    @pytest.mark.asyncio
    async def test_default_read_only_read(self, evaluator):
        decision = await evaluator.evaluate("assistant-1", "read", "document", "5")
        assert decision.permitted is True
        assert decision.requires_approval is False
        assert decision.permission_level == PermissionLevel.READ_ONLY

    @pytest.mark.asyncio
    async def test_specific_setting_wins(self, evaluator):
        decision = await evaluator.evaluate("editor-1", "update", "document", "42")
        assert decision.permitted is True
        assert decision.permission_level == PermissionLevel.FULL_ACCESS

    @pytest.mark.asyncio
    async def test_unknown_agent_is_denial_not_error(self, evaluator):
        decision = await evaluator.evaluate("ghost", "read", "document", "1")
        assert decision.permitted is False

    @pytest.mark.asyncio
    async def test_inactive_agent(self, evaluator):
        decision = await evaluator.evaluate("sleeper-1", "read", "document", "42")
        assert decision.permitted is False

    @pytest.mark.asyncio
    async def test_unknown_resource_type(self, evaluator):
        decision = await evaluator.evaluate("assistant-1", "read", "folder", "1")
        assert decision.permitted is False
