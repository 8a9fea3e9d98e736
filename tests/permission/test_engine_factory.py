"""Tests for PermissionEngine construction."""

import pytest

from docwarden.generation.fallback import FallbackContentGenerator
from docwarden.permission.action_store import InMemoryActionStore, SQLiteActionStore
from docwarden.permission.agent_registry import InMemoryAgentStore, SQLiteAgentStore
from docwarden.permission.factory import (
    create_permission_engine,
    get_permission_engine,
    reset_permission_engine,
)
from docwarden.permission.models import ActionStatus
from docwarden.permission.setting_store import (
    InMemoryPermissionSettingStore,
    SQLitePermissionSettingStore,
)


class TestCreatePermissionEngine:
    @pytest.mark.asyncio
    async def test_memory_seeded(self):
        engine = create_permission_engine(
            storage_type="memory", seed=True, generator=FallbackContentGenerator()
        )
        assert isinstance(engine.agents.store, InMemoryAgentStore)
        assert isinstance(engine.settings, InMemoryPermissionSettingStore)
        assert isinstance(engine.actions, InMemoryActionStore)

        assert len(await engine.list_agents()) == 3
        assert len(await engine.list_actions()) == 3
        assert [a.id for a in await engine.list_pending_actions()] == ["action-1"]
        await engine.close()

    @pytest.mark.asyncio
    async def test_memory_unseeded(self):
        engine = create_permission_engine(
            storage_type="memory", seed=False, generator=FallbackContentGenerator()
        )
        assert await engine.list_agents() == []
        assert await engine.settings.list_settings() == []
        decision = await engine.evaluate("ai-editor-1", "read", "document", "1")
        assert decision.permitted is False
        await engine.close()

    @pytest.mark.asyncio
    async def test_sqlite(self, tmp_path):
        engine = create_permission_engine(
            storage_type="sqlite",
            db_path=str(tmp_path / "engine.db"),
            seed=True,
            generator=FallbackContentGenerator(),
        )
        assert isinstance(engine.agents.store, SQLiteAgentStore)
        assert isinstance(engine.settings, SQLitePermissionSettingStore)
        assert isinstance(engine.actions, SQLiteActionStore)

        outcome = await engine.request_action(
            "ai-editor-1",
            "improve_document",
            "document",
            "1",
            title="Getting Started Guide",
            content="Welcome.",
        )
        assert outcome.action.status == ActionStatus.PENDING

        approved = await engine.approve_action(
            outcome.action.id, "admin-id", approver_role="admin"
        )
        assert approved.status == ActionStatus.COMPLETED
        assert [a.id for a in await engine.list_actions_for_resource("1")][0] == (
            outcome.action.id
        )
        await engine.close()

    def test_unknown_storage_type(self):
        with pytest.raises(ValueError):
            create_permission_engine(storage_type="mongodb")


class TestGlobalEngine:
    def test_singleton_and_reset(self):
        reset_permission_engine()
        first = get_permission_engine()
        assert get_permission_engine() is first
        reset_permission_engine()
        assert get_permission_engine() is not first
        reset_permission_engine()
