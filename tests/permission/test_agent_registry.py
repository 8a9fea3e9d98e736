"""Tests for AgentStore implementations and the AgentRegistry."""

import asyncio

import pytest

from docwarden.permission.agent_registry import (
    AgentRegistry,
    InMemoryAgentStore,
    SQLiteAgentStore,
)
from docwarden.permission.capabilities import Capability
from docwarden.permission.defaults import default_agents
from docwarden.permission.exceptions import AgentNotFoundError, NotFoundError
from docwarden.permission.models import AgentDescriptor, AgentRole


@pytest.fixture(params=["memory", "sqlite"])
async def registry(request):
    if request.param == "memory":
        store = InMemoryAgentStore(default_agents())
    else:
        store = SQLiteAgentStore(":memory:", seed=default_agents())
    yield AgentRegistry(store)
    await store.close()


def _descriptor(**kwargs) -> AgentDescriptor:
    return AgentDescriptor(
        name=kwargs.pop("name", "Translator"),
        role=kwargs.pop("role", AgentRole.EDITOR),
        capabilities=kwargs.pop(
            "capabilities", [Capability.READ_DOCUMENTS, Capability.TRANSLATE_CONTENT]
        ),
        created_by=kwargs.pop("created_by", "admin-id"),
        **kwargs,
    )


class TestRegistryRead:
    @pytest.mark.asyncio
    async def test_list_seeded(self, registry):
        agents = await registry.list()
        assert {a.id for a in agents} == {"ai-assistant-1", "ai-editor-1", "ai-analyzer-1"}

    @pytest.mark.asyncio
    async def test_get(self, registry):
        agent = await registry.get("ai-analyzer-1")
        assert agent is not None
        assert agent.role == AgentRole.ANALYZER
        assert Capability.ANALYZE_CONTENT in agent.capabilities

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, registry):
        assert await registry.get("nope") is None


class TestRegistryCreate:
    @pytest.mark.asyncio
    async def test_create_generates_role_id(self, registry):
        agent = await registry.create(_descriptor(role=AgentRole.ASSISTANT))
        assert agent.id.startswith("ai-assistant-")
        assert len(agent.id) == len("ai-assistant-") + 8
        assert agent.created_at == agent.updated_at
        stored = await registry.get(agent.id)
        assert stored is not None
        assert stored.capabilities == [
            Capability.READ_DOCUMENTS,
            Capability.TRANSLATE_CONTENT,
        ]

    @pytest.mark.asyncio
    async def test_created_ids_unique(self, registry):
        a = await registry.create(_descriptor())
        b = await registry.create(_descriptor())
        assert a.id != b.id


class TestRegistryUpdate:
    @pytest.mark.asyncio
    async def test_update_preserves_creation_fields(self, registry):
        original = await registry.get("ai-editor-1")
        await asyncio.sleep(0.01)
        changed = original.model_copy(
            update={"name": "Senior Editor", "created_by": "someone-else"}
        )
        updated = await registry.update(changed)
        assert updated.name == "Senior Editor"
        assert updated.created_by == original.created_by
        assert updated.created_at == original.created_at
        assert updated.updated_at > original.updated_at

    @pytest.mark.asyncio
    async def test_update_nonexistent(self, registry):
        ghost = (await registry.get("ai-editor-1")).model_copy(update={"id": "ghost"})
        with pytest.raises(AgentNotFoundError):
            await registry.update(ghost)

    @pytest.mark.asyncio
    async def test_toggle_active(self, registry):
        agent = await registry.toggle_active("ai-assistant-1")
        assert agent.is_active is False
        assert (await registry.get("ai-assistant-1")).is_active is False

        agent = await registry.toggle_active("ai-assistant-1")
        assert agent.is_active is True

    @pytest.mark.asyncio
    async def test_toggle_nonexistent(self, registry):
        with pytest.raises(NotFoundError):
            await registry.toggle_active("ghost")


class TestRegistryDelete:
    @pytest.mark.asyncio
    async def test_delete(self, registry):
        assert await registry.delete("ai-analyzer-1") is True
        assert await registry.get("ai-analyzer-1") is None
        assert await registry.delete("ai-analyzer-1") is False
