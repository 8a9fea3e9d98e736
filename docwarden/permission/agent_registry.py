"""
Agent registry.

AgentStore persists agent descriptors; AgentRegistry layers the registry
contract (id generation, timestamps, NotFound semantics) on top of it.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import datetime
from uuid import uuid4

import aiosqlite

from docwarden.permission.capabilities import Capability
from docwarden.permission.exceptions import AgentNotFoundError
from docwarden.permission.models import Agent, AgentDescriptor, AgentRole, utc_now
from docwarden.permission.sqlite_base import SQLiteStoreBase
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


class AgentStore(ABC):
    """Abstract base for agent persistence."""

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent | None:
        ...

    @abstractmethod
    async def list_agents(self) -> list[Agent]:
        """All agents, ordered by creation time."""
        ...

    @abstractmethod
    async def save_agent(self, agent: Agent) -> None:
        """Insert or replace an agent."""
        ...

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> bool:
        ...

    async def close(self) -> None:
        pass


class InMemoryAgentStore(AgentStore):
    """In-memory implementation."""

    def __init__(self, agents: list[Agent] | None = None) -> None:
        self._agents: dict[str, Agent] = {a.id: a for a in agents or []}
        self._lock = asyncio.Lock()

    async def get_agent(self, agent_id: str) -> Agent | None:
        agent = self._agents.get(agent_id)
        return agent.model_copy(deep=True) if agent else None

    async def list_agents(self) -> list[Agent]:
        agents = sorted(self._agents.values(), key=lambda a: a.created_at)
        return [a.model_copy(deep=True) for a in agents]

    async def save_agent(self, agent: Agent) -> None:
        async with self._lock:
            self._agents[agent.id] = agent.model_copy(deep=True)

    async def delete_agent(self, agent_id: str) -> bool:
        async with self._lock:
            return self._agents.pop(agent_id, None) is not None


class SQLiteAgentStore(SQLiteStoreBase, AgentStore):
    """SQLite-backed agent storage."""

    def __init__(self, db_path: str = "docwarden.db", seed: list[Agent] | None = None) -> None:
        super().__init__(db_path)
        self._seed = seed or []

    async def _create_tables(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_agents (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT DEFAULT '',
                role TEXT NOT NULL,
                capabilities TEXT DEFAULT '[]',
                is_active INTEGER DEFAULT 1,
                created_by TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        if not self._seed:
            return
        cursor = await conn.execute("SELECT COUNT(*) FROM ai_agents")
        row = await cursor.fetchone()
        if row[0] == 0:
            for agent in self._seed:
                await self._upsert(conn, agent)
            logger.info("agents_seeded", count=len(self._seed))

    async def _upsert(self, conn: aiosqlite.Connection, agent: Agent) -> None:
        await conn.execute(
            """
            INSERT OR REPLACE INTO ai_agents
                (id, name, description, role, capabilities, is_active,
                 created_by, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                agent.id,
                agent.name,
                agent.description,
                agent.role.value,
                json.dumps([c.value for c in agent.capabilities]),
                1 if agent.is_active else 0,
                agent.created_by,
                agent.created_at.isoformat(),
                agent.updated_at.isoformat(),
            ),
        )

    def _row_to_agent(self, row: dict) -> Agent:
        return Agent(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            role=AgentRole(row["role"]),
            capabilities=[Capability(c) for c in json.loads(row["capabilities"] or "[]")],
            is_active=bool(row["is_active"]),
            created_by=row["created_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    async def get_agent(self, agent_id: str) -> Agent | None:
        conn = await self._get_conn()
        cursor = await conn.execute("SELECT * FROM ai_agents WHERE id = ?", (agent_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_agent(dict(row))

    async def list_agents(self) -> list[Agent]:
        conn = await self._get_conn()
        cursor = await conn.execute("SELECT * FROM ai_agents ORDER BY created_at")
        rows = await cursor.fetchall()
        return [self._row_to_agent(dict(r)) for r in rows]

    async def save_agent(self, agent: Agent) -> None:
        conn = await self._get_conn()
        await self._upsert(conn, agent)
        await conn.commit()

    async def delete_agent(self, agent_id: str) -> bool:
        conn = await self._get_conn()
        cursor = await conn.execute("DELETE FROM ai_agents WHERE id = ?", (agent_id,))
        await conn.commit()
        return cursor.rowcount > 0


class AgentRegistry:
    """
    Registry of AI agents.

    Deactivating an agent keeps its record (and its actions) but makes every
    subsequent permission check for it a denial.
    """

    def __init__(self, store: AgentStore) -> None:
        self._store = store

    @property
    def store(self) -> AgentStore:
        return self._store

    async def get(self, agent_id: str) -> Agent | None:
        return await self._store.get_agent(agent_id)

    async def list(self) -> list[Agent]:
        return await self._store.list_agents()

    async def create(self, descriptor: AgentDescriptor) -> Agent:
        now = utc_now()
        agent = Agent(
            **descriptor.model_dump(),
            id=f"ai-{descriptor.role.value}-{uuid4().hex[:8]}",
            created_at=now,
            updated_at=now,
        )
        await self._store.save_agent(agent)
        logger.info("agent_created", agent_id=agent.id, role=agent.role.value)
        return agent

    async def update(self, agent: Agent) -> Agent:
        """
        Replace an agent's descriptor fields.

        created_at and created_by are kept from the stored record.

        Raises:
            AgentNotFoundError: no agent with this id
        """
        existing = await self._store.get_agent(agent.id)
        if existing is None:
            raise AgentNotFoundError(agent.id)

        updated = agent.model_copy(
            update={
                "created_at": existing.created_at,
                "created_by": existing.created_by,
                "updated_at": utc_now(),
            }
        )
        await self._store.save_agent(updated)
        logger.info("agent_updated", agent_id=agent.id, is_active=updated.is_active)
        return updated

    async def toggle_active(self, agent_id: str) -> Agent:
        existing = await self._store.get_agent(agent_id)
        if existing is None:
            raise AgentNotFoundError(agent_id)

        existing.is_active = not existing.is_active
        existing.updated_at = utc_now()
        await self._store.save_agent(existing)
        logger.info("agent_toggled", agent_id=agent_id, is_active=existing.is_active)
        return existing

    async def delete(self, agent_id: str) -> bool:
        deleted = await self._store.delete_agent(agent_id)
        if deleted:
            logger.info("agent_deleted", agent_id=agent_id)
        return deleted


__all__ = [
    "AgentStore",
    "InMemoryAgentStore",
    "SQLiteAgentStore",
    "AgentRegistry",
]
