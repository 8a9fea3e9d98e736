"""
Action storage: ABC and implementations.

Action records are the audit trail of AI-originated operations; stores never
delete them.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import datetime

import aiosqlite
from pydantic import TypeAdapter

from docwarden.permission.models import (
    Action,
    ActionMetadata,
    ActionStatus,
    ActionTransition,
)
from docwarden.permission.sqlite_base import SQLiteStoreBase
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)

_metadata_adapter: TypeAdapter = TypeAdapter(ActionMetadata)
_history_adapter: TypeAdapter = TypeAdapter(list[ActionTransition])


class ActionStore(ABC):
    """Abstract base for action persistence."""

    @abstractmethod
    async def save_action(self, action: Action) -> None:
        """Insert or replace an action."""
        ...

    @abstractmethod
    async def get_action(self, action_id: str) -> Action | None:
        ...

    @abstractmethod
    async def list_actions(
        self,
        *,
        status: ActionStatus | None = None,
        resource_id: str | None = None,
        agent_id: str | None = None,
    ) -> list[Action]:
        """List actions matching every given filter, newest request first."""
        ...

    async def close(self) -> None:
        pass


class InMemoryActionStore(ActionStore):
    """In-memory implementation."""

    def __init__(self, actions: list[Action] | None = None) -> None:
        self._actions: dict[str, Action] = {a.id: a for a in actions or []}
        self._lock = asyncio.Lock()

    async def save_action(self, action: Action) -> None:
        async with self._lock:
            self._actions[action.id] = action.model_copy(deep=True)

    async def get_action(self, action_id: str) -> Action | None:
        action = self._actions.get(action_id)
        return action.model_copy(deep=True) if action else None

    async def list_actions(
        self,
        *,
        status: ActionStatus | None = None,
        resource_id: str | None = None,
        agent_id: str | None = None,
    ) -> list[Action]:
        actions = list(self._actions.values())
        if status is not None:
            actions = [a for a in actions if a.status == status]
        if resource_id is not None:
            actions = [a for a in actions if a.resource_id == resource_id]
        if agent_id is not None:
            actions = [a for a in actions if a.agent_id == agent_id]
        actions.sort(key=lambda a: a.requested_at, reverse=True)
        return [a.model_copy(deep=True) for a in actions]


class SQLiteActionStore(SQLiteStoreBase, ActionStore):
    """SQLite-backed action storage."""

    def __init__(self, db_path: str = "docwarden.db", seed: list[Action] | None = None) -> None:
        super().__init__(db_path)
        self._seed = seed or []

    async def _create_tables(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_actions (
                id TEXT PRIMARY KEY,
                agent_id TEXT NOT NULL,
                action_type TEXT NOT NULL,
                resource_type TEXT NOT NULL,
                resource_id TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                requires_approval INTEGER DEFAULT 1,
                requested_at TEXT NOT NULL,
                completed_at TEXT,
                requested_by TEXT NOT NULL,
                approved_by TEXT,
                rejected_by TEXT,
                metadata TEXT NOT NULL,
                result TEXT,
                history TEXT DEFAULT '[]'
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_ai_actions_status ON ai_actions(status)"
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_ai_actions_resource ON ai_actions(resource_id)"
        )
        if not self._seed:
            return
        cursor = await conn.execute("SELECT COUNT(*) FROM ai_actions")
        row = await cursor.fetchone()
        if row[0] == 0:
            for action in self._seed:
                await self._upsert(conn, action)
            logger.info("actions_seeded", count=len(self._seed))

    async def _upsert(self, conn: aiosqlite.Connection, action: Action) -> None:
        await conn.execute(
            """
            INSERT OR REPLACE INTO ai_actions
                (id, agent_id, action_type, resource_type, resource_id,
                 status, requires_approval, requested_at, completed_at,
                 requested_by, approved_by, rejected_by,
                 metadata, result, history)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                action.id,
                action.agent_id,
                action.action_type,
                action.resource_type,
                action.resource_id,
                action.status.value,
                1 if action.requires_approval else 0,
                action.requested_at.isoformat(),
                action.completed_at.isoformat() if action.completed_at else None,
                action.requested_by,
                action.approved_by,
                action.rejected_by,
                action.metadata.model_dump_json(),
                action.result,
                json.dumps([h.model_dump(mode="json") for h in action.history]),
            ),
        )

    def _row_to_action(self, row: dict) -> Action:
        completed_at = None
        if row.get("completed_at"):
            completed_at = datetime.fromisoformat(row["completed_at"])
        return Action(
            id=row["id"],
            agent_id=row["agent_id"],
            action_type=row["action_type"],
            resource_type=row["resource_type"],
            resource_id=row["resource_id"],
            status=ActionStatus(row["status"]),
            requires_approval=bool(row["requires_approval"]),
            requested_at=datetime.fromisoformat(row["requested_at"]),
            completed_at=completed_at,
            requested_by=row["requested_by"],
            approved_by=row.get("approved_by"),
            rejected_by=row.get("rejected_by"),
            metadata=_metadata_adapter.validate_json(row["metadata"]),
            result=row.get("result"),
            history=_history_adapter.validate_json(row.get("history") or "[]"),
        )

    async def save_action(self, action: Action) -> None:
        conn = await self._get_conn()
        await self._upsert(conn, action)
        await conn.commit()

    async def get_action(self, action_id: str) -> Action | None:
        conn = await self._get_conn()
        cursor = await conn.execute("SELECT * FROM ai_actions WHERE id = ?", (action_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_action(dict(row))

    async def list_actions(
        self,
        *,
        status: ActionStatus | None = None,
        resource_id: str | None = None,
        agent_id: str | None = None,
    ) -> list[Action]:
        conn = await self._get_conn()
        clauses: list[str] = []
        params: list = []
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if resource_id is not None:
            clauses.append("resource_id = ?")
            params.append(resource_id)
        if agent_id is not None:
            clauses.append("agent_id = ?")
            params.append(agent_id)

        sql = "SELECT * FROM ai_actions"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY requested_at DESC"

        cursor = await conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_action(dict(r)) for r in rows]


__all__ = ["ActionStore", "InMemoryActionStore", "SQLiteActionStore"]
