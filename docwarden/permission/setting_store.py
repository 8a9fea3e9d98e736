"""
PermissionSettingStore - resource-scoped AI permission configuration.

Maps (resource_type [+ resource_id]) to a PermissionSetting. Settings are
low-cardinality and admin-edited, so mutation replaces the whole collection.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from uuid import uuid4

import aiosqlite

from docwarden.permission.capabilities import PermissionLevel
from docwarden.permission.defaults import default_permission_settings
from docwarden.permission.exceptions import SettingValidationError
from docwarden.permission.models import PermissionSetting
from docwarden.permission.sqlite_base import SQLiteStoreBase
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_setting(
    settings: list[PermissionSetting],
    resource_type: str,
    resource_id: str | None = None,
) -> PermissionSetting | None:
    """
    Pick the setting that governs a resource.

    Exact (type, id) match first, then the type's default. None means no
    setting applies; callers must treat that as no_access.
    """
    if resource_id is not None:
        for setting in settings:
            if (
                setting.resource_type == resource_type
                and setting.resource_id == resource_id
            ):
                return setting

    for setting in settings:
        if setting.resource_type == resource_type and setting.resource_id is None:
            return setting

    return None


def validate_settings(settings: list[PermissionSetting]) -> list[PermissionSetting]:
    """
    Check uniqueness and assign ids to settings that lack one.

    Raises:
        SettingValidationError: two settings share (resource_type, resource_id),
            which includes two defaults for one resource type
    """
    seen: set[tuple[str, str | None]] = set()
    normalized: list[PermissionSetting] = []
    for setting in settings:
        key = (setting.resource_type, setting.resource_id)
        if key in seen:
            if setting.resource_id is None:
                raise SettingValidationError(
                    f"More than one default setting for resource type '{setting.resource_type}'"
                )
            raise SettingValidationError(
                f"Duplicate setting for {setting.resource_type}:{setting.resource_id}"
            )
        seen.add(key)
        if setting.id is None:
            setting = setting.model_copy(update={"id": uuid4().hex[:8]})
        normalized.append(setting)
    return normalized


class PermissionSettingStore(ABC):
    """Abstract base class for permission-setting storage"""

    def __init__(self, defaults: list[PermissionSetting] | None = None) -> None:
        self._defaults = (
            defaults if defaults is not None else default_permission_settings()
        )

    @abstractmethod
    async def list_settings(self) -> list[PermissionSetting]:
        """Return every setting, in insertion order."""
        ...

    @abstractmethod
    async def replace_all(
        self, settings: list[PermissionSetting]
    ) -> list[PermissionSetting]:
        """Replace the whole collection. Returns the stored settings."""
        ...

    async def lookup(
        self, resource_type: str, resource_id: str | None = None
    ) -> PermissionSetting | None:
        """Resolve the setting for a resource (specific before default)."""
        return resolve_setting(await self.list_settings(), resource_type, resource_id)

    async def reset_to_defaults(self) -> list[PermissionSetting]:
        logger.info("permission_settings_reset", count=len(self._defaults))
        return await self.replace_all(
            [s.model_copy(deep=True) for s in self._defaults]
        )

    async def close(self) -> None:
        """Close storage and release resources."""
        pass


class InMemoryPermissionSettingStore(PermissionSettingStore):
    """In-memory implementation."""

    def __init__(
        self,
        settings: list[PermissionSetting] | None = None,
        defaults: list[PermissionSetting] | None = None,
    ) -> None:
        super().__init__(defaults)
        self._settings: list[PermissionSetting] = validate_settings(settings or [])
        self._lock = asyncio.Lock()

    async def list_settings(self) -> list[PermissionSetting]:
        return [s.model_copy(deep=True) for s in self._settings]

    async def replace_all(
        self, settings: list[PermissionSetting]
    ) -> list[PermissionSetting]:
        normalized = validate_settings(settings)
        async with self._lock:
            self._settings = [s.model_copy(deep=True) for s in normalized]
        logger.info("permission_settings_replaced", count=len(normalized))
        return normalized


class SQLitePermissionSettingStore(SQLiteStoreBase, PermissionSettingStore):
    """SQLite-backed permission-setting storage."""

    def __init__(
        self,
        db_path: str = "docwarden.db",
        defaults: list[PermissionSetting] | None = None,
        seed: bool = True,
    ) -> None:
        SQLiteStoreBase.__init__(self, db_path)
        PermissionSettingStore.__init__(self, defaults)
        self._seed = seed
        self._write_lock = asyncio.Lock()

    async def _create_tables(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS permission_settings (
                position INTEGER PRIMARY KEY,
                id TEXT NOT NULL,
                resource_type TEXT NOT NULL,
                resource_id TEXT,
                resource_name TEXT,
                permission_level TEXT NOT NULL,
                requires_approval INTEGER NOT NULL,
                approver_roles TEXT DEFAULT '[]'
            )
            """
        )
        if not self._seed:
            return
        cursor = await conn.execute("SELECT COUNT(*) FROM permission_settings")
        row = await cursor.fetchone()
        if row[0] == 0:
            await self._insert_all(conn, validate_settings(self._defaults))
            logger.info("permission_settings_seeded", count=len(self._defaults))

    async def _insert_all(
        self, conn: aiosqlite.Connection, settings: list[PermissionSetting]
    ) -> None:
        await conn.executemany(
            """
            INSERT INTO permission_settings
                (position, id, resource_type, resource_id, resource_name,
                 permission_level, requires_approval, approver_roles)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    position,
                    s.id,
                    s.resource_type,
                    s.resource_id,
                    s.resource_name,
                    s.permission_level.value,
                    1 if s.requires_approval else 0,
                    json.dumps(s.approver_roles),
                )
                for position, s in enumerate(settings)
            ],
        )

    def _row_to_setting(self, row: dict) -> PermissionSetting:
        return PermissionSetting(
            id=row["id"],
            resource_type=row["resource_type"],
            resource_id=row["resource_id"],
            resource_name=row["resource_name"],
            permission_level=PermissionLevel(row["permission_level"]),
            requires_approval=bool(row["requires_approval"]),
            approver_roles=json.loads(row["approver_roles"] or "[]"),
        )

    async def list_settings(self) -> list[PermissionSetting]:
        conn = await self._get_conn()
        cursor = await conn.execute(
            "SELECT * FROM permission_settings ORDER BY position"
        )
        rows = await cursor.fetchall()
        return [self._row_to_setting(dict(r)) for r in rows]

    async def lookup(
        self, resource_type: str, resource_id: str | None = None
    ) -> PermissionSetting | None:
        conn = await self._get_conn()
        if resource_id is not None:
            cursor = await conn.execute(
                "SELECT * FROM permission_settings WHERE resource_type = ? AND resource_id = ?",
                (resource_type, resource_id),
            )
            row = await cursor.fetchone()
            if row is not None:
                return self._row_to_setting(dict(row))

        cursor = await conn.execute(
            "SELECT * FROM permission_settings WHERE resource_type = ? AND resource_id IS NULL",
            (resource_type,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_setting(dict(row))

    async def replace_all(
        self, settings: list[PermissionSetting]
    ) -> list[PermissionSetting]:
        normalized = validate_settings(settings)
        conn = await self._get_conn()
        async with self._write_lock:
            try:
                await conn.execute("DELETE FROM permission_settings")
                await self._insert_all(conn, normalized)
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise
        logger.info("permission_settings_replaced", count=len(normalized))
        return normalized


__all__ = [
    "PermissionSettingStore",
    "InMemoryPermissionSettingStore",
    "SQLitePermissionSettingStore",
    "resolve_setting",
    "validate_settings",
]
