"""
PermissionEngine wiring and the global engine factory.

The engine bundles the agent registry, setting store, evaluator and lifecycle
manager over one storage backend chosen from settings.
"""

from typing import Any

from docwarden.config.settings import settings as global_settings
from docwarden.generation import ContentGenerator, create_content_generator
from docwarden.permission.action_store import (
    ActionStore,
    InMemoryActionStore,
    SQLiteActionStore,
)
from docwarden.permission.agent_registry import (
    AgentRegistry,
    AgentStore,
    InMemoryAgentStore,
    SQLiteAgentStore,
)
from docwarden.permission.capabilities import ActionType
from docwarden.permission.defaults import (
    default_actions,
    default_agents,
    default_permission_settings,
)
from docwarden.permission.evaluator import PermissionEvaluator
from docwarden.permission.lifecycle import ActionLifecycleManager
from docwarden.permission.models import (
    Action,
    ActionRequestResult,
    Agent,
    Decision,
    RequestMetadata,
)
from docwarden.permission.setting_store import (
    InMemoryPermissionSettingStore,
    PermissionSettingStore,
    SQLitePermissionSettingStore,
)
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


class PermissionEngine:
    """Entry point used by the surrounding application."""

    def __init__(
        self,
        agent_store: AgentStore,
        setting_store: PermissionSettingStore,
        action_store: ActionStore,
        generator: ContentGenerator,
        generation_timeout: float = 30.0,
        enforce_approver_roles: bool = True,
    ) -> None:
        self.agents = AgentRegistry(agent_store)
        self.settings = setting_store
        self.actions = action_store
        self.generator = generator
        self.evaluator = PermissionEvaluator(self.agents, setting_store)
        self.lifecycle = ActionLifecycleManager(
            evaluator=self.evaluator,
            actions=action_store,
            generator=generator,
            settings=setting_store if enforce_approver_roles else None,
            generation_timeout=generation_timeout,
        )

    async def evaluate(
        self,
        agent_id: str,
        action: str | ActionType,
        resource_type: str,
        resource_id: str | None = None,
    ) -> Decision:
        return await self.evaluator.evaluate(agent_id, action, resource_type, resource_id)

    async def request_action(
        self,
        agent_id: str,
        action_type: str,
        resource_type: str,
        resource_id: str,
        metadata: dict[str, Any] | RequestMetadata | None = None,
        *,
        title: str = "",
        content: str = "",
    ) -> ActionRequestResult:
        return await self.lifecycle.request_action(
            agent_id,
            action_type,
            resource_type,
            resource_id,
            metadata,
            title=title,
            content=content,
        )

    async def approve_action(self, action_id: str, user_id: str, **kwargs: Any) -> Action:
        return await self.lifecycle.approve_action(action_id, user_id, **kwargs)

    async def reject_action(self, action_id: str, user_id: str, **kwargs: Any) -> Action:
        return await self.lifecycle.reject_action(action_id, user_id, **kwargs)

    async def fail_action(self, action_id: str, error: str) -> Action:
        return await self.lifecycle.fail_action(action_id, error)

    async def list_agents(self) -> list[Agent]:
        return await self.agents.list()

    async def list_actions(self) -> list[Action]:
        return await self.lifecycle.list_actions()

    async def list_pending_actions(self) -> list[Action]:
        return await self.lifecycle.list_pending_actions()

    async def list_actions_for_resource(self, resource_id: str) -> list[Action]:
        return await self.lifecycle.list_actions_for_resource(resource_id)

    async def close(self) -> None:
        await self.actions.close()
        await self.settings.close()
        await self.agents.store.close()
        await self.generator.close()


def create_permission_engine(
    storage_type: str | None = None,
    db_path: str | None = None,
    seed: bool | None = None,
    generator: ContentGenerator | None = None,
    generation_timeout: float | None = None,
) -> PermissionEngine:
    """
    Build a PermissionEngine; unset arguments come from global settings.

    Args:
        storage_type: "memory" or "sqlite"
        db_path: SQLite database path (sqlite only)
        seed: Load the demo agents, settings and actions into empty stores
        generator: Content generator; defaults to create_content_generator()
        generation_timeout: Seconds allowed per generation call
    """
    storage_type = storage_type or global_settings.storage_type
    seed = global_settings.seed_defaults if seed is None else seed
    db_path = db_path or global_settings.sqlite_db_path

    if storage_type == "memory":
        agent_store: AgentStore = InMemoryAgentStore(default_agents() if seed else None)
        setting_store: PermissionSettingStore = InMemoryPermissionSettingStore(
            default_permission_settings() if seed else None
        )
        action_store: ActionStore = InMemoryActionStore(default_actions() if seed else None)
    elif storage_type == "sqlite":
        agent_store = SQLiteAgentStore(db_path, seed=default_agents() if seed else None)
        setting_store = SQLitePermissionSettingStore(db_path, seed=seed)
        action_store = SQLiteActionStore(db_path, seed=default_actions() if seed else None)
    else:
        raise ValueError(f"Unknown storage_type: {storage_type}")

    logger.info("permission_engine_created", storage_type=storage_type, seeded=seed)

    return PermissionEngine(
        agent_store=agent_store,
        setting_store=setting_store,
        action_store=action_store,
        generator=generator or create_content_generator(),
        generation_timeout=generation_timeout or global_settings.generation_timeout,
    )


_permission_engine: PermissionEngine | None = None


def get_permission_engine() -> PermissionEngine:
    """Global PermissionEngine singleton, created lazily from settings."""
    global _permission_engine

    if _permission_engine is None:
        logger.info("initializing_global_permission_engine")
        _permission_engine = create_permission_engine()

    return _permission_engine


def reset_permission_engine() -> None:
    """Drop the global engine; used by tests to start from a clean state."""
    global _permission_engine
    _permission_engine = None
    logger.debug("permission_engine_reset")


__all__ = [
    "PermissionEngine",
    "create_permission_engine",
    "get_permission_engine",
    "reset_permission_engine",
]
