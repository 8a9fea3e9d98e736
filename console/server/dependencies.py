"""
Global dependency instances for the console server.

Initialized during app lifespan, accessed by routers.
"""

from docwarden.permission.factory import PermissionEngine

from server.config import ConsoleConfig

_console_config: ConsoleConfig | None = None
_permission_engine: PermissionEngine | None = None


def set_console_config(config: ConsoleConfig) -> None:
    global _console_config
    _console_config = config


def get_console_config() -> ConsoleConfig:
    if _console_config is None:
        raise RuntimeError("ConsoleConfig not initialized")
    return _console_config


def set_permission_engine(engine: PermissionEngine) -> None:
    global _permission_engine
    _permission_engine = engine


def get_permission_engine() -> PermissionEngine:
    if _permission_engine is None:
        raise RuntimeError("PermissionEngine not initialized")
    return _permission_engine
