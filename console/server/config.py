"""
Console server configuration.

Loaded from environment variables with DOCWARDEN_CONSOLE_ prefix.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class ConsoleConfig(BaseSettings):
    model_config = {"env_prefix": "DOCWARDEN_CONSOLE_"}

    # Server
    host: str = "0.0.0.0"
    port: int = 8422

    # Storage backend: "memory" | "sqlite"
    storage_type: Literal["memory", "sqlite"] = "sqlite"

    # SQLite settings
    sqlite_db_path: str = "docwarden.db"

    # Load demo agents, permission settings and actions into empty stores
    seed_defaults: bool = True

    # Seconds allowed for one content-generation call
    generation_timeout: float = 30.0

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]
