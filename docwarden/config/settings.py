"""
Global settings from environment variables.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

import os


class DocwardenSettings(BaseSettings):
    """
    Global configuration loaded from environment variables.

    Environment variables should be prefixed with DOCWARDEN_
    Example: DOCWARDEN_STORAGE_TYPE=sqlite, DOCWARDEN_GENERATION_TIMEOUT=10
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCWARDEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Core settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    # Storage settings: "memory" | "sqlite"
    storage_type: Literal["memory", "sqlite"] = "memory"
    sqlite_db_path: str = "~/.docwarden/docwarden.db"
    seed_defaults: bool = True

    # Content generation
    generation_timeout: float = Field(default=30.0, gt=0.0)
    generation_max_attempts: int = Field(default=2, ge=1)

    # Groq (OpenAI-compatible endpoint)
    groq_api_key: SecretStr | None = (
        SecretStr(os.environ["GROQ_API_KEY"]) if os.getenv("GROQ_API_KEY") else None
    )
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model_name: str = "llama3-8b-8192"
    groq_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    groq_max_tokens: int = Field(default=1000, ge=1)

    # Default target language for translate_document
    default_target_language: str = "English"


# Global settings instance (singleton)
settings = DocwardenSettings()


__all__ = ["DocwardenSettings", "settings"]
