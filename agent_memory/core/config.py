"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_llm_settings() -> "LLMSettings":
    """Build LLM settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return LLMSettings()  # type: ignore[call-arg]


def _build_embedding_settings() -> "EmbeddingSettings":
    return EmbeddingSettings()


def _build_vector_store_settings() -> "VectorStoreSettings":
    return VectorStoreSettings()


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    See _build_llm_settings() for rationale about the type ignore.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class LLMSettings(BaseSettings):
    """Chat model configuration.

    Any OpenAI-compatible endpoint works (OpenAI, Groq, a local gateway)
    through ``base_url``. Provider-specific validation happens in the factory.
    """

    provider: str = Field(
        ...,
        description="LLM provider name (e.g., openai)",
    )
    model: str = Field(
        ...,
        description="Model name (e.g., gpt-4o-mini, llama-3.1-8b-instant)",
    )
    api_key: str | None = Field(
        None,
        description="API key for cloud providers",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint for OpenAI-compatible providers",
    )
    timeout_seconds: float = Field(
        30.0,
        description="Request timeout in seconds",
    )
    temperature: float = Field(
        0.7,
        description="Sampling temperature for chat replies",
    )
    max_tokens: int = Field(
        1000,
        description="Upper bound on reply length in tokens",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class EmbeddingSettings(BaseSettings):
    """Text embedding provider configuration.

    ``hashing`` is a deterministic, non-semantic placeholder; ``openai`` calls
    the embeddings endpoint and requires an API key.
    """

    provider: str = Field(
        "hashing",
        description="Embedding provider name (hashing, openai)",
    )
    model: str = Field(
        "text-embedding-3-small",
        description="Embedding model name for semantic providers",
    )
    api_key: str | None = Field(
        None,
        description="API key for the embedding provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint for the embedding provider",
    )
    dimension: int = Field(
        384,
        description="Vector dimension; must match the vector index",
        ge=1,
    )
    timeout_seconds: float = Field(
        10.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        case_sensitive=False,
    )


class VectorStoreSettings(BaseSettings):
    """Vector database configuration."""

    provider: str = Field(
        "memory",
        description="Vector store backend (memory, pinecone)",
    )
    api_key: str | None = Field(
        None,
        description="API key for the hosted vector database",
    )
    index_name: str = Field(
        "agent-memory",
        description="Name of the vector index holding memories",
    )
    namespace: str | None = Field(
        None,
        description="Optional namespace inside the index",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Per-call timeout for vector store operations in seconds",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_memory_chars: int = Field(
        1000,
        description="Maximum memory text length in characters",
        ge=1,
    )
    max_chat_chars: int = Field(
        1000,
        description="Maximum chat message length in characters",
        ge=1,
    )
    memory_list_top_k: int = Field(
        20,
        description="Default number of memories returned by the list endpoint",
        ge=1,
    )
    memory_search_top_k: int = Field(
        5,
        description="Default number of matches returned by the search endpoint",
        ge=1,
    )
    chat_memory_top_k: int = Field(
        3,
        description="Number of memories injected into a chat prompt",
        ge=0,
    )
    chat_remember_messages: bool = Field(
        True,
        description="Store user chat messages as agent memories",
    )
    children_file: str = Field(
        "data/children.json",
        description="JSON file holding bred child agents",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable rate limiting on chat and memory endpoints",
    )
    rate_limit_requests: int = Field(
        10,
        description="Maximum number of requests allowed per window (per caller)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_sweep_interval_seconds: int = Field(
        300,
        description="How often expired rate limit entries are removed",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if required settings are missing.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=_build_llm_settings)
    embedding: EmbeddingSettings = Field(default_factory=_build_embedding_settings)
    vector_store: VectorStoreSettings = Field(default_factory=_build_vector_store_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
