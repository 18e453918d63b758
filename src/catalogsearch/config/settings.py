"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (CATALOGSEARCH_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=3000, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class AdapterConfig(BaseModel):
    """Configuration for a single search adapter."""

    enabled: bool = Field(default=True, description="Whether this adapter is active")
    hosts: list[str] = Field(default_factory=list, description="Backend host URLs")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    api_key: str | None = Field(default=None, description="API key authentication")
    extra: dict[str, Any] = Field(default_factory=dict, description="Adapter-specific options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class CollectionSettings(BaseModel):
    """Names of the catalog collections in the search backend."""

    album: str = Field(default="Album", description="Album collection / index name")
    song: str = Field(default="Song", description="Song collection / index name")
    artist: str = Field(default="Artist", description="Artist collection / index name")


class SearchSettings(BaseModel):
    """Search backend configuration."""

    default_adapter: str = Field(default="opensearch", description="Adapter used for catalog search")
    adapters: dict[str, AdapterConfig] = Field(default_factory=dict, description="Adapter configurations")
    collections: CollectionSettings = Field(default_factory=CollectionSettings)
    candidate_limit: int = Field(
        default=1000,
        ge=1,
        description="Upper bound on candidates fetched when a relevance cutoff is applied",
    )


class CacheSettings(BaseModel):
    """Response cache configuration (API layer only)."""

    enabled: bool = Field(default=False, description="Cache successful search responses")
    backend: str = Field(default="memory", description="Cache backend: memory, redis")
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    ttl: int = Field(default=300, ge=1, description="Time-to-live of cached responses in seconds")
    memory_max_entries: int = Field(default=10_000, ge=1, description="Entry cap of the in-memory backend")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the CATALOGSEARCH_ prefix.
    Nested settings use double underscores.

    Example:
        CATALOGSEARCH_SERVER__PORT=9090
        CATALOGSEARCH_SEARCH__DEFAULT_ADAPTER=meilisearch
        CATALOGSEARCH_CACHE__BACKEND=redis
    """

    model_config = {
        "env_prefix": "CATALOGSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="Catalog & Discovery Service", description="Service name reported by /health")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they take
        precedence over environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
