"""Configuration management using Pydantic Settings.

Loads configuration from multiple sources with the following priority (highest first):
1. Environment variables (HEALTHCHECKER_* prefix)
2. .env file
3. config.local.yaml (if exists)
4. config.yaml
5. Default values
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CorsSettings(BaseModel):
    """CORS configuration."""

    allowed_origins: list[str] = ["http://localhost:5173"]
    allowed_methods: list[str] = ["GET", "DELETE", "OPTIONS"]
    allowed_headers: list[str] = [
        "Content-Type",
        "Authorization",
        "X-API-Key",
        "X-Request-ID",
    ]


class ServerSettings(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors: CorsSettings = Field(default_factory=CorsSettings)


class ApiKeyConfig(BaseModel):
    """API key configuration."""

    key: str
    name: str


class AuthSettings(BaseModel):
    """Authentication configuration."""

    mode: Literal["none", "api_key"] = "none"
    api_keys: list[ApiKeyConfig] = Field(default_factory=list)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class RunnerSettings(BaseModel):
    """Check execution settings."""

    max_concurrency: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Checks run at once by the async runner (1 = sequential)",
    )
    timeout_seconds: float | None = Field(
        default=30.0,
        gt=0,
        description="Per-check time limit for the async runner; null disables it",
    )
    cache_ttl_seconds: int = Field(
        default=900,
        ge=0,
        description="Lifetime of a cached report; 0 disables caching",
    )
    strict_slugs: bool = Field(
        default=False,
        description="Fail collection on duplicate check slugs instead of keeping the first",
    )


class ChecksSettings(BaseModel):
    """Per-check toggles."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Slugs of checks that are never collected",
    )


class DatabaseSettings(BaseModel):
    """Database probed by the database checks."""

    path: Path | None = Field(
        default=None,
        description="SQLite database file; unset leaves the database checks without a connection",
    )
    timeout_seconds: float = Field(default=5.0, gt=0)


class SiteConfig(BaseModel):
    """Snapshot of site options handed to the built-in checks."""

    debug: bool = False
    force_ssl: Literal["none", "administrator", "site"] = "site"
    live_site: str = ""
    root_path: Path = Field(default_factory=Path.cwd)
    tmp_path: Path = Field(default_factory=lambda: Path("/tmp"))
    min_python_version: str = "3.11"
    recommended_python_version: str = "3.12"
    critical_free_disk_mb: int = Field(default=100, ge=0)
    warning_free_disk_mb: int = Field(default=500, ge=0)
    slow_query_ms: int = Field(default=250, gt=0)


def _load_yaml_config(config_dir: Path) -> dict:
    """Load configuration from YAML files.

    Loads config.yaml and optionally overlays config.local.yaml.
    """
    config = {}

    config_file = config_dir / "config.yaml"
    if config_file.exists():
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    local_config_file = config_dir / "config.local.yaml"
    if local_config_file.exists():
        with open(local_config_file) as f:
            local_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, local_config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Settings(BaseSettings):
    """Application settings loaded from environment, .env, and config files."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTHCHECKER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    checks: ChecksSettings = Field(default_factory=ChecksSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    site: SiteConfig = Field(default_factory=SiteConfig)

    def __init__(self, config_dir: Path | None = None, **data):
        """Initialize settings, loading from YAML if config_dir provided."""
        if config_dir is not None:
            yaml_config = _load_yaml_config(config_dir)
            # Explicit data wins over YAML
            merged = _deep_merge(yaml_config, data)
            super().__init__(**merged)
        else:
            super().__init__(**data)

    def validate_required(self) -> None:
        """Validate that required settings are present.

        Raises:
            ValueError: If required settings are missing.
        """
        if self.auth.mode == "api_key" and not self.auth.api_keys:
            raise ValueError("At least one API key is required when auth mode is 'api_key'")


@lru_cache
def get_settings(config_dir: Path | None = None) -> Settings:
    """Get cached settings instance.

    Args:
        config_dir: Optional path to config directory. If None, only environment
                   variables and .env file are used.

    Returns:
        Settings instance.
    """
    if config_dir is None:
        # Try to find config directory relative to project root
        project_root = Path(__file__).parent.parent.parent
        default_config_dir = project_root / "config"
        if default_config_dir.exists():
            config_dir = default_config_dir

    return Settings(config_dir=config_dir)
