"""
Configuration management for the Advanced Security overview.

Uses Pydantic Settings for validation and environment variable support.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AzureDevOpsSettings(BaseSettings):
    """Azure DevOps API configuration."""

    organization: str = Field(default="", description="Azure DevOps organization name")
    token: str = Field(default="", description="Bearer token used for every request")
    api_url: str = Field(default="https://dev.azure.com", description="Azure DevOps API host")
    advsec_url: str = Field(
        default="https://advsec.dev.azure.com",
        description="Advanced Security API host",
    )
    api_version: str = Field(default="7.2-preview.1", description="API version query parameter")
    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds (None = transport default)",
    )

    @field_validator("api_url", "advsec_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize host URLs."""
        return v.rstrip("/")

    @property
    def organization_url(self) -> str:
        return f"{self.api_url}/{self.organization}"

    @property
    def advsec_organization_url(self) -> str:
        return f"{self.advsec_url}/{self.organization}"


class FetchSettings(BaseSettings):
    """Fan-out and reduction configuration."""

    max_concurrent_projects: int = Field(
        default=8, ge=0, description="Projects aggregated in parallel (0 = unbounded)"
    )
    max_concurrent_repositories: int = Field(
        default=16, ge=0, description="Repository alert queries in parallel per project (0 = unbounded)"
    )
    alerts_page_size: int = Field(default=10000, ge=1, description="Alerts requested per repository")
    top_alerts_limit: int = Field(default=5, ge=1, description="Entries per top alerts category")
    show_progress: bool = Field(default=False, description="Show progress bars while fetching")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level")
    file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid:
            raise ValueError(f"level must be one of {valid}")
        return v.upper()


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration.

    Without a config file, settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file
    3. Default values (lowest priority)

    ``from_yaml`` passes the YAML values as init arguments, so the sections a
    config file sets take precedence over environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADVSEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    devops: AzureDevOpsSettings = Field(default_factory=AzureDevOpsSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data = cls._process_env_vars(data)

        return cls(**data)

    @classmethod
    def _process_env_vars(cls, data: Any) -> Any:
        """Recursively process environment variable references in config."""
        if isinstance(data, dict):
            return {k: cls._process_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._process_env_vars(item) for item in data]
        elif isinstance(data, str):
            # Handle ${ENV_VAR} syntax
            if data.startswith("${") and data.endswith("}"):
                env_var = data[2:-1]
                return os.environ.get(env_var, "")
            return data
        return data


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config.yaml file

    Returns:
        Settings instance
    """
    if config_path:
        return Settings.from_yaml(config_path)

    possible_configs = [
        Path.cwd() / "advsec-overview.yaml",
        Path.home() / ".config" / "advsec-overview" / "config.yaml",
    ]

    for config in possible_configs:
        if config.exists():
            return Settings.from_yaml(config)

    return Settings()


def create_default_config(path: str | Path) -> None:
    """Create a default configuration file."""
    default_config = """# Advanced Security overview configuration

devops:
  organization: SET_YOUR_ORGANIZATION_NAME
  # Bearer token (can use env var AZURE_DEVOPS_TOKEN)
  token: ${AZURE_DEVOPS_TOKEN}
  api_url: https://dev.azure.com
  advsec_url: https://advsec.dev.azure.com
  api_version: 7.2-preview.1
  timeout: null

fetch:
  # 0 means no limit
  max_concurrent_projects: 8
  max_concurrent_repositories: 16
  alerts_page_size: 10000
  top_alerts_limit: 5
  show_progress: false

logging:
  level: WARNING
  file: null
"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_config)
