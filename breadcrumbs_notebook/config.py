"""
Configuration for the breadcrumbs notebook.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from breadcrumbs_notebook.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """On-disk layout, relative to the workspace root."""

    root_dir: str = ".breadcrumbs"
    notes_dir: str = "notes"
    chains_dir: str = "chains"
    index_file: str = "index.json"

    @field_validator("root_dir", "notes_dir", "chains_dir", "index_file")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("storage paths must be non-empty")
        return value.strip()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Raises:
            ConfigurationError: If a variable holds an invalid value

        Environment variables:
            BREADCRUMBS_ROOT_DIR: Hidden root under the workspace
            BREADCRUMBS_NOTES_DIR: Notes directory name
            BREADCRUMBS_CHAINS_DIR: Chains directory name
            BREADCRUMBS_INDEX_FILE: Index file name
            BREADCRUMBS_LOG_LEVEL: Log level
            BREADCRUMBS_LOG_TO_FILE: Enable file logging
            BREADCRUMBS_LOG_DIR: Log directory
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            return value

        try:
            return cls(
                storage=StorageConfig(
                    root_dir=get_env("BREADCRUMBS_ROOT_DIR", ".breadcrumbs"),
                    notes_dir=get_env("BREADCRUMBS_NOTES_DIR", "notes"),
                    chains_dir=get_env("BREADCRUMBS_CHAINS_DIR", "chains"),
                    index_file=get_env("BREADCRUMBS_INDEX_FILE", "index.json"),
                ),
                logging=LoggingConfig(
                    level=get_env("BREADCRUMBS_LOG_LEVEL", "INFO"),
                    log_to_file=get_env("BREADCRUMBS_LOG_TO_FILE", False),
                    log_dir=get_env("BREADCRUMBS_LOG_DIR", "logs"),
                    file_rotation=get_env("BREADCRUMBS_LOG_FILE_ROTATION", "10 MB"),
                    file_retention=get_env("BREADCRUMBS_LOG_FILE_RETENTION", "7 days"),
                    compression=get_env("BREADCRUMBS_LOG_COMPRESSION", "zip"),
                    serialize=get_env("BREADCRUMBS_LOG_SERIALIZE", True),
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ConfigurationError: If the YAML content is not a valid configuration
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {yaml_path}")

        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid config file {yaml_path}: {e}") from e

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        base = cls.from_yaml(yaml_path) if yaml_path and Path(yaml_path).exists() else cls()
        env_config = cls.from_env(env_file=env_file)

        # Apply env overrides (non-default values)
        default = cls()
        final_dict = base.model_dump()
        if env_config.storage != default.storage:
            final_dict["storage"] = env_config.storage.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict)


# Default config instance
default_config = Config()
