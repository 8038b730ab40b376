"""
Configuration management for kitebuilder.

Settings come from an optional YAML file (.buildkite/builder.yaml) and are
then overridden by environment variables:

    KITEBUILDER_AGENT       -> agent_executable
    KITEBUILDER_LOG_LEVEL   -> log_level

Example builder.yaml:

    agent_executable: /usr/local/bin/buildkite-agent
    log_level: DEBUG
    log_format: structured
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from kitebuilder.errors import ConfigError

BUILDKITE_DIR = ".buildkite"
CONFIG_FILENAME = "builder.yaml"

ENV_OVERRIDES = {
    "KITEBUILDER_AGENT": "agent_executable",
    "KITEBUILDER_LOG_LEVEL": "log_level",
}

LOG_FORMATS = ("pretty", "structured")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class BuilderConfig:
    """
    Settings for building and uploading pipelines.

    Attributes:
        agent_executable: buildkite-agent binary used for uploads
        pipelines_dir: Directory (relative to .buildkite) holding pipelines
        log_level: Logging level name
        log_format: "pretty" or "structured"
        console: Whether to log to the console
    """
    agent_executable: str = "buildkite-agent"
    pipelines_dir: str = "pipelines"
    log_level: str = "INFO"
    log_format: str = "pretty"
    console: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuilderConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def validate(self) -> None:
        """Validate configuration values."""
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'"
            )
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}, got '{self.log_format}'"
            )
        if not self.agent_executable:
            raise ConfigError("agent_executable is required")


def find_buildkite_root(start: Optional[Path] = None) -> Optional[Path]:
    """
    Find the nearest .buildkite directory at or above start.

    Returns:
        Path to the .buildkite directory, or None
    """
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if candidate.name == BUILDKITE_DIR and candidate.is_dir():
            return candidate
        if (candidate / BUILDKITE_DIR).is_dir():
            return candidate / BUILDKITE_DIR
    return None


def load_config(config_path: Optional[Path] = None) -> BuilderConfig:
    """
    Load configuration from YAML (if present) and environment overrides.

    Args:
        config_path: Path to config file. Defaults to builder.yaml in the
                     nearest .buildkite directory

    Returns:
        BuilderConfig instance

    Raises:
        ConfigError: If the file is invalid
    """
    if config_path is None:
        root = find_buildkite_root()
        if root is not None:
            config_path = root / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if config_path is not None and Path(config_path).exists():
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Config file must contain a mapping: {config_path}")
        data.update(loaded or {})

    for env_var, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data[key] = value

    config = BuilderConfig.from_dict(data)
    config.validate()
    return config
