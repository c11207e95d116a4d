# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Regbox Configuration System

Configuration is merged from (lowest to highest precedence):
- Defaults
- ~/.regbox/config.yaml
- .regbox.yaml in the current directory
- An explicitly passed file
- Environment variables (REGBOX_*)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError

logger = logging.getLogger("regbox.config")

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# ============================================================================
# Configuration Models
# ============================================================================


class ToolConfig(BaseModel):
    """External registry tool settings"""

    executable: str = Field(default="reg", min_length=1, description="REG executable")
    encoding: Optional[str] = Field(
        default=None,
        description="Encoding of the tool's output (None = OEM code page on Windows, locale encoding elsewhere)",
    )
    chunk_size: int = Field(
        default=4096, ge=1, description="Bytes read from stdout per chunk"
    )


class LoggingConfig(BaseModel):
    """Logging configuration"""

    level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Rotating log file")
    console: bool = Field(default=True, description="Log to stderr")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate log level"""
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level. Must be one of: {VALID_LOG_LEVELS}")
        return v_upper

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v):
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class RegboxConfig(BaseModel):
    """Complete regbox configuration"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tool: ToolConfig = Field(default_factory=ToolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ============================================================================
# Configuration Loader
# ============================================================================


class ConfigLoader:
    """Load configuration from multiple sources"""

    ENV_VARS = {
        "REGBOX_EXECUTABLE": ("tool", "executable"),
        "REGBOX_ENCODING": ("tool", "encoding"),
        "REGBOX_CHUNK_SIZE": ("tool", "chunk_size"),
        "REGBOX_LOG_LEVEL": ("logging", "level"),
        "REGBOX_LOG_FILE": ("logging", "log_file"),
    }

    @staticmethod
    def load_from_env() -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}
        for env_name, (section, option) in ConfigLoader.ENV_VARS.items():
            value = os.getenv(env_name)
            if value:
                config.setdefault(section, {})[option] = value
        return config

    @staticmethod
    def load_from_file(file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Failed to load config file {file_path}",
                details={"path": str(file_path)},
                cause=e,
            )

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {file_path} must contain a mapping",
                details={"path": str(file_path)},
            )
        return data

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple configuration dictionaries"""
        result: Dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if (
                    key in result
                    and isinstance(result[key], dict)
                    and isinstance(value, dict)
                ):
                    result[key] = ConfigLoader.merge_configs(result[key], value)
                else:
                    result[key] = value
        return result


# ============================================================================
# Global Configuration Instance
# ============================================================================

_config: Optional[RegboxConfig] = None


def default_locations():
    return [
        Path.home() / ".regbox" / "config.yaml",
        Path.cwd() / ".regbox.yaml",
    ]


def load_config(
    config_file: Optional[Path] = None, env_override: bool = True
) -> RegboxConfig:
    """
    Load configuration from all sources

    Args:
        config_file: Optional specific config file to load
        env_override: Whether environment variables override file config

    Returns:
        RegboxConfig instance

    Raises:
        ConfigError: If a file cannot be read or the merged result is invalid
    """
    configs = []

    for location in default_locations():
        file_config = ConfigLoader.load_from_file(location)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {location}")

    if config_file:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigError(f"Config file {config_file} does not exist")
        configs.append(ConfigLoader.load_from_file(config_file))
        logger.debug(f"Loaded config from {config_file}")

    if env_override:
        env_config = ConfigLoader.load_from_env()
        if env_config:
            configs.append(env_config)
            logger.debug("Loaded config from environment")

    merged = ConfigLoader.merge_configs(*configs) if configs else {}

    try:
        return RegboxConfig(**merged)
    except ValidationError as e:
        raise ConfigError("Config validation failed", cause=e)


def get_config() -> RegboxConfig:
    """Get the process-wide configuration, loading it on first use"""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config() -> RegboxConfig:
    """Reload global configuration"""
    global _config
    _config = load_config()
    logger.info("Configuration reloaded")
    return _config
