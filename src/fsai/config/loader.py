"""
Configuration loader for FSai.

Loads and merges configuration from multiple sources:
1. Default values
2. Config file (<fsai home>/config.yaml)
3. Environment variables (FSAI_<SECTION>_<KEY>)
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from fsai.config.merger import deep_merge, set_nested_value
from fsai.config.schema import Config
from fsai.storage.paths import get_config_path

ENV_PREFIX = "FSAI_"

# Handled elsewhere, never treated as config overrides
_RESERVED_ENV = {"FSAI_HOME", "FSAI_AUTHORIZED_ROOT"}


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file does not exist).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return content


def save_yaml_file(path: Path, config: dict[str, Any]) -> None:
    """
    Save a configuration dictionary to a YAML file.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigurationError(f"Cannot write {path}: {e}") from e


def _env_key_to_path(env_key: str) -> str | None:
    """
    Map an environment variable name to a dotted config path.

    The first segment(s) must name a known section; the remainder is the
    field name with its underscores kept, so ``FSAI_AUDIT_LOG_INCLUDE_CONTENT``
    becomes ``audit_log.include_content``.
    """
    name = env_key[len(ENV_PREFIX) :].lower()

    # Longest section name wins ("audit_log" before "audit")
    for section in sorted(Config.model_fields, key=len, reverse=True):
        if name.startswith(section + "_"):
            field = name[len(section) + 1 :]
            return f"{section}.{field}" if field else None

    return None


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Returns:
        Parsed value (bool, int, float, or string).
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    return value


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply FSAI_* environment variable overrides to configuration.

    Example: ``FSAI_AGENT_MAX_ITERATIONS=5`` sets ``agent.max_iterations``.
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
            continue

        config_key = _env_key_to_path(key)
        if config_key is None:
            continue

        config = set_nested_value(config, config_key, _parse_env_value(value))

    return config


def load_config(config_path: Path | None = None, skip_env: bool = False) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        config_path: Config file to read. Defaults to <fsai home>/config.yaml.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    path = config_path or get_config_path()
    if path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        Config instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
