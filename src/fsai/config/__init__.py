"""
Configuration system for FSai.

Provides the pydantic schema, the YAML/environment loader and the persisted
user settings store.
"""

from fsai.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_yaml_file,
    save_yaml_file,
)
from fsai.config.merger import deep_merge, get_nested_value, set_nested_value
from fsai.config.schema import AgentConfig, AuditLogConfig, Config, Settings
from fsai.config.settings import SettingsStore

__all__ = [
    # Schema
    "Config",
    "AgentConfig",
    "AuditLogConfig",
    "Settings",
    # Loader
    "ConfigurationError",
    "apply_env_overrides",
    "clear_config_cache",
    "get_config",
    "load_config",
    "load_yaml_file",
    "save_yaml_file",
    # Merger
    "deep_merge",
    "get_nested_value",
    "set_nested_value",
    # Settings
    "SettingsStore",
]
