"""
Path utilities for FSai.

Provides consistent path resolution for settings, configuration and audit files.
"""

import os
import sys
from pathlib import Path

APP_NAME = "FSai"


def get_app_data_dir() -> Path:
    """
    Get the OS-conventional per-user application data root.

    Resolution:
    - Windows: %APPDATA% (default: ~/AppData/Roaming)
    - macOS: ~/Library/Application Support
    - Linux and others: $XDG_CONFIG_HOME (default: ~/.config)

    Returns:
        Path to the platform application data root.
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg_home) if xdg_home else Path.home() / ".config"


def get_fsai_home() -> Path:
    """
    Get the FSai configuration directory.

    Resolution order:
    1. FSAI_HOME environment variable
    2. Default: <app data root>/FSai

    Returns:
        Path to the FSai home directory.
    """
    env_home = os.environ.get("FSAI_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return get_app_data_dir() / APP_NAME


def get_settings_path() -> Path:
    """
    Get the path to the persisted settings file.

    Returns:
        Path to <fsai home>/settings.json
    """
    return get_fsai_home() / "settings.json"


def get_config_path() -> Path:
    """
    Get the path to the agent configuration file.

    Returns:
        Path to <fsai home>/config.yaml
    """
    return get_fsai_home() / "config.yaml"


def get_audit_log_path() -> Path:
    """
    Get the default audit log path.

    Returns:
        Path to <fsai home>/audit.jsonl
    """
    return get_fsai_home() / "audit.jsonl"


def ensure_directory(path: Path, mode: int = 0o755) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path.
        mode: Permission mode for created directories.

    Returns:
        The path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True, mode=mode)
    return path
