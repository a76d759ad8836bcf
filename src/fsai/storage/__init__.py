"""
Storage locations for FSai.

Resolves the per-application configuration directory and the files kept in it.
"""

from fsai.storage.paths import (
    APP_NAME,
    ensure_directory,
    get_app_data_dir,
    get_audit_log_path,
    get_config_path,
    get_fsai_home,
    get_settings_path,
)

__all__ = [
    "APP_NAME",
    "ensure_directory",
    "get_app_data_dir",
    "get_audit_log_path",
    "get_config_path",
    "get_fsai_home",
    "get_settings_path",
]
