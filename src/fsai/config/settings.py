"""
Persisted user settings.

The settings store is the only place settings change. Turns never mutate
settings; they take a snapshot with ``get()`` and pass it along explicitly.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from fsai.config.loader import ConfigurationError
from fsai.config.schema import Settings
from fsai.storage.paths import get_settings_path

if TYPE_CHECKING:
    from fsai.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

# Used when no credential is stored in the settings file
CREDENTIAL_ENV_VAR = "GEMINI_API_KEY"


class SettingsStore:
    """Loads, snapshots and persists ``Settings`` as a small JSON file."""

    def __init__(
        self,
        path: Path | None = None,
        audit_logger: "AuditLogger | None" = None,
        use_env_credential: bool = True,
    ) -> None:
        """
        Initialize the store and load any existing settings file.

        Args:
            path: Settings file. Defaults to <fsai home>/settings.json.
            audit_logger: Optional audit logger for recording changes.
            use_env_credential: Fall back to $GEMINI_API_KEY when no
                credential is stored.
        """
        self.path = path or get_settings_path()
        self.audit_logger = audit_logger
        self.use_env_credential = use_env_credential
        self._lock = threading.Lock()
        self._settings = self._load()

    def _load(self) -> Settings:
        if not self.path.exists():
            return Settings()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Settings.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Could not load settings file {self.path}: {e}")
            return Settings()

    def get(self) -> Settings:
        """
        Get a snapshot of the current settings.

        Returns:
            Immutable Settings value, with the environment credential
            applied when none is stored.
        """
        settings = self._settings
        if not settings.credential and self.use_env_credential:
            env_credential = os.environ.get(CREDENTIAL_ENV_VAR, "")
            if env_credential:
                settings = settings.model_copy(update={"credential": env_credential})
        return settings

    def save(self, **updates: Any) -> Settings:
        """
        Apply a partial update and persist it.

        Keys may use either field names (``allow_root_access``) or wire
        names (``allowRootAccess``).

        Returns:
            The new settings snapshot.

        Raises:
            ConfigurationError: If a key is unknown, a value is invalid or
                the file cannot be written.
        """
        with self._lock:
            current = self._settings.model_dump()
            merged = dict(current)

            for key, value in updates.items():
                field = _field_name(key)
                if field is None:
                    raise ConfigurationError(f"Unknown setting: {key}")
                merged[field] = value

            try:
                new_settings = Settings.model_validate(merged)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid settings: {e}") from e

            self._write(new_settings)
            self._settings = new_settings

        for field, value in merged.items():
            if current[field] != value:
                logger.info(f"Setting changed: {field}")
                if self.audit_logger:
                    shown = "***" if field == "credential" else value
                    self.audit_logger.log_settings_changed(field, shown)

        return self.get()

    def _write(self, settings: Settings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                settings.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigurationError(f"Cannot write {self.path}: {e}") from e


def _field_name(key: str) -> str | None:
    """Map a field or alias name to the Settings field name."""
    for name in Settings.model_fields:
        if key in (name, to_camel(name)):
            return name
    if key == "apiKey":
        return "credential"
    return None
