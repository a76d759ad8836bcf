"""Tests for configuration loading and the settings store."""

import json
from unittest.mock import MagicMock

import pytest
import yaml
from pydantic import ValidationError

from fsai.config import (
    ConfigurationError,
    SettingsStore,
    clear_config_cache,
    deep_merge,
    get_config,
    load_config,
)
from fsai.config.schema import AgentConfig, Settings
from fsai.storage.paths import get_audit_log_path, get_config_path, get_settings_path


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.credential == ""
        assert settings.allow_root_access is False
        assert settings.multimedia_support is False
        assert settings.is_configured is False

    def test_wire_names(self):
        settings = Settings.model_validate(
            {"credential": "k", "allowRootAccess": True, "multimediaSupport": True}
        )
        assert settings.allow_root_access is True
        assert settings.model_dump(by_alias=True) == {
            "credential": "k",
            "allowRootAccess": True,
            "multimediaSupport": True,
        }

    def test_legacy_api_key(self):
        assert Settings.model_validate({"apiKey": "old"}).credential == "old"

    def test_immutable(self):
        with pytest.raises(ValidationError):
            Settings().allow_root_access = True

    def test_masked(self):
        masked = Settings(credential="abcdefgh123").masked()
        assert masked["credential"].startswith("abcd")
        assert "efgh123" not in masked["credential"]
        assert Settings().masked()["credential"] == ""


class TestSettingsStore:
    def test_save_persists(self, tmp_path):
        path = tmp_path / "settings.json"
        store = SettingsStore(path=path, use_env_credential=False)

        updated = store.save(allow_root_access=True)

        assert updated.allow_root_access is True
        assert json.loads(path.read_text())["allowRootAccess"] is True
        assert SettingsStore(path=path).get().allow_root_access is True

    def test_save_by_wire_name(self, settings_store):
        settings_store.save(multimediaSupport=True)
        assert settings_store.get().multimedia_support is True

    def test_snapshots_are_independent(self, settings_store):
        before = settings_store.get()
        settings_store.save(credential="new")
        assert before.credential == ""
        assert settings_store.get().credential == "new"

    def test_unknown_key(self, settings_store):
        with pytest.raises(ConfigurationError, match="Unknown setting"):
            settings_store.save(theme="dark")

    def test_invalid_value(self, settings_store):
        with pytest.raises(ConfigurationError):
            settings_store.save(allow_root_access="sometimes")
        assert settings_store.get().allow_root_access is False

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        assert SettingsStore(path=path).get() == Settings()

    def test_env_credential_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        store = SettingsStore(path=tmp_path / "settings.json")
        assert store.get().credential == "from-env"

        store.save(credential="stored")
        assert store.get().credential == "stored"

    def test_env_credential_disabled(self, settings_store, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert settings_store.get().credential == ""

    def test_changes_audited_with_masked_credential(self, tmp_path):
        audit = MagicMock()
        store = SettingsStore(path=tmp_path / "s.json", audit_logger=audit, use_env_credential=False)

        store.save(credential="secret", allow_root_access=False)

        audit.log_settings_changed.assert_called_once_with("credential", "***")

    def test_default_path(self, isolated_env):
        assert SettingsStore().path == isolated_env / "settings.json"


class TestPaths:
    def test_fsai_home(self, isolated_env):
        assert get_settings_path() == isolated_env / "settings.json"
        assert get_config_path() == isolated_env / "config.yaml"
        assert get_audit_log_path() == isolated_env / "audit.jsonl"


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.agent == AgentConfig()
        assert config.agent.max_iterations == 10
        assert config.agent.timeout_per_call == 300
        assert config.audit_log.enable is True

    def test_yaml_merged_over_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"agent": {"model": "openai/gpt-4o", "max_iterations": 4}}))

        config = load_config(path)
        assert config.agent.model == "openai/gpt-4o"
        assert config.agent.max_iterations == 4
        assert config.agent.history_char_budget == 1500

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FSAI_AGENT_MAX_ITERATIONS", "5")
        monkeypatch.setenv("FSAI_AUDIT_LOG_INCLUDE_CONTENT", "true")
        monkeypatch.setenv("FSAI_AGENT_TEMPERATURE", "0.5")

        config = load_config(tmp_path / "missing.yaml")
        assert config.agent.max_iterations == 5
        assert config.audit_log.include_content is True
        assert config.agent.temperature == 0.5

    def test_skip_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FSAI_AGENT_MAX_ITERATIONS", "5")
        assert load_config(tmp_path / "missing.yaml", skip_env=True).agent.max_iterations == 10

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("agent: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"agent": {"max_iterations": 0}}))
        with pytest.raises(ConfigurationError, match="validation failed"):
            load_config(path)

    def test_get_config_cached(self, isolated_env):
        first = get_config()
        assert get_config() is first
        assert get_config(reload=True) is not first

        clear_config_cache()
        assert get_config() is not first

    def test_get_config_reads_home(self, isolated_env):
        isolated_env.mkdir(parents=True, exist_ok=True)
        (isolated_env / "config.yaml").write_text("agent:\n  auto_confirm_low_risk: true\n")
        assert get_config(reload=True).agent.auto_confirm_low_risk is True


class TestDeepMerge:
    def test_nested(self):
        base = {"agent": {"model": "a", "temperature": 0.0}, "x": 1}
        merged = deep_merge(base, {"agent": {"model": "b"}})
        assert merged == {"agent": {"model": "b", "temperature": 0.0}, "x": 1}
        assert base["agent"]["model"] == "a"
