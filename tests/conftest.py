"""
Pytest configuration and fixtures for fsai tests.
"""

import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from fsai.agent.parser import describe_tool_call
from fsai.audit.logger import reset_audit_logger
from fsai.config import SettingsStore, clear_config_cache
from fsai.providers.exceptions import UpstreamError
from fsai.providers.models import Proposal
from fsai.security.guard import AccessGuard
from fsai.tools.builtin import register_builtin_tools
from fsai.tools.executor import ToolExecutor
from fsai.tools.models import ToolCall
from fsai.tools.registry import ToolRegistry, reset_tool_registry
from fsai.tools.risk import classify


def make_call(name: str, arguments: dict[str, Any] | None = None, call_id: str = "tc_test00001") -> ToolCall:
    """Build a ToolCall the way the parser would."""
    arguments = arguments or {}
    return ToolCall(
        id=call_id,
        name=name,
        arguments=arguments,
        description=describe_tool_call(name, arguments),
        risk=classify(name),
    )


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Relative path -> content (None for directories) for everything under root."""
    return {
        str(p.relative_to(root)): (None if p.is_dir() else p.read_bytes())
        for p in sorted(root.rglob("*"))
    }


class FakeGateway:
    """Gateway double returning scripted proposals in order.

    A scripted item may be a Proposal, a plain string (text-only answer) or
    an UpstreamError to raise.
    """

    def __init__(self, *script: Proposal | str | UpstreamError):
        self.script = list(script)
        self.calls: list[dict[str, Any]] = []

    async def propose(
        self,
        system_prompt,
        prompt_text,
        settings,
        *,
        attachments=(),
        followup=False,
        taken_ids=None,
    ) -> Proposal:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "prompt_text": prompt_text,
                "settings": settings,
                "attachments": list(attachments),
                "followup": followup,
            }
        )
        if not self.script:
            raise AssertionError("FakeGateway script exhausted")

        item = self.script.pop(0)
        if isinstance(item, UpstreamError):
            raise item
        if isinstance(item, str):
            return Proposal(text=item)

        if taken_ids is not None:
            taken_ids.update(call.id for call in item.tool_calls)
        return item


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Keep settings, config and audit files inside the test's tmp dir."""
    for key in list(os.environ):
        if key.startswith("FSAI_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    fsai_home = tmp_path / "fsai_home"
    monkeypatch.setenv("FSAI_HOME", str(fsai_home))

    clear_config_cache()
    reset_tool_registry()
    yield fsai_home
    reset_audit_logger()
    clear_config_cache()
    reset_tool_registry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A small directory tree acting as the authorized root."""
    root = tmp_path / "work"
    root.mkdir()
    (root / "notes.txt").write_text("buy milk\n")
    (root / "report.md").write_text("# Report\n\nAll good.\n")
    docs = root / "docs"
    docs.mkdir()
    (docs / "readme.txt").write_text("hello")
    (root / "archive").mkdir()
    return root


@pytest.fixture
def outside(tmp_path: Path) -> Path:
    """A directory next to the workspace, outside the authorized root."""
    other = tmp_path / "work2"
    other.mkdir()
    (other / "secret.txt").write_text("top secret")
    return other


@pytest.fixture
def guard(workspace: Path) -> AccessGuard:
    return AccessGuard(root=workspace)


@pytest.fixture
def registry() -> ToolRegistry:
    registry = ToolRegistry()
    register_builtin_tools(registry)
    return registry


@pytest.fixture
def executor(registry: ToolRegistry, guard: AccessGuard) -> ToolExecutor:
    return ToolExecutor(registry, guard)


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    """Settings store backed by a tmp file, ignoring $GEMINI_API_KEY."""
    return SettingsStore(path=tmp_path / "settings.json", use_env_credential=False)


@pytest.fixture
def configured_store(settings_store: SettingsStore) -> SettingsStore:
    """Settings store with a credential set."""
    settings_store.save(credential="test-key")
    return settings_store
