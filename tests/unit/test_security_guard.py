"""Tests for the access guard."""

import os
from pathlib import Path

import pytest

from fsai.security.guard import AccessGuard, is_within, resolve_path


class TestResolvePath:
    """Tests for resolve_path."""

    def test_relative_against_current_path(self):
        assert resolve_path("notes.txt", "/home/user/docs") == Path("/home/user/docs/notes.txt")

    def test_absolute_ignores_current_path(self):
        assert resolve_path("/etc/hosts", "/home/user/docs") == Path("/etc/hosts")

    def test_dot_segments_normalized(self):
        assert resolve_path("../b/./c.txt", "/home/user/a") == Path("/home/user/b/c.txt")

    def test_home_expanded(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/tester")
        assert resolve_path("~/notes.txt") == Path("/home/tester/notes.txt")

    def test_nonexistent_path_resolves(self, tmp_path):
        assert resolve_path("missing/file.txt", tmp_path) == tmp_path / "missing" / "file.txt"


class TestIsWithin:
    """Containment is decided per path segment."""

    def test_root_itself(self):
        assert is_within("/home/user", "/home/user") is True

    def test_descendant(self):
        assert is_within("/home/user/docs/a.txt", "/home/user") is True

    def test_sibling_with_shared_prefix(self):
        assert is_within("/home/user2/secret.txt", "/home/user") is False

    def test_parent(self):
        assert is_within("/home", "/home/user") is False


class TestAccessGuard:
    """Tests for AccessGuard."""

    def test_sibling_prefix_rejected(self):
        guard = AccessGuard(root="/home/user")
        assert guard.is_allowed("/home/user2/secret.txt", allow_root=False) is False

    def test_inside_root_allowed(self, workspace):
        guard = AccessGuard(root=workspace)
        assert guard.is_allowed(workspace / "notes.txt", allow_root=False) is True
        assert guard.is_allowed(workspace, allow_root=False) is True

    def test_relative_path_uses_current_path(self, workspace):
        guard = AccessGuard(root=workspace)
        assert guard.is_allowed("readme.txt", False, workspace / "docs") is True
        assert guard.is_allowed("../../escape.txt", False, workspace / "docs") is False

    def test_outside_rejected(self, workspace, outside):
        guard = AccessGuard(root=workspace)
        assert guard.is_allowed(outside / "secret.txt", allow_root=False) is False

    def test_root_access_lifts_restriction(self, workspace, outside):
        guard = AccessGuard(root=workspace)
        assert guard.is_allowed(outside / "secret.txt", allow_root=True) is True
        assert guard.is_allowed("/etc/passwd", allow_root=True) is True

    def test_symlink_escaping_root_rejected(self, workspace, outside):
        link = workspace / "escape"
        os.symlink(outside, link)
        guard = AccessGuard(root=workspace)

        assert guard.is_allowed(link / "secret.txt", allow_root=False) is False

    def test_check_path_reason(self, workspace):
        guard = AccessGuard(root=workspace)

        allowed, reason = guard.check_path("/etc/passwd", allow_root=False)
        assert allowed is False
        assert reason == "Access to path '/etc/passwd' is disallowed."

        allowed, reason = guard.check_path(workspace / "notes.txt", allow_root=False)
        assert allowed is True
        assert reason is None

    def test_root_from_environment(self, monkeypatch, workspace):
        monkeypatch.setenv("FSAI_AUTHORIZED_ROOT", str(workspace))
        assert AccessGuard().root == workspace

    def test_root_defaults_to_home(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/tester")
        assert AccessGuard().root == Path("/home/tester")

    @pytest.mark.parametrize("raw", ["..", "../work2/secret.txt", "/"])
    def test_escapes_rejected(self, workspace, raw):
        guard = AccessGuard(root=workspace)
        assert guard.is_allowed(raw, False, workspace) is False
