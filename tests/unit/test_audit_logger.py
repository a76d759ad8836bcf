"""Tests for audit logger."""

import gzip
import hashlib
import json
import os
import time

from conftest import make_call
from fsai.audit.logger import (
    AuditEventType,
    AuditLogger,
    get_audit_logger,
    reset_audit_logger,
)
from fsai.config.schema import AuditLogConfig


def read_events(path):
    with path.open() as f:
        return [json.loads(line) for line in f]


class TestAuditLogger:
    """Test AuditLogger functionality."""

    def test_create_audit_logger(self, tmp_path):
        log_path = tmp_path / "logs" / "audit.jsonl"
        logger = AuditLogger(log_path=log_path)

        assert logger.log_path == log_path
        assert logger.enable is True
        assert log_path.parent.is_dir()

    def test_turn_events(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=1)

        logger.log_turn_start("rename notes", "gemini/gemini-2.5-flash", "/home/user")
        logger.log_turn_complete("rename notes", "Done.", iterations=1, tool_calls=1)
        logger.log_turn_error("rename notes", "quota exceeded")

        events = read_events(log_path)
        assert [e["event_type"] for e in events] == [
            AuditEventType.TURN_START.value,
            AuditEventType.TURN_COMPLETE.value,
            AuditEventType.TURN_ERROR.value,
        ]
        assert events[0]["model"] == "gemini/gemini-2.5-flash"
        assert events[1]["iterations"] == 1
        assert events[2]["error"] == "quota exceeded"

    def test_content_hashed_by_default(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=1)

        logger.log_turn_start("my secret plans", "m", None)

        event = read_events(log_path)[0]
        assert event["prompt"] == hashlib.sha256(b"my secret plans").hexdigest()

    def test_content_included_when_enabled(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=1, include_content=True)

        logger.log_turn_start("my plans", "m", None)
        assert read_events(log_path)[0]["prompt"] == "my plans"

    def test_tool_events(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=1)
        call = make_call("write_file", {"path": "a.txt", "content": "private"}, "tc_1")

        logger.log_tool_proposed(call)
        logger.log_tool_approved(call, automatic=False)
        logger.log_tool_executed(call, "success")
        logger.log_tool_denied(call)
        logger.log_tool_blocked(call, "Access to path 'a.txt' is disallowed.")

        events = read_events(log_path)
        assert [e["event_type"] for e in events] == [
            "tool_proposed",
            "tool_approved",
            "tool_executed",
            "tool_denied",
            "tool_blocked",
        ]
        assert events[0]["tool_call_id"] == "tc_1"
        assert events[0]["risk"] == "high"
        assert events[0]["description"] == "Write to file: a.txt"
        assert events[0]["arguments"]["path"] == "a.txt"
        assert events[0]["arguments"]["content"] != "private"
        assert events[2]["status"] == "success"
        assert events[4]["reason"] == "Access to path 'a.txt' is disallowed."

    def test_settings_changed(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=1)

        logger.log_settings_changed("allow_root_access", True)
        event = read_events(log_path)[0]
        assert event["key"] == "allow_root_access"
        assert event["new_value"] == "True"

    def test_buffering(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, buffer_size=10, flush_interval_seconds=3600)

        logger.log_turn_error("p", "e")
        assert not log_path.exists()

        logger.close()
        assert len(read_events(log_path)) == 1

    def test_disabled(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=log_path, enable=False, buffer_size=1)

        logger.log_turn_error("p", "e")
        logger.close()
        assert not log_path.exists()

    def test_size_rotation_compresses(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        log_path.write_text("x" * (1024 * 1024 + 1))
        logger = AuditLogger(log_path=log_path, rotation="size", max_size_mb=1, buffer_size=1)

        logger.log_turn_error("p", "e")

        rotated = list(tmp_path.glob("audit_*.jsonl.gz"))
        assert len(rotated) == 1
        with gzip.open(rotated[0], "rt") as f:
            assert f.read().startswith("xxx")
        assert len(read_events(log_path)) == 1

    def test_daily_rotation(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        log_path.write_text("{}\n")
        yesterday = time.time() - 2 * 86400
        os.utime(log_path, (yesterday, yesterday))

        logger = AuditLogger(log_path=log_path, compress_old=False, buffer_size=1)
        logger.log_turn_error("p", "e")

        assert len(list(tmp_path.glob("audit_*.jsonl"))) == 1

    def test_old_logs_cleaned(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        stale = tmp_path / "audit_20000101_000000.jsonl.gz"
        stale.write_bytes(b"")
        ancient = time.time() - 400 * 86400
        os.utime(stale, (ancient, ancient))
        log_path.write_text("x" * (1024 * 1024 + 1))

        logger = AuditLogger(log_path=log_path, rotation="size", max_size_mb=1, buffer_size=1)
        logger.log_turn_error("p", "e")

        assert not stale.exists()


class TestGlobalAuditLogger:
    def test_singleton_from_config(self, tmp_path):
        config = AuditLogConfig(path=str(tmp_path / "a.jsonl"), buffer_size=1)

        logger = get_audit_logger(config)
        assert get_audit_logger() is logger
        assert logger.log_path == tmp_path / "a.jsonl"

        reset_audit_logger()
        assert get_audit_logger(config) is not logger

    def test_default_path(self, isolated_env):
        logger = get_audit_logger(AuditLogConfig())
        assert logger.log_path == isolated_env / "audit.jsonl"
