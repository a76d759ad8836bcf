"""
Audit logging for FSai operations.

This module provides JSON Lines based audit logging for tracking turns,
tool proposals, confirmation decisions, executions and settings changes.
"""

import gzip
import hashlib
import json
import logging
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fsai.tools.models import ToolCall

logger = logging.getLogger(__name__)


class AuditEventType(str, Enum):
    """Types of audit events."""

    # Turns
    TURN_START = "turn_start"
    TURN_COMPLETE = "turn_complete"
    TURN_ERROR = "turn_error"

    # Tool calls
    TOOL_PROPOSED = "tool_proposed"
    TOOL_APPROVED = "tool_approved"
    TOOL_DENIED = "tool_denied"
    TOOL_EXECUTED = "tool_executed"
    TOOL_BLOCKED = "tool_blocked"

    # Settings
    SETTINGS_CHANGED = "settings_changed"


class AuditLogger:
    """
    JSON Lines based audit logger.

    Logs events to a JSON Lines file with rotation and compression support.
    """

    def __init__(
        self,
        log_path: str | Path,
        enable: bool = True,
        rotation: str = "daily",
        max_size_mb: int = 20,
        retention_days: int = 90,
        compress_old: bool = True,
        include_content: bool = False,
        buffer_size: int = 20,
        flush_interval_seconds: int = 5,
    ) -> None:
        """
        Initialize audit logger.

        Args:
            log_path: Path to audit log file
            enable: Whether logging is enabled
            rotation: Rotation strategy (daily, size)
            max_size_mb: Maximum log file size in MB before rotation
            retention_days: Days to keep rotated logs
            compress_old: Whether to compress rotated logs
            include_content: Log prompts, responses and written file content
                verbatim instead of as hashes
            buffer_size: Number of events to buffer before flush
            flush_interval_seconds: Seconds between forced flushes
        """
        self.log_path = Path(log_path).expanduser()
        self.enable = enable
        self.rotation = rotation
        self.max_size_mb = max_size_mb
        self.retention_days = retention_days
        self.compress_old = compress_old
        self.include_content = include_content
        self.buffer_size = buffer_size
        self.flush_interval_seconds = flush_interval_seconds

        # Internal state
        self._buffer: list[dict[str, Any]] = []
        self._last_flush = datetime.now()

        if self.enable:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, config: Any) -> "AuditLogger":
        """
        Create audit logger from configuration.

        Args:
            config: AuditLogConfig instance

        Returns:
            Configured AuditLogger
        """
        from fsai.storage.paths import get_audit_log_path

        return cls(
            log_path=config.path or get_audit_log_path(),
            enable=config.enable,
            rotation=config.rotation,
            max_size_mb=config.max_size_mb,
            retention_days=config.retention_days,
            compress_old=config.compress_old,
            include_content=config.include_content,
            buffer_size=config.buffer_size,
            flush_interval_seconds=config.flush_interval_seconds,
        )

    def _hash_text(self, text: str) -> str:
        """SHA256 hash of text, for privacy-preserving logging."""
        return hashlib.sha256(text.encode()).hexdigest()

    def _content(self, text: str) -> str:
        return text if self.include_content else self._hash_text(text)

    def _create_event(
        self, event_type: AuditEventType, data: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type.value,
            **data,
        }

    def _write_event(self, event: dict[str, Any]) -> None:
        if not self.enable:
            return

        self._buffer.append(event)

        # Flush if buffer is full or interval elapsed
        now = datetime.now()
        should_flush = (
            len(self._buffer) >= self.buffer_size
            or (now - self._last_flush).total_seconds() >= self.flush_interval_seconds
        )

        if should_flush:
            self.flush()

    def flush(self) -> None:
        """Flush buffered events to disk."""
        if not self.enable or not self._buffer:
            return

        try:
            self._rotate_if_needed()
            with self.log_path.open("a", encoding="utf-8") as f:
                for event in self._buffer:
                    f.write(json.dumps(event, default=str) + "\n")
        except OSError as e:
            # Auditing must not break a turn
            logger.error(f"Failed to write audit log {self.log_path}: {e}")
            return

        self._buffer.clear()
        self._last_flush = datetime.now()

    def _rotate_if_needed(self) -> None:
        """Rotate log file if needed based on configuration."""
        if not self.log_path.exists():
            return

        should_rotate = False

        if self.rotation == "size":
            size_mb = self.log_path.stat().st_size / (1024 * 1024)
            should_rotate = size_mb >= self.max_size_mb

        elif self.rotation == "daily":
            mtime = datetime.fromtimestamp(self.log_path.stat().st_mtime)
            should_rotate = mtime.date() < datetime.now().date()

        if should_rotate:
            self._rotate_log()

    def _rotate_log(self) -> None:
        """Rotate the current log file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        rotated_name = f"{self.log_path.stem}_{timestamp}{self.log_path.suffix}"
        rotated_path = self.log_path.parent / rotated_name

        self.log_path.rename(rotated_path)
        logger.debug(f"Rotated audit log to {rotated_path}")

        if self.compress_old:
            self._compress_log(rotated_path)

        self._clean_old_logs()

    def _compress_log(self, log_path: Path) -> None:
        """Compress a log file with gzip."""
        compressed_path = log_path.with_suffix(log_path.suffix + ".gz")

        with log_path.open("rb") as f_in, gzip.open(compressed_path, "wb") as f_out:
            f_out.write(f_in.read())

        log_path.unlink()

    def _clean_old_logs(self) -> None:
        """Remove rotated logs older than the retention period."""
        cutoff = datetime.now() - timedelta(days=self.retention_days)

        pattern = f"{self.log_path.stem}_*{self.log_path.suffix}*"
        for old_log in self.log_path.parent.glob(pattern):
            mtime = datetime.fromtimestamp(old_log.stat().st_mtime)
            if mtime < cutoff:
                old_log.unlink()

    def _tool_data(self, tool_call: "ToolCall") -> dict[str, Any]:
        arguments = dict(tool_call.arguments)
        if "content" in arguments and isinstance(arguments["content"], str):
            arguments["content"] = self._content(arguments["content"])
        return {
            "tool_call_id": tool_call.id,
            "tool": tool_call.name,
            "risk": tool_call.risk.value,
            "arguments": arguments,
        }

    # Convenience methods for logging specific events

    def log_turn_start(self, prompt: str, model: str, current_path: str | None) -> None:
        """Log the start of a user turn."""
        event = self._create_event(
            AuditEventType.TURN_START,
            {
                "prompt": self._content(prompt),
                "model": model,
                "current_path": current_path,
            },
        )
        self._write_event(event)

    def log_turn_complete(
        self, prompt: str, response: str, iterations: int, tool_calls: int
    ) -> None:
        """Log a turn that ended with a final answer."""
        event = self._create_event(
            AuditEventType.TURN_COMPLETE,
            {
                "prompt": self._content(prompt),
                "response": self._content(response),
                "iterations": iterations,
                "tool_calls": tool_calls,
            },
        )
        self._write_event(event)

    def log_turn_error(self, prompt: str, error: str) -> None:
        """Log a failed turn."""
        event = self._create_event(
            AuditEventType.TURN_ERROR,
            {"prompt": self._content(prompt), "error": error},
        )
        self._write_event(event)

    def log_tool_proposed(self, tool_call: "ToolCall") -> None:
        """Log a tool call proposed by the model."""
        event = self._create_event(
            AuditEventType.TOOL_PROPOSED,
            {**self._tool_data(tool_call), "description": tool_call.description},
        )
        self._write_event(event)

    def log_tool_approved(self, tool_call: "ToolCall", automatic: bool = False) -> None:
        """Log an accepted tool call."""
        event = self._create_event(
            AuditEventType.TOOL_APPROVED,
            {**self._tool_data(tool_call), "automatic": automatic},
        )
        self._write_event(event)

    def log_tool_denied(self, tool_call: "ToolCall") -> None:
        """Log a tool call denied by the user."""
        event = self._create_event(AuditEventType.TOOL_DENIED, self._tool_data(tool_call))
        self._write_event(event)

    def log_tool_executed(
        self, tool_call: "ToolCall", status: str, error: str | None = None
    ) -> None:
        """Log the outcome of an executed tool call."""
        data = {**self._tool_data(tool_call), "status": status}
        if error:
            data["error"] = error
        event = self._create_event(AuditEventType.TOOL_EXECUTED, data)
        self._write_event(event)

    def log_tool_blocked(self, tool_call: "ToolCall", reason: str) -> None:
        """Log a tool call rejected by the access guard."""
        event = self._create_event(
            AuditEventType.TOOL_BLOCKED,
            {**self._tool_data(tool_call), "reason": reason},
        )
        self._write_event(event)

    def log_settings_changed(self, key: str, new_value: Any) -> None:
        """Log a settings change."""
        event = self._create_event(
            AuditEventType.SETTINGS_CHANGED,
            {"key": key, "new_value": str(new_value)},
        )
        self._write_event(event)

    def close(self) -> None:
        """Close the audit logger and flush remaining events."""
        self.flush()


# Singleton instance
_audit_logger: AuditLogger | None = None


def get_audit_logger(config: Any | None = None) -> AuditLogger:
    """
    Get or create the global audit logger instance.

    Args:
        config: Optional AuditLogConfig for initialization

    Returns:
        AuditLogger instance
    """
    global _audit_logger

    if _audit_logger is None:
        if config is None:
            # Import here to avoid circular dependency
            from fsai.config.loader import get_config

            config = get_config().audit_log

        _audit_logger = AuditLogger.from_config(config)

    return _audit_logger


def reset_audit_logger() -> None:
    """Flush and drop the global audit logger. Useful for testing."""
    global _audit_logger
    if _audit_logger is not None:
        _audit_logger.close()
    _audit_logger = None
