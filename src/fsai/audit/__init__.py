"""
Audit logging for FSai.

This package provides audit logging for turns, tool calls, confirmation
decisions and settings changes.
"""

from fsai.audit.logger import (
    AuditEventType,
    AuditLogger,
    get_audit_logger,
    reset_audit_logger,
)

__all__ = ["AuditEventType", "AuditLogger", "get_audit_logger", "reset_audit_logger"]
