"""Tool executor: the only place accepted tool calls touch the filesystem."""

import logging
from typing import TYPE_CHECKING

from fsai.security.guard import AccessGuard
from fsai.tools.base import AccessDeniedError, ToolContext, ToolExecutionError
from fsai.tools.models import ToolCall, ToolResult
from fsai.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from fsai.audit.logger import AuditLogger

logger = logging.getLogger(__name__)


def describe_os_error(error: OSError) -> str:
    """Turn an OSError into a message naming the path involved."""
    if isinstance(error, PermissionError):
        return f"Permission denied: {error.filename}"
    if isinstance(error, FileNotFoundError):
        return f"No such file or directory: {error.filename}"
    if isinstance(error, NotADirectoryError):
        return f"Not a directory: {error.filename}"
    if isinstance(error, IsADirectoryError):
        return f"Is a directory: {error.filename}"
    if error.filename:
        return f"{error.strerror or error}: {error.filename}"
    return str(error)


class ToolExecutor:
    """Executes accepted tool calls inside the access sandbox.

    Every failure, including access denials and filesystem errors, is
    returned as an ``error`` ToolResult; nothing is raised to the caller.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        guard: AccessGuard,
        audit_logger: "AuditLogger | None" = None,
    ):
        """Initialize the executor.

        Args:
            registry: Registry resolving tool kinds to tools
            guard: Access guard every path must pass
            audit_logger: Optional audit logger
        """
        self.registry = registry
        self.guard = guard
        self.audit_logger = audit_logger

    async def execute(
        self,
        tool_call: ToolCall,
        current_path: str | None = None,
        allow_root_access: bool = False,
    ) -> ToolResult:
        """Execute one accepted tool call.

        Args:
            tool_call: The accepted call
            current_path: Directory relative paths are resolved against
            allow_root_access: Settings snapshot lifting the sandbox

        Returns:
            ToolResult with status success or error
        """
        tool = self.registry.get(tool_call.name)
        if tool is None:
            return self._fail(tool_call, f"Tool type '{tool_call.name}' not yet implemented")

        try:
            params = tool.validate_input(tool_call.arguments)
        except ToolExecutionError as e:
            return self._fail(tool_call, str(e))

        # Guard every path-bearing parameter before any filesystem access
        raw_paths = params.paths()
        try:
            checks = [
                self.guard.check_path(raw, allow_root_access, current_path)
                for raw in raw_paths
            ]
        except ValueError as e:
            # e.g. an embedded null byte
            return self._block(tool_call, f"Invalid path: {e}")
        if not all(allowed for allowed, _ in checks):
            if len(raw_paths) == 1:
                reason = checks[0][1] or "Access denied"
            else:
                reason = "Access to one or more paths is disallowed."
            return self._block(tool_call, reason)

        context = ToolContext(
            guard=self.guard,
            current_path=current_path,
            allow_root_access=allow_root_access,
        )

        logger.info(f"Executing tool: {tool_call}")

        try:
            payload = await tool.execute(params, context)
        except AccessDeniedError as e:
            return self._block(tool_call, str(e))
        except ToolExecutionError as e:
            return self._fail(tool_call, str(e))
        except OSError as e:
            logger.warning(f"Filesystem error in {tool_call.name}: {e}")
            return self._fail(tool_call, describe_os_error(e))
        except Exception as e:
            logger.error(f"Tool execution failed: {tool_call.name}: {e}", exc_info=True)
            return self._fail(tool_call, f"Tool execution failed: {e}")

        result = ToolResult.success(tool_call.id, payload)
        if self.audit_logger:
            self.audit_logger.log_tool_executed(tool_call, result.status.value)
        return result

    def _fail(self, tool_call: ToolCall, error: str) -> ToolResult:
        logger.info(f"Tool {tool_call.name} failed: {error}")
        if self.audit_logger:
            self.audit_logger.log_tool_executed(tool_call, "error", error)
        return ToolResult.failure(tool_call.id, error)

    def _block(self, tool_call: ToolCall, reason: str) -> ToolResult:
        logger.warning(f"Tool {tool_call.name} blocked: {reason}")
        if self.audit_logger:
            self.audit_logger.log_tool_blocked(tool_call, reason)
        return ToolResult.failure(tool_call.id, reason)
