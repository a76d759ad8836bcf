"""FileSystemAgent: the single object a UI talks to."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from fsai.agent.context import ContextBuilder
from fsai.agent.conversation import Conversation
from fsai.agent.loop import TurnController
from fsai.agent.models import AgentEvent, Decision, TurnState, TurnUpdate
from fsai.audit.logger import AuditLogger
from fsai.config.schema import AgentConfig, Settings
from fsai.config.settings import SettingsStore
from fsai.providers.gateway import ModelGateway
from fsai.security.guard import AccessGuard
from fsai.tools.executor import ToolExecutor
from fsai.tools.models import ToolCall
from fsai.tools.registry import ToolRegistry, get_tool_registry

logger = logging.getLogger(__name__)


class FileSystemAgent:
    """
    Wires the settings store, access guard, gateway, tools and turn
    controller together around one conversation.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        config: AgentConfig | None = None,
        current_path: str | Path | None = None,
        guard: AccessGuard | None = None,
        registry: ToolRegistry | None = None,
        gateway: ModelGateway | None = None,
        audit_logger: AuditLogger | None = None,
        event_callback: Optional[Callable[[AgentEvent], None]] = None,
    ):
        """
        Args:
            settings_store: Source of the settings snapshot for each step.
            config: Agent configuration. Defaults to built-in defaults.
            current_path: Starting directory. Defaults to the guard's root.
            guard: Access guard. Defaults to one rooted at the home directory.
            registry: Tool registry. Defaults to the global built-in registry.
            gateway: Model gateway. Defaults to a LiteLLM gateway.
            audit_logger: Optional audit logger.
            event_callback: Optional callback for turn events.
        """
        self.settings_store = settings_store
        self.config = config or AgentConfig()
        self.guard = guard or AccessGuard()
        self.registry = registry or get_tool_registry()
        self.gateway = gateway or ModelGateway(self.config, self.registry)
        self.audit_logger = audit_logger

        start = AccessGuard.resolve(current_path) if current_path else self.guard.root
        self.conversation = Conversation(start)

        self.executor = ToolExecutor(self.registry, self.guard, audit_logger)
        self.controller = TurnController(
            gateway=self.gateway,
            executor=self.executor,
            context_builder=ContextBuilder(self.config),
            config=self.config,
            settings_provider=self.settings_store.get,
            audit_logger=audit_logger,
            event_callback=event_callback,
        )

    @property
    def settings(self) -> Settings:
        """Current settings snapshot."""
        return self.settings_store.get()

    @property
    def state(self) -> TurnState:
        return self.controller.state

    @property
    def current_path(self) -> str:
        return self.conversation.current_path

    @property
    def pending(self) -> list[ToolCall]:
        return self.controller.pending

    async def submit(self, prompt: str) -> TurnUpdate:
        """Start a turn with the user's instruction."""
        return await self.controller.submit(prompt, self.conversation)

    async def decide(self, decision: Decision) -> TurnUpdate:
        """Deliver a confirmation decision for one pending call."""
        return await self.controller.decide(decision)

    async def accept(self, tool_call_id: str) -> TurnUpdate:
        return await self.decide(Decision.accept(tool_call_id))

    async def deny(self, tool_call_id: str) -> TurnUpdate:
        return await self.decide(Decision.deny(tool_call_id))

    def tally(self) -> tuple[int, int]:
        """(resolved, issued) for the current round."""
        return self.controller.tally()

    def navigate(self, path: str | Path) -> None:
        """Move the user's view, e.g. from a UI path bar.

        Raises:
            PermissionError: If the path fails the access guard.
            NotADirectoryError: If the path is not an existing directory.
        """
        allowed, reason = self.guard.check_path(
            path, self.settings.allow_root_access, self.current_path
        )
        if not allowed:
            raise PermissionError(reason)

        target = AccessGuard.resolve(path, self.current_path)
        if not target.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {target}")
        self.conversation.navigate(target)

    def __repr__(self) -> str:
        return f"<FileSystemAgent path={self.current_path} state={self.state.value}>"
