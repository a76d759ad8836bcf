"""Turn controller: the human-in-the-loop state machine for one user turn."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from fsai.agent.context import ContextBuilder
from fsai.agent.conversation import Conversation
from fsai.agent.gate import ConfirmationGate
from fsai.agent.models import (
    AgentEvent,
    ChatRole,
    Decision,
    EventType,
    TurnState,
    TurnUpdate,
)
from fsai.agent.prompts import SYSTEM_PROMPT, build_followup_prompt, build_request_prompt
from fsai.config.schema import AgentConfig, Settings
from fsai.providers.exceptions import UpstreamError
from fsai.providers.models import Proposal
from fsai.tools.executor import ToolExecutor
from fsai.tools.models import (
    FileContentPayload,
    MediaPayload,
    NavigationPayload,
    ToolCall,
    ToolResult,
)

if TYPE_CHECKING:
    from fsai.audit.logger import AuditLogger
    from fsai.providers.gateway import ModelGateway

logger = logging.getLogger(__name__)


class TurnStateError(Exception):
    """Raised when an operation does not fit the current turn state."""


class TurnController:
    """Drives a user turn from prompt to final answer.

    State machine:
    1. IDLE -> AWAITING_PROPOSAL on submit
    2. AWAITING_PROPOSAL -> IDLE (text only) or AWAITING_CONFIRMATION
    3. AWAITING_CONFIRMATION -> EXECUTING on accept, back once recorded
    4. When every call of the round has a result -> AWAITING_FOLLOWUP
    5. AWAITING_FOLLOWUP -> AWAITING_CONFIRMATION or IDLE

    Decisions arrive one at a time through ``decide``. Any model failure
    ends the turn in IDLE as failed; nothing is retried.
    """

    def __init__(
        self,
        gateway: "ModelGateway",
        executor: ToolExecutor,
        context_builder: ContextBuilder,
        config: AgentConfig,
        settings_provider: Callable[[], Settings],
        audit_logger: "AuditLogger | None" = None,
        event_callback: Optional[Callable[[AgentEvent], None]] = None,
    ):
        """Initialize the controller.

        Args:
            gateway: Model gateway
            executor: Tool executor
            context_builder: Builds the context sent with each model call
            config: Agent configuration
            settings_provider: Returns the current settings snapshot
            audit_logger: Optional audit logger
            event_callback: Optional callback for streaming events
        """
        self.gateway = gateway
        self.executor = executor
        self.context_builder = context_builder
        self.config = config
        self.settings_provider = settings_provider
        self.audit_logger = audit_logger
        self.event_callback = event_callback

        self.gate = ConfirmationGate()
        self._state = TurnState.IDLE
        self._conversation: Conversation | None = None
        self._prompt = ""
        self._round_text: str | None = None
        self._iteration = 0
        self._tool_call_count = 0
        self._taken_ids: set[str] = set()
        self._navigated = False

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def pending(self) -> list[ToolCall]:
        """Calls awaiting a decision."""
        return self.gate.pending

    @property
    def iteration(self) -> int:
        """Follow-up rounds completed in the current turn."""
        return self._iteration

    def tally(self) -> tuple[int, int]:
        """(resolved, issued) counts for the current round."""
        return self.gate.resolved_count, self.gate.issued_count

    def _emit_event(self, event_type: EventType, **kwargs) -> None:
        """Emit an event if callback is configured."""
        if not self.event_callback:
            return
        event = AgentEvent(
            event_type=event_type,
            iteration=self._iteration,
            timestamp=datetime.now().isoformat(),
            **kwargs,
        )
        try:
            self.event_callback(event)
        except Exception as e:
            logger.warning(f"Event callback error: {e}")

    # =========================================================================
    # Turn operations
    # =========================================================================

    async def submit(self, prompt: str, conversation: Conversation) -> TurnUpdate:
        """
        Start a turn.

        Args:
            prompt: The user's instruction
            conversation: Conversation the turn belongs to

        Returns:
            TurnUpdate after the first model call

        Raises:
            TurnStateError: If a turn is already in progress
        """
        if self._state != TurnState.IDLE:
            raise TurnStateError(f"Cannot submit while {self._state.value}")

        self._conversation = conversation
        self._prompt = prompt
        self._round_text = None
        self._iteration = 0
        self._tool_call_count = 0
        self._taken_ids = set()
        self._navigated = False
        self.gate.clear()

        conversation.add_message(ChatRole.USER, prompt)

        logger.info(f"Turn started: {prompt[:80]}")
        if self.audit_logger:
            self.audit_logger.log_turn_start(
                prompt, self.config.model, conversation.current_path
            )
        self._emit_event(EventType.TURN_START, message=prompt)

        self._state = TurnState.AWAITING_PROPOSAL
        settings = self.settings_provider()
        context = self.context_builder.build(conversation, settings)

        try:
            proposal = await self.gateway.propose(
                SYSTEM_PROMPT,
                build_request_prompt(context, prompt),
                settings,
                taken_ids=self._taken_ids,
            )
        except UpstreamError as e:
            return self._fail(e)

        return await self._handle_proposal(proposal)

    async def decide(self, decision: Decision, automatic: bool = False) -> TurnUpdate:
        """
        Apply the user's decision on one pending call.

        Accepted calls are executed before this returns. When the decision
        resolves the last call of the round, the follow-up model call is
        made before this returns too.

        Raises:
            TurnStateError: If no call is awaiting confirmation
            UnknownToolCallError: If the id is not pending
        """
        if self._state != TurnState.AWAITING_CONFIRMATION:
            raise TurnStateError(f"Cannot decide while {self._state.value}")

        outcome = self.gate.take(decision.tool_call_id, decision.decision)

        if isinstance(outcome, ToolResult):
            call = self.gate.get(decision.tool_call_id)
            if self.audit_logger and call:
                self.audit_logger.log_tool_denied(call)
            self._emit_event(
                EventType.TOOL_DENIED,
                tool_call_id=decision.tool_call_id,
                tool_name=call.name if call else None,
            )
        else:
            await self._execute(outcome, automatic)

        if self.gate.all_resolved:
            return await self._follow_up()

        return self._update(self._round_text)

    async def continue_turn(
        self, original_prompt: str, results: list[ToolResult]
    ) -> Proposal:
        """
        Re-prompt the model with the results of a round.

        Raises:
            UpstreamError: If the model call fails
        """
        assert self._conversation is not None
        settings = self.settings_provider()
        context = self.context_builder.build(self._conversation, settings, followup=True)

        prompt_text = build_followup_prompt(
            context,
            original_prompt,
            results,
            navigated=self._navigated,
            read_preview_chars=self.config.read_result_preview_chars,
        )
        attachments = [r.payload for r in results if isinstance(r.payload, MediaPayload)]

        return await self.gateway.propose(
            SYSTEM_PROMPT,
            prompt_text,
            settings,
            attachments=attachments,
            followup=True,
            taken_ids=self._taken_ids,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    async def _handle_proposal(self, proposal: Proposal) -> TurnUpdate:
        self._emit_event(EventType.AI_RESPONSE, message=proposal.text)

        if not proposal.tool_calls:
            return self._finish(proposal.text)

        self.gate.open_round(proposal.tool_calls)
        self._tool_call_count += len(proposal.tool_calls)
        self._round_text = proposal.text
        self._navigated = False
        self._state = TurnState.AWAITING_CONFIRMATION

        for call in proposal.tool_calls:
            if self.audit_logger:
                self.audit_logger.log_tool_proposed(call)
            self._emit_event(
                EventType.TOOL_APPROVAL_NEEDED,
                tool_name=call.name,
                tool_call_id=call.id,
                message=call.description,
                data={"risk": call.risk.value, "arguments": call.arguments},
            )

        if self.config.auto_confirm_low_risk and self.gate.auto_confirmable():
            call = self.gate.pending[0]
            logger.info(f"Auto-confirming low-risk call: {call.description}")
            return await self.decide(Decision.accept(call.id), automatic=True)

        return self._update(proposal.text)

    async def _execute(self, call: ToolCall, automatic: bool) -> None:
        assert self._conversation is not None

        if self.audit_logger:
            self.audit_logger.log_tool_approved(call, automatic=automatic)
        self._emit_event(EventType.TOOL_APPROVED, tool_name=call.name, tool_call_id=call.id)

        self._state = TurnState.EXECUTING
        self._emit_event(EventType.TOOL_START, tool_name=call.name, tool_call_id=call.id)

        settings = self.settings_provider()
        try:
            result = await self.executor.execute(
                call,
                current_path=self._conversation.current_path,
                allow_root_access=settings.allow_root_access,
            )
        except Exception as e:
            # The call has already left pending; it still needs a result
            logger.error(f"Executor raised for {call.name}: {e}", exc_info=True)
            result = ToolResult.failure(call.id, f"Tool execution failed: {e}")
        finally:
            self._state = TurnState.AWAITING_CONFIRMATION

        self.gate.record(result)
        self._apply_result(result)

        if result.is_error:
            self._emit_event(
                EventType.TOOL_ERROR,
                tool_name=call.name,
                tool_call_id=call.id,
                message=result.error,
            )
        else:
            self._emit_event(EventType.TOOL_COMPLETE, tool_name=call.name, tool_call_id=call.id)

    def _apply_result(self, result: ToolResult) -> None:
        """Carry successful results into the conversation."""
        assert self._conversation is not None
        payload = result.payload

        if isinstance(payload, FileContentPayload):
            self._conversation.add_file_snippet(payload.path, payload.content)
        elif isinstance(payload, NavigationPayload):
            self._conversation.navigate(payload.path)
            self._navigated = True
            self._emit_event(EventType.NAVIGATED, message=payload.path)

    async def _follow_up(self) -> TurnUpdate:
        self._state = TurnState.AWAITING_FOLLOWUP
        results = self.gate.results

        if self._iteration >= self.config.max_iterations:
            logger.warning(f"Iteration ceiling reached ({self.config.max_iterations})")
            return self._finish(
                f"Stopped after {self._iteration} follow-up rounds without a final answer.",
                results,
            )

        self._iteration += 1
        self._emit_event(EventType.FOLLOWUP_START, data={"results": len(results)})

        try:
            proposal = await self.continue_turn(self._prompt, results)
        except UpstreamError as e:
            return self._fail(e, results)

        return await self._handle_proposal(proposal)

    def _update(self, text: str | None) -> TurnUpdate:
        return TurnUpdate(
            state=self._state,
            text=text,
            pending=self.gate.pending,
            results=self.gate.results,
            iteration=self._iteration,
        )

    def _finish(self, text: str, results: list[ToolResult] | None = None) -> TurnUpdate:
        assert self._conversation is not None
        self._conversation.add_message(ChatRole.AI, text)
        self._state = TurnState.IDLE

        logger.info(f"Turn complete after {self._iteration} follow-up round(s)")
        if self.audit_logger:
            self.audit_logger.log_turn_complete(
                self._prompt, text, self._iteration, self._tool_call_count
            )
        self._emit_event(EventType.TURN_COMPLETE, message=text)

        return TurnUpdate(
            state=TurnState.IDLE,
            text=text,
            results=results or [],
            iteration=self._iteration,
        )

    def _fail(self, error: UpstreamError, results: list[ToolResult] | None = None) -> TurnUpdate:
        assert self._conversation is not None
        message = f"Error: {error}"
        if error.hint:
            message = f"{message}\n{error.hint}"

        self._conversation.add_message(ChatRole.SYSTEM, message)
        self._state = TurnState.IDLE
        self.gate.clear()

        logger.error(f"Turn failed: {error}")
        if self.audit_logger:
            self.audit_logger.log_turn_error(self._prompt, str(error))
        self._emit_event(EventType.TURN_ERROR, message=str(error))

        return TurnUpdate(
            state=TurnState.IDLE,
            text=message,
            results=results or [],
            iteration=self._iteration,
            failed=True,
            error=str(error),
        )
