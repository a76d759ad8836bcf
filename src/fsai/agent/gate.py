"""Confirmation gate holding proposed tool calls until the user decides."""

import logging
from collections.abc import Sequence

from fsai.agent.models import DecisionType
from fsai.tools.models import RiskLevel, ToolCall, ToolResult

logger = logging.getLogger(__name__)


class UnknownToolCallError(Exception):
    """Raised for a decision or result on a call that is not pending."""

    def __init__(self, tool_call_id: str):
        super().__init__(f"No pending tool call with id '{tool_call_id}'")
        self.tool_call_id = tool_call_id


class ConfirmationGate:
    """
    Tracks one round of proposals: which calls are pending a decision and
    which have a recorded result.

    A denial produces its result immediately and never reaches the executor.
    An accepted call leaves the gate and comes back through ``record`` once
    it has been executed.
    """

    def __init__(self) -> None:
        self._issued: list[ToolCall] = []
        self._pending: dict[str, ToolCall] = {}
        self._results: dict[str, ToolResult] = {}

    def open_round(self, tool_calls: Sequence[ToolCall]) -> None:
        """Start a new round with freshly proposed calls.

        Raises:
            ValueError: If two calls share an id
        """
        ids = [call.id for call in tool_calls]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate tool call ids in round: {ids}")

        self._issued = list(tool_calls)
        self._pending = {call.id: call for call in tool_calls}
        self._results = {}
        logger.debug(f"Opened round with {len(ids)} tool call(s)")

    @property
    def pending(self) -> list[ToolCall]:
        """Calls awaiting a decision, in proposal order."""
        return list(self._pending.values())

    @property
    def issued(self) -> list[ToolCall]:
        return list(self._issued)

    @property
    def results(self) -> list[ToolResult]:
        """Recorded results, in the order their calls were resolved."""
        return list(self._results.values())

    def get(self, tool_call_id: str) -> ToolCall | None:
        """Look up an issued call by id."""
        return next((c for c in self._issued if c.id == tool_call_id), None)

    def take(self, tool_call_id: str, decision: DecisionType) -> ToolCall | ToolResult:
        """
        Resolve a pending call.

        Args:
            tool_call_id: Id of a pending call.
            decision: Accept or deny.

        Returns:
            The denied ToolResult (already recorded) on deny, or the ToolCall
            to execute on accept.

        Raises:
            UnknownToolCallError: If the id is not pending.
        """
        call = self._pending.pop(tool_call_id, None)
        if call is None:
            raise UnknownToolCallError(tool_call_id)

        if decision == DecisionType.DENY:
            result = ToolResult.denied(tool_call_id)
            self._results[tool_call_id] = result
            logger.info(f"Denied: {call.description}")
            return result

        logger.info(f"Accepted: {call.description}")
        return call

    def record(self, result: ToolResult) -> None:
        """
        Record the result of an accepted call.

        Raises:
            UnknownToolCallError: If the call was not issued in this round,
                is still pending, or already has a result.
        """
        call_id = result.tool_call_id
        issued = any(c.id == call_id for c in self._issued)
        if not issued or call_id in self._pending or call_id in self._results:
            raise UnknownToolCallError(call_id)
        self._results[call_id] = result

    def auto_confirmable(self) -> bool:
        """Whether the round is a single low-risk call still awaiting a decision."""
        return (
            len(self._issued) == 1
            and len(self._pending) == 1
            and self._issued[0].risk == RiskLevel.LOW
        )

    @property
    def issued_count(self) -> int:
        return len(self._issued)

    @property
    def resolved_count(self) -> int:
        return len(self._results)

    @property
    def all_resolved(self) -> bool:
        """Whether every issued call has a result."""
        return bool(self._issued) and self.resolved_count == self.issued_count

    def clear(self) -> None:
        self._issued = []
        self._pending = {}
        self._results = {}
