"""Tests for the confirmation gate."""

import pytest

from conftest import make_call
from fsai.agent.gate import ConfirmationGate, UnknownToolCallError
from fsai.agent.models import DecisionType
from fsai.tools.models import ToolCall, ToolResult, ToolStatus


@pytest.fixture
def calls():
    return [
        make_call("read_file", {"path": "a.txt"}, "tc_000000001"),
        make_call("delete_item", {"path": "b.txt"}, "tc_000000002"),
        make_call("get_tree", {"path": "."}, "tc_000000003"),
    ]


@pytest.fixture
def gate(calls):
    gate = ConfirmationGate()
    gate.open_round(calls)
    return gate


class TestConfirmationGate:
    def test_open_round(self, gate, calls):
        assert gate.pending == calls
        assert gate.issued_count == 3
        assert gate.resolved_count == 0
        assert gate.all_resolved is False

    def test_duplicate_ids(self):
        call = make_call("read_file", {"path": "a"}, "tc_dup")
        with pytest.raises(ValueError):
            ConfirmationGate().open_round([call, call])

    def test_deny_records_immediately(self, gate):
        result = gate.take("tc_000000002", DecisionType.DENY)

        assert isinstance(result, ToolResult)
        assert result.status == ToolStatus.DENIED
        assert gate.resolved_count == 1
        assert [c.id for c in gate.pending] == ["tc_000000001", "tc_000000003"]

    def test_accept_returns_call(self, gate):
        call = gate.take("tc_000000001", DecisionType.ACCEPT)

        assert isinstance(call, ToolCall)
        assert gate.resolved_count == 0
        gate.record(ToolResult.failure(call.id, "boom"))
        assert gate.resolved_count == 1

    def test_unknown_id(self, gate):
        with pytest.raises(UnknownToolCallError):
            gate.take("tc_nope", DecisionType.ACCEPT)

    def test_decided_twice(self, gate):
        gate.take("tc_000000001", DecisionType.DENY)
        with pytest.raises(UnknownToolCallError):
            gate.take("tc_000000001", DecisionType.ACCEPT)

    def test_record_rejects_unissued(self, gate):
        with pytest.raises(UnknownToolCallError):
            gate.record(ToolResult.failure("tc_other", "x"))

    def test_record_rejects_pending(self, gate):
        with pytest.raises(UnknownToolCallError):
            gate.record(ToolResult.failure("tc_000000001", "x"))

    def test_record_rejects_duplicate(self, gate):
        gate.take("tc_000000001", DecisionType.ACCEPT)
        gate.record(ToolResult.failure("tc_000000001", "x"))
        with pytest.raises(UnknownToolCallError):
            gate.record(ToolResult.failure("tc_000000001", "y"))

    def test_results_in_resolution_order(self, gate):
        gate.take("tc_000000003", DecisionType.DENY)
        gate.take("tc_000000001", DecisionType.ACCEPT)
        gate.record(ToolResult.failure("tc_000000001", "x"))
        gate.take("tc_000000002", DecisionType.DENY)

        assert gate.all_resolved is True
        assert [r.tool_call_id for r in gate.results] == [
            "tc_000000003",
            "tc_000000001",
            "tc_000000002",
        ]

    def test_accepted_but_unrecorded_not_resolved(self, gate):
        for call_id in ("tc_000000001", "tc_000000002", "tc_000000003"):
            gate.take(call_id, DecisionType.ACCEPT)
        assert gate.pending == []
        assert gate.all_resolved is False

    def test_auto_confirmable(self):
        gate = ConfirmationGate()
        gate.open_round([make_call("read_directory", {"path": "."})])
        assert gate.auto_confirmable() is True

        gate.open_round([make_call("delete_item", {"path": "x"})])
        assert gate.auto_confirmable() is False

    def test_multiple_calls_not_auto_confirmable(self, gate):
        assert gate.auto_confirmable() is False

    def test_clear(self, gate):
        gate.clear()
        assert gate.pending == []
        assert gate.issued_count == 0
        assert gate.all_resolved is False
