"""Tests for the tool registry and tool definitions."""

import pytest

from fsai.tools.builtin import ReadFileTool, register_builtin_tools
from fsai.tools.models import RiskLevel, ToolKind
from fsai.tools.registry import ToolRegistry, get_tool_registry, reset_tool_registry


class TestToolRegistry:
    def test_builtins_cover_every_kind(self, registry):
        assert len(registry) == len(ToolKind)
        for kind in ToolKind:
            tool = registry.get(kind)
            assert tool is not None
            assert tool.kind == kind
            assert kind.value in registry

    def test_duplicate_registration(self, registry):
        with pytest.raises(ValueError, match="already registered"):
            registry.register(ReadFileTool())

    def test_unregister(self, registry):
        assert registry.unregister("read_file") is True
        assert registry.unregister("read_file") is False
        assert registry.get("read_file") is None

    def test_multimedia_filter(self, registry):
        names = [d["function"]["name"] for d in registry.get_tool_definitions()]
        assert "process_file" not in names
        assert len(names) == len(ToolKind) - 1

        names = [
            d["function"]["name"]
            for d in registry.get_tool_definitions(multimedia_support=True)
        ]
        assert "process_file" in names

    def test_registration_order(self, registry):
        assert registry.list_tool_names()[:3] == ["read_file", "read_directory", "get_tree"]

    def test_safe_and_dangerous(self, registry):
        dangerous = {t.name for t in registry.get_dangerous_tools()}
        assert dangerous == {"write_file", "rename_file", "delete_item", "move_item"}
        assert all(t.risk == RiskLevel.LOW for t in registry.get_safe_tools())

    def test_clear(self, registry):
        registry.clear()
        assert len(registry) == 0

    def test_global_registry(self):
        first = get_tool_registry()
        assert get_tool_registry() is first
        assert len(first) == len(ToolKind)

        reset_tool_registry()
        assert get_tool_registry() is not first


class TestToolDefinitions:
    def test_function_format(self, registry):
        definition = registry.get(ToolKind.MOVE).get_tool_definition()

        assert definition["type"] == "function"
        function = definition["function"]
        assert function["name"] == "move_item"
        assert function["parameters"]["type"] == "object"
        assert set(function["parameters"]["properties"]) == {"sourcePath", "destinationPath"}
        assert function["parameters"]["required"] == ["sourcePath", "destinationPath"]

    def test_declared_parameters_match_models(self):
        # Construction validates declared names against the parameter model
        registry = ToolRegistry()
        register_builtin_tools(registry)
        rename = registry.get("rename_file")
        assert [p.name for p in rename.parameters] == ["path", "newName"]

    def test_required_message(self, registry):
        assert (
            registry.get("rename_file").required_message()
            == "path and newName parameters are required for rename_file"
        )
