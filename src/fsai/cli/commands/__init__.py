"""CLI command modules."""

from fsai.cli.commands import chat, run, settings, tools

__all__ = ["chat", "run", "settings", "tools"]
