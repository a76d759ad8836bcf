"""
fsai tools - Inspect the tools offered to the model.

Usage:
    fsai tools list
"""

import typer
from rich.table import Table

from fsai.cli.output import console, risk_label
from fsai.config import SettingsStore
from fsai.tools.registry import get_tool_registry

app = typer.Typer(
    name="tools",
    help="Inspect the tools available to the assistant.",
)


@app.command("list")
def list_tools() -> None:
    """List every tool with its risk tier and availability."""
    registry = get_tool_registry()
    settings = SettingsStore().get()

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Risk")
    table.add_column("Available")
    table.add_column("Description")

    for tool in registry.list_tools():
        if tool.requires_multimedia and not settings.multimedia_support:
            available = "[dim]needs multimedia support[/dim]"
        else:
            available = "yes"
        desc = tool.description[:80] + "..." if len(tool.description) > 80 else tool.description
        table.add_row(tool.name, risk_label(tool.risk), available, desc)

    console.print(table)
    console.print(f"\n[dim]Total: {len(registry)} tool(s)[/dim]")
