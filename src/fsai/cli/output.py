"""
Output formatting utilities for the CLI.

Provides consistent output formatting across all CLI commands.
"""

from rich.console import Console
from rich.markup import escape

from fsai.tools.models import RiskLevel, ToolCall

# Global console instance
console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def risk_label(risk: RiskLevel) -> str:
    """Colored risk tier label."""
    if risk == RiskLevel.HIGH:
        return "[red]high risk[/red]"
    return "[green]low risk[/green]"


def print_tool_call(call: ToolCall) -> None:
    """Show a proposed tool call awaiting confirmation."""
    console.print(f"\n[yellow]Proposed:[/yellow] [bold]{escape(call.description)}[/bold] ({risk_label(call.risk)})")
    console.print(f"  [dim]{call.name} {escape(str(call.arguments))}[/dim]")

