"""
fsai chat - Multi-turn conversation about a directory.

Usage:
    fsai chat
    fsai chat --path ~/Projects
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from fsai.audit.logger import reset_audit_logger
from fsai.cli.interactive import create_agent, drive_turn
from fsai.cli.output import console, print_error, print_info
from fsai.config import ConfigurationError

EXIT_COMMANDS = {"exit", "quit", ":q"}


def chat(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Directory to start in. Defaults to your home directory.",
        ),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="LiteLLM model identifier."),
    ] = None,
) -> None:
    """Start an interactive session. Type 'exit' to leave."""
    try:
        agent = create_agent(path, model)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(2)

    print_info(f"Working in [bold]{escape(agent.current_path)}[/bold]. Type 'exit' to leave.")

    try:
        while True:
            try:
                prompt = console.input(f"\n[bold cyan]{escape(agent.current_path)}[/bold cyan] > ")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            prompt = prompt.strip()
            if not prompt:
                continue
            if prompt.lower() in EXIT_COMMANDS:
                break

            asyncio.run(drive_turn(agent, prompt))
    finally:
        reset_audit_logger()
