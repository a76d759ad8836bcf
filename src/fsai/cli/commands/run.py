"""
fsai run - Carry out one instruction against a directory.

Usage:
    fsai run "Rename notes.txt to todo.txt"
    fsai run "Summarize report.md" --path ~/Documents
    fsai run "List my downloads" --yes
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from fsai.audit.logger import reset_audit_logger
from fsai.cli.interactive import create_agent, drive_turn
from fsai.cli.output import print_error
from fsai.config import ConfigurationError

def run_prompt(
    prompt: Annotated[
        str,
        typer.Argument(help="What you want done, in plain language."),
    ],
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Directory to work in. Defaults to your home directory.",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Accept a lone low-risk action without asking. Risky or grouped actions still ask.",
        ),
    ] = False,
    model: Annotated[
        str | None,
        typer.Option(
            "--model",
            "-m",
            help="LiteLLM model identifier to use for this run.",
        ),
    ] = None,
) -> None:
    """Carry out one instruction."""
    try:
        agent = create_agent(path, model)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(2)

    try:
        update = asyncio.run(drive_turn(agent, prompt, assume_yes=yes))
    finally:
        reset_audit_logger()

    if update.failed:
        raise typer.Exit(1)
