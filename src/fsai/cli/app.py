"""
Main Typer application for the fsai CLI.

This module defines the root CLI application and registers all command groups.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from fsai import __version__
from fsai.cli.commands import chat, run, settings, tools
from fsai.cli.output import console, print_info

app = typer.Typer(
    name="fsai",
    help="A file system assistant that asks before it acts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"fsai version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]fsai[/bold blue] - File System AI Assistant

    Describe what you want done with your files. Every proposed action is
    shown to you for confirmation before it runs.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, rich_tracebacks=True)],
        )
        # LiteLLM is very chatty at debug level
        logging.getLogger("LiteLLM").setLevel(logging.INFO)


# Register commands and command groups
app.command("run", help="Carry out one instruction with per-action confirmation.")(run.run_prompt)
app.command("chat", help="Chat with the assistant about your files.")(chat.chat)
app.add_typer(settings.app, name="settings")
app.add_typer(tools.app, name="tools")


if __name__ == "__main__":
    app()
