"""
fsai settings - View and update user settings.

Usage:
    fsai settings show
    fsai settings set credential
    fsai settings set allow-root-access true
    fsai settings set multimedia-support on
"""

from typing import Annotated, Any

import typer
from rich.table import Table

from fsai.cli.output import console, print_error, print_success
from fsai.config import ConfigurationError, SettingsStore
from fsai.config.schema import Settings

app = typer.Typer(
    name="settings",
    help="View and update user settings.",
)

BOOL_TRUE = ("true", "yes", "1", "on")
BOOL_FALSE = ("false", "no", "0", "off")


def _normalize_key(key: str) -> str:
    return key.strip().replace("-", "_")


def _parse_value(field: str, value: str) -> Any:
    """
    Parse a command-line value for a settings field.

    Raises:
        ConfigurationError: If a boolean field gets a non-boolean value.
    """
    if Settings.model_fields[field].annotation is not bool:
        return value

    lowered = value.lower()
    if lowered in BOOL_TRUE:
        return True
    if lowered in BOOL_FALSE:
        return False
    raise ConfigurationError(f"Expected true or false for {field}, got '{value}'")


@app.command()
def show() -> None:
    """Show the current settings. The credential is masked."""
    store = SettingsStore()
    settings = store.get()

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in settings.masked().items():
        table.add_row(key, str(value) if value != "" else "[dim]not set[/dim]")

    console.print(table)
    console.print(f"[dim]File: {store.path}[/dim]")


@app.command("set")
def set_value(
    key: Annotated[
        str,
        typer.Argument(
            help="Setting name: credential, allow-root-access or multimedia-support.",
        ),
    ],
    value: Annotated[
        str | None,
        typer.Argument(
            help="New value. Omit for the credential to be prompted without echo.",
        ),
    ] = None,
) -> None:
    """Update one setting."""
    field = _normalize_key(key)
    if field not in Settings.model_fields:
        print_error(f"Unknown setting: {key}")
        raise typer.Exit(1)

    if value is None:
        if field != "credential":
            print_error(f"A value is required for {key}")
            raise typer.Exit(1)
        value = typer.prompt("Credential", hide_input=True)

    try:
        parsed = _parse_value(field, value)
        SettingsStore().save(**{field: parsed})
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    shown = "***" if field == "credential" else parsed
    print_success(f"Set {field} = {shown}")
