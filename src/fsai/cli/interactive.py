"""
Interactive turn driver shared by ``fsai run`` and ``fsai chat``.

Asks the user to confirm each proposed tool call on the terminal.
"""

import logging
from pathlib import Path

import typer
from rich.markdown import Markdown
from rich.markup import escape

from fsai.agent.models import AgentEvent, Decision, EventType, TurnUpdate
from fsai.agent.session import FileSystemAgent
from fsai.audit.logger import get_audit_logger
from fsai.cli.output import (
    console,
    print_error,
    print_info,
    print_success,
    print_tool_call,
    print_warning,
)
from fsai.config import SettingsStore, get_config

logger = logging.getLogger(__name__)


def show_event(event: AgentEvent) -> None:
    """Print tool progress as the turn runs."""
    if event.event_type == EventType.TOOL_COMPLETE:
        print_success(f"{event.tool_name} completed")
    elif event.event_type == EventType.TOOL_ERROR:
        print_error(f"{event.tool_name} failed: {escape(event.message or '')}")
    elif event.event_type == EventType.TOOL_DENIED:
        print_warning(f"{event.tool_name} denied")
    elif event.event_type == EventType.NAVIGATED:
        print_info(f"Now in [bold]{escape(event.message or '')}[/bold]")
    elif event.event_type == EventType.FOLLOWUP_START:
        console.print("[dim]Sending results back to the model...[/dim]")


def create_agent(path: Path | None = None, model: str | None = None) -> FileSystemAgent:
    """Build an agent from the user's config and settings files."""
    config = get_config()
    agent_config = config.agent
    if model:
        agent_config = agent_config.model_copy(update={"model": model})

    audit_logger = get_audit_logger(config.audit_log)
    store = SettingsStore(audit_logger=audit_logger)

    return FileSystemAgent(
        settings_store=store,
        config=agent_config,
        current_path=path,
        audit_logger=audit_logger,
        event_callback=show_event,
    )


async def drive_turn(agent: FileSystemAgent, prompt: str, assume_yes: bool = False) -> TurnUpdate:
    """
    Run one turn to completion, prompting for each proposed call.

    Args:
        agent: The agent.
        prompt: User instruction.
        assume_yes: Accept a round made of a single low-risk call without
            asking. Anything else is still confirmed.

    Returns:
        The final TurnUpdate.
    """
    update = await agent.submit(prompt)
    shown_round_text: str | None = None

    while not update.is_final:
        if update.text and update.text != shown_round_text:
            console.print(f"[dim]{escape(update.text)}[/dim]")
            shown_round_text = update.text

        call = update.pending[0]
        print_tool_call(call)

        if assume_yes and agent.controller.gate.auto_confirmable():
            accepted = True
        else:
            accepted = typer.confirm("Allow this action?", default=False)

        decision = Decision.accept(call.id) if accepted else Decision.deny(call.id)
        update = await agent.decide(decision)

    if update.failed:
        print_error(escape(update.text or "Turn failed"))
    elif update.text:
        console.print()
        console.print(Markdown(update.text))

    return update
