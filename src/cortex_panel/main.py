"""
Command-line entry point for the Cortex panel.

This module runs an interactive console session in front of a
`SessionCoordinator`. Plain text is submitted as a request and turned into a
``cortex`` command in the visible terminal; lines starting with ``/`` drive
onboarding (provider selection, API keys, CLI installation, setup reset).
"""

import logging
import shlex
from typing import Any, Dict, Optional

from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.text import Text

from cortex_panel.builder import build_coordinator
from cortex_panel.core.config import AppConfig
from cortex_panel.core.logging import setup_logging
from cortex_panel.llm import ProviderRegistry, get_provider
from cortex_panel.session.coordinator import SessionCoordinator
from cortex_panel.session.messages import CommandSent, GatePrompt, InstallCli, parse_message
from cortex_panel.utils.console_utils import (
    HELP_TEXT,
    WELCOME_TEXT,
    console,
    show_outcome,
    show_status_panel,
)

_SIMPLE_COMMANDS = {
    "/done": "confirmSetup",
    "/reset": "resetSetup",
    "/install": "installCli",
    "/installed": "confirmCliInstalled",
    "/check": "ready",
    "/verify": "checkInstallation",
}


def build_payload(line: str) -> Optional[Dict[str, Any]]:
    """Translate one console line into a raw panel message payload.

    Args:
        line: The trimmed line typed by the user.

    Returns:
        Dict[str, Any] | None: The payload to validate and dispatch, or None
        for console-only commands (``/status``, ``/help``) and unknown ``/``
        commands. API keys are never part of the payload; ``/key`` returns a
        payload without ``apiKey`` for the caller to complete.
    """
    if not line.startswith("/"):
        return {"type": "submit", "text": line}

    try:
        parts = shlex.split(line)
    except ValueError:
        return None
    verb, args = parts[0].lower(), parts[1:]

    if verb in _SIMPLE_COMMANDS:
        return {"type": _SIMPLE_COMMANDS[verb]}
    if verb == "/provider" and len(args) == 1:
        return {"type": "selectProvider", "provider": args[0].lower()}
    if verb == "/key" and len(args) == 1:
        return {"type": "setApiKey", "provider": args[0].lower()}
    if verb == "/clear-key" and len(args) <= 1:
        payload: Dict[str, Any] = {"type": "clearApiKey"}
        if args:
            payload["provider"] = args[0].lower()
        return payload
    return None


def handle_line(coordinator: SessionCoordinator, line: str) -> None:
    """Process one console line against the coordinator and render the result."""
    verb = line.split(maxsplit=1)[0].lower() if line.startswith("/") else ""
    if verb == "/status":
        show_status_panel(coordinator.status())
        return
    if verb == "/help":
        console.print(Markdown(HELP_TEXT))
        return

    payload = build_payload(line)
    if payload is None:
        console.print(Text(f"Unknown command: {verb}. Type /help.", style="yellow"))
        return

    if payload["type"] == "setApiKey":
        provider = payload["provider"]
        if provider in ProviderRegistry.names() and get_provider(provider).requires_key:
            payload["apiKey"] = Prompt.ask(
                f"Enter your {provider} API key", password=True, console=console
            )
        else:
            # let the coordinator explain why no key is taken
            payload["apiKey"] = ""
    if payload["type"] == "installCli" and not Confirm.ask(
        "This will install the Cortex CLI from PyPI. Continue?",
        default=False,
        console=console,
    ):
        return

    message = parse_message(payload)
    if message is None:
        console.print("[red]Invalid command arguments. Type /help.[/red]")
        return

    outcome = coordinator.dispatch(message)
    show_outcome(outcome)
    if isinstance(message, InstallCli) and isinstance(outcome, CommandSent):
        console.print(
            Text("Cortex CLI installation started. Type /verify once it completes.", style="cyan")
        )
    if isinstance(outcome, GatePrompt) and outcome.first_run:
        _offer_install(coordinator)


def _offer_install(coordinator: SessionCoordinator) -> None:
    """Ask the one-time welcome question shown when the CLI is first found missing."""
    choice = Prompt.ask(
        WELCOME_TEXT,
        choices=["install", "installed", "later"],
        default="later",
        console=console,
    )
    if choice == "install":
        handle_line(coordinator, "/install")
    elif choice == "installed":
        handle_line(coordinator, "/installed")


def run() -> None:
    """Run the interactive console for the Cortex panel.

    Example:
        ```bash
        cortex-panel
        ```
    """
    cfg = AppConfig.from_env()
    setup_logging(cfg.log_level)

    coordinator = build_coordinator(cfg)

    console.print(
        Panel.fit(
            "[bold green]>_ Cortex AI[/bold green]\n"
            "Describe what you want to install, or type /help. Type 'exit' to quit.",
            border_style="green",
        )
    )
    handle_line(coordinator, "/check")

    while True:
        try:
            user_input = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not user_input:
            continue
        if user_input.lower() in {"exit", "quit"}:
            break

        try:
            handle_line(coordinator, user_input)
        except Exception:
            logging.exception("Failed to handle input.")
            console.print("[red]Something went wrong; see the log for details.[/red]")

    console.print("\n[cyan]Session ended. Goodbye![/cyan]")


def main() -> None:
    """Entry point for the Cortex panel."""
    run()


if __name__ == "__main__":
    main()
