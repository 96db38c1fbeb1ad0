"""
Helper utilities for the Rich-based console UI of the Cortex panel.

Includes the shared `console` and renderers for coordinator outcomes,
onboarding prompts and the status summary.
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from cortex_panel.core.state import StatusSummary
from cortex_panel.environment.gate import (
    GateDecision,
    NeedsCliInstall,
    NeedsCredential,
    NeedsOnboardingAck,
    Ready,
)
from cortex_panel.session.messages import (
    CommandSent,
    GatePrompt,
    Ignored,
    DispatchFailed,
    InputRejected,
    Outcome,
    SubmissionBlocked,
)

# Global Console object
console = Console()

WELCOME_TEXT = "Welcome to Cortex AI! The Cortex CLI is required. Install it now?"

CLI_INSTALL_TEXT = """
## Welcome to Cortex AI

To get started, you'll need the **Cortex CLI** installed on your system.

- `/install` installs `cortex-apt-cli` via pip (Python required)
- `/installed` if the CLI is already installed
- `/verify` once the install in the terminal has finished
"""

CREDENTIAL_TEXT = """
## Configure API Key

Cortex needs an LLM provider to understand your natural language requests.

- **Anthropic Claude** (recommended): `/key anthropic`
- **OpenAI**: `/key openai`
- **Ollama** (free, runs locally, no key): `/provider ollama`
"""

ONBOARDING_TEXT = """
## Welcome to Cortex AI

Cortex is an AI-powered package manager for Linux that understands natural language.

Verify the CLI with `cortex --version`, then type `/done` to start.
"""

HELP_TEXT = """
Describe what you want to install (e.g. `nginx with SSL support`), or type a
command such as `cortex history`, `status`, `wizard` or `rollback <id>`.

`/status` `/provider <name>` `/key <provider>` `/clear-key [provider]`
`/install` `/installed` `/verify` `/done` `/reset` `/help` `exit`
"""


def decision_markdown(decision: GateDecision) -> str:
    """Return the onboarding text shown for a non-blocked gate decision."""
    if isinstance(decision, NeedsCliInstall):
        return CLI_INSTALL_TEXT
    if isinstance(decision, NeedsCredential):
        return CREDENTIAL_TEXT + f"\nSelected provider: **{decision.provider}**"
    if isinstance(decision, NeedsOnboardingAck):
        return ONBOARDING_TEXT
    if isinstance(decision, Ready):
        return "Ready. " + HELP_TEXT
    return ""


def show_outcome(outcome: Outcome) -> None:
    """Render a coordinator outcome."""
    if isinstance(outcome, CommandSent):
        console.print(Text.assemble(("Sent: ", "green"), (outcome.command.text, "bold")))
    elif isinstance(outcome, SubmissionBlocked):
        console.print(Panel.fit(outcome.reason, title="Unsupported Platform", border_style="red"))
    elif isinstance(outcome, InputRejected):
        console.print(Text(outcome.reason, style="red"))
    elif isinstance(outcome, DispatchFailed):
        console.print(Panel.fit(outcome.reason, title="Something Failed", border_style="red"))
    elif isinstance(outcome, GatePrompt):
        if outcome.notice:
            console.print(Text(outcome.notice, style="cyan"))
        console.print(
            Panel(Markdown(decision_markdown(outcome.decision)), border_style="yellow")
        )
    elif isinstance(outcome, Ignored):
        return


def show_status_panel(summary: StatusSummary) -> None:
    """Render the status summary."""
    style = "green" if summary.supported and summary.credential_configured else "yellow"
    if not summary.supported:
        style = "red"
    console.print(
        Panel.fit(
            summary.message.replace(" | ", "\n")
            + f"\nCLI: {'Installed' if summary.cli_installed else 'Not installed'}",
            title="Cortex Status",
            border_style=style,
        )
    )
