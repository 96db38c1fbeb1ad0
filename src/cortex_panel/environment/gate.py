"""
Onboarding gate.

Combines the platform verdict, CLI presence, credentials and the persisted
setup flag into exactly one of five decisions. The checks run in a fixed
order and the first one that applies wins, so the result is a pure function
of its inputs.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cortex_panel.core.state import (
    CredentialStatus,
    PlatformVerdict,
    ProviderName,
    SetupState,
)


class _Decision(BaseModel):
    model_config = ConfigDict(frozen=True)


class Blocked(_Decision):
    """The platform cannot run the CLI; nothing else is offered."""

    kind: Literal["blocked"] = "blocked"
    reason: str


class NeedsCliInstall(_Decision):
    """The CLI has not been found or confirmed yet."""

    kind: Literal["needs_cli_install"] = "needs_cli_install"


class NeedsCredential(_Decision):
    """The selected provider is missing its API key."""

    kind: Literal["needs_credential"] = "needs_credential"
    provider: ProviderName


class NeedsOnboardingAck(_Decision):
    """Everything is configured but the user has not acknowledged onboarding."""

    kind: Literal["needs_onboarding_ack"] = "needs_onboarding_ack"


class Ready(_Decision):
    """Submissions are accepted."""

    kind: Literal["ready"] = "ready"


GateDecision = Annotated[
    Union[Blocked, NeedsCliInstall, NeedsCredential, NeedsOnboardingAck, Ready],
    Field(discriminator="kind"),
]


def evaluate_gate(
    verdict: PlatformVerdict,
    cli_installed_known: bool,
    credentials: CredentialStatus,
    setup: SetupState,
) -> GateDecision:
    """Compute the single gate decision for an environment snapshot.

    Args:
        verdict: Platform support verdict.
        cli_installed_known: The CLI was found by a probe or the user
            confirmed it is installed.
        credentials: Provider selection and key presence.
        setup: Persisted onboarding flags.

    Returns:
        GateDecision: ``Blocked`` on an unsupported platform regardless of the
        other inputs; otherwise the first unmet onboarding step, or ``Ready``.
    """
    if not verdict.supported:
        return Blocked(reason=verdict.reason_message)

    if not cli_installed_known:
        return NeedsCliInstall()

    if not credentials.has_valid_config and not setup.setup_complete:
        return NeedsCredential(provider=credentials.selected_provider)

    if not setup.setup_complete:
        return NeedsOnboardingAck()

    return Ready()
