"""
Inbound panel messages and coordinator outcomes.

Both sides of the UI boundary are closed, tagged unions: inbound messages are
discriminated by ``type`` and validated with Pydantic before they reach the
coordinator; outcomes are discriminated by ``kind`` so the UI can handle each
case explicitly.
"""

import logging
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from cortex_panel.command.builder import Command
from cortex_panel.core.state import ProviderName
from cortex_panel.environment.gate import GateDecision

logger = logging.getLogger(__name__)


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Submit(_Message):
    """User text to turn into a command."""

    type: Literal["submit"] = "submit"
    text: str


class CheckEnvironment(_Message):
    """The panel became visible and wants the current gate decision."""

    type: Literal["ready"] = "ready"


class ConfirmSetup(_Message):
    type: Literal["confirmSetup"] = "confirmSetup"


class ResetSetup(_Message):
    type: Literal["resetSetup"] = "resetSetup"


class SelectProvider(_Message):
    type: Literal["selectProvider"] = "selectProvider"
    provider: ProviderName


class SetApiKey(_Message):
    type: Literal["setApiKey"] = "setApiKey"
    provider: ProviderName
    api_key: str = Field(..., alias="apiKey")


class ClearApiKey(_Message):
    """Remove one provider's key, or both when ``provider`` is omitted."""

    type: Literal["clearApiKey"] = "clearApiKey"
    provider: Optional[ProviderName] = None


class InstallCli(_Message):
    type: Literal["installCli"] = "installCli"


class ConfirmCliInstalled(_Message):
    type: Literal["confirmCliInstalled"] = "confirmCliInstalled"


class RecheckCli(_Message):
    """Probe for the CLI again, e.g. after an install finished in the terminal."""

    type: Literal["checkInstallation"] = "checkInstallation"


PanelMessage = Annotated[
    Union[
        Submit,
        CheckEnvironment,
        ConfirmSetup,
        ResetSetup,
        SelectProvider,
        SetApiKey,
        ClearApiKey,
        InstallCli,
        ConfirmCliInstalled,
        RecheckCli,
    ],
    Field(discriminator="type"),
]

_PANEL_MESSAGE_ADAPTER: TypeAdapter[PanelMessage] = TypeAdapter(PanelMessage)


def parse_message(payload: Any) -> Optional[PanelMessage]:
    """Validate a raw inbound payload.

    Returns:
        The typed message, or None when the payload is malformed (the
        rejection is logged, not raised).
    """
    try:
        return _PANEL_MESSAGE_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        logger.warning("Invalid panel message received: %s", exc.errors(include_url=False))
        return None


class _Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)


class CommandSent(_Outcome):
    """A command was handed to the terminal."""

    kind: Literal["sent"] = "sent"
    command: Command


class SubmissionBlocked(_Outcome):
    """The platform cannot run the CLI."""

    kind: Literal["blocked"] = "blocked"
    reason: str


class GatePrompt(_Outcome):
    """The current gate decision, plus an optional notice for the user.

    ``first_run`` is set the one time the missing-CLI welcome is shown.
    """

    kind: Literal["prompt"] = "prompt"
    decision: GateDecision
    notice: str = ""
    first_run: bool = False


class InputRejected(_Outcome):
    """The user's input failed validation; nothing was executed."""

    kind: Literal["rejected"] = "rejected"
    reason: str


class DispatchFailed(_Outcome):
    """A collaborator failed, so the operation did not complete."""

    kind: Literal["failed"] = "failed"
    reason: str


class Ignored(_Outcome):
    """Nothing to do (e.g. blank input)."""

    kind: Literal["ignored"] = "ignored"


Outcome = Annotated[
    Union[CommandSent, SubmissionBlocked, GatePrompt, InputRejected, DispatchFailed, Ignored],
    Field(discriminator="kind"),
]
