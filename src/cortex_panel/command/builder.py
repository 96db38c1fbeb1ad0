"""
Command construction for the ``cortex`` CLI.

User text is mapped to exactly one command line. Three paths interpolate the
user's text without quoting (direct ``cortex ...`` pass-through, bare verbs,
``rollback <id>``) and each of them validates the text first. Everything else
is treated as a free-text install description, single-quoted and run as a
dry run.
"""

import logging
import re

from pydantic import BaseModel, ConfigDict, Field

from cortex_panel.command.validator import contains_dangerous_metacharacters
from cortex_panel.core.config import PROGRAM_NAME
from cortex_panel.core.errors import InvalidInputError

logger = logging.getLogger(__name__)

PASSTHROUGH_PREFIX = f"{PROGRAM_NAME} "
ROLLBACK_PREFIX = "rollback "
BARE_VERBS = frozenset({"history", "status", "wizard"})
DRY_RUN_SUFFIX = "--dry-run"

_ROLLBACK_ID = re.compile(r"[A-Za-z0-9_-]+")

METACHARACTER_REASON = (
    "Invalid characters in command. Please avoid special shell characters."
)
ROLLBACK_ID_REASON = (
    "Invalid rollback ID. Only alphanumeric characters, hyphens, "
    "and underscores are allowed."
)


class Command(BaseModel):
    """A validated command line ready for the terminal."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Complete shell command line.")

    def __str__(self) -> str:
        return self.text


def quote_for_shell(text: str) -> str:
    """Wrap ``text`` in single quotes, escaping embedded single quotes as ``'\\''``."""
    return "'" + text.replace("'", "'\\''") + "'"


def build_command(raw_input: str) -> Command:
    """Translate user input into a single safe ``cortex`` command.

    Args:
        raw_input: Text typed by the user.

    Returns:
        Command: The command to send to the terminal.

    Raises:
        InvalidInputError: If a pass-through command contains shell
            metacharacters, or a rollback identifier is malformed.

    Example:
        >>> build_command("nginx with SSL").text
        "cortex install 'nginx with SSL' --dry-run"
    """
    lowered = raw_input.lower()

    if lowered.startswith(PASSTHROUGH_PREFIX):
        if contains_dangerous_metacharacters(raw_input):
            raise InvalidInputError(
                METACHARACTER_REASON, {"branch": "passthrough"}
            )
        return Command(text=raw_input)

    if lowered in BARE_VERBS:
        return Command(text=f"{PROGRAM_NAME} {lowered}")

    if lowered.startswith(ROLLBACK_PREFIX):
        rollback_id = raw_input[len(ROLLBACK_PREFIX):].strip()
        if not _ROLLBACK_ID.fullmatch(rollback_id):
            raise InvalidInputError(ROLLBACK_ID_REASON, {"branch": "rollback"})
        return Command(text=f"{PROGRAM_NAME} rollback {rollback_id}")

    logger.debug("Treating input as install description (%d chars)", len(raw_input))
    return Command(
        text=f"{PROGRAM_NAME} install {quote_for_shell(raw_input)} {DRY_RUN_SUFFIX}"
    )
