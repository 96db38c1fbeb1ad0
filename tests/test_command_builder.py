import shlex

import pytest

from cortex_panel.command.builder import (
    METACHARACTER_REASON,
    ROLLBACK_ID_REASON,
    build_command,
    quote_for_shell,
)
from cortex_panel.command.validator import contains_dangerous_metacharacters
from cortex_panel.core.errors import InvalidInputError


@pytest.mark.parametrize(
    "char", [";", "&", "|", "`", "$", "(", ")", "{", "}", "[", "]", "<", ">", "\\", "!", "\n", "\r"]
)
def test_validator_flags_every_metacharacter(char: str) -> None:
    assert contains_dangerous_metacharacters(f"cortex install{char}x") is True


def test_validator_accepts_plain_text() -> None:
    assert contains_dangerous_metacharacters("cortex install nginx --dry-run") is False
    assert contains_dangerous_metacharacters("it's \"quoted\" text, ok?") is False


def test_passthrough_returns_input_unchanged() -> None:
    assert build_command("cortex history").text == "cortex history"
    assert build_command("Cortex install nginx --execute").text == "Cortex install nginx --execute"


@pytest.mark.parametrize(
    "raw",
    ["cortex ; rm -rf /", "cortex install $(whoami)", "cortex status && reboot", "cortex x\nrm -rf ~"],
)
def test_passthrough_rejects_metacharacters(raw: str) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        build_command(raw)

    assert excinfo.value.reason == METACHARACTER_REASON


@pytest.mark.parametrize("raw", ["history", "HISTORY", "Status", "wizard"])
def test_bare_verbs_are_prefixed_in_lower_case(raw: str) -> None:
    assert build_command(raw).text == f"cortex {raw.lower()}"


def test_rollback_with_valid_id() -> None:
    assert build_command("rollback abc-123").text == "cortex rollback abc-123"
    assert build_command("ROLLBACK  snap_01 ").text == "cortex rollback snap_01"


@pytest.mark.parametrize("raw", ["rollback ../etc", "rollback a b", "rollback id;ls", "rollback  "])
def test_rollback_rejects_malformed_id(raw: str) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        build_command(raw)

    assert excinfo.value.reason == ROLLBACK_ID_REASON


def test_free_text_becomes_quoted_dry_run_install() -> None:
    assert build_command("nginx with SSL").text == "cortex install 'nginx with SSL' --dry-run"


def test_embedded_single_quote_is_escaped() -> None:
    command = build_command("it's nginx").text

    assert command == "cortex install 'it'\\''s nginx' --dry-run"
    assert shlex.split(command) == ["cortex", "install", "it's nginx", "--dry-run"]


def test_hostile_free_text_stays_a_single_argument() -> None:
    raw = "x'; rm -rf / #$(id)`id`"
    assert shlex.split(build_command(raw).text) == ["cortex", "install", raw, "--dry-run"]


def test_bare_word_not_in_allow_list_is_an_install_description() -> None:
    assert build_command("historyx").text == "cortex install 'historyx' --dry-run"
    assert build_command("cortex").text == "cortex install 'cortex' --dry-run"


def test_quote_for_shell_round_trips_through_shlex() -> None:
    assert shlex.split(quote_for_shell("a'b''c")) == ["a'b''c"]


def test_command_is_immutable() -> None:
    command = build_command("status")
    with pytest.raises(Exception):
        command.text = "cortex wizard"  # type: ignore[misc]
