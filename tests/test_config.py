import logging
from pathlib import Path

import pytest

from cortex_panel.core.config import AppConfig, ProbeSettings
from cortex_panel.core.logging import setup_logging


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CORTEX_LLM_PROVIDER",
        "CORTEX_PROBE_TIMEOUT",
        "CORTEX_WSL_PROBE_TIMEOUT",
        "CORTEX_PIP_PACKAGE",
        "CORTEX_REMOTE_KIND",
        "CORTEX_STATE_FILE",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = AppConfig.from_env()

    assert cfg.provider.default_provider == "anthropic"
    assert cfg.probe.timeout_sec == 3.0
    assert cfg.probe.wsl_timeout_sec == 5.0
    assert cfg.probe.executable == "cortex"
    assert cfg.terminal.remote_kind_override is None
    assert cfg.state_file.name == "state.json"
    assert cfg.install_command == "pip install cortex-apt-cli || pip3 install cortex-apt-cli"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CORTEX_LLM_PROVIDER", " Ollama ")
    monkeypatch.setenv("CORTEX_PROBE_TIMEOUT", "1.5")
    monkeypatch.setenv("CORTEX_PIP_PACKAGE", "cortex-linux")
    monkeypatch.setenv("CORTEX_STATE_FILE", str(tmp_path / "s.json"))
    monkeypatch.setenv("CORTEX_REMOTE_KIND", "wsl")

    cfg = AppConfig.from_env()

    assert cfg.provider.default_provider == "ollama"
    assert cfg.probe.timeout_sec == 1.5
    assert cfg.state_file == tmp_path / "s.json"
    assert cfg.terminal.remote_kind_override == "wsl"
    assert cfg.install_command == "pip install cortex-linux || pip3 install cortex-linux"


@pytest.mark.parametrize("raw", ["soon", "0", "-2"])
def test_bad_timeouts_fall_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("CORTEX_WSL_PROBE_TIMEOUT", raw)

    assert ProbeSettings().wsl_timeout_sec == 5.0


def test_unsafe_package_name_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CORTEX_PIP_PACKAGE", "cortex; rm -rf /")

    assert ProbeSettings().pip_package == "cortex-apt-cli"


@pytest.mark.parametrize(
    ("level", "expected"),
    [("debug", logging.DEBUG), ("nonsense", logging.INFO), (logging.ERROR, logging.ERROR)],
)
def test_setup_logging_accepts_names_and_constants(level, expected) -> None:
    setup_logging(level)

    assert logging.getLogger().level == expected
