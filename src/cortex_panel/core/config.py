"""
Configuration module for the Cortex panel.

This module defines the configuration dataclasses used across the system:
- Provider configuration (default provider and seed API keys)
- Probe settings (time bounds for CLI presence checks)
- Terminal and install settings (program name, pip package, terminal name)
- AppConfig, which aggregates them and resolves the durable state file.

Values come from the process environment after ``.env`` has been loaded.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

PROGRAM_NAME = "cortex"
DEFAULT_STATE_FILE = Path("~/.config/cortex-panel/state.json")
_PACKAGE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_package(name: str, default: str = "cortex-apt-cli") -> str:
    """Read a pip distribution name; anything outside ``[A-Za-z0-9._-]`` is ignored."""
    raw = (os.getenv(name) or "").strip()
    if raw and _PACKAGE_NAME.match(raw):
        return raw
    return default


@dataclass
class ProviderConfig:
    """Provider selection defaults and seed credentials.

    Attributes:
        default_provider: Provider used until the user selects one
            (``anthropic``, ``openai`` or ``ollama``).
        anthropic_api_key: Anthropic key seeded from ``ANTHROPIC_API_KEY``.
        openai_api_key: OpenAI key seeded from ``OPENAI_API_KEY``.
    """

    default_provider: str = field(
        default_factory=lambda: os.getenv("CORTEX_LLM_PROVIDER", "anthropic")
        .strip()
        .lower()
    )
    anthropic_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY")
    )
    openai_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY")
    )


@dataclass
class ProbeSettings:
    """Time bounds and targets for the CLI presence probe.

    Attributes:
        timeout_sec: Bound for native ``which``/``where``/``pip show`` checks.
        wsl_timeout_sec: Bound for checks routed through ``wsl``.
        executable: Name of the CLI executable to look for.
        pip_package: Distribution name checked with ``pip show``.
    """

    timeout_sec: float = field(
        default_factory=lambda: _env_float("CORTEX_PROBE_TIMEOUT", 3.0)
    )
    wsl_timeout_sec: float = field(
        default_factory=lambda: _env_float("CORTEX_WSL_PROBE_TIMEOUT", 5.0)
    )
    executable: str = PROGRAM_NAME
    pip_package: str = field(default_factory=lambda: _env_package("CORTEX_PIP_PACKAGE"))


@dataclass
class TerminalSettings:
    """Settings for the visible terminal commands are sent to.

    Attributes:
        name: Display name of the terminal.
        remote_kind_override: Explicit remote context (``wsl``, ``ssh-remote``,
            ``dev-container``, ``attached-container`` or ``none``) that
            replaces auto-detection when set.
    """

    name: str = field(default_factory=lambda: os.getenv("CORTEX_TERMINAL_NAME", "Cortex"))
    remote_kind_override: Optional[str] = field(
        default_factory=lambda: os.getenv("CORTEX_REMOTE_KIND")
    )


@dataclass
class AppConfig:
    """Aggregate configuration for the application.

    Attributes:
        provider: Provider defaults and seed keys.
        probe: CLI presence probe settings.
        terminal: Terminal settings.
        state_file: JSON file holding persisted flags and settings.
        log_level: Root log level name.
    """

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    probe: ProbeSettings = field(default_factory=ProbeSettings)
    terminal: TerminalSettings = field(default_factory=TerminalSettings)
    state_file: Path = field(
        default_factory=lambda: Path(
            os.getenv("CORTEX_STATE_FILE", str(DEFAULT_STATE_FILE))
        ).expanduser()
    )
    log_level: str = field(default_factory=lambda: os.getenv("CORTEX_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Construct an AppConfig instance from environment variables.

        Returns:
            AppConfig: A configuration object with defaults resolved from
            the current process environment.
        """
        return cls()

    @property
    def install_command(self) -> str:
        """Shell line that installs the CLI from PyPI."""
        package = self.probe.pip_package
        return f"pip install {package} || pip3 install {package}"
