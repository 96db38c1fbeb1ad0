"""
Session builder.

This module exposes a single factory function, :func:`build_coordinator`,
which wires a :class:`SessionCoordinator` to its real collaborators: host
environment detection, the subprocess CLI probe, the seeded secret store, the
JSON state file and a persistent visible terminal.

Settings are injected from environment variables via
:class:`cortex_panel.core.config.AppConfig`.
"""

from functools import partial
from typing import Optional

from cortex_panel.collaborators.stores import JsonStateStore, MemorySecretStore
from cortex_panel.collaborators.terminal import PersistentTerminal, TerminalSink
from cortex_panel.core.config import AppConfig
from cortex_panel.environment.detect import detect_environment
from cortex_panel.environment.probe import SubprocessCliProbe
from cortex_panel.session.coordinator import SessionCoordinator


def build_coordinator(
    cfg: Optional[AppConfig] = None,
    terminal: Optional[TerminalSink] = None,
) -> SessionCoordinator:
    """Construct a session coordinator for the current host.

    Args:
        cfg: Application configuration; read from the environment when omitted.
        terminal: Terminal sink override; a :class:`PersistentTerminal` is
            created when omitted.

    Returns:
        SessionCoordinator: Ready to evaluate the gate and accept submissions.

    Example:
        ```python
        coordinator = build_coordinator()
        outcome = coordinator.handle_submission("nginx with SSL")
        print(outcome)
        ```
    """
    cfg = cfg or AppConfig.from_env()

    environment = partial(
        detect_environment, remote_override=cfg.terminal.remote_kind_override
    )
    state_store = JsonStateStore(cfg.state_file)

    return SessionCoordinator(
        environment=environment,
        probe=SubprocessCliProbe(cfg.probe),
        secrets=MemorySecretStore.from_config(cfg.provider),
        flags=state_store,
        settings=state_store,
        terminal=terminal or PersistentTerminal(cfg.terminal, environment()),
        install_command=cfg.install_command,
        default_provider=cfg.provider.default_provider,
    )
