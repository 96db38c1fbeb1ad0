from __future__ import annotations

from typing import Callable

import pytest

from cortex_panel.collaborators.stores import MemorySecretStore, MemoryStateStore
from cortex_panel.command.builder import Command
from cortex_panel.core.errors import ProbeTimeoutError
from cortex_panel.core.state import EnvironmentDescriptor
from cortex_panel.session.coordinator import SessionCoordinator

LINUX = EnvironmentDescriptor(operating_system_family="linux")
MACOS = EnvironmentDescriptor(operating_system_family="macos")


class FakeProbe:
    def __init__(self, found: bool = True, timeout: bool = False, pip: bool = True) -> None:
        self.found = found
        self.timeout = timeout
        self.pip = pip
        self.calls: list[EnvironmentDescriptor] = []

    def probe(self, descriptor: EnvironmentDescriptor) -> bool:
        self.calls.append(descriptor)
        if self.timeout:
            raise ProbeTimeoutError("which cortex", 3.0)
        return self.found

    def pip_available(self, descriptor: EnvironmentDescriptor) -> bool:
        return self.pip


class RecordingTerminal:
    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, command: Command) -> None:
        self.sent.append(command.text)


class Harness:
    def __init__(self, descriptor: EnvironmentDescriptor = LINUX) -> None:
        self.descriptor = descriptor
        self.probe = FakeProbe()
        self.secrets = MemorySecretStore()
        self.state_store = MemoryStateStore()
        self.terminal = RecordingTerminal()

    def coordinator(self, default_provider: str = "anthropic") -> SessionCoordinator:
        return SessionCoordinator(
            environment=lambda: self.descriptor,
            probe=self.probe,
            secrets=self.secrets,
            flags=self.state_store,
            settings=self.state_store,
            terminal=self.terminal,
            install_command="pip install cortex-apt-cli || pip3 install cortex-apt-cli",
            default_provider=default_provider,
        )


@pytest.fixture
def harness() -> Harness:
    return Harness()


@pytest.fixture
def make_harness() -> Callable[[EnvironmentDescriptor], Harness]:
    return Harness
