"""
Visible terminal sink (persistent process).

Commands are written to a long-lived shell process whose output goes straight
to the user's console. The process is reused while it is alive and recreated
when it has exited. On a Windows host that resolved to WSL the shell is
``wsl.exe`` so commands run inside Linux.
"""

import logging
import os
import subprocess
from typing import Callable, List, Optional, Protocol

from cortex_panel.command.builder import Command
from cortex_panel.core.config import TerminalSettings
from cortex_panel.core.state import EnvironmentDescriptor
from cortex_panel.environment.platform import resolve_platform

logger = logging.getLogger(__name__)

PopenFactory = Callable[..., "subprocess.Popen[str]"]
_CLOSE_TIMEOUT_SEC = 2.0


class TerminalSink(Protocol):
    """Fire-and-forget destination for validated commands."""

    def send(self, command: Command) -> None: ...


def _bash_executable() -> str:
    """Prefer ``/bin/bash`` when present; otherwise fall back to ``bash`` on PATH."""
    return "/bin/bash" if os.path.exists("/bin/bash") else "bash"


def shell_argv(descriptor: EnvironmentDescriptor) -> List[str]:
    """Return the argv used to start the terminal's shell for ``descriptor``."""
    on_windows = descriptor.operating_system_family == "windows"
    if on_windows and resolve_platform(descriptor).platform_tag == "wsl":
        return ["wsl.exe"]
    return [_bash_executable()]


class PersistentTerminal:
    """Thin wrapper over a long-lived shell subprocess fed through stdin.

    Args:
        settings: Terminal name and related settings.
        descriptor: Environment used to pick the shell executable.
        popen: Process factory, ``subprocess.Popen`` by default.
    """

    def __init__(
        self,
        settings: TerminalSettings,
        descriptor: EnvironmentDescriptor,
        popen: PopenFactory = subprocess.Popen,
    ):
        self.settings = settings
        self.argv = shell_argv(descriptor)
        self._popen = popen
        self._proc: Optional["subprocess.Popen[str]"] = None

    @property
    def alive(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    def _ensure_process(self) -> "subprocess.Popen[str]":
        if self._proc is not None and self._proc.poll() is None:
            return self._proc
        logger.info(
            "Starting %s terminal: %s", self.settings.name, " ".join(self.argv)
        )
        self._proc = self._popen(
            self.argv,
            stdin=subprocess.PIPE,
            text=True,
            bufsize=1,  # line-buffered
            shell=False,
        )
        return self._proc

    def send(self, command: Command) -> None:
        """Write ``command`` to the terminal without waiting for it to finish."""
        try:
            self._write(command.text)
        except BrokenPipeError:
            logger.warning("%s terminal exited; restarting it", self.settings.name)
            self.close()
            self._write(command.text)
        logger.info("Sent command to %s terminal: %s", self.settings.name, command.text)

    def _write(self, text: str) -> None:
        proc = self._ensure_process()
        assert proc.stdin is not None
        proc.stdin.write(f"{text}\n")
        proc.stdin.flush()

    def close(self) -> None:
        """Terminate the underlying process and reap it."""
        proc, self._proc = self._proc, None
        if proc is None:
            return
        if proc.poll() is None:
            proc.terminate()
        try:
            proc.wait(timeout=_CLOSE_TIMEOUT_SEC)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
