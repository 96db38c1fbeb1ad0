"""
CLI presence probe.

Checks whether the ``cortex`` executable is reachable from the current
environment. On a Windows host that resolved to WSL the check runs through
``wsl bash -ic``; elsewhere the executable is looked up on ``PATH`` with a
``pip show`` fallback. Every subprocess call is time-bounded, and a timeout
counts as "not installed".
"""

import logging
import shutil
import subprocess
from typing import List, Protocol

from cortex_panel.core.config import ProbeSettings
from cortex_panel.core.errors import ProbeTimeoutError
from cortex_panel.core.state import EnvironmentDescriptor
from cortex_panel.environment.platform import resolve_platform

logger = logging.getLogger(__name__)


class CliPresenceProbe(Protocol):
    """Answers whether the CLI is reachable for a given environment."""

    def probe(self, descriptor: EnvironmentDescriptor) -> bool: ...

    def pip_available(self, descriptor: EnvironmentDescriptor) -> bool: ...


class SubprocessCliProbe:
    """Presence probe backed by ``which``/``pip show`` lookups.

    Args:
        settings: Executable name, pip package and time bounds.
    """

    def __init__(self, settings: ProbeSettings):
        self.settings = settings

    def probe(self, descriptor: EnvironmentDescriptor) -> bool:
        """Return True if the CLI was found; timeouts and failures return False."""
        try:
            found = self._probe(descriptor)
        except ProbeTimeoutError as exc:
            logger.warning("CLI presence probe timed out: %s", exc)
            return False
        logger.info("CLI presence probe result: %s", "found" if found else "missing")
        return found

    def pip_available(self, descriptor: EnvironmentDescriptor) -> bool:
        """Return True if ``pip3`` or ``pip`` can be run where the CLI would be installed."""
        if self._through_wsl(descriptor):
            try:
                return self._run(["wsl", "which", "pip3"], self.settings.wsl_timeout_sec)
            except ProbeTimeoutError as exc:
                logger.warning("pip lookup timed out: %s", exc)
                return False
        return bool(shutil.which("pip3") or shutil.which("pip"))

    @staticmethod
    def _through_wsl(descriptor: EnvironmentDescriptor) -> bool:
        on_windows = descriptor.operating_system_family == "windows"
        return on_windows and resolve_platform(descriptor).platform_tag == "wsl"

    def _probe(self, descriptor: EnvironmentDescriptor) -> bool:
        exe = self.settings.executable
        pkg = self.settings.pip_package

        if self._through_wsl(descriptor):
            return self._run(
                ["wsl", "bash", "-ic", f"which {exe} || pip show {pkg}"],
                self.settings.wsl_timeout_sec,
            )

        if shutil.which(exe):
            return True
        return self._run(["pip", "show", pkg], self.settings.timeout_sec)

    def _run(self, args: List[str], timeout: float) -> bool:
        """Run a check command; True on exit status 0.

        Raises:
            ProbeTimeoutError: If the command does not finish within ``timeout``.
        """
        logger.debug("Probing with: %s", " ".join(args))
        try:
            subprocess.run(
                args,
                capture_output=True,
                check=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProbeTimeoutError(" ".join(args), timeout) from exc
        except (subprocess.CalledProcessError, OSError):
            return False
        return True
