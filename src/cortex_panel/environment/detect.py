"""
Host environment detection.

Builds an :class:`EnvironmentDescriptor` from the running process: the OS
family from :func:`platform.system`, the remote context from well-known
environment variables (or an explicit ``CORTEX_REMOTE_KIND`` override), and a
WSL availability hint on Windows hosts.
"""

import logging
import os
import platform
from pathlib import Path
from typing import Mapping, Optional, get_args

from cortex_panel.core.state import (
    EnvironmentDescriptor,
    OperatingSystemFamily,
    RemoteContextKind,
)

logger = logging.getLogger(__name__)

WSL_EXECUTABLE = Path(r"C:\Windows\System32\wsl.exe")

_SYSTEM_FAMILIES: dict[str, OperatingSystemFamily] = {
    "linux": "linux",
    "windows": "windows",
    "darwin": "macos",
}
_REMOTE_KINDS = set(get_args(RemoteContextKind))


def _os_family(system_name: str) -> OperatingSystemFamily:
    return _SYSTEM_FAMILIES.get(system_name.strip().lower(), "other")


def _remote_kind(
    env: Mapping[str, str], family: OperatingSystemFamily, override: Optional[str]
) -> RemoteContextKind:
    """Infer the remote context, honouring an explicit override first."""
    if override:
        normalized = override.strip().lower()
        if normalized in _REMOTE_KINDS:
            return normalized  # type: ignore[return-value]
        logger.warning("Ignoring unknown remote context override: %s", override)

    if family == "linux" and env.get("WSL_DISTRO_NAME"):
        return "wsl"
    if env.get("REMOTE_CONTAINERS") or env.get("CODESPACES"):
        return "dev-container"
    if env.get("SSH_CONNECTION") or env.get("SSH_CLIENT"):
        return "ssh-remote"
    return "none"


def wsl_available(env: Mapping[str, str], wsl_executable: Path = WSL_EXECUTABLE) -> bool:
    """Heuristic WSL check for Windows hosts.

    ``WSL_DISTRO_NAME`` and ``WSLENV`` are set by WSL interop; otherwise the
    presence of ``wsl.exe`` in ``System32`` is taken as a sign WSL is installed.
    """
    if env.get("WSL_DISTRO_NAME") or env.get("WSLENV"):
        return True
    try:
        return wsl_executable.exists()
    except OSError:
        return False


def detect_environment(
    env: Optional[Mapping[str, str]] = None,
    system_name: Optional[str] = None,
    remote_override: Optional[str] = None,
) -> EnvironmentDescriptor:
    """Describe the current host.

    Args:
        env: Environment mapping (defaults to ``os.environ``).
        system_name: OS name as reported by :func:`platform.system`.
        remote_override: Explicit remote context, e.g. from configuration.

    Returns:
        EnvironmentDescriptor: A fresh snapshot.
    """
    env = os.environ if env is None else env
    family = _os_family(system_name if system_name is not None else platform.system())
    descriptor = EnvironmentDescriptor(
        operating_system_family=family,
        remote_context_kind=_remote_kind(env, family, remote_override),
        wsl_available_hint=family == "windows" and wsl_available(env),
    )
    logger.debug("Detected environment: %s", descriptor)
    return descriptor
