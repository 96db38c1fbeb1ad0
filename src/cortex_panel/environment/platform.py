"""
Platform support resolution.

The ``cortex`` CLI manages Linux packages, so it only runs somewhere Linux is
available: natively, inside WSL, over SSH to a Linux host, or inside a
container. Remote-context signals are checked before the local OS family, so a
Windows host attached to a Linux remote resolves as Linux.
"""

from cortex_panel.core.state import EnvironmentDescriptor, PlatformVerdict

WSL_ADVISORY = "Running on Windows with WSL support. Commands will execute in WSL."
WINDOWS_REMEDIATION = (
    "Cortex requires Linux. Please install WSL (Windows Subsystem for Linux) "
    "or use the WSL remote."
)
MACOS_UNSUPPORTED = (
    "Cortex is designed for Linux package management. macOS is not directly "
    "supported, but you can use a Linux VM or container."
)
LINUX_REQUIRED = "Cortex requires a Linux environment."

_CONTAINER_KINDS = {"dev-container", "attached-container"}


def resolve_platform(descriptor: EnvironmentDescriptor) -> PlatformVerdict:
    """Decide whether the described environment can run ``cortex``.

    Args:
        descriptor: Snapshot of the host OS and remote context.

    Returns:
        PlatformVerdict: Supported flag, platform tag and a user-facing
        message (empty when nothing needs to be said).
    """
    remote = descriptor.remote_context_kind

    if remote == "wsl":
        return PlatformVerdict(supported=True, platform_tag="wsl")
    if remote == "ssh-remote":
        return PlatformVerdict(supported=True, platform_tag="linux")
    if remote in _CONTAINER_KINDS:
        return PlatformVerdict(supported=True, platform_tag="linux")

    family = descriptor.operating_system_family
    if family == "linux":
        return PlatformVerdict(supported=True, platform_tag="linux")
    if family == "windows":
        if descriptor.wsl_available_hint:
            return PlatformVerdict(
                supported=True, platform_tag="wsl", reason_message=WSL_ADVISORY
            )
        return PlatformVerdict(
            supported=False, platform_tag="windows", reason_message=WINDOWS_REMEDIATION
        )
    if family == "macos":
        return PlatformVerdict(
            supported=False, platform_tag="macos", reason_message=MACOS_UNSUPPORTED
        )
    return PlatformVerdict(
        supported=False, platform_tag="unknown", reason_message=LINUX_REQUIRED
    )
