"""
Error taxonomy for the Cortex panel.

Every failure raised by the core derives from :class:`CortexError` so the
surrounding UI can catch one type and surface the message to the user.
"""

from typing import Any, Dict, Optional


class CortexError(Exception):
    """Base class for all errors raised by the Cortex panel core.

    The `detail` attribute carries structured context for logging.
    """

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.detail: Dict[str, Any] = detail or {}


class InvalidInputError(CortexError):
    """Raised when user input cannot be turned into a safe command.

    The `reason` attribute names the exact constraint that failed and is
    shown to the user verbatim.
    """

    def __init__(self, reason: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(reason, detail)
        self.reason = reason


class UnsupportedPlatformError(CortexError):
    """Raised when an operation needs a supported (Linux-like) platform."""

    def __init__(self, reason: str, platform_tag: str = "unknown"):
        super().__init__(reason, {"platform": platform_tag})
        self.reason = reason
        self.platform_tag = platform_tag


class ProbeTimeoutError(CortexError):
    """Raised inside a presence probe when a subprocess check exceeds its time bound."""

    def __init__(self, command: str, timeout: float):
        super().__init__(
            f"Probe '{command}' timed out after {timeout:g}s.",
            {"command": command, "timeout": timeout},
        )
        self.command = command
        self.timeout = timeout


class MissingDependencyError(CortexError):
    """Raised when a tool an operation relies on (e.g. ``pip``) is not available."""

    def __init__(self, reason: str, dependency: str):
        super().__init__(reason, {"dependency": dependency})
        self.reason = reason
        self.dependency = dependency
