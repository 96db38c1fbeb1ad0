"""
State models for Cortex panel sessions.

This module defines the Pydantic models that describe the environment
snapshot, the derived platform and credential views, the persisted setup
flags, and the per-session context threaded through the gate and the
session coordinator. Snapshots are frozen; they are rebuilt on every check
rather than mutated.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OperatingSystemFamily = Literal["linux", "windows", "macos", "other"]
RemoteContextKind = Literal[
    "none", "wsl", "ssh-remote", "dev-container", "attached-container"
]
PlatformTag = Literal["linux", "wsl", "macos", "windows", "unknown"]
ProviderName = Literal["anthropic", "openai", "ollama"]


class EnvironmentDescriptor(BaseModel):
    """Immutable snapshot of where the panel is running.

    Attributes:
        operating_system_family: Family of the local host OS.
        remote_context_kind: Remote context the host is attached to, if any.
        wsl_available_hint: Whether WSL looks available on a Windows host.
    """

    model_config = ConfigDict(frozen=True)

    operating_system_family: OperatingSystemFamily = Field(
        default="other", description="Family of the local host operating system."
    )
    remote_context_kind: RemoteContextKind = Field(
        default="none", description="Remote context the host is attached to."
    )
    wsl_available_hint: bool = Field(
        default=False, description="Whether WSL appears to be installed."
    )


class PlatformVerdict(BaseModel):
    """Supported/unsupported verdict derived from an environment descriptor."""

    model_config = ConfigDict(frozen=True)

    supported: bool
    platform_tag: PlatformTag
    reason_message: str = ""


class CredentialStatus(BaseModel):
    """Which provider is selected and which API keys are present.

    Attributes:
        has_anthropic_key: An Anthropic key is stored.
        has_openai_key: An OpenAI key is stored.
        selected_provider: The provider chosen by the user.
    """

    model_config = ConfigDict(frozen=True)

    has_anthropic_key: bool = False
    has_openai_key: bool = False
    selected_provider: ProviderName = "anthropic"

    @property
    def has_valid_config(self) -> bool:
        """True when the selected provider can be used as configured."""
        if self.selected_provider == "ollama":
            return True
        if self.selected_provider == "anthropic":
            return self.has_anthropic_key
        return self.has_openai_key


class SetupState(BaseModel):
    """Persisted onboarding flags.

    Each flag is set once and only cleared by an explicit reset.
    """

    model_config = ConfigDict(frozen=True)

    cli_confirmed_installed: bool = False
    install_prompt_shown: bool = False
    setup_complete: bool = False


class BaseSessionState(BaseModel):
    """Base class for per-session state.

    Attributes:
        session_id: Unique identifier for the current session.
        metadata: Arbitrary session metadata for contextual storage.
    """

    session_id: Optional[str] = Field(
        default=None, description="Unique identifier for the session."
    )
    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Arbitrary metadata for storing additional session context.",
    )


class SessionState(BaseSessionState):
    """Mutable context owned by one session coordinator.

    Holds what the session has learned about the CLI so far. A confirmed
    presence (probe success or user self-confirmation) is cached for the
    lifetime of the session and only re-probed on an explicit re-check.

    Attributes:
        cli_installed: The CLI has been confirmed present in this session.
        welcome_pending: The first-run install welcome was just triggered and
            has not been handed to the UI yet.
    """

    cli_installed: bool = Field(
        default=False, description="CLI presence confirmed for this session."
    )
    welcome_pending: bool = False


class StatusSummary(BaseModel):
    """Snapshot behind the status indicator and status-details view."""

    model_config = ConfigDict(frozen=True)

    platform_tag: PlatformTag
    supported: bool
    provider: ProviderName
    credential_configured: bool
    cli_installed: bool
    message: str = ""
