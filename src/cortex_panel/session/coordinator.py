"""
Session coordinator.

Drives one interactive surface: evaluates the onboarding gate against the
stores and the CLI presence probe, turns accepted submissions into commands,
and hands them to the terminal. All I/O goes through the collaborators passed
in at construction; the coordinator itself only sequences calls and records
what the session has learned in its :class:`SessionState`.

State transitions are serialized with a per-coordinator lock so a reset
cannot interleave with an in-flight submission.
"""

import logging
import threading
import uuid
from typing import Callable, Optional

from cortex_panel.collaborators.stores import (
    ANTHROPIC_KEY,
    CLI_INSTALLED_KEY,
    INSTALL_PROMPTED_KEY,
    OPENAI_KEY,
    PROVIDER_SETTING_KEY,
    SETUP_COMPLETE_KEY,
    USER_CONFIRMED_INSTALL_KEY,
    FlagStore,
    SecretStore,
    SettingsStore,
)
from cortex_panel.collaborators.terminal import TerminalSink
from cortex_panel.command.builder import Command, build_command
from cortex_panel.core.errors import (
    InvalidInputError,
    MissingDependencyError,
    ProbeTimeoutError,
    UnsupportedPlatformError,
)
from cortex_panel.core.state import (
    CredentialStatus,
    EnvironmentDescriptor,
    PlatformVerdict,
    ProviderName,
    SessionState,
    SetupState,
    StatusSummary,
)
from cortex_panel.environment.gate import (
    Blocked,
    GateDecision,
    NeedsCliInstall,
    Ready,
    evaluate_gate,
)
from cortex_panel.environment.platform import resolve_platform
from cortex_panel.environment.probe import CliPresenceProbe
from cortex_panel.llm import ProviderRegistry, get_provider
from cortex_panel.session.messages import (
    CheckEnvironment,
    ClearApiKey,
    CommandSent,
    ConfirmCliInstalled,
    ConfirmSetup,
    DispatchFailed,
    GatePrompt,
    Ignored,
    InputRejected,
    InstallCli,
    Outcome,
    PanelMessage,
    RecheckCli,
    ResetSetup,
    SelectProvider,
    SetApiKey,
    Submit,
    SubmissionBlocked,
)

logger = logging.getLogger(__name__)

PIP_MISSING = "pip is not installed. Please install Python and pip first, then try again."
_TERMINAL_FAILURE = "Could not send the command to the terminal"
_STATE_FAILURE = "Could not read or save Cortex state"


class SessionCoordinator:
    """Orchestrates gate checks and command dispatch for one session.

    Args:
        environment: Returns a fresh environment snapshot on every call.
        probe: CLI presence probe.
        secrets: API key storage.
        flags: Persisted onboarding flags.
        settings: Persisted settings (provider selection).
        terminal: Destination for validated commands.
        install_command: Shell line that installs the CLI.
        default_provider: Provider used until the user picks one.
        state: Session context; a new one is created when omitted.
    """

    def __init__(
        self,
        *,
        environment: Callable[[], EnvironmentDescriptor],
        probe: CliPresenceProbe,
        secrets: SecretStore,
        flags: FlagStore,
        settings: SettingsStore,
        terminal: TerminalSink,
        install_command: str,
        default_provider: str = "anthropic",
        state: Optional[SessionState] = None,
    ):
        self._environment = environment
        self._probe = probe
        self._secrets = secrets
        self._flags = flags
        self._settings = settings
        self._terminal = terminal
        self._install_command = install_command
        self._default_provider = self._known_provider(default_provider, "anthropic")
        self.state = state or SessionState(session_id=uuid.uuid4().hex)
        self._lock = threading.RLock()

    @staticmethod
    def _known_provider(name: str, fallback: str) -> str:
        if name in ProviderRegistry.names():
            return name
        logger.warning("Unknown provider %r; using %s", name, fallback)
        return fallback

    def _verdict(self) -> tuple[EnvironmentDescriptor, PlatformVerdict]:
        descriptor = self._environment()
        return descriptor, resolve_platform(descriptor)

    def credentials(self) -> CredentialStatus:
        """Current provider selection and key presence."""
        provider = self._known_provider(
            self._settings.get_setting(PROVIDER_SETTING_KEY, self._default_provider),
            self._default_provider,
        )
        return CredentialStatus(
            has_anthropic_key=bool(self._secrets.get(ANTHROPIC_KEY)),
            has_openai_key=bool(self._secrets.get(OPENAI_KEY)),
            selected_provider=provider,  # type: ignore[arg-type]
        )

    def setup_state(self) -> SetupState:
        """Current persisted onboarding flags."""
        return SetupState(
            cli_confirmed_installed=self._flags.get(USER_CONFIRMED_INSTALL_KEY, False),
            install_prompt_shown=self._flags.get(INSTALL_PROMPTED_KEY, False),
            setup_complete=self._flags.get(SETUP_COMPLETE_KEY, False),
        )

    def _cli_known(self, descriptor: EnvironmentDescriptor, setup: SetupState) -> bool:
        """Whether the CLI is confirmed for this session, probing at most until it is."""
        if self.state.cli_installed:
            return True
        if setup.cli_confirmed_installed:
            self.state.cli_installed = True
            return True
        return self._probe_cli(descriptor)

    def _probe_cli(self, descriptor: EnvironmentDescriptor) -> bool:
        try:
            found = self._probe.probe(descriptor)
        except ProbeTimeoutError as exc:
            logger.warning("Treating timed-out CLI probe as not installed: %s", exc)
            found = False
        if found:
            self.state.cli_installed = True
            self._flags.set(CLI_INSTALLED_KEY, True)
        return found

    def check_environment(self) -> GateDecision:
        """Evaluate the onboarding gate for the current environment.

        The first time the CLI is found missing, ``installPrompted`` is
        recorded and the session is flagged so the next prompt carries the
        one-time install welcome.
        """
        with self._lock:
            descriptor, verdict = self._verdict()
            setup = self.setup_state()
            cli_known = verdict.supported and self._cli_known(descriptor, setup)
            decision = evaluate_gate(verdict, cli_known, self.credentials(), setup)
            if isinstance(decision, NeedsCliInstall) and not setup.install_prompt_shown:
                self._flags.set(INSTALL_PROMPTED_KEY, True)
                self.state.welcome_pending = True
        logger.info(
            "Gate decision for session %s: %s", self.state.session_id, decision.kind
        )
        return decision

    def handle_submission(self, raw_input: str) -> Outcome:
        """Turn one user submission into a command, or explain why not.

        Returns:
            Outcome: ``CommandSent`` when the command reached the terminal,
            ``SubmissionBlocked`` on an unsupported platform, ``GatePrompt``
            when onboarding is incomplete, ``InputRejected`` when the input
            failed validation, ``DispatchFailed`` when the terminal or state
            file could not be used, or ``Ignored`` for blank input.
        """
        text = raw_input.strip()
        if not text:
            return Ignored()

        with self._lock:
            try:
                decision = self.check_environment()
            except OSError as exc:
                return self._failed(_STATE_FAILURE, exc)
            if not isinstance(decision, Ready):
                return self._prompt(decision)

            try:
                command = build_command(text)
            except InvalidInputError as exc:
                logger.info("Rejected submission: %s", exc.reason)
                return InputRejected(reason=exc.reason)

            try:
                self._terminal.send(command)
            except OSError as exc:
                return self._failed(_TERMINAL_FAILURE, exc)
        return CommandSent(command=command)

    def confirm_setup(self) -> GateDecision:
        """Record that the user acknowledged onboarding."""
        with self._lock:
            self._flags.set(SETUP_COMPLETE_KEY, True)
            return self.check_environment()

    def reset_setup(self) -> GateDecision:
        """Clear the onboarding acknowledgment and re-check."""
        with self._lock:
            self._flags.set(SETUP_COMPLETE_KEY, False)
            return self.check_environment()

    def confirm_cli_installed(self) -> GateDecision:
        """Trust the user's statement that the CLI is installed.

        The confirmation is persisted and is not re-verified for the rest of
        the process lifetime.
        """
        with self._lock:
            self._flags.set(USER_CONFIRMED_INSTALL_KEY, True)
            self._flags.set(CLI_INSTALLED_KEY, True)
            self.state.cli_installed = True
            return self.check_environment()

    def select_provider(self, provider: ProviderName) -> GateDecision:
        """Persist the provider choice.

        Providers that need no key (Ollama) also complete onboarding.

        Raises:
            InvalidInputError: If the provider is unknown.
        """
        chosen = self._provider(provider)
        with self._lock:
            self._settings.set_setting(PROVIDER_SETTING_KEY, chosen.name)
            if not chosen.requires_key:
                self._flags.set(SETUP_COMPLETE_KEY, True)
            return self.check_environment()

    def set_api_key(self, provider: ProviderName, api_key: str) -> GateDecision:
        """Store an API key and select its provider.

        Raises:
            InvalidInputError: If the provider takes no key or the key is blank.
        """
        chosen = self._provider(provider)
        key = chosen.normalize_key(api_key)
        with self._lock:
            self._settings.set_setting(PROVIDER_SETTING_KEY, chosen.name)
            self._secrets.set(chosen.secret_key, key)  # type: ignore[arg-type]
            logger.info("%s API key saved", chosen.label)
            return self.check_environment()

    def clear_api_key(self, provider: Optional[ProviderName] = None) -> GateDecision:
        """Delete one provider's API key, or every stored key when ``provider`` is None."""
        if provider is None:
            keys = [ANTHROPIC_KEY, OPENAI_KEY]
        else:
            chosen = self._provider(provider)
            keys = [chosen.secret_key] if chosen.secret_key else []
        with self._lock:
            for key in keys:
                self._secrets.delete(key)
            logger.info("Cleared %d API key(s)", len(keys))
            return self.check_environment()

    def request_cli_install(self) -> Command:
        """Send the CLI install line to the terminal.

        Raises:
            UnsupportedPlatformError: If the platform cannot run the CLI.
            MissingDependencyError: If neither ``pip3`` nor ``pip`` is available.
            OSError: If the terminal cannot be started or written to.
        """
        with self._lock:
            descriptor, verdict = self._verdict()
            if not verdict.supported:
                raise UnsupportedPlatformError(
                    verdict.reason_message, verdict.platform_tag
                )
            if not self._probe.pip_available(descriptor):
                raise MissingDependencyError(PIP_MISSING, "pip")
            command = Command(text=self._install_command)
            self._terminal.send(command)
        logger.info("CLI installation started in terminal")
        return command

    def recheck_cli(self) -> bool:
        """Drop the session's cached CLI presence and probe again.

        Used once an install started in the terminal has had time to finish.
        Returns False without probing on an unsupported platform.
        """
        with self._lock:
            descriptor, verdict = self._verdict()
            self.state.cli_installed = False
            if not verdict.supported:
                return False
            found = self._probe_cli(descriptor)
        logger.info("CLI re-check: %s", "installed" if found else "not yet installed")
        return found

    def status(self) -> StatusSummary:
        """Summarize platform, provider and credential state."""
        with self._lock:
            descriptor, verdict = self._verdict()
            credentials = self.credentials()
            cli_installed = verdict.supported and self._cli_known(
                descriptor, self.setup_state()
            )

        provider = credentials.selected_provider
        parts = [
            f"Platform: {verdict.platform_tag}",
            f"Supported: {'Yes' if verdict.supported else 'No'}",
            f"Provider: {provider}",
        ]
        if provider == "ollama":
            parts.append("Status: Using local Ollama")
        else:
            label = get_provider(provider).label
            parts.append(
                f"{label} Key: "
                f"{'Configured' if credentials.has_valid_config else 'Not set'}"
            )
        return StatusSummary(
            platform_tag=verdict.platform_tag,
            supported=verdict.supported,
            provider=provider,
            credential_configured=credentials.has_valid_config,
            cli_installed=cli_installed,
            message=" | ".join(parts),
        )

    def dispatch(self, message: PanelMessage) -> Outcome:
        """Route one validated panel message to the matching operation."""
        if isinstance(message, Submit):
            return self.handle_submission(message.text)

        try:
            if isinstance(message, CheckEnvironment):
                return self._prompt(self.check_environment())
            if isinstance(message, ConfirmSetup):
                return self._prompt(self.confirm_setup())
            if isinstance(message, ResetSetup):
                return self._prompt(self.reset_setup())
            if isinstance(message, ConfirmCliInstalled):
                return self._prompt(
                    self.confirm_cli_installed(), "Great! Cortex is ready to use."
                )
            if isinstance(message, SelectProvider):
                chosen = self._provider(message.provider)
                notice = (
                    f"Enter your {chosen.label} API key."
                    if chosen.requires_key
                    else "Ollama selected. Make sure Ollama is running locally."
                )
                return self._prompt(self.select_provider(message.provider), notice)
            if isinstance(message, SetApiKey):
                decision = self.set_api_key(message.provider, message.api_key)
                label = self._provider(message.provider).label
                return self._prompt(decision, f"{label} API key saved securely.")
            if isinstance(message, ClearApiKey):
                notice = "API key cleared." if message.provider else "All API keys cleared."
                return self._prompt(self.clear_api_key(message.provider), notice)
            if isinstance(message, InstallCli):
                return CommandSent(command=self.request_cli_install())
            if isinstance(message, RecheckCli):
                notice = (
                    "Cortex CLI is installed and ready!"
                    if self.recheck_cli()
                    else "Cortex CLI installation may still be in progress. "
                    "Please wait for the terminal to complete."
                )
                return self._prompt(self.check_environment(), notice)
        except InvalidInputError as exc:
            return InputRejected(reason=exc.reason)
        except UnsupportedPlatformError as exc:
            return SubmissionBlocked(reason=exc.reason)
        except MissingDependencyError as exc:
            return DispatchFailed(reason=exc.reason)
        except OSError as exc:
            failure = _TERMINAL_FAILURE if isinstance(message, InstallCli) else _STATE_FAILURE
            return self._failed(failure, exc)

        raise TypeError(f"Unhandled panel message: {message!r}")

    @staticmethod
    def _provider(name: str):
        try:
            return get_provider(name)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown provider: {name}") from exc

    def _prompt(self, decision: GateDecision, notice: str = "") -> Outcome:
        if isinstance(decision, Blocked):
            return SubmissionBlocked(reason=decision.reason)
        first_run = self.state.welcome_pending
        self.state.welcome_pending = False
        return GatePrompt(decision=decision, notice=notice, first_run=first_run)

    @staticmethod
    def _failed(action: str, exc: OSError) -> Outcome:
        logger.exception("%s", action)
        return DispatchFailed(reason=f"{action}: {exc}")
