"""
Durable stores consumed by the session coordinator.

Three narrow interfaces are defined here: secrets (API keys), boolean flags
(onboarding progress) and string settings (provider selection). Concrete
implementations keep secrets in memory only, seeded from configuration, and
keep flags and settings in memory or in a small JSON file.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from cortex_panel.core.config import ProviderConfig

logger = logging.getLogger(__name__)

# Secret identifiers
ANTHROPIC_KEY = "cortex.anthropicApiKey"
OPENAI_KEY = "cortex.openaiApiKey"

# Flag identifiers
CLI_INSTALLED_KEY = "cortex.cliInstalled"
USER_CONFIRMED_INSTALL_KEY = "cortex.userConfirmedInstall"
INSTALL_PROMPTED_KEY = "cortex.installPrompted"
SETUP_COMPLETE_KEY = "cortex.setupComplete"

# Setting identifiers
PROVIDER_SETTING_KEY = "cortex.llmProvider"

StoredValue = Union[bool, str]


class SecretStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class FlagStore(Protocol):
    def get(self, key: str, default: bool = False) -> bool: ...

    def set(self, key: str, value: bool) -> None: ...


class SettingsStore(Protocol):
    def get_setting(self, key: str, default: str) -> str: ...

    def set_setting(self, key: str, value: str) -> None: ...


class MemorySecretStore:
    """Process-local secret store. Values never touch disk."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._secrets: Dict[str, str] = dict(initial or {})

    @classmethod
    def from_config(cls, cfg: ProviderConfig) -> "MemorySecretStore":
        """Seed the store with keys found in the environment."""
        seeded: Dict[str, str] = {}
        if cfg.anthropic_api_key and cfg.anthropic_api_key.strip():
            seeded[ANTHROPIC_KEY] = cfg.anthropic_api_key.strip()
        if cfg.openai_api_key and cfg.openai_api_key.strip():
            seeded[OPENAI_KEY] = cfg.openai_api_key.strip()
        return cls(seeded)

    def get(self, key: str) -> Optional[str]:
        return self._secrets.get(key)

    def set(self, key: str, value: str) -> None:
        self._secrets[key] = value

    def delete(self, key: str) -> None:
        self._secrets.pop(key, None)


class MemoryStateStore:
    """Flags and settings held in a plain dict."""

    def __init__(self, initial: Optional[Dict[str, StoredValue]] = None):
        self._data: Dict[str, StoredValue] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: bool = False) -> bool:
        value = self._data.get(key)
        return value if isinstance(value, bool) else default

    def set(self, key: str, value: bool) -> None:
        self._write(key, bool(value))

    def get_setting(self, key: str, default: str) -> str:
        value = self._data.get(key)
        return value if isinstance(value, str) and value else default

    def set_setting(self, key: str, value: str) -> None:
        self._write(key, value)

    def snapshot(self) -> Dict[str, StoredValue]:
        return dict(self._data)

    def _write(self, key: str, value: StoredValue) -> None:
        with self._lock:
            self._data[key] = value


class JsonStateStore(MemoryStateStore):
    """Flags and settings persisted to a JSON object on disk.

    The file is read once at construction and rewritten on every change.
    A missing or unreadable file starts the store empty.

    Args:
        path: Location of the JSON file; parent directories are created on
            first write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load(self.path))

    @staticmethod
    def _load(path: Path) -> Dict[str, StoredValue]:
        if not path.is_file():
            return {}
        try:
            with path.open("r", encoding="utf-8") as fh:
                parsed = json.load(fh)
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable state file: %s", path)
            return {}
        if not isinstance(parsed, dict):
            return {}
        return {k: v for k, v in parsed.items() if isinstance(v, (bool, str))}

    def _write(self, key: str, value: StoredValue) -> None:
        with self._lock:
            self._data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        logger.debug("Persisted %s to %s", key, self.path)
