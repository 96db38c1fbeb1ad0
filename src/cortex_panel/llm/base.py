from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from cortex_panel.core.errors import InvalidInputError
from cortex_panel.core.state import ProviderName


class BaseProvider(ABC):
    """Abstract description of an LLM provider the ``cortex`` CLI can use.

    Each provider declares its display label and, when it needs one, the
    secret-store key its API key lives under.
    """

    name: ProviderName
    label: str
    description: str = ""

    @property
    @abstractmethod
    def secret_key(self) -> Optional[str]:
        """Secret-store identifier for the API key, or None if no key is needed."""

    @property
    def key_prefix(self) -> Optional[str]:
        """Expected API key prefix, used as an input hint."""
        return None

    @property
    def requires_key(self) -> bool:
        return self.secret_key is not None

    def normalize_key(self, api_key: str) -> str:
        """Return the trimmed key.

        Raises:
            InvalidInputError: If the provider takes no key or the key is empty.
        """
        if not self.requires_key:
            raise InvalidInputError(f"{self.label} does not use an API key.")
        trimmed = api_key.strip()
        if not trimmed:
            raise InvalidInputError("API key cannot be empty")
        return trimmed


class ProviderRegistry:
    """Central registry of supported providers.

    Provides a single entry point to look a provider up by name.
    """

    _providers: Dict[str, Type[BaseProvider]] = {}

    @classmethod
    def register_provider(cls, name: str, provider_cls: Type[BaseProvider]) -> None:
        """Register a provider implementation.

        Args:
            name: Provider name (e.g., "anthropic", "ollama").
            provider_cls: The provider class implementing BaseProvider.
        """
        cls._providers[name.lower()] = provider_cls
        logging.debug(f"Registered LLM provider: {name}")

    @classmethod
    def get_provider(cls, name: str) -> BaseProvider:
        """Return an instantiated provider.

        Args:
            name: Provider name (e.g., "anthropic", "openai").

        Raises:
            ValueError: If the provider is not registered.
        """
        provider_cls = cls._providers.get(name.lower())
        if not provider_cls:
            raise ValueError(f"Provider not registered: {name}")
        return provider_cls()

    @classmethod
    def names(cls) -> List[str]:
        """Names of all registered providers, in registration order."""
        return list(cls._providers)


def get_provider(name: str) -> BaseProvider:
    """Shortcut to look up a provider.

    Args:
        name: Provider name.

    Returns:
        The provider description.
    """
    return ProviderRegistry.get_provider(name)
