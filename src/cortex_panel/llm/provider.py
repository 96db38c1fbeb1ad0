from __future__ import annotations

from typing import Optional

from .base import BaseProvider, ProviderRegistry
from cortex_panel.collaborators.stores import ANTHROPIC_KEY, OPENAI_KEY


class AnthropicProvider(BaseProvider):
    """Anthropic (Claude) models. Needs an ``sk-ant-`` API key."""

    name = "anthropic"
    label = "Anthropic"
    description = "Recommended"

    @property
    def secret_key(self) -> Optional[str]:
        return ANTHROPIC_KEY

    @property
    def key_prefix(self) -> Optional[str]:
        return "sk-ant-"


class OpenAIProvider(BaseProvider):
    """OpenAI models. Needs an ``sk-`` API key."""

    name = "openai"
    label = "OpenAI"
    description = "Alternative"

    @property
    def secret_key(self) -> Optional[str]:
        return OPENAI_KEY

    @property
    def key_prefix(self) -> Optional[str]:
        return "sk-"


class OllamaProvider(BaseProvider):
    """Local models served by Ollama. No API key; Ollama must be running locally."""

    name = "ollama"
    label = "Ollama"
    description = "Free, no API key needed"

    @property
    def secret_key(self) -> Optional[str]:
        return None


def _register_providers() -> None:
    """Register every supported provider."""
    ProviderRegistry.register_provider("anthropic", AnthropicProvider)
    ProviderRegistry.register_provider("openai", OpenAIProvider)
    ProviderRegistry.register_provider("ollama", OllamaProvider)


# Register providers on module import
_register_providers()
