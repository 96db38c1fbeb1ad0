"""LLM module - Describes and registers the providers the CLI can use.

This module ensures that all provider descriptions are registered
with the ProviderRegistry at import time.
"""

from . import provider  # Import to trigger provider registration
from .base import BaseProvider, ProviderRegistry, get_provider

__all__ = ["get_provider", "ProviderRegistry", "BaseProvider", "provider"]
