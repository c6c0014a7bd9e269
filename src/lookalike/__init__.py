"""Lookalike Portrait - animal-costume portraits from a face photo."""

__version__ = "0.1.0"

from lookalike.core.config import LookalikeConfig, config
from lookalike.core.provider_clients import ProviderClientBase, provider_registry

# Import providers to ensure they're registered
from lookalike.core.providers import OpenAIResponsesProvider, PollinationsProvider  # noqa: F401

__all__ = [
    "LookalikeConfig",
    "OpenAIResponsesProvider",
    "PollinationsProvider",
    "ProviderClientBase",
    "config",
    "provider_registry",
]
