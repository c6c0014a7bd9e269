"""Core functionality for lookalike portrait generation.

- **LookalikeConfig / config**: Settings loaded from LOOKALIKE_* environment variables
- **LookalikeRequest / LookalikeResult**: Request and result models
- **ProviderClientBase / provider_registry**: Provider interface and registry
- **errors**: Error taxonomy shared by every provider

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - Frozen after construction, shared read-only by all requests

2. **Prompt Layer** (prompt_builder.py):
   - Fixed English and Korean templates, no randomness

3. **Provider Layer** (provider_clients.py, providers/):
   - One client per external generation service
   - Registry pattern for selecting the client at startup
"""

from lookalike.core.config import LookalikeConfig, config
from lookalike.core.models import LookalikeRequest, LookalikeResult
from lookalike.core.provider_clients import ProviderClientBase, provider_registry

# Import providers to ensure they're registered
# This must happen after provider_registry is imported
from lookalike.core.providers import OpenAIResponsesProvider, PollinationsProvider  # noqa: F401

__all__ = [
    "LookalikeConfig",
    "LookalikeRequest",
    "LookalikeResult",
    "ProviderClientBase",
    "config",
    "provider_registry",
]
