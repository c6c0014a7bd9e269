"""Provider client implementations.

Importing this package registers every provider with
:data:`lookalike.core.provider_clients.provider_registry`.
"""

from .openai_responses import OpenAIResponsesProvider
from .pollinations import PollinationsProvider

__all__ = [
    "OpenAIResponsesProvider",
    "PollinationsProvider",
]
