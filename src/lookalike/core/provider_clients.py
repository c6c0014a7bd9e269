"""Base classes and registry for generation provider clients.

Each image-generation provider (Pollinations, OpenAI Responses, ...) has its own
client that implements a common interface while handling the provider's
request and response shapes.

Provider Client Pattern
-----------------------
The request handler only ever sees :class:`ProviderClientBase`.  Each client
encapsulates:
- Building the provider-specific request (prompt, images, parameters)
- Exactly one outbound HTTP call per ``generate()``; there are no retries
- Mapping provider failures onto the shared error taxonomy
- Normalising the provider response into a :class:`LookalikeResult`

Which client serves requests is decided once at startup from
``LookalikeConfig.provider``.

Usage Example
-------------
Using the registry to instantiate and use a provider client:

    >>> import httpx
    >>> from lookalike.core.provider_clients import provider_registry
    >>> from lookalike.core.config import config
    >>>
    >>> print(provider_registry.list_available())
    ['pollinations', 'openai']
    >>>
    >>> async with httpx.AsyncClient(timeout=config.request_timeout) as http_client:
    ...     provider = provider_registry.instantiate("pollinations", config, http_client)
    ...     result = await provider.generate(request)

See Also
--------
- PollinationsProvider: Direct text-to-image endpoint
- OpenAIResponsesProvider: Multimodal responses endpoint
- LookalikeConfig: Configuration options
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .config import LookalikeConfig
from .models import LookalikeRequest, LookalikeResult

logger = logging.getLogger(__name__)

# Provider error bodies are cut to this many characters before they are
# surfaced to the caller.
ERROR_SNIPPET_LENGTH = 260


def truncate_detail(text: str, limit: int = ERROR_SNIPPET_LENGTH) -> str:
    """Cut provider error text down to ``limit`` characters."""
    return text[:limit]


def to_data_url(mime_type: str, b64_data: str) -> str:
    """Wrap base64 image data in a ``data:`` URL."""
    return f"data:{mime_type};base64,{b64_data}"


class ProviderClientBase(ABC):
    """Abstract base class for all generation provider clients.

    Attributes
    ----------
    provider_id : str
        Registry key, matching the ``provider`` configuration value
    name : str
        Human-readable provider name
    description : str
        Brief description of how the provider is called
    uses_style_hints : bool
        Whether ``animal_type`` and ``traits_text`` shape the generation
    config : LookalikeConfig
        Shared, immutable configuration
    http_client : httpx.AsyncClient
        Pooled client used for the single outbound call

    Notes
    -----
    - Clients hold no per-request state, so one instance serves all requests
    - The HTTP client is owned by the caller, which is responsible for
      closing it
    """

    provider_id: str = "base"
    name: str = "Base Provider"
    description: str = "Base class for provider clients"
    uses_style_hints: bool = False

    def __init__(self, config: LookalikeConfig, http_client: httpx.AsyncClient) -> None:
        """Initialize the provider client.

        Args:
            config: Configuration object containing provider settings
            http_client: Async HTTP client used for outbound calls
        """
        self.config = config
        self.http_client = http_client

        logger.info(f"Initialized {self.name} provider")

    @abstractmethod
    async def generate(self, request: LookalikeRequest) -> LookalikeResult:
        """Generate a lookalike portrait for one validated request.

        Implementations issue exactly one outbound HTTP call.

        Returns
        -------
        LookalikeResult
            Generated image as a data URL plus the analysis note

        Raises
        ------
        ConfigError
            If a required credential is not configured
        AuthError
            If the provider rejects the credential
        ProviderError
            If the provider call fails for any other reason
        NoImageError
            If a successful response carries no image
        """

    def get_provider_info(self) -> dict[str, Any]:
        """Get information about this provider client.

        Returns
        -------
        dict[str, Any]
            Provider metadata, without credentials
        """
        return {
            "id": self.provider_id,
            "name": self.name,
            "description": self.description,
            "uses_style_hints": self.uses_style_hints,
        }


class ProviderRegistry:
    """Registry for managing available provider clients.

    Usage
    -----
    Registering a new provider:

        >>> provider_registry.register(MyProvider)

    Instantiating a provider:

        >>> provider = provider_registry.instantiate("openai", config, http_client)

    Notes
    -----
    - Providers must be registered before they can be instantiated
    - Registry is global and shared across the application
    """

    def __init__(self) -> None:
        """Initialize the provider registry."""
        self._providers: dict[str, type[ProviderClientBase]] = {}

    def register(self, provider_class: type[ProviderClientBase]) -> None:
        """Register a provider client class.

        Args:
            provider_class: Provider client class to register
        """
        provider_id = provider_class.provider_id

        if provider_id in self._providers:
            logger.warning(f"Provider '{provider_id}' is already registered, overwriting")

        self._providers[provider_id] = provider_class
        logger.debug(f"Registered provider: {provider_id}")

    def instantiate(
        self,
        provider_id: str,
        config: LookalikeConfig,
        http_client: httpx.AsyncClient,
    ) -> ProviderClientBase:
        """Create an instance of a registered provider client.

        Args:
            provider_id: Registry key of the provider
            config: Configuration object
            http_client: Async HTTP client for outbound calls

        Returns
        -------
        ProviderClientBase
            New instance of the specified provider

        Raises
        ------
        KeyError
            If provider_id is not registered
        """
        if provider_id not in self._providers:
            available = ", ".join(self.list_available())
            raise KeyError(f"Provider '{provider_id}' not found. Available providers: {available}")

        instance = self._providers[provider_id](config, http_client)
        logger.info(f"Instantiated provider: {provider_id}")
        return instance

    def get_provider_class(self, provider_id: str) -> type[ProviderClientBase] | None:
        """Get the provider class for a given registry key."""
        return self._providers.get(provider_id)

    def list_available(self) -> list[str]:
        """List all registered provider keys."""
        return list(self._providers.keys())


# Global provider registry instance
provider_registry = ProviderRegistry()
