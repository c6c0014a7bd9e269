"""Pollinations provider client.

This module provides the client for the Pollinations direct image endpoint, a
text-to-image API that takes the whole prompt in the URL path and streams the
image bytes back.

Pollinations Specifics
----------------------
- **Request**: ``GET {base}/image/{url-encoded prompt}?{query}``
- **Size**: always 1024x1024
- **Seed**: fixed for the first generation so identical inputs reproduce the
  same portrait; random when the caller asks for a reroll
- **Flags**: ``nologo``, ``safe`` and ``enhance`` are always on
- **Credential**: optional; sent both as ``key`` and as a bearer header
- **Analysis text**: Pollinations returns only an image, so the note is
  synthesised locally from the requested traits and animal type

Usage Example
-------------
    >>> provider = PollinationsProvider(config, http_client)
    >>> result = await provider.generate(request)
    >>> result.image_data_url[:22]
    'data:image/jpeg;base64'
"""

import base64
import logging
import random
from urllib.parse import quote

import httpx

from lookalike.core.errors import AuthError, ProviderError
from lookalike.core.models import LookalikeRequest, LookalikeResult
from lookalike.core.prompt_builder import build_analysis_text, build_prompt
from lookalike.core.provider_clients import (
    ProviderClientBase,
    provider_registry,
    to_data_url,
    truncate_detail,
)

logger = logging.getLogger(__name__)

DEFAULT_SEED = 424242
MAX_REROLL_SEED = 999_999
IMAGE_SIZE = 1024
DEFAULT_CONTENT_TYPE = "image/jpeg"

# Characters encodeURIComponent leaves untouched.
_PATH_SAFE_CHARS = "-_.!~*'()"


class PollinationsProvider(ProviderClientBase):
    """Provider client for the Pollinations text-to-image endpoint.

    Attributes
    ----------
    provider_id : str
        Always "pollinations"
    uses_style_hints : bool
        True: animal type and traits are written into the prompt
    """

    provider_id = "pollinations"
    name = "Pollinations"
    description = "Direct text-to-image endpoint with the prompt in the URL"
    uses_style_hints = True

    def build_url(self, prompt: str) -> str:
        """Return the endpoint URL with the prompt percent-encoded into the path."""
        base = self.config.pollinations_base_url.rstrip("/")
        return f"{base}/image/{quote(prompt, safe=_PATH_SAFE_CHARS)}"

    def build_params(self, reroll: bool) -> dict[str, str]:
        """Return the query parameters for one generation.

        Args:
            reroll: Use a fresh random seed instead of the fixed default.

        Returns
        -------
        dict[str, str]
            Query parameters in the order Pollinations documents them
        """
        seed = random.randint(0, MAX_REROLL_SEED) if reroll else DEFAULT_SEED
        params = {
            "model": self.config.pollinations_model,
            "width": str(IMAGE_SIZE),
            "height": str(IMAGE_SIZE),
            "seed": str(seed),
            "nologo": "true",
            "safe": "true",
            "enhance": "true",
        }
        if self.config.pollinations_api_key:
            params["key"] = self.config.pollinations_api_key
        return params

    def build_headers(self) -> dict[str, str]:
        if self.config.pollinations_api_key:
            return {"Authorization": f"Bearer {self.config.pollinations_api_key}"}
        return {}

    async def generate(self, request: LookalikeRequest) -> LookalikeResult:
        """Generate a portrait with one GET to the image endpoint.

        Args:
            request: Validated lookalike request

        Returns
        -------
        LookalikeResult
            Image bytes as a data URL (provider content type, JPEG if absent)
            and the locally synthesised analysis note

        Raises
        ------
        AuthError
            If Pollinations answers 401 (missing or invalid key)
        ProviderError
            For any other non-success status or a transport failure
        """
        prompt = build_prompt(
            request.lang,
            request.animal_type,
            request.traits_text,
            reroll=request.reroll,
        )
        params = self.build_params(request.reroll)

        logger.info(
            f"Calling Pollinations (model={self.config.pollinations_model}, "
            f"lang={request.lang}, reroll={request.reroll}, seed={params['seed']})"
        )

        try:
            response = await self.http_client.get(
                self.build_url(prompt),
                params=params,
                headers=self.build_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Pollinations request failed: {e}")
            raise ProviderError(f"Pollinations request failed: {e}") from e

        if not response.is_success:
            detail = truncate_detail(response.text)
            logger.error(f"Pollinations returned {response.status_code}: {detail}")
            if response.status_code == 401:
                raise AuthError(
                    "Pollinations authentication failed. Set LOOKALIKE_POLLINATIONS_API_KEY "
                    f"and restart server. Provider response: {detail}"
                )
            raise ProviderError(
                f"Pollinations API error ({response.status_code}): {detail}",
                status=response.status_code,
                detail=detail,
            )

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        b64_data = base64.b64encode(response.content).decode("ascii")

        return LookalikeResult(
            image_data_url=to_data_url(content_type, b64_data),
            analysis_text=build_analysis_text(request.lang, request.animal_type, request.traits_text),
        )


# Register the provider with the global provider registry
provider_registry.register(PollinationsProvider)
