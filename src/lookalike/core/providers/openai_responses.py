"""OpenAI Responses provider client.

This module provides the client for the OpenAI Responses API with the
``image_generation`` tool.  Unlike Pollinations, the model sees the user's
photo directly, performs the facial analysis itself and returns both the
portrait and a short analysis note.

Request Shape
-------------
- **System turn**: portrait-artist persona (analyse, then generate while
  preserving identity and never copying logos or text from the reference)
- **User turn**: five-step task text with a localized analysis-note request
  and a reroll-dependent closing clause, then the source photo, then the
  fixed outfit reference image
- **Tool**: one ``image_generation`` call at high quality, 1024x1024

Response Extraction
-------------------
The ``output`` array is parsed into typed items (see
:mod:`lookalike.core.providers.response_items`).  The image comes from an
image generation call if there is one, otherwise from inline message content;
the analysis note is every message text fragment joined in order.

Usage Example
-------------
    >>> provider = OpenAIResponsesProvider(config, http_client)
    >>> result = await provider.generate(request)
"""

import json
import logging
from typing import Any

import httpx

from lookalike.core.errors import ConfigError, NoImageError, ProviderError
from lookalike.core.models import LookalikeRequest, LookalikeResult
from lookalike.core.prompt_builder import (
    OUTFIT_REFERENCE_URL,
    SYSTEM_INSTRUCTION,
    build_task_instruction,
)
from lookalike.core.provider_clients import (
    ProviderClientBase,
    provider_registry,
    to_data_url,
    truncate_detail,
)
from lookalike.core.providers.response_items import (
    collect_analysis_text,
    find_image_data,
    parse_output_items,
)

logger = logging.getLogger(__name__)

IMAGE_SIZE = "1024x1024"
IMAGE_QUALITY = "high"
RESULT_MIME_TYPE = "image/png"


def extract_error_message(response: httpx.Response) -> str:
    """Return the structured ``error.message`` of a failed reply.

    Falls back to the raw body (truncated) when the reply is not JSON or has
    no structured message.
    """
    try:
        payload = response.json()
    except ValueError:
        return truncate_detail(response.text)

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    return truncate_detail(json.dumps(payload, ensure_ascii=False))


class OpenAIResponsesProvider(ProviderClientBase):
    """Provider client for the OpenAI Responses API image generation tool.

    Attributes
    ----------
    provider_id : str
        Always "openai"
    uses_style_hints : bool
        False: the model picks the animal and traits from the photo itself
    """

    provider_id = "openai"
    name = "OpenAI Responses"
    description = "Multimodal responses endpoint with the image_generation tool"
    uses_style_hints = False

    def build_payload(self, request: LookalikeRequest) -> dict[str, Any]:
        """Build the JSON body for one responses call.

        Args:
            request: Validated lookalike request

        Returns
        -------
        dict[str, Any]
            Responses API payload
        """
        return {
            "model": self.config.openai_model,
            "input": [
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": SYSTEM_INSTRUCTION}],
                },
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_text",
                            "text": build_task_instruction(request.lang, reroll=request.reroll),
                        },
                        {"type": "input_image", "image_url": request.image_data_url},
                        {"type": "input_image", "image_url": OUTFIT_REFERENCE_URL},
                    ],
                },
            ],
            "tools": [
                {
                    "type": "image_generation",
                    "quality": IMAGE_QUALITY,
                    "size": IMAGE_SIZE,
                }
            ],
            "tool_choice": {"type": "image_generation"},
        }

    async def generate(self, request: LookalikeRequest) -> LookalikeResult:
        """Generate a portrait with one POST to the responses endpoint.

        Args:
            request: Validated lookalike request

        Returns
        -------
        LookalikeResult
            Generated image as a PNG data URL and the model's analysis note

        Raises
        ------
        ConfigError
            If no OpenAI API key is configured (no call is made)
        ProviderError
            For a non-success status or a transport failure
        NoImageError
            If the reply contains no image payload
        """
        api_key = self.config.openai_api_key
        if not api_key:
            raise ConfigError("OpenAI API key is not configured. Set LOOKALIKE_OPENAI_API_KEY.")

        logger.info(
            f"Calling OpenAI Responses (model={self.config.openai_model}, "
            f"lang={request.lang}, reroll={request.reroll})"
        )

        try:
            response = await self.http_client.post(
                self.config.openai_responses_url,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=self.build_payload(request),
            )
        except httpx.HTTPError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ProviderError(f"OpenAI request failed: {e}") from e

        if not response.is_success:
            message = extract_error_message(response)
            logger.error(f"OpenAI returned {response.status_code}: {message}")
            raise ProviderError(
                f"OpenAI API error ({response.status_code}): {message}",
                status=response.status_code,
                detail=message,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise NoImageError("OpenAI response was not valid JSON") from e

        items = parse_output_items(payload)
        image_data = find_image_data(items)
        if not image_data:
            logger.error(f"OpenAI response had no image among {len(items)} output items")
            raise NoImageError("No image found in OpenAI response")

        return LookalikeResult(
            image_data_url=to_data_url(RESULT_MIME_TYPE, image_data),
            analysis_text=collect_analysis_text(items),
        )


# Register the provider with the global provider registry
provider_registry.register(OpenAIResponsesProvider)
