"""Validation of raw ``POST /api/lookalike`` bodies."""

import json
import logging

from lookalike.core.errors import InvalidBodyError, MissingImageError
from lookalike.core.models import IMAGE_DATA_URL_PREFIX, LookalikeRequest

logger = logging.getLogger(__name__)


def parse_lookalike_request(body: bytes) -> LookalikeRequest:
    """Turn a raw request body into a validated :class:`LookalikeRequest`.

    The checks run in the order a caller would fix them: the body must be
    JSON, then it must carry a usable source image.  Every other field is
    lenient and normalised by the model itself.

    Args:
        body: Raw request body as received from the client.

    Returns:
        The validated request with language defaults applied.

    Raises:
        InvalidBodyError: If the body is not valid UTF-8 JSON.
        MissingImageError: If ``imageDataUrl`` is missing, not a string, or
            not a ``data:image/`` URL.
    """
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.info(f"Rejected request body: {e}")
        raise InvalidBodyError() from e

    # A JSON array or scalar carries no imageDataUrl at all.
    if not isinstance(payload, dict):
        raise MissingImageError()

    image_data_url = payload.get("imageDataUrl")
    if not isinstance(image_data_url, str) or not image_data_url.startswith(IMAGE_DATA_URL_PREFIX):
        raise MissingImageError()

    return LookalikeRequest.model_validate(payload)
