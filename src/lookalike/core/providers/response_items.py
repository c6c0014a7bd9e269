"""Typed output items of an OpenAI Responses API reply.

A responses reply carries an ordered ``output`` array of loosely typed items.
This module parses each raw item once into one of three kinds, so the
extraction logic in :mod:`lookalike.core.providers.openai_responses` can match
on types instead of probing dictionaries:

MessageItem
    ``type == "message"``; assistant content parts (text and, for some
    models, inline image data).
ImageGenerationCallItem
    ``type == "image_generation_call"``; the image generation tool result.
OtherItem
    Anything else (reasoning, web search calls, ...).  Kept so the item list
    stays aligned with the raw reply, never scanned for data.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MESSAGE_TYPE = "message"
IMAGE_GENERATION_CALL_TYPE = "image_generation_call"
TEXT_PART_TYPES = frozenset({"text", "output_text"})


class ContentPart(BaseModel):
    """One part of a message item's ``content`` list."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    text: str | None = None
    image_base64: str | None = None
    b64_json: str | None = None

    @property
    def is_text(self) -> bool:
        return self.type in TEXT_PART_TYPES and bool(self.text)

    @property
    def image_data(self) -> str | None:
        """Inline base64 image data, preferring ``image_base64``."""
        return self.image_base64 or self.b64_json or None


class MessageItem(BaseModel):
    """Assistant message output item."""

    model_config = ConfigDict(extra="ignore")

    type: str = MESSAGE_TYPE
    content: list[ContentPart] = Field(default_factory=list)

    def text_fragments(self) -> list[str]:
        return [part.text for part in self.content if part.is_text and part.text]

    def image_data(self) -> str | None:
        for part in self.content:
            if part.image_data:
                return part.image_data
        return None


class ImageGenerationCallItem(BaseModel):
    """Image generation tool call output item."""

    model_config = ConfigDict(extra="ignore")

    type: str = IMAGE_GENERATION_CALL_TYPE
    result: str | None = None
    b64_json: str | None = None
    image_base64: str | None = None

    def image_data(self) -> str | None:
        """Base64 image payload: ``result``, then ``b64_json``, then ``image_base64``."""
        return self.result or self.b64_json or self.image_base64 or None


class OtherItem(BaseModel):
    """Output item of a kind the lookalike flow does not read."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""


OutputItem = Union[MessageItem, ImageGenerationCallItem, OtherItem]


def _parse_content_parts(content: Any) -> list[ContentPart]:
    """Parse the usable parts of a message's ``content`` list.

    Parts that are not objects or do not fit :class:`ContentPart` are dropped.
    """
    if not isinstance(content, list):
        return []

    parts: list[ContentPart] = []
    for raw in content:
        if not isinstance(raw, dict):
            continue
        try:
            parts.append(ContentPart.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed message content part: {e.error_count()} error(s)")
    return parts


def parse_output_item(raw: Any) -> OutputItem:
    """Parse one raw ``output`` entry into its typed item.

    Args:
        raw: One element of the reply's ``output`` array.

    Returns:
        The matching item model.  Non-dict entries, unknown types and image
        generation calls with malformed fields become :class:`OtherItem`.
    """
    if not isinstance(raw, dict):
        return OtherItem()

    item_type = raw.get("type")
    if item_type == IMAGE_GENERATION_CALL_TYPE:
        try:
            return ImageGenerationCallItem.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed image generation call: {e.error_count()} error(s)")
            return OtherItem(type=item_type)
    if item_type == MESSAGE_TYPE:
        return MessageItem(content=_parse_content_parts(raw.get("content")))
    return OtherItem(type=item_type if isinstance(item_type, str) else "")


def parse_output_items(payload: Any) -> list[OutputItem]:
    """Parse the ``output`` array of a reply, preserving order."""
    output = payload.get("output") if isinstance(payload, dict) else None
    if not isinstance(output, list):
        return []
    return [parse_output_item(raw) for raw in output]


def find_image_data(items: list[OutputItem]) -> str | None:
    """Return the first base64 image payload in the reply.

    Image generation tool results win over inline message images, whatever
    their position in the list.
    """
    for item in items:
        if isinstance(item, ImageGenerationCallItem):
            data = item.image_data()
            if data:
                return data

    for item in items:
        if isinstance(item, MessageItem):
            data = item.image_data()
            if data:
                return data

    return None


def collect_analysis_text(items: list[OutputItem]) -> str:
    """Join every text fragment of every message item, in order."""
    fragments: list[str] = []
    for item in items:
        if isinstance(item, MessageItem):
            fragments.extend(item.text_fragments())
    return "\n".join(fragments).strip()
