"""Pydantic models for lookalike requests and results.

These models use the camelCase field names of the JSON API as aliases, so a
model can be validated straight from a request body and dumped straight into
a response with ``model_dump(by_alias=True)``.

Models
------
LookalikeRequest
    Validated payload of ``POST /api/lookalike``.  Construction normalises the
    loose JSON input: unknown languages fall back to Korean, ``reroll`` is
    coerced by truthiness and blank style hints take language defaults.
LookalikeResult
    Normalised provider output returned to the caller.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lookalike.core.prompt_builder import DEFAULT_ANIMAL_TYPE, DEFAULT_TRAITS_TEXT

IMAGE_DATA_URL_PREFIX = "data:image/"


def _clean_text(value: Any) -> str:
    """Return the stripped string, or an empty string for non-strings."""
    return value.strip() if isinstance(value, str) else ""


class LookalikeRequest(BaseModel):
    """Request body for the ``POST /api/lookalike`` endpoint.

    Attributes:
        image_data_url: Source photo as a ``data:image/...`` URL.
        lang: ``"en"`` or ``"ko"``.  Any other input value becomes ``"ko"``.
        reroll: Ask for a fresh variation instead of the first result.
        animal_type: Animal the costume is modelled on.  Language default when
            absent or blank.
        traits_text: Facial trait description.  Language default when absent
            or blank.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    image_data_url: str = Field(
        ...,
        alias="imageDataUrl",
        description="Source photo as a data:image/... URL.",
    )
    lang: Literal["en", "ko"] = Field(
        default="ko",
        description="Output language: 'en' or 'ko' (anything else means 'ko').",
    )
    reroll: bool = Field(
        default=False,
        description="True to request a variation of a previous generation.",
    )
    animal_type: str = Field(
        default="",
        alias="animalType",
        description="Animal for the hoodie costume (language default when blank).",
    )
    traits_text: str = Field(
        default="",
        alias="traitsText",
        description="Facial traits to emphasise (language default when blank).",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalise_loose_input(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        lang = "en" if data.get("lang") == "en" else "ko"
        data["lang"] = lang
        data["reroll"] = bool(data.get("reroll"))

        for alias, name, defaults in (
            ("animalType", "animal_type", DEFAULT_ANIMAL_TYPE),
            ("traitsText", "traits_text", DEFAULT_TRAITS_TEXT),
        ):
            raw = data.pop(alias, data.pop(name, None))
            data[alias] = _clean_text(raw) or defaults[lang]

        return data


class LookalikeResult(BaseModel):
    """Normalised generation result returned by every provider.

    Attributes:
        image_data_url: Generated portrait as ``data:<mime>;base64,<data>``.
        analysis_text: Short note describing the applied analysis.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    image_data_url: str = Field(
        ...,
        alias="imageDataUrl",
        description="Generated portrait as a base64 data URL.",
    )
    analysis_text: str = Field(
        default="",
        alias="analysisText",
        description="Short analysis note accompanying the portrait.",
    )
