"""Prompt templates for the lookalike animal-costume portrait.

Every provider shares the same creative brief: a stylised portrait of the
person in the uploaded photo wearing an animal hoodie costume, with the outfit
vibe taken from a fixed reference image.  The wording is fixed per language
(English or Korean); the only caller-controlled parts are the animal type, the
facial trait description and the reroll flag.

Templates
---------
build_prompt
    Single-string prompt for text-to-image endpoints (Pollinations).
build_analysis_text
    Locally synthesised analysis note for providers that return no text.
SYSTEM_INSTRUCTION / build_task_instruction
    System and user-turn text for multimodal providers (OpenAI Responses).

Nothing in this module is random.  Variation between rerolls comes from the
generation seed or from the provider itself, never from the prompt text.

Usage
-----
::

    prompt = build_prompt(
        lang="en",
        animal_type="fox",
        traits_text="sharp eyes, warm smile",
        reroll=False,
    )
"""

from __future__ import annotations

OUTFIT_REFERENCE_URL = (
    "https://d29hudvzbgrxww.cloudfront.net/public/product/2023011516445-a757c3d3-be926ff4c87a.jpg"
)

# ---------------------------------------------------------------------------
# Language defaults for the optional request fields.
# ---------------------------------------------------------------------------

DEFAULT_ANIMAL_TYPE = {
    "en": "cat",
    "ko": "고양이",
}

DEFAULT_TRAITS_TEXT = {
    "en": "balanced expression, clear eyes, natural skin tone, medium contrast, calm mood",
    "ko": "균형 잡힌 표정, 또렷한 눈매, 자연스러운 피부톤, 중간 대비, 차분한 분위기",
}

# ---------------------------------------------------------------------------
# Reroll clauses.
# ---------------------------------------------------------------------------

_VARIATION_CLAUSE = {
    "en": "Create a clearly different variation from previous output while keeping identity cues.",
    "ko": "이전 결과와 확실히 다른 변형으로 생성하되 인물 정체성 힌트는 유지.",
}


def _is_english(lang: str) -> bool:
    return lang == "en"


def build_prompt(lang: str, animal_type: str, traits_text: str, reroll: bool = False) -> str:
    """Compile the text-to-image prompt for one generation.

    Args:
        lang: ``"en"`` for the English template; anything else selects Korean.
        animal_type: Animal the hoodie costume is modelled on.
        traits_text: Comma-separated facial traits to carry into the portrait.
        reroll: When ``True``, append the clause asking for a different
            variation than the previous output.

    Returns:
        The prompt as a single line of text.
    """
    key = "en" if _is_english(lang) else "ko"
    variation = _VARIATION_CLAUSE[key] if reroll else ""

    if key == "en":
        prompt = (
            f"Ultra-detailed anime portrait of a real person wearing {animal_type} animal hoodie costume, "
            "cinematic lighting, realistic eyes and skin texture, high detail face rendering, natural asymmetry, "
            "expression fidelity, premium illustration quality, no text, no watermark. "
            f"Use this outfit vibe reference: {OUTFIT_REFERENCE_URL}. "
            f"Face traits: {traits_text}. {variation}"
        )
    else:
        prompt = (
            f"{animal_type} 동물 후드 의상을 입은 실사형 애니 초상화, 시네마틱 조명, "
            "눈빛/피부 질감의 사실적 표현, 얼굴 디테일 고해상도, 자연스러운 좌우 비대칭, "
            "표정 재현도 강화, 고급 일러스트 퀄리티, 텍스트/워터마크 없음. "
            f"의상 분위기 참고: {OUTFIT_REFERENCE_URL}. "
            f"얼굴 특징: {traits_text}. {variation}"
        )

    return prompt.strip()


def build_analysis_text(lang: str, animal_type: str, traits_text: str) -> str:
    """Return the short analysis note for providers that generate no text."""
    if _is_english(lang):
        return f"Applied traits: {traits_text}. Animal style: {animal_type}."
    return f"적용된 특징: {traits_text}. 동물 스타일: {animal_type}."


# ---------------------------------------------------------------------------
# Multimodal (responses API) instructions.
# ---------------------------------------------------------------------------

SYSTEM_INSTRUCTION = (
    "You are a portrait artist who specialises in look-alike animal costume portraits. "
    "First study the face in the user's photo: face shape, eye shape and gaze, brows, nose, "
    "mouth, skin tone and overall mood. Then generate one stylised portrait of the same person "
    "wearing an animal hoodie costume. Preserve the person's identity so friends would recognise "
    "them. Use the outfit reference image only for the costume's silhouette, material and vibe; "
    "never copy logos, brand marks or text from it, and add no text or watermark to the portrait."
)

_TASK_STEPS = (
    "Follow these steps in order:\n"
    "1. Analyse the facial features of the person in the first image.\n"
    "2. Pick the animal whose impression best matches those features.\n"
    "3. Study the second image as the outfit reference for a hoodie-style animal costume.\n"
    "4. Generate a 1024x1024 ultra-detailed anime-style portrait of the same person wearing that "
    "animal hoodie costume, with cinematic lighting, realistic eyes and skin texture, and "
    "faithful expression.\n"
    "5. Keep the face recognisable; do not copy any logo or text from the reference image."
)

_ANALYSIS_REQUEST = {
    "en": (
        "Also reply with a short analysis note in English (2-3 sentences) naming the animal you "
        "chose and the facial traits that led to it."
    ),
    "ko": (
        "또한 선택한 동물과 그 이유가 된 얼굴 특징을 한국어로 2~3문장의 짧은 분석 메모로 "
        "함께 답해 주세요."
    ),
}

_CLOSING_INSTRUCTION = {
    "en": "Generate the portrait now.",
    "ko": "지금 초상화를 생성해 주세요.",
}

_REROLL_CLOSING_INSTRUCTION = {
    "en": (
        "This is a reroll: generate a clearly different variation from any previous output "
        "(pose, lighting or costume details) while keeping the identity cues."
    ),
    "ko": (
        "다시 생성 요청입니다: 이전 결과와 확실히 다른 변형(포즈, 조명, 의상 디테일)으로 "
        "생성하되 인물 정체성 힌트는 유지해 주세요."
    ),
}


def build_task_instruction(lang: str, reroll: bool = False) -> str:
    """Compile the user-turn task text for multimodal providers.

    The text always contains the five ordered steps and a localized request
    for the analysis note.  Only the closing clause depends on ``reroll``.

    Args:
        lang: ``"en"`` for English wording; anything else selects Korean.
        reroll: Selects the variation closing clause instead of the default.

    Returns:
        Task text with sections separated by blank lines.
    """
    key = "en" if _is_english(lang) else "ko"
    closing = _REROLL_CLOSING_INSTRUCTION[key] if reroll else _CLOSING_INSTRUCTION[key]
    return "\n\n".join([_TASK_STEPS, _ANALYSIS_REQUEST[key], closing])
