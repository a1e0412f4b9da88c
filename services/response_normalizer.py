"""
Response Normalizer

Turns the model's free-form reply into a TranslationResult. The model is asked
for bare JSON but may wrap it in code fences, surround it with prose, return
invalid JSON or the wrong field types. normalize_reply() never raises: each
step falls back to something weaker but still well-formed.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from services.llm_models.translation_models import TranslationResult

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```json|```", re.IGNORECASE)
# Greedy: first "{" to last "}" across the whole reply
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

UNPARSED_DESCRIPTION = "The model's reply could not be parsed; showing the raw response."


def strip_code_fences(raw_reply: str) -> str:
    """Remove ```json / ``` markers anywhere in the reply and trim whitespace."""
    return CODE_FENCE_PATTERN.sub("", raw_reply).strip()


def extract_json_candidate(text: str) -> str:
    """Return the first {...} span in text, or the whole text if there is none."""
    match = JSON_OBJECT_PATTERN.search(text)
    return match.group(0) if match else text


def first_line(text: str) -> str:
    """First line of text, or the whole text when the first line is blank."""
    line = text.split("\n", 1)[0].strip()
    return line or text


def parse_reply(raw_reply: str) -> Optional[Dict[str, Any]]:
    """
    Strict decode step.

    Returns:
        The parsed JSON object, or None if the reply holds no JSON object
    """
    candidate = extract_json_candidate(strip_code_fences(raw_reply))
    try:
        payload = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return payload if isinstance(payload, dict) else None


def coerce_idioms(value: Any, max_idioms: Optional[int] = None) -> List[str]:
    """Keep non-blank string entries as the model sent them, in model order."""
    if not isinstance(value, list):
        return []
    idioms = [entry for entry in value if isinstance(entry, str) and entry.strip()]
    if max_idioms is not None:
        idioms = idioms[:max_idioms]
    return idioms


def normalize_reply(raw_reply: Any, max_idioms: Optional[int] = None) -> TranslationResult:
    """
    Normalize a raw model reply into a TranslationResult.

    Args:
        raw_reply: Text returned by the model (None is treated as empty)
        max_idioms: Optional cap on the number of idioms kept

    Returns:
        TranslationResult; if no JSON object could be parsed, translation is
        the first line of the reply, idioms is empty and description is
        UNPARSED_DESCRIPTION
    """
    raw_text = raw_reply if isinstance(raw_reply, str) else ("" if raw_reply is None else str(raw_reply))
    cleaned = strip_code_fences(raw_text)
    fallback_translation = first_line(cleaned)

    payload = parse_reply(raw_text)
    if payload is None:
        logger.warning(f"Model reply is not a JSON object, using raw text fallback ({len(cleaned)} chars)")
        return TranslationResult(
            translation=fallback_translation,
            idioms=[],
            description=UNPARSED_DESCRIPTION,
        )

    translation = payload.get("translation")
    if not isinstance(translation, str) or not translation.strip():
        logger.info("Model reply has no usable translation field, using first line of reply")
        translation = fallback_translation
    else:
        translation = translation.strip()

    description = payload.get("description")
    description = description.strip() if isinstance(description, str) else ""

    return TranslationResult(
        translation=translation,
        idioms=coerce_idioms(payload.get("idioms"), max_idioms),
        description=description,
    )
