"""Best-effort rewrite of the contextual description in the target language"""

import logging

from services.llm_provider_factory import LLMProvider, generate_with_retries
from services.prompts import build_localization_prompt

logger = logging.getLogger(__name__)


def refine_description(
    provider: LLMProvider,
    description: str,
    target_language: str,
    target_code: str,
    model: str,
    timeout: float = 30.0,
    max_retries: int = 0,
    backoff: float = 1.0,
) -> str:
    """
    Ask the model to rewrite description fluently in the target language.

    Never raises: on any failure, or an empty reply, the original
    description is returned unchanged.
    """
    if not description:
        return description

    prompt = build_localization_prompt(description, target_language, target_code)
    try:
        response = generate_with_retries(
            provider,
            prompt,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
            backoff=backoff,
        )
    except Exception as e:
        logger.warning(f"Failed to localize description, keeping original: {str(e)}", exc_info=True)
        return description

    refined = (response.get("content") or "").strip()
    return refined or description
