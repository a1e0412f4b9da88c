"""
LLM Translation Service
Translates text between a language pair using an LLM provider (Gemini, OpenAI, Mistral)
and returns the translation with idioms and a short contextual description
"""

import logging
from typing import Optional

from dotenv import load_dotenv

from services.description_refiner import refine_description
from services.errors import (
    MissingParametersError,
    ServiceUnavailableError,
    TranslationFailedError,
)
from services.language_utils import get_language_code, get_language_name
from services.llm_models.translation_models import TranslationRequest, TranslationResult
from services.llm_provider_factory import (
    LLMProviderFactory,
    generate_with_retries,
    get_llm_client,
)
from services.prompts import build_translation_prompt
from services.response_normalizer import UNPARSED_DESCRIPTION, normalize_reply, strip_code_fences

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Primary translation call; low temperature keeps the JSON shape stable
TRANSLATION_TEMPERATURE = 0.2


def translate_text(
    request: TranslationRequest,
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    timeout: float = 30.0,
    max_retries: int = 0,
    retry_backoff: float = 1.0,
    max_idioms: Optional[int] = None,
) -> TranslationResult:
    """
    Translate request.text from request.source_lang to request.target_lang.

    Args:
        request: The translation request
        provider_name: LLM provider to use (default: LLM_PROVIDER env var)
        model: Model name (default: the provider's default model)
        timeout: Per-call timeout in seconds
        max_retries: Extra attempts for transient upstream errors
        retry_backoff: Base backoff between retries in seconds
        max_idioms: Optional cap on returned idioms

    Returns:
        TranslationResult with translation, idioms and description

    Raises:
        MissingParametersError: text, source or target language missing
        ServiceUnavailableError: provider not configured (e.g. no API key)
        TranslationFailedError: the primary model call failed
    """
    if not request.is_complete():
        raise MissingParametersError()

    # Credential check happens before any network call
    try:
        provider = get_llm_client(provider_name)
    except ValueError as e:
        logger.error(f"Failed to initialize LLM provider: {str(e)}")
        raise ServiceUnavailableError() from e

    model = model or LLMProviderFactory.get_default_model(provider.get_provider_name())

    source_name = get_language_name(request.source_lang)
    target_name = get_language_name(request.target_lang)
    target_code = get_language_code(request.target_lang)
    text = request.text if isinstance(request.text, str) else str(request.text)

    prompt = build_translation_prompt(source_name, target_name, text)

    try:
        logger.info(f"Translating {len(text)} chars from {source_name} to {target_name} with {model}")
        response = generate_with_retries(
            provider,
            prompt,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
            backoff=retry_backoff,
            temperature=TRANSLATION_TEMPERATURE,
        )
    except Exception as e:
        logger.error(
            f"Translation call failed ({provider.get_provider_name()}/{model}): {str(e)}",
            exc_info=True,
        )
        raise TranslationFailedError() from e

    raw_reply = response.get("content") or ""
    if not strip_code_fences(raw_reply):
        logger.error(f"Model {model} returned an empty reply")
        raise TranslationFailedError()

    usage = response.get("usage") or {}
    logger.info(f"Translation successful. Tokens: {usage.get('total_tokens', 0)}")

    result = normalize_reply(raw_reply, max_idioms=max_idioms)

    # The raw-text fallback notice is not a real description; leave it as is
    if result.description and result.description != UNPARSED_DESCRIPTION:
        refined = refine_description(
            provider,
            result.description,
            target_name,
            target_code,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
            backoff=retry_backoff,
        )
        result = result.model_copy(update={"description": refined})

    return result
