"""
Unit tests for the translation service (orchestrator).

Tests the translation pipeline including:
- Input validation (no LLM call on missing parameters)
- Credential / provider configuration errors
- Upstream failures mapped to TranslationFailedError
- Description refinement and its graceful degradation
- Retries for transient upstream errors

Note: These tests mock the LLM provider to avoid actual API calls and costs.
"""

import sys
import os
import json
import pytest
from unittest.mock import MagicMock, patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.errors import (
    LLMProviderError,
    MissingParametersError,
    ServiceUnavailableError,
    TranslationFailedError,
)
from services.llm_models.translation_models import TranslationRequest
from services.llm_translation_service import translate_text
from services.response_normalizer import UNPARSED_DESCRIPTION


def _reply(content):
    return {
        "content": content,
        "model": "gemini-2.5-flash",
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        "raw_response": None
    }


@pytest.fixture
def mock_provider():
    """Mock LLM provider returned by get_llm_client"""
    provider = MagicMock()
    provider.get_provider_name.return_value = "gemini"
    with patch('services.llm_translation_service.get_llm_client', return_value=provider):
        yield provider


@pytest.fixture
def request_it_es():
    return TranslationRequest(text="Ciao mondo", source_lang="it", target_lang="es")


GREETING_REPLY = json.dumps({
    "translation": "Hola mundo",
    "idioms": [],
    "description": "A common greeting."
})


# ============================================================================
# VALIDATION TESTS
# ============================================================================

@pytest.mark.parametrize("fields", [
    {"text": "", "source_lang": "it", "target_lang": "es"},
    {"text": "Ciao", "source_lang": None, "target_lang": "es"},
    {"text": "Ciao", "source_lang": "it", "target_lang": ""},
    {},
])
def test_missing_parameters_make_no_llm_call(fields):
    with patch('services.llm_translation_service.get_llm_client') as mock_client:
        with pytest.raises(MissingParametersError) as exc_info:
            translate_text(TranslationRequest(**fields))

    assert exc_info.value.status_code == 400
    assert exc_info.value.to_dict() == {"error": "Missing required parameters"}
    mock_client.assert_not_called()


def test_missing_credentials_raise_service_unavailable(request_it_es):
    with patch('services.llm_translation_service.get_llm_client',
               side_effect=ValueError("GEMINI_API_KEY not found in environment variables")):
        with pytest.raises(ServiceUnavailableError) as exc_info:
            translate_text(request_it_es)

    assert exc_info.value.status_code == 500


def test_missing_env_credentials_short_circuit(request_it_es, monkeypatch):
    """No key in the environment: fails before importing or calling any SDK"""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    with pytest.raises(ServiceUnavailableError):
        translate_text(request_it_es, provider_name="gemini")


# ============================================================================
# HAPPY PATH TESTS
# ============================================================================

def test_end_to_end_with_refinement(mock_provider, request_it_es):
    mock_provider.generate.side_effect = [
        _reply(GREETING_REPLY),
        _reply("  Un saludo común.  "),
    ]

    result = translate_text(request_it_es)

    assert result.model_dump() == {
        "translation": "Hola mundo",
        "idioms": [],
        "description": "Un saludo común."
    }
    assert mock_provider.generate.call_count == 2


def test_prompt_uses_resolved_language_names(mock_provider):
    mock_provider.generate.side_effect = [_reply(GREETING_REPLY), _reply("Un saludo.")]

    translate_text(TranslationRequest(text="Ciao mondo", source_lang="IT", target_lang="ES"))

    translation_prompt = mock_provider.generate.call_args_list[0].args[0]
    refinement_prompt = mock_provider.generate.call_args_list[1].args[0]
    assert "from Italian to Spanish" in translation_prompt
    assert "Ciao mondo" in translation_prompt
    assert "Spanish (es)" in refinement_prompt
    assert "A common greeting." in refinement_prompt


def test_unknown_languages_are_echoed(mock_provider):
    mock_provider.generate.side_effect = [_reply(GREETING_REPLY), _reply("Uma saudação.")]

    translate_text(TranslationRequest(text="Ciao", source_lang="Italiano", target_lang="Portuguese"))

    translation_prompt = mock_provider.generate.call_args_list[0].args[0]
    refinement_prompt = mock_provider.generate.call_args_list[1].args[0]
    assert "from Italiano to Portuguese" in translation_prompt
    assert "Portuguese (portuguese)" in refinement_prompt


def test_default_model_for_provider(mock_provider, request_it_es):
    mock_provider.generate.side_effect = [_reply(GREETING_REPLY), _reply("Un saludo.")]

    translate_text(request_it_es)

    assert mock_provider.generate.call_args_list[0].kwargs["model"] == "gemini-2.5-flash"


def test_explicit_model_and_timeout(mock_provider, request_it_es):
    mock_provider.generate.side_effect = [_reply(GREETING_REPLY), _reply("Un saludo.")]

    translate_text(request_it_es, model="gemini-2.0-flash", timeout=5.0)

    for call in mock_provider.generate.call_args_list:
        assert call.kwargs["model"] == "gemini-2.0-flash"
        assert call.kwargs["timeout"] == 5.0


def test_empty_description_skips_refinement(mock_provider, request_it_es):
    mock_provider.generate.return_value = _reply(
        '{"translation": "Hola mundo", "idioms": ["Hola"], "description": "  "}'
    )

    result = translate_text(request_it_es)

    assert result.description == ""
    assert result.idioms == ["Hola"]
    mock_provider.generate.assert_called_once()


def test_unparseable_reply_skips_refinement(mock_provider, request_it_es):
    mock_provider.generate.return_value = _reply("Hola mundo\nIt means hello world.")

    result = translate_text(request_it_es)

    assert result.translation == "Hola mundo"
    assert result.idioms == []
    assert result.description == UNPARSED_DESCRIPTION
    mock_provider.generate.assert_called_once()


def test_idiom_cap_is_applied(mock_provider, request_it_es):
    mock_provider.generate.return_value = _reply(
        '{"translation": "Hola", "idioms": ["a", "b", "c"], "description": ""}'
    )

    result = translate_text(request_it_es, max_idioms=2)

    assert result.idioms == ["a", "b"]


# ============================================================================
# FAILURE TESTS
# ============================================================================

def test_upstream_failure_raises_translation_failed(mock_provider, request_it_es):
    mock_provider.generate.side_effect = LLMProviderError("Gemini API error 403: forbidden")

    with pytest.raises(TranslationFailedError) as exc_info:
        translate_text(request_it_es)

    # Upstream detail is not leaked to the caller
    assert exc_info.value.to_dict() == {"error": "Failed to get translation from AI model"}


def test_unexpected_upstream_exception_raises_translation_failed(mock_provider, request_it_es):
    mock_provider.generate.side_effect = ConnectionError("connection reset")

    with pytest.raises(TranslationFailedError):
        translate_text(request_it_es)


def test_empty_reply_raises_translation_failed(mock_provider, request_it_es):
    mock_provider.generate.return_value = _reply("   ")

    with pytest.raises(TranslationFailedError):
        translate_text(request_it_es)


@pytest.mark.parametrize("content", ["```json\n```", "```\n\n```", "  ```JSON```  "])
def test_fence_only_reply_raises_translation_failed(mock_provider, request_it_es, content):
    """A reply that is empty once code fences are removed is an upstream failure"""
    mock_provider.generate.return_value = _reply(content)

    with pytest.raises(TranslationFailedError):
        translate_text(request_it_es)

    mock_provider.generate.assert_called_once()


def test_refinement_failure_keeps_original_description(mock_provider, request_it_es):
    mock_provider.generate.side_effect = [
        _reply(GREETING_REPLY),
        LLMProviderError("timeout", transient=True),
    ]

    result = translate_text(request_it_es)

    assert result.translation == "Hola mundo"
    assert result.description == "A common greeting."


def test_empty_refinement_keeps_original_description(mock_provider, request_it_es):
    mock_provider.generate.side_effect = [_reply(GREETING_REPLY), _reply("")]

    result = translate_text(request_it_es)

    assert result.description == "A common greeting."


# ============================================================================
# RETRY TESTS
# ============================================================================

@patch('services.llm_provider_factory.time.sleep')
def test_transient_error_is_retried(mock_sleep, mock_provider, request_it_es):
    mock_provider.generate.side_effect = [
        LLMProviderError("503 unavailable", transient=True),
        _reply(GREETING_REPLY),
        _reply("Un saludo común."),
    ]

    result = translate_text(request_it_es, max_retries=2, retry_backoff=0.5)

    assert result.translation == "Hola mundo"
    assert mock_provider.generate.call_count == 3
    mock_sleep.assert_called_once()


@patch('services.llm_provider_factory.time.sleep')
def test_permanent_error_is_not_retried(mock_sleep, mock_provider, request_it_es):
    mock_provider.generate.side_effect = LLMProviderError("401 invalid key", transient=False)

    with pytest.raises(TranslationFailedError):
        translate_text(request_it_es, max_retries=3)

    mock_provider.generate.assert_called_once()
    mock_sleep.assert_not_called()


@patch('services.llm_provider_factory.time.sleep')
def test_retries_are_bounded(mock_sleep, mock_provider, request_it_es):
    mock_provider.generate.side_effect = LLMProviderError("timeout", transient=True)

    with pytest.raises(TranslationFailedError):
        translate_text(request_it_es, max_retries=2)

    assert mock_provider.generate.call_count == 3
    assert mock_sleep.call_count == 2
