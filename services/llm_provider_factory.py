"""
LLM Provider Factory
Provides a unified text-completion interface for different LLM providers (Gemini, OpenAI, Mistral)
Allows easy swapping between providers via environment configuration
"""

import os
import random
import time
import logging
from typing import Dict, List, Optional, Any
from abc import ABC, abstractmethod
from dotenv import load_dotenv

from services.errors import LLMProviderError

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# HTTP status codes worth retrying
TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}


def _is_transient_status(status_code: Optional[int]) -> bool:
    return status_code is not None and (status_code in TRANSIENT_STATUS_CODES or status_code >= 500)


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """
        Send a single prompt and return the model's text reply.

        Returns a normalized response dictionary with:
        - content: str (the response text, may be empty)
        - model: str (model used)
        - usage: dict (token usage stats)
        - raw_response: original API response object

        Raises:
            LLMProviderError: if the call fails for any reason
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Return provider name.

        Returns:
            Provider name ('gemini', 'openai', 'mistral')
        """
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation (google-genai SDK)"""

    # Primary name first; GOOGLE_API_KEY is the legacy name still accepted
    API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Gemini provider with API key"""
        self.api_key = api_key or get_api_key("gemini")
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not found in environment variables")

        from google import genai

        self.client = genai.Client(api_key=self.api_key)
        logger.info("Initialized Gemini provider")

    def generate(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Generate content using the Gemini API"""
        from google.genai import errors, types

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            # google-genai expects milliseconds
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

        try:
            response = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except errors.APIError as e:
            raise LLMProviderError(
                f"Gemini API error {e.code}: {e.message}",
                transient=_is_transient_status(e.code),
            ) from e
        except Exception as e:
            # Anything outside the API error hierarchy is a transport failure
            raise LLMProviderError(f"Gemini request failed: {e}", transient=True) from e

        usage = response.usage_metadata
        return {
            "content": response.text or "",
            "model": model,
            "usage": {
                "prompt_tokens": getattr(usage, "prompt_token_count", None) or 0,
                "completion_tokens": getattr(usage, "candidates_token_count", None) or 0,
                "total_tokens": getattr(usage, "total_token_count", None) or 0,
            },
            "raw_response": response
        }

    def get_provider_name(self) -> str:
        return "gemini"


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation"""

    API_KEY_ENV_VARS = ("OPENAI_API_KEY",)

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI provider with API key"""
        self.api_key = api_key or get_api_key("openai")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")

        from openai import OpenAI

        # Retries are handled by the translation service
        self.client = OpenAI(api_key=self.api_key, max_retries=0)
        logger.info("Initialized OpenAI provider")

    def generate(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Create chat completion using OpenAI API"""
        import openai

        api_params = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "timeout": timeout,
        }
        if max_tokens:
            api_params["max_tokens"] = max_tokens

        try:
            response = self.client.chat.completions.create(**api_params)
        except (openai.APITimeoutError, openai.APIConnectionError) as e:
            raise LLMProviderError(f"OpenAI request failed: {e}", transient=True) from e
        except openai.APIStatusError as e:
            raise LLMProviderError(
                f"OpenAI API error {e.status_code}: {e.message}",
                transient=_is_transient_status(e.status_code),
            ) from e
        except openai.OpenAIError as e:
            raise LLMProviderError(f"OpenAI error: {e}") from e

        # Normalize response
        return {
            "content": response.choices[0].message.content or "",
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    def get_provider_name(self) -> str:
        return "openai"


class MistralProvider(LLMProvider):
    """Mistral AI provider implementation"""

    API_KEY_ENV_VARS = ("MISTRAL_API_KEY",)

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Mistral provider with API key"""
        self.api_key = api_key or get_api_key("mistral")
        if not self.api_key:
            raise ValueError("MISTRAL_API_KEY not found in environment variables")

        from mistralai import Mistral

        self.client = Mistral(api_key=self.api_key)
        logger.info("Initialized Mistral provider")

    def generate(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Create chat completion using Mistral API"""

        api_params = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            # Mistral SDK expects milliseconds
            "timeout_ms": int(timeout * 1000),
        }
        if max_tokens:
            api_params["max_tokens"] = max_tokens

        try:
            # Mistral SDK uses chat.complete()
            response = self.client.chat.complete(**api_params)
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            transient = status_code is None or _is_transient_status(status_code)
            raise LLMProviderError(f"Mistral request failed: {e}", transient=transient) from e

        return {
            "content": response.choices[0].message.content or "",
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    def get_provider_name(self) -> str:
        return "mistral"


class LLMProviderFactory:
    """Factory class for creating LLM provider instances"""

    PROVIDERS = {
        "gemini": GeminiProvider,
        "openai": OpenAIProvider,
        "mistral": MistralProvider,
    }

    # Default models per provider
    DEFAULT_MODELS = {
        "gemini": "gemini-2.5-flash",
        "openai": "gpt-4o-mini",
        "mistral": "mistral-small-latest",
    }

    @staticmethod
    def _resolve_name(provider_name: Optional[str]) -> str:
        if provider_name is None:
            return os.getenv("LLM_PROVIDER", "gemini").lower()
        return provider_name.lower()

    @staticmethod
    def create_provider(provider_name: Optional[str] = None) -> LLMProvider:
        """
        Create an LLM provider instance based on configuration.

        Args:
            provider_name: Provider to use ("gemini", "openai", "mistral").
                         If None, reads from LLM_PROVIDER env var (default: "gemini")

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider is not supported or API key is missing
        """
        provider_name = LLMProviderFactory._resolve_name(provider_name)
        provider_class = LLMProviderFactory.PROVIDERS.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Unsupported LLM provider: {provider_name}. "
                f"Supported providers: {', '.join(LLMProviderFactory.supported_providers())}"
            )

        logger.info(f"Creating LLM provider: {provider_name}")
        return provider_class()

    @staticmethod
    def get_default_model(provider_name: Optional[str] = None) -> str:
        """
        Get the default model for a provider.

        Args:
            provider_name: Provider name. If None, uses LLM_PROVIDER env var

        Returns:
            Default model name
        """
        provider_name = LLMProviderFactory._resolve_name(provider_name)
        return LLMProviderFactory.DEFAULT_MODELS.get(provider_name, "gemini-2.5-flash")

    @staticmethod
    def supported_providers() -> List[str]:
        return sorted(LLMProviderFactory.PROVIDERS)


def get_api_key(provider_name: Optional[str] = None) -> Optional[str]:
    """
    Read the provider's API key from the environment.

    The first non-empty variable in the provider's API_KEY_ENV_VARS wins,
    so a primary name takes precedence over a legacy one.
    """
    provider_class = LLMProviderFactory.PROVIDERS.get(LLMProviderFactory._resolve_name(provider_name))
    if provider_class is None:
        return None
    for env_var in provider_class.API_KEY_ENV_VARS:
        value = os.getenv(env_var)
        if value:
            return value
    return None


def generate_with_retries(
    provider: LLMProvider,
    prompt: str,
    model: str,
    timeout: float = 30.0,
    max_retries: int = 0,
    backoff: float = 1.0,
    **kwargs
) -> Dict[str, Any]:
    """
    Call provider.generate(), retrying transient LLMProviderErrors.

    Makes at most 1 + max_retries attempts with linear backoff plus jitter.
    Permanent errors and the last transient error are re-raised.
    """
    attempts = 1 + max(0, max_retries)
    for attempt in range(attempts):
        if attempt > 0:
            delay = backoff * attempt + random.uniform(0, backoff)
            logger.info(f"Retrying {provider.get_provider_name()} call in {delay:.2f}s (attempt {attempt + 1}/{attempts})")
            time.sleep(delay)
        try:
            return provider.generate(prompt, model=model, timeout=timeout, **kwargs)
        except LLMProviderError as e:
            if not e.transient or attempt == attempts - 1:
                raise
            logger.warning(f"Transient LLM error: {e}")


# Convenience function for easier imports in service files
def get_llm_client(provider_name: Optional[str] = None) -> LLMProvider:
    """
    Get an LLM provider client instance.

    Args:
        provider_name: Provider to use ("gemini", "openai", "mistral")

    Returns:
        LLMProvider instance
    """
    return LLMProviderFactory.create_provider(provider_name)
