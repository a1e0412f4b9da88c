"""
Translation error types

Every error the /api/translate endpoint can return maps to one of these.
Model reply parsing problems are not errors: the normalizer absorbs them.
"""


class TranslationError(Exception):
    """Base class for errors reported to the caller as a JSON error payload"""

    status_code = 500
    default_message = "Translation error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class MissingParametersError(TranslationError):
    """text, sourceLang or targetLang was missing or empty"""

    status_code = 400
    default_message = "Missing required parameters"


class ServiceUnavailableError(TranslationError):
    """No credential (or no usable provider) is configured"""

    status_code = 500
    default_message = "LLM API key not configured"


class TranslationFailedError(TranslationError):
    """The upstream model call failed (transport, timeout, non-success status)"""

    status_code = 500
    default_message = "Failed to get translation from AI model"


class LLMProviderError(RuntimeError):
    """
    Raised by provider adapters when the SDK call fails.

    transient is True for timeouts, connection problems, rate limiting and
    5xx responses, i.e. failures worth retrying.
    """

    def __init__(self, message: str, transient: bool = False):
        super().__init__(message)
        self.transient = transient
