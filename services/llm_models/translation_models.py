"""
Translation Pydantic Models

Models for the translation request/response pipeline.
TranslationResult is the shape the model is asked to produce and the shape
returned to the caller, whatever the model actually replied.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List


class LanguageEntry(BaseModel):
    """A registered language: lookup key, human-readable name and short code."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Lowercase identifier used in requests, e.g. 'it'")
    display_name: str = Field(description="Name used inside prompts, e.g. 'Italian'")
    code: str = Field(description="Short language code, e.g. 'it'")


class TranslationRequest(BaseModel):
    """Inbound request. Fields stay loosely typed: validation happens in the service."""
    text: Any = None
    source_lang: Any = None
    target_lang: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TranslationRequest":
        """Build a request from the camelCase JSON body; non-objects yield an empty request."""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            text=payload.get("text"),
            source_lang=payload.get("sourceLang"),
            target_lang=payload.get("targetLang"),
        )

    def is_complete(self) -> bool:
        return bool(self.text) and bool(self.source_lang) and bool(self.target_lang)


class TranslationResult(BaseModel):
    """Structured translation result.

    Example structure:
    {
        "translation": "Hola mundo",
        "idioms": ["¡Hola a todos!"],
        "description": "Un saludo común."
    }
    """
    translation: str = Field(description="Main translated text, never empty after normalization")
    idioms: List[str] = Field(default_factory=list, description="Idioms with a similar meaning in the target language")
    description: str = Field(default="", description="Short contextual note in the target language")
