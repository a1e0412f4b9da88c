"""
LLM Pydantic Models

Data models for the translation pipeline:
- LanguageEntry (registry entry)
- TranslationRequest (inbound request)
- TranslationResult (normalized model reply)
"""

from .translation_models import LanguageEntry, TranslationRequest, TranslationResult

__all__ = [
    'LanguageEntry',
    'TranslationRequest',
    'TranslationResult',
]
