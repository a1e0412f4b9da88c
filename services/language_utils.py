"""Language registry and helpers for mapping language identifiers to names and codes"""
from typing import Any, Dict, List, Optional

from services.llm_models.translation_models import LanguageEntry

# The supported language pair. Read-only after import.
LANGUAGES: Dict[str, LanguageEntry] = {
    entry.key: entry
    for entry in (
        LanguageEntry(key="it", display_name="Italian", code="it"),
        LanguageEntry(key="es", display_name="Spanish", code="es"),
    )
}


def resolve_language(identifier: Any) -> Optional[LanguageEntry]:
    """
    Look up a language identifier in the registry (case-insensitive).

    Args:
        identifier: Language identifier from the request (e.g., "it", "ES")

    Returns:
        LanguageEntry, or None if the identifier is not registered
    """
    if not isinstance(identifier, str):
        return None
    return LANGUAGES.get(identifier.lower())


def get_language_name(identifier: Any) -> str:
    """
    Display name for a language identifier.

    Unregistered identifiers are echoed back verbatim so arbitrary language
    names ("Portuguese") still work in prompts.
    """
    entry = resolve_language(identifier)
    return entry.display_name if entry else str(identifier)


def get_language_code(identifier: Any) -> str:
    """
    Short code for a language identifier.

    Unregistered identifiers fall back to their lowercased form.
    """
    entry = resolve_language(identifier)
    if entry:
        return entry.code
    return identifier.lower() if isinstance(identifier, str) else str(identifier)


def get_all_languages() -> List[Dict[str, str]]:
    """All registered languages as plain dicts, in registration order."""
    return [
        {"key": entry.key, "name": entry.display_name, "code": entry.code}
        for entry in LANGUAGES.values()
    ]


def is_supported_language(identifier: Any) -> bool:
    """Check if an identifier is in the registry."""
    return resolve_language(identifier) is not None
