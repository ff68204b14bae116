"""Internationalization module."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from src.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES

I18N_DIR = Path(__file__).parent


@lru_cache
def load_translations(locale: str) -> dict[str, Any]:
    """Load translations for a given locale."""
    if locale not in SUPPORTED_LOCALES:
        locale = DEFAULT_LOCALE
    file_path = I18N_DIR / f"{locale}.json"

    with open(file_path, encoding="utf-8") as f:
        return json.load(f)


def get_translation(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Get a translation for a key, falling back to the key itself."""
    value: Any = load_translations(locale)

    for k in key.split("."):
        if not isinstance(value, dict):
            return key
        value = value.get(k, key)

    return str(value) if not isinstance(value, dict) else key


def t(key: str, locale: str = DEFAULT_LOCALE, **kwargs: Any) -> str:
    """Shorthand for get_translation with formatting support."""
    translation = get_translation(key, locale)
    if kwargs:
        try:
            return translation.format(**kwargs)
        except KeyError:
            return translation
    return translation
