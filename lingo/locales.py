"""
Locale tag handling for lingo.

Normalizes locale identifiers and resolves them to Babel ``Locale`` objects:
- Hyphenated tags (en-US, zh-Hant-TW) are converted to Babel's underscore form
- Encoding and modifier suffixes (.UTF-8, @latin) are stripped
- Unknown or malformed tags fall back to English
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from babel import Locale
from babel.core import UnknownLocaleError

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


def normalize_locale(locale_string: str) -> str:
    """
    Convert a locale tag into Babel's identifier form.

    Handles formats like:
    - en
    - en-US
    - en_US.UTF-8
    - sr_RS@latin

    Args:
        locale_string: Raw locale tag

    Returns:
        Normalized identifier (e.g., 'en_US'), or the default locale
        if the tag is empty
    """
    if not locale_string or not isinstance(locale_string, str):
        return DEFAULT_LOCALE

    value = locale_string.strip()
    if not value or value.lower() in ("c", "posix"):
        return DEFAULT_LOCALE

    value = value.replace("-", "_")
    value = re.sub(r"\.[A-Za-z0-9_-]+(@[A-Za-z]+)?$", "", value)
    value = re.sub(r"@[A-Za-z]+$", "", value)
    return value or DEFAULT_LOCALE


def language_of(locale_string: str) -> str:
    """
    Get the bare language subtag of a locale tag.

    Args:
        locale_string: Locale tag (e.g., 'fr-CA')

    Returns:
        Lowercase language code (e.g., 'fr')
    """
    return normalize_locale(locale_string).split("_")[0].lower()


@lru_cache(maxsize=128)
def get_babel_locale(locale_string: str) -> Locale:
    """
    Resolve a locale tag to a Babel Locale, cached per tag.

    Args:
        locale_string: Locale tag in any supported form

    Returns:
        The matching Babel Locale, or English if the tag is unknown
    """
    identifier = normalize_locale(locale_string)
    try:
        return Locale.parse(identifier)
    except (UnknownLocaleError, ValueError, TypeError):
        pass

    # Retry with just the language part (e.g. 'xx_YY' -> 'xx')
    language = identifier.split("_")[0]
    if language != identifier:
        try:
            return Locale.parse(language)
        except (UnknownLocaleError, ValueError, TypeError):
            pass

    logger.debug(f"Unknown locale '{locale_string}', using '{DEFAULT_LOCALE}'")
    return Locale.parse(DEFAULT_LOCALE)
