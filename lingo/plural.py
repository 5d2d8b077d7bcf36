"""
Plural category selection for lingo.

Maps a count to a category tag (``zero``, ``one``, ``other``, ...) using a
per-locale rule table. The tag is appended to a message key
(``"items.one"``) to pick a plural variant.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

PluralRule = Callable[[float], str]

FALLBACK_RULE_LOCALE = "en"


def _zero_one_other(count: float) -> str:
    if count == 0:
        return "zero"
    if count == 1:
        return "one"
    return "other"


def _french(count: float) -> str:
    if count == 0 or count == 1:
        return "one"
    return "other"


def _german(count: float) -> str:
    return "one" if count == 1 else "other"


def _always_other(count: float) -> str:
    return "other"


DEFAULT_PLURAL_RULES: dict[str, PluralRule] = {
    "en": _zero_one_other,
    "es": _zero_one_other,
    "fr": _french,
    "de": _german,
    "ja": _always_other,
    "ko": _always_other,
    "zh": _always_other,
}


def get_plural_form(
    locale: str,
    count: float,
    custom_rules: Mapping[str, PluralRule] | None = None,
) -> str:
    """
    Select the plural category for a count.

    Lookup order: the custom rule for the locale, the custom English rule,
    the built-in rule for the locale, then the built-in English rule.

    Args:
        locale: Locale code (e.g., 'fr')
        count: Number being pluralized
        custom_rules: Optional ``locale -> rule`` table

    Returns:
        Plural category tag
    """
    for rules in (custom_rules or {}, DEFAULT_PLURAL_RULES):
        rule = rules.get(locale) or rules.get(FALLBACK_RULE_LOCALE)
        if rule is not None:
            return rule(count)
    return DEFAULT_PLURAL_RULES[FALLBACK_RULE_LOCALE](count)
