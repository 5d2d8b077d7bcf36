"""
Locale-aware formatting for lingo.

Provides the formatter registry consulted by ``{{param:name}}`` placeholders
and the built-in formatters:
- number: decimal, percent, scientific and compact presets
- date: CLDR widths, patterns and skeletons
- currency: ISO 4217 amounts with a plain-text fallback
- relative time: "in 3 days", "2 hours ago"
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Callable, Iterator, Mapping
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Any

from babel.dates import format_date as babel_format_date
from babel.dates import format_datetime as babel_format_datetime
from babel.dates import format_skeleton, format_timedelta
from babel.numbers import (
    UnknownCurrencyError,
    format_compact_decimal,
    format_currency,
    format_decimal,
    format_percent,
    format_scientific,
    validate_currency,
)

from lingo.errors import ConfigurationError
from lingo.locales import DEFAULT_LOCALE, get_babel_locale, language_of

logger = logging.getLogger(__name__)

Formatter = Callable[[Any, str, str], str]

# =============================================================================
# Time Constants
# =============================================================================
# All values are in seconds.

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600  # 60 * 60
SECONDS_PER_DAY = 86400  # 60 * 60 * 24
SECONDS_PER_WEEK = 604800  # 60 * 60 * 24 * 7
SECONDS_PER_MONTH = 2592000  # 60 * 60 * 24 * 30 (approximate)
SECONDS_PER_YEAR = 31536000  # 60 * 60 * 24 * 365 (approximate)

RELATIVE_TIME_UNITS: list[tuple[str, int]] = [
    ("year", SECONDS_PER_YEAR),
    ("month", SECONDS_PER_MONTH),
    ("week", SECONDS_PER_WEEK),
    ("day", SECONDS_PER_DAY),
    ("hour", SECONDS_PER_HOUR),
    ("minute", SECONDS_PER_MINUTE),
    ("second", 1),
]

# Phrase for a zero-second delta, keyed by language
RELATIVE_NOW: dict[str, str] = {
    "en": "now",
    "es": "ahora",
    "fr": "maintenant",
    "de": "jetzt",
    "it": "ora",
    "pt": "agora",
    "nl": "nu",
    "ru": "сейчас",
    "zh": "现在",
    "ja": "今",
    "ko": "지금",
}

DEFAULT_CURRENCY = "USD"
SHORT_DATE_SKELETON = "yMd"

# Numeric month or day fields, widened to two digits in the short date
NUMERIC_FIELD_PATTERN = re.compile(r"(?<![MLd])(M{1,2}|L{1,2}|d{1,2})(?![MLd])")


def is_number(value: Any) -> bool:
    """Check for a real number, excluding booleans."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@lru_cache(maxsize=128)
def short_date_pattern(locale: str) -> str:
    """
    Get the locale's numeric date pattern with 2-digit month and day.

    Starts from the CLDR ``yMd`` skeleton (en: ``M/d/y``) and widens its
    month and day fields (en: ``MM/dd/y``, de: ``dd.MM.y``).
    """
    babel_locale = get_babel_locale(locale)
    skeleton = babel_locale.datetime_skeletons.get(SHORT_DATE_SKELETON)
    if skeleton is None:
        skeleton = babel_locale.date_formats["short"]
    pattern = getattr(skeleton, "pattern", str(skeleton))
    return NUMERIC_FIELD_PATTERN.sub(lambda m: m.group(1)[0] * 2, pattern)


def format_short_date(value: date, locale: str | None = None) -> str:
    """Render a date or datetime as a locale-aware numeric short date."""
    locale = locale or DEFAULT_LOCALE
    return babel_format_date(value, format=short_date_pattern(locale), locale=get_babel_locale(locale))


def _preset_name(format_spec: str | None, own_name: str) -> str:
    """
    Extract a preset name from a format spec.

    Specs coming from placeholders carry the formatter's own name as the
    first segment ("number:percent"); direct calls pass the bare preset.
    """
    if not format_spec:
        return ""
    head, _, rest = format_spec.partition(":")
    if head.strip() == own_name:
        return rest.strip()
    return format_spec.strip()


class FormatterRegistry(Mapping):
    """
    Name to formatter table.

    Every formatter has the signature ``(value, format_spec, locale) -> str``.
    The built-ins are installed on construction; plugins may add entries or
    shadow built-ins, and ``restore_builtin`` puts a built-in back.
    """

    def __init__(self, formats: Mapping[str, Mapping[str, Any]] | None = None):
        self._formats: dict[str, Mapping[str, Any]] = dict(formats or {})
        self._builtins: dict[str, Formatter] = {
            "number": self.format_number,
            "date": self.format_date,
            "currency": self.format_currency,
        }
        self._formatters: dict[str, Formatter] = dict(self._builtins)

    def __getitem__(self, name: str) -> Formatter:
        return self._formatters[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._formatters)

    def __len__(self) -> int:
        return len(self._formatters)

    def register(self, name: str, formatter: Formatter) -> None:
        """Install or replace the formatter stored under ``name``."""
        self._formatters[name] = formatter

    def unregister(self, name: str) -> None:
        """Remove a formatter; a no-op if it is not registered."""
        self._formatters.pop(name, None)

    def is_builtin(self, name: str) -> bool:
        return name in self._builtins

    def restore_builtin(self, name: str) -> bool:
        """
        Reinstall the built-in formatter called ``name``.

        Returns:
            True if a built-in with that name exists
        """
        builtin = self._builtins.get(name)
        if builtin is None:
            return False
        self._formatters[name] = builtin
        return True

    # -------------------------------------------------------------------------
    # Built-in formatters
    # -------------------------------------------------------------------------

    def _preset(self, kind: str, name: str) -> Any:
        presets = self._formats.get(kind) or {}
        return presets.get(name or "default")

    def format_number(self, value: Any, format_spec: str | None = None, locale: str = DEFAULT_LOCALE) -> str:
        """
        Format a number using a named preset.

        Args:
            value: Number to format; anything else is stringified
            format_spec: Preset name from ``formats["number"]``
            locale: Locale tag

        Returns:
            Formatted number string
        """
        if not is_number(value):
            return str(value)

        babel_locale = get_babel_locale(locale)
        preset = self._preset("number", _preset_name(format_spec, "number"))

        if preset is None:
            return format_decimal(value, locale=babel_locale)
        if isinstance(preset, str):
            return format_decimal(value, format=preset, locale=babel_locale)

        style = preset.get("style", "decimal")
        pattern = preset.get("pattern")
        if style == "percent":
            return format_percent(value, format=pattern, locale=babel_locale)
        if style == "scientific":
            return format_scientific(value, format=pattern, locale=babel_locale)
        if style == "compact":
            return format_compact_decimal(
                value, format_type=preset.get("format_type", "short"), locale=babel_locale
            )
        if style == "currency":
            return format_currency(
                value,
                preset.get("currency", DEFAULT_CURRENCY),
                format=pattern,
                locale=babel_locale,
            )
        return format_decimal(value, format=pattern, locale=babel_locale)

    def format_date(self, value: Any, format_spec: str | None = None, locale: str = DEFAULT_LOCALE) -> str:
        """
        Format a date or datetime using a named preset.

        Args:
            value: date/datetime to format; anything else is stringified
            format_spec: Preset name from ``formats["date"]``
            locale: Locale tag

        Returns:
            Formatted date string
        """
        if not isinstance(value, date):
            return str(value)

        babel_locale = get_babel_locale(locale)
        preset = self._preset("date", _preset_name(format_spec, "date"))

        if preset is None:
            return format_short_date(value, locale)
        if isinstance(preset, str):
            preset = {"format": preset}

        if "skeleton" in preset:
            return format_skeleton(preset["skeleton"], value, locale=babel_locale)

        fmt = preset.get("format", "medium")
        if preset.get("time") and isinstance(value, datetime):
            return babel_format_datetime(value, format=fmt, locale=babel_locale)
        return babel_format_date(value, format=fmt, locale=babel_locale)

    def format_currency(self, value: Any, format_spec: str | None = None, locale: str = DEFAULT_LOCALE) -> str:
        """
        Format a monetary amount.

        Args:
            value: Amount; non-numbers are stringified
            format_spec: ``currency:<ISO code>`` (defaults to USD)
            locale: Locale tag

        Returns:
            Formatted amount, or ``"<code> <value>"`` if the currency is unknown
        """
        if not is_number(value):
            return str(value)

        parts = (format_spec or "currency:" + DEFAULT_CURRENCY).split(":")
        currency = parts[1].strip().upper() if len(parts) > 1 else ""
        currency = currency or DEFAULT_CURRENCY

        try:
            validate_currency(currency)
            return format_currency(value, currency, locale=get_babel_locale(locale))
        except (UnknownCurrencyError, ValueError) as e:
            logger.error(f"Currency formatter error for currency '{currency}': {e}")
            return f"{currency} {value}"


def format_relative_time(value: datetime, base_date: datetime | None = None, locale: str = DEFAULT_LOCALE) -> str:
    """
    Format a datetime relative to a base datetime.

    The delta is bucketed into the largest unit whose length it reaches and
    the quotient is rounded.

    Args:
        value: Moment to describe
        base_date: Reference moment (defaults to now)
        locale: Locale tag

    Returns:
        Relative time phrase (e.g., "in 2 hours", "3 days ago")

    Raises:
        ConfigurationError: If value or base_date is not a datetime
    """
    if not isinstance(value, datetime):
        raise ConfigurationError("Invalid date provided to format_relative_time")
    if base_date is None:
        base_date = datetime.now(tz=value.tzinfo)
    elif not isinstance(base_date, datetime):
        raise ConfigurationError("Invalid base date provided to format_relative_time")

    diff_seconds = int((value - base_date) // timedelta(seconds=1))
    babel_locale = get_babel_locale(locale)

    for unit, seconds_in_unit in RELATIVE_TIME_UNITS:
        if abs(diff_seconds) >= seconds_in_unit:
            # Halves round up, toward positive infinity
            amount = math.floor(diff_seconds / seconds_in_unit + 0.5)
            # A threshold equal to the amount pins Babel to this unit
            return format_timedelta(
                timedelta(seconds=amount * seconds_in_unit),
                granularity=unit,
                threshold=abs(amount),
                add_direction=True,
                locale=babel_locale,
            )

    return RELATIVE_NOW.get(language_of(locale), RELATIVE_NOW["en"])
