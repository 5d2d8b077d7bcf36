"""
Placeholder interpolation for lingo.

Expands ``{{param}}`` and ``{{param:format[:args]}}`` placeholders in a
message template. Interpolation never raises: a placeholder that cannot be
resolved is left in the output as written.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from lingo.formatter import Formatter, format_short_date
from lingo.locales import DEFAULT_LOCALE

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def stringify(value: Any) -> str:
    """
    Convert a parameter value to display text.

    None renders as an empty string and sequences render as a
    comma-joined list. Everything else goes through ``str()``.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def _apply_formatter(
    formatter: Formatter, name: str, value: Any, format_spec: str, locale: str | None
) -> str:
    try:
        formatted = formatter(value, format_spec, locale or DEFAULT_LOCALE)
    except Exception as e:
        logger.error(f"Formatter '{name}' failed: {e}")
        return stringify(value)

    if not isinstance(formatted, str):
        logger.error(f"Formatter '{name}' must return a string, got {type(formatted).__name__}")
        return stringify(value)
    return formatted


def interpolate(
    template: Any,
    params: Mapping[str, Any] | None = None,
    formatters: Mapping[str, Formatter] | None = None,
    locale: str | None = None,
    diagnostics: bool = True,
) -> str:
    """
    Replace placeholders in a template with parameter values.

    Args:
        template: Message template; non-strings are stringified
        params: Parameter values keyed by name
        formatters: Registry of named formatters for ``{{param:name}}``
        locale: Locale passed to formatters and used for dates
        diagnostics: Log a warning for each missing parameter

    Returns:
        The interpolated string

    Examples:
        >>> interpolate("Hello {{name}}!", {"name": "World"})
        'Hello World!'
    """
    if not isinstance(template, str):
        return stringify(template)

    params = params if params is not None else {}
    formatters = formatters if formatters is not None else {}

    def replace(match: re.Match[str]) -> str:
        body = match.group(1).strip()
        try:
            param_key, _, format_spec = body.partition(":")
            param_key = param_key.strip()
            format_spec = format_spec.strip()
            format_name = format_spec.split(":", 1)[0].strip()

            if param_key not in params:
                if diagnostics:
                    logger.warning(f"Missing translation parameter: {param_key}")
                return match.group(0)

            value = params[param_key]

            if format_name and format_name in formatters:
                return _apply_formatter(
                    formatters[format_name], format_name, value, format_spec, locale
                )

            if value is None:
                return ""
            if isinstance(value, date):
                return format_short_date(value, locale)
            return stringify(value)
        except Exception as e:
            logger.error(f"Parameter interpolation error for '{body}': {e}")
            return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)
