"""
ICU plugin: a minimal subset of ICU MessageFormat.

Supported arguments:
- ``{name}``: the parameter value
- ``{count, plural, =0 {none} one {# item} other {# items}}``: exact matches,
  then the locale's plural category, then ``other``; ``#`` is the count
- ``{gender, select, male {He} female {She} other {They}}``

Double-brace ``{{...}}`` placeholders are left untouched for interpolation.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from lingo.interpolation import stringify
from lingo.plugins.base import Plugin
from lingo.plural import PluralRule, get_plural_form

OPTION_PATTERN = re.compile(r"\s*(=?[\w.-]+)\s*\{")


def _matching_brace(text: str, start: int) -> int:
    """Index of the brace closing the one at ``start``, or -1."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _parse_options(options: str) -> dict[str, str]:
    result: dict[str, str] = {}
    position = 0
    while position < len(options):
        match = OPTION_PATTERN.match(options, position)
        if not match:
            break
        start = match.end() - 1
        end = _matching_brace(options, start)
        if end == -1:
            break
        result.setdefault(match.group(1), options[start + 1 : end])
        position = end + 1
    return result


def _exact_match(options: dict[str, str], count: float) -> str | None:
    for selector, content in options.items():
        if not selector.startswith("="):
            continue
        try:
            if float(selector[1:]) == count:
                return content
        except ValueError:
            continue
    return None


class ICURenderer:
    """Renders ICU-style arguments against a parameter mapping."""

    def __init__(self, plural_rules: Mapping[str, PluralRule] | None = None):
        self.plural_rules = plural_rules

    def render(self, text: str, params: Mapping[str, Any], locale: str) -> str:
        parts: list[str] = []
        position = 0
        length = len(text)

        while position < length:
            brace = text.find("{", position)
            if brace == -1:
                parts.append(text[position:])
                break
            parts.append(text[position:brace])

            if text.startswith("{{", brace):
                close = text.find("}}", brace)
                if close == -1:
                    parts.append(text[brace:])
                    break
                parts.append(text[brace : close + 2])
                position = close + 2
                continue

            end = _matching_brace(text, brace)
            if end == -1:
                parts.append(text[brace:])
                break
            parts.append(self._render_argument(text[brace + 1 : end], text[brace : end + 1], params, locale))
            position = end + 1

        return "".join(parts)

    def _render_argument(self, body: str, original: str, params: Mapping[str, Any], locale: str) -> str:
        pieces = [piece.strip() for piece in body.split(",", 2)]
        name = pieces[0]
        if name not in params:
            return original
        value = params[name]

        if len(pieces) < 3:
            return stringify(value)

        arg_type, options = pieces[1], _parse_options(pieces[2])

        if arg_type == "plural":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return original
            content = _exact_match(options, value)
            if content is None:
                category = get_plural_form(locale, value, self.plural_rules)
                content = options.get(category, options.get("other"))
            if content is None:
                return stringify(value)
            return self.render(content.replace("#", stringify(value)), params, locale)

        if arg_type == "select":
            content = options.get(stringify(value), options.get("other"))
            if content is None:
                return stringify(value)
            return self.render(content, params, locale)

        return stringify(value)


def create_icu_plugin(plural_rules: Mapping[str, PluralRule] | None = None) -> Plugin:
    """
    Create the ``icu`` transform plugin.

    Args:
        plural_rules: Optional custom plural rules, as passed to the engine
    """
    renderer = ICURenderer(plural_rules)

    def transform(key: str, text: str, params: Mapping[str, Any], locale: str) -> str:
        if not params:
            return text
        return renderer.render(text, params, locale)

    return Plugin(name="icu", transform=transform)
