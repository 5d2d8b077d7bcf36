"""
Message storage for lingo.

Provides:
- Dot-path lookups into nested message trees
- Structural deep merge with a blocked-key list
- A per-locale message store that never mutates a published tree
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

logger = logging.getLogger(__name__)

# Keys that would rebind an object's prototype or constructor slot when a
# message tree is shared with other runtimes (or reflected into objects).
BLOCKED_KEYS = frozenset({"__proto__", "constructor", "prototype", "__class__", "__dict__"})


def get_nested_value(data: Any, path: Any) -> Any:
    """
    Get a nested value from a mapping using dot notation.

    Args:
        data: Mapping to search
        path: Dot-separated key (e.g., 'user.role.admin')

    Returns:
        The value if found, None otherwise. Malformed input (non-mapping
        data, non-string or empty path) also yields None.
    """
    if not isinstance(data, Mapping) or not isinstance(path, str) or not path:
        return None

    current: Any = data
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


def _is_mergeable(value: Any) -> bool:
    return isinstance(value, Mapping)


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge ``source`` into a copy of ``target``.

    Nested mappings merge key by key. Lists, dates and other scalars replace
    the existing value wholesale. ``None`` values in ``source`` are skipped,
    and blocked or non-string keys are rejected individually.

    Args:
        target: Existing tree (left untouched)
        source: Partial tree to merge in

    Returns:
        A new merged tree
    """
    result = dict(target)
    if not isinstance(source, Mapping):
        return result

    for key, value in source.items():
        if not isinstance(key, str):
            logger.warning(f"Ignoring non-string message key: {key!r}")
            continue
        if key in BLOCKED_KEYS:
            logger.warning(f"Blocked attempt to set reserved message key: {key}")
            continue
        if value is None:
            continue

        if _is_mergeable(value):
            existing = result.get(key)
            base = existing if isinstance(existing, Mapping) else {}
            result[key] = deep_merge(base, value)
        elif isinstance(value, (datetime, date)):
            result[key] = value
        else:
            result[key] = copy.deepcopy(value)

    return result


def _as_message(value: Any) -> str | None:
    # Only leaves are messages: subtrees and sequences are not
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return None
    return value if isinstance(value, str) else str(value)


class MessageStore:
    """
    Two-level mapping of ``locale -> message tree``.

    Lookups try the key as a literal entry first (flat keys such as
    ``"user.role.admin"``), then as a dot path into nested subtrees.
    Merges publish a fresh tree per locale, so a tree handed out earlier is
    never modified afterwards.
    """

    def __init__(self, messages: Mapping[str, Mapping[str, Any]] | None = None):
        self._trees: dict[str, dict[str, Any]] = {}
        for locale, tree in (messages or {}).items():
            if isinstance(tree, Mapping):
                self._trees[locale] = deep_merge({}, tree)
            else:
                logger.warning(f"Ignoring messages for '{locale}': expected a mapping")

    def __contains__(self, locale: object) -> bool:
        return locale in self._trees

    @property
    def locales(self) -> list[str]:
        """Locales that currently have a message tree."""
        return list(self._trees)

    def tree(self, locale: str) -> Mapping[str, Any]:
        """Get the message tree for a locale (empty if unknown)."""
        return self._trees.get(locale, {})

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Get a shallow copy of the whole store."""
        return dict(self._trees)

    def get(self, locale: str, key: str) -> str | None:
        """
        Look up a message template.

        Args:
            locale: Locale whose tree to search
            key: Literal key or dot path

        Returns:
            The template string, or None if absent
        """
        tree = self._trees.get(locale)
        if tree is None or not isinstance(key, str):
            return None

        if key in tree:
            message = _as_message(tree[key])
            if message is not None:
                return message

        return _as_message(get_nested_value(tree, key))

    def merge(self, locale: str, partial: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge a partial tree into a locale and publish the result.

        Args:
            locale: Locale to update
            partial: Nested or flat messages to add

        Returns:
            The newly published tree for the locale
        """
        merged = deep_merge(self._trees.get(locale, {}), partial)
        self._trees[locale] = merged
        return merged
