"""
Translation result cache for lingo.

Resolved strings are cached under ``(locale, key, canonical params)``.
The cache is bounded (oldest-inserted entries are evicted first) and is
cleared wholesale whenever the engine state changes.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1000

CacheKey = tuple[str, str, str]

_SCALAR_TYPES = (str, int, float, bool, type(None))


class _Uncacheable(Exception):
    """A parameter value has no stable canonical form."""


def _type_tag(value: Any) -> str:
    kind = type(value)
    return f"{kind.__module__}.{kind.__qualname__}"


def _encode(value: Any, active: set[int]) -> list[Any]:
    """
    Encode a parameter value as a ``[type tag, payload]`` pair.

    Only exact built-in types are accepted, since their text rendering is
    fully determined by the encoded payload. Container order is preserved
    because it shows in the rendered text.
    """
    kind = type(value)
    if kind in _SCALAR_TYPES:
        return [kind.__name__, value]
    if kind in (date, datetime):
        return [kind.__name__, value.isoformat()]
    if kind not in (dict, list, tuple, set, frozenset):
        raise _Uncacheable(f"unsupported parameter type {_type_tag(value)}")

    marker = id(value)
    if marker in active:
        raise _Uncacheable("reference cycle")
    active.add(marker)
    try:
        if kind is dict:
            payload = [[_encode(k, active), _encode(v, active)] for k, v in value.items()]
        else:
            payload = [_encode(item, active) for item in value]
    finally:
        active.discard(marker)
    return [kind.__name__, payload]


def canonicalize_params(params: Mapping[str, Any] | None) -> str | None:
    """
    Serialize parameters into a stable cache-key fragment.

    Top-level parameter names are sorted so that parameter order does not
    matter. Every value is tagged with its type, so distinct values never
    share a fragment.

    Args:
        params: Translation parameters

    Returns:
        The serialized fragment, or None if the parameters cannot be
        serialized (a reference cycle, or a value of a type other than the
        built-in scalars, dates and containers). Results for such
        parameters are not cached.
    """
    if not params:
        return ""
    if not isinstance(params, Mapping):
        return None
    try:
        active: set[int] = set()
        entries = [[_encode(name, active), _encode(value, active)] for name, value in params.items()]
        entries.sort(key=lambda entry: json.dumps(entry[0], ensure_ascii=False))
        return json.dumps(entries, ensure_ascii=False)
    except (_Uncacheable, TypeError, ValueError, RecursionError) as e:
        logger.debug(f"Parameters cannot be serialized for caching: {e}")
        return None


def make_cache_key(locale: str, key: str, params: Mapping[str, Any] | None) -> CacheKey | None:
    """Build the cache key for a resolution, or None if it must not be cached."""
    fragment = canonicalize_params(params)
    if fragment is None:
        return None
    return (locale, key, fragment)


class TranslationCache:
    """
    Bounded key -> string cache with a generation counter.

    Every ``clear()`` advances the generation. A writer that captured the
    generation before resolving passes it to ``set()``; the write is dropped
    if the cache was cleared in the meantime, so a concurrent mutation can
    never be undone by a late store.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        if max_size <= 0:
            raise ValueError("Cache size must be a positive integer")
        self.max_size = max_size
        self._entries: OrderedDict[CacheKey, str] = OrderedDict()
        self._generation = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, key: CacheKey) -> str | None:
        return self._entries.get(key)

    def set(self, key: CacheKey, value: str, generation: int | None = None) -> bool:
        """
        Store a value.

        Args:
            key: Cache key
            value: Resolved string
            generation: Generation observed before resolving, if any

        Returns:
            True if the value was stored
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = value
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1
