"""
Core translation engine for lingo.

Provides message translation with:
- Locale-scoped key lookup over flat or nested message trees
- Fallback-locale resolution
- Pluralization through ``<key>.<category>`` variants
- Plugin transforms and ``{{param:format}}`` interpolation
- A bounded result cache invalidated on every state change
- Locale-change subscriptions

A ``Translator`` never raises from ``t()``: a key that cannot be resolved
is returned unchanged.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from lingo.cache import TranslationCache, make_cache_key
from lingo.config import I18nConfig, coerce_config
from lingo.errors import ConfigurationError
from lingo.formatter import FormatterRegistry, format_relative_time, is_number
from lingo.interpolation import interpolate
from lingo.messages import MessageStore
from lingo.plugins.base import PluginPipeline, get_hook
from lingo.plural import get_plural_form

logger = logging.getLogger(__name__)

LocaleListener = Callable[[str], Any]


class Translator:
    """
    Resolves message keys into localized, formatted strings.

    Features:
    - ``t(key, params)`` with cache -> lookup -> fallback -> plural ->
      transform -> interpolate -> store resolution
    - Runtime message merging with ``before_load``/``after_load`` hooks
    - Plugins contributing transforms and formatters
    - Locale-aware number, date and relative-time formatting

    Each instance owns its state; separate instances share nothing.
    Mutations are serialized by a per-instance lock.
    """

    def __init__(self, config: I18nConfig | Mapping[str, Any] | None = None, **kwargs: Any):
        """
        Initialize the translator.

        Args:
            config: ``I18nConfig`` or a mapping of its fields
            **kwargs: Config fields given directly (override ``config``)

        Raises:
            ConfigurationError: If the configuration is missing or invalid
        """
        self._config = coerce_config(config, **kwargs)
        self._locale: str = self._config.locale
        self._fallback_locale: str | None = self._config.fallback_locale
        self._diagnostics = self._config.diagnostics
        self._lock = threading.RLock()

        self._store = MessageStore(self._config.messages)
        self._formatters = FormatterRegistry(self._config.formats)
        self._cache = TranslationCache(self._config.cache_size)
        self._listeners: dict[LocaleListener, None] = {}
        self._plugins = PluginPipeline()

        for plugin in self._config.plugins:
            self._install_plugin(plugin)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def locale(self) -> str:
        """Get the active locale."""
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self.set_locale(value)

    @property
    def fallback_locale(self) -> str | None:
        """Get the fallback locale, if any."""
        return self._fallback_locale

    @property
    def messages(self) -> dict[str, dict[str, Any]]:
        """Get a snapshot of all message trees."""
        return self._store.snapshot()

    @property
    def plugins(self) -> list[Any]:
        """Get the installed plugins in pipeline order."""
        return list(self._plugins)

    @property
    def formatters(self) -> FormatterRegistry:
        return self._formatters

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _lookup(self, key: str, locale: str) -> str | None:
        """Look up a key in a locale, then in the fallback locale."""
        message = self._store.get(locale, key)
        fallback = self._fallback_locale
        if message is None and fallback and fallback != locale:
            message = self._store.get(fallback, key)
        return message

    def translate(self, key: str, params: Mapping[str, Any] | None = None, locale: str | None = None) -> str:
        """
        Translate a message key.

        Args:
            key: Message key (flat or dot path)
            params: Values for placeholders; a numeric ``count`` selects
                a plural variant
            locale: Locale to resolve in (defaults to the active locale)

        Returns:
            The resolved string, or the key itself if no message exists
        """
        key = str(key)
        locale = locale or self._locale
        params = params if params is not None else {}

        try:
            generation = self._cache.generation
            cache_key = make_cache_key(locale, key, params)
            if cache_key is not None:
                cached = self._cache.get(cache_key)
                if cached is not None:
                    return cached

            message = self._lookup(key, locale)

            count = params.get("count") if isinstance(params, Mapping) else None
            if is_number(count):
                category = get_plural_form(locale, count, self._config.pluralization_rules)
                plural_message = self._lookup(f"{key}.{category}", locale)
                if plural_message is not None:
                    message = plural_message

            if message is None:
                if self._config.warn_on_missing_translations and self._diagnostics:
                    logger.warning(f"Missing translation: {key} for locale: {locale}")
                return key

            result = self._plugins.transform(key, message, params, locale)
            result = interpolate(
                result,
                params,
                self._formatters,
                locale=locale,
                diagnostics=self._diagnostics,
            )

            if cache_key is not None:
                self._cache.set(cache_key, result, generation=generation)
            return result
        except Exception as e:
            logger.error(f"Translation error for key {key}: {e}")
            return key

    def t(self, key: str, params: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """
        Translate a message key (shorthand).

        Keyword arguments are merged into ``params``.

        Examples:
            >>> i18n.t("welcome", {"name": "John"})
            'Welcome John!'

            >>> i18n.t("items", count=5)
            '5 items'
        """
        if kwargs:
            params = {**(params or {}), **kwargs}
        return self.translate(key, params)

    __call__ = t

    def has_translation(self, key: str, locale: str | None = None) -> bool:
        """
        Check whether a key has a message in a locale.

        The fallback locale is not consulted.
        """
        return self._store.get(locale or self._locale, str(key)) is not None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def get_locale(self) -> str:
        return self._locale

    def set_locale(self, locale: str) -> None:
        """
        Change the active locale.

        Clears the cache and notifies subscribers if the locale changed.

        Args:
            locale: New locale code

        Raises:
            ConfigurationError: If locale is not a non-empty string
        """
        if not isinstance(locale, str) or not locale.strip():
            raise ConfigurationError(f"Invalid locale provided: {locale!r}")

        with self._lock:
            if locale not in self._store and self._diagnostics:
                logger.warning(
                    f"Locale '{locale}' not found in messages. "
                    f"Available locales: {', '.join(self._store.locales)}"
                )
            if locale == self._locale:
                return
            self._locale = locale
            self._cache.clear()
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(locale)
            except Exception as e:
                logger.error(f"Locale change listener error: {e}")

    def add_messages(self, locale: str, messages: Mapping[str, Any]) -> None:
        """
        Merge messages into a locale.

        Runs ``before_load`` hooks, deep-merges the result, runs
        ``after_load`` hooks and clears the cache.

        Args:
            locale: Locale to update (created if new)
            messages: Flat or nested messages

        Raises:
            ConfigurationError: If locale or messages is invalid
        """
        if not isinstance(locale, str) or not locale.strip():
            raise ConfigurationError(f"Invalid locale provided: {locale!r}")
        if not isinstance(messages, Mapping):
            raise ConfigurationError("Invalid messages provided: expected a mapping")

        with self._lock:
            processed = self._plugins.before_load(locale, messages)
            merged = self._store.merge(locale, processed)
            self._plugins.after_load(locale, merged)
            self._cache.clear()

    def _install_plugin(self, plugin: Any) -> None:
        self._plugins.add(plugin)
        format_hook = get_hook(plugin, "format")
        if format_hook is not None:
            self._formatters.register(plugin.name, self._bind_formatter(format_hook))

    def _bind_formatter(self, hook: Callable[..., Any]) -> Callable[[Any, str, str], str]:
        def formatter(value: Any, format_spec: str | None = None, locale: str | None = None) -> str:
            return hook(value, format_spec or "", locale or self._locale)

        return formatter

    def add_plugin(self, plugin: Any) -> None:
        """
        Append a plugin to the pipeline.

        A plugin with a ``format`` hook is also registered as a formatter
        under its name, replacing any formatter of that name.

        Raises:
            ConfigurationError: If the plugin has no name
        """
        with self._lock:
            self._install_plugin(plugin)
            self._cache.clear()

    def remove_plugin(self, name: str) -> None:
        """
        Remove the first plugin called ``name``.

        Its formatter is removed too; a formatter it was shadowing (from
        another plugin of the same name, or a built-in) is restored.
        Does nothing if no plugin has that name.
        """
        with self._lock:
            removed = self._plugins.remove(name)
            if removed is None:
                return

            remaining = self._plugins.find_formatter(name)
            if remaining is not None:
                self._formatters.register(name, self._bind_formatter(remaining))
            elif not self._formatters.restore_builtin(name):
                self._formatters.unregister(name)
            self._cache.clear()

    def subscribe(self, listener: LocaleListener) -> Callable[[], None]:
        """
        Register a callback invoked with the new locale on every change.

        Subscribing the same callback twice has no extra effect.

        Returns:
            A function that unsubscribes the callback
        """
        with self._lock:
            self._listeners[listener] = None

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(listener, None)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format_number(self, value: Any, format_name: str | None = None) -> str:
        """Format a number in the active locale using a named preset."""
        return self._formatters["number"](value, format_name or "", self._locale)

    def format_date(self, value: Any, format_name: str | None = None) -> str:
        """Format a date in the active locale using a named preset."""
        return self._formatters["date"](value, format_name or "", self._locale)

    def format_relative_time(self, value: datetime, base_date: datetime | None = None) -> str:
        """Format a datetime relative to ``base_date`` (default: now)."""
        return format_relative_time(value, base_date, self._locale)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_all_keys(self, locale: str | None = None) -> set[str]:
        """
        Get all translation keys for a locale.

        Args:
            locale: Locale code, defaults to the active locale

        Returns:
            Set of dot-notation keys
        """
        return self._extract_keys(self._store.tree(locale or self._locale))

    def _extract_keys(self, data: Mapping[str, Any], prefix: str = "") -> set[str]:
        keys = set()
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, Mapping):
                keys.update(self._extract_keys(value, full_key))
            else:
                keys.add(full_key)
        return keys

    def get_missing_translations(self, locale: str, reference: str | None = None) -> set[str]:
        """
        Find keys that exist in a reference locale but not in ``locale``.

        Args:
            locale: Locale to check
            reference: Source locale, defaults to the fallback locale
                (or the active locale if there is none)

        Returns:
            Set of missing translation keys
        """
        reference = reference or self._fallback_locale or self._locale
        return {
            key
            for key in self.get_all_keys(reference)
            if self._store.get(locale, key) is None
        }


def create_i18n(config: I18nConfig | Mapping[str, Any] | None = None, **kwargs: Any) -> Translator:
    """
    Create a translation engine.

    Args:
        config: ``I18nConfig`` or a mapping of its fields
        **kwargs: Config fields given directly

    Returns:
        A new, independent Translator

    Raises:
        ConfigurationError: If the configuration is missing or invalid

    Examples:
        >>> i18n = create_i18n(locale="en", messages={"en": {"greeting": "Hello!"}})
        >>> i18n.t("greeting")
        'Hello!'
    """
    return Translator(config, **kwargs)
