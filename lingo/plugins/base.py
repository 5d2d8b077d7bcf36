"""
Plugin pipeline for lingo.

A plugin is any object with a ``name`` and any subset of four hooks:
- transform(key, text, params, locale) -> str: rewrite resolved text
- before_load(locale, messages) -> messages: rewrite messages before merging
- after_load(locale, messages): observe the merged messages
- format(value, format_spec, locale) -> str: formatter registered under ``name``

Hooks are discovered by attribute lookup, so plain objects, modules,
``SimpleNamespace`` instances and the ``Plugin`` dataclass all work.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from lingo.errors import ConfigurationError

logger = logging.getLogger(__name__)

TransformHook = Callable[[str, str, Mapping[str, Any], str], str]
BeforeLoadHook = Callable[[str, Mapping[str, Any]], Mapping[str, Any]]
AfterLoadHook = Callable[[str, Mapping[str, Any]], Any]
FormatHook = Callable[[Any, str, str], str]


@dataclass
class Plugin:
    """Capability object with optional hooks."""

    name: str
    transform: TransformHook | None = None
    before_load: BeforeLoadHook | None = None
    after_load: AfterLoadHook | None = None
    format: FormatHook | None = None


def get_hook(plugin: Any, hook: str) -> Callable[..., Any] | None:
    """Get a callable hook from a plugin, or None if it does not provide one."""
    candidate = getattr(plugin, hook, None)
    return candidate if callable(candidate) else None


def plugin_name(plugin: Any) -> str:
    return str(getattr(plugin, "name", "") or type(plugin).__name__)


class PluginPipeline:
    """
    Ordered list of plugins.

    Hooks run in registration order. A hook that raises is logged and
    skipped; it never aborts the stage it runs in.
    """

    def __init__(self, plugins: Any = None):
        self._plugins: list[Any] = []
        for plugin in plugins or ():
            self.add(plugin)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._plugins))

    def __len__(self) -> int:
        return len(self._plugins)

    @property
    def names(self) -> list[str]:
        return [plugin_name(plugin) for plugin in self._plugins]

    def add(self, plugin: Any) -> None:
        """
        Append a plugin.

        Raises:
            ConfigurationError: If the plugin has no name
        """
        if not getattr(plugin, "name", None):
            raise ConfigurationError("Plugins must have a non-empty 'name'")
        self._plugins.append(plugin)

    def remove(self, name: str) -> Any | None:
        """
        Remove the first plugin called ``name``.

        Returns:
            The removed plugin, or None if no plugin matched
        """
        for index, plugin in enumerate(self._plugins):
            if getattr(plugin, "name", None) == name:
                return self._plugins.pop(index)
        return None

    def find_formatter(self, name: str) -> FormatHook | None:
        """Get the ``format`` hook of the last plugin called ``name`` that has one."""
        for plugin in reversed(self._plugins):
            if getattr(plugin, "name", None) == name:
                hook = get_hook(plugin, "format")
                if hook is not None:
                    return hook
        return None

    def transform(self, key: str, text: str, params: Mapping[str, Any], locale: str) -> str:
        """Run every transform hook, feeding each one's output to the next."""
        result = text
        for plugin in list(self._plugins):
            hook = get_hook(plugin, "transform")
            if hook is None:
                continue
            try:
                output = hook(key, result, params, locale)
            except Exception as e:
                logger.error(f"Plugin {plugin_name(plugin)} transform error: {e}")
                continue
            if isinstance(output, str):
                result = output
            else:
                logger.error(
                    f"Plugin {plugin_name(plugin)} transform returned "
                    f"{type(output).__name__}, expected str"
                )
        return result

    def before_load(self, locale: str, messages: Mapping[str, Any]) -> Mapping[str, Any]:
        """Run every before_load hook over the incoming messages."""
        processed = messages
        for plugin in list(self._plugins):
            hook = get_hook(plugin, "before_load")
            if hook is None:
                continue
            try:
                output = hook(locale, processed)
            except Exception as e:
                logger.error(f"Plugin {plugin_name(plugin)} before_load error: {e}")
                continue
            if isinstance(output, Mapping):
                processed = output
            else:
                logger.error(
                    f"Plugin {plugin_name(plugin)} before_load returned "
                    f"{type(output).__name__}, expected a mapping"
                )
        return processed

    def after_load(self, locale: str, messages: Mapping[str, Any]) -> None:
        """Notify every after_load hook; return values are ignored."""
        for plugin in list(self._plugins):
            hook = get_hook(plugin, "after_load")
            if hook is None:
                continue
            try:
                hook(locale, messages)
            except Exception as e:
                logger.error(f"Plugin {plugin_name(plugin)} after_load error: {e}")
