"""
lingo: runtime message resolution for internationalized applications.

Provides:
- Message translation with {{param}} interpolation
- Pluralization through per-locale category rules
- Fallback-locale resolution
- Plugins for text transforms, message preprocessing and formatters
- Locale-aware number, currency, date and relative-time formatting

Usage:
    from lingo import create_i18n

    i18n = create_i18n(
        locale="en",
        fallback_locale="en",
        messages={
            "en": {"welcome": "Welcome {{name}}!", "items.one": "One item",
                   "items.other": "{{count}} items"},
            "es": {"welcome": "¡Bienvenido {{name}}!"},
        },
    )

    i18n.t("welcome", {"name": "John"})   # "Welcome John!"
    i18n.t("items", count=5)              # "5 items"
    i18n.set_locale("es")
"""

from lingo.cache import TranslationCache
from lingo.config import I18nConfig, load_catalog, load_messages
from lingo.errors import ConfigurationError, I18nError
from lingo.formatter import FormatterRegistry, format_relative_time
from lingo.interpolation import interpolate
from lingo.messages import MessageStore, deep_merge, get_nested_value
from lingo.plugins import Plugin, PluginPipeline, create_icu_plugin, create_markdown_plugin
from lingo.plural import DEFAULT_PLURAL_RULES, get_plural_form
from lingo.translator import Translator, create_i18n

__version__ = "0.1.0"

__all__ = [
    # Core translation
    "create_i18n",
    "Translator",
    # Configuration
    "I18nConfig",
    "load_catalog",
    "load_messages",
    # Errors
    "I18nError",
    "ConfigurationError",
    # Building blocks
    "MessageStore",
    "get_nested_value",
    "deep_merge",
    "interpolate",
    "get_plural_form",
    "DEFAULT_PLURAL_RULES",
    "FormatterRegistry",
    "format_relative_time",
    "TranslationCache",
    # Plugins
    "Plugin",
    "PluginPipeline",
    "create_icu_plugin",
    "create_markdown_plugin",
]
