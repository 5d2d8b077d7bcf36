"""
Engine configuration for lingo.

Handles:
- The ``I18nConfig`` settings object and its validation
- Loading message catalogs from YAML/JSON files
- Loading a whole configuration from a YAML file

Catalog files are named after their locale (``en.yaml``, ``pt-BR.yml``,
``fr.json``) and contain a nested or flat message tree.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from lingo.cache import DEFAULT_CACHE_SIZE
from lingo.errors import ConfigurationError

# Get logger for this module
logger = logging.getLogger(__name__)

CATALOG_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass
class I18nConfig:
    """
    Settings for a ``Translator``.

    Attributes:
        locale: Active locale at construction
        messages: ``locale -> message tree``
        fallback_locale: Locale consulted when a key is missing
        plugins: Plugins installed at construction, in order
        warn_on_missing_translations: Log each missing translation
        pluralization_rules: ``locale -> (count -> category)`` overrides
        formats: Named presets, ``{"number": {...}, "date": {...}}``
        diagnostics: Emit warning-level diagnostics at all
        cache_size: Maximum number of cached translations
    """

    locale: str
    messages: Mapping[str, Any]
    fallback_locale: str | None = None
    plugins: list[Any] = field(default_factory=list)
    warn_on_missing_translations: bool = False
    pluralization_rules: Mapping[str, Callable[[float], str]] | None = None
    formats: Mapping[str, Mapping[str, Any]] | None = None
    diagnostics: bool = True
    cache_size: int = DEFAULT_CACHE_SIZE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> I18nConfig:
        """
        Build a config from a plain mapping.

        Raises:
            ConfigurationError: If the mapping has unknown or missing keys
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration is required")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        if "locale" not in data or "messages" not in data:
            raise ConfigurationError("Configuration requires 'locale' and 'messages'")

        return cls(**dict(data))

    @classmethod
    def from_yaml(cls, path: str | Path) -> I18nConfig:
        """
        Load a config from a YAML file.

        Supported keys are the dataclass fields except ``plugins`` and
        ``pluralization_rules``, plus ``messages_dir``: a directory of
        catalogs (relative to the config file) merged under ``messages``.

        Raises:
            ConfigurationError: If the file cannot be read or is malformed
        """
        config_path = Path(path)
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed YAML in config file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Could not read config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping, "
                f"got {type(data).__name__}"
            )

        for key in ("plugins", "pluralization_rules"):
            if key in data:
                raise ConfigurationError(f"'{key}' cannot be set from a config file")

        messages: dict[str, Any] = {}
        messages_dir = data.pop("messages_dir", None)
        if messages_dir:
            directory = Path(messages_dir)
            if not directory.is_absolute():
                directory = config_path.parent / directory
            messages.update(load_messages(directory))

        inline = data.get("messages") or {}
        if not isinstance(inline, dict):
            raise ConfigurationError("'messages' must be a mapping")
        for locale, tree in inline.items():
            if isinstance(tree, dict) and isinstance(messages.get(locale), dict):
                messages[locale] = {**messages[locale], **tree}
            else:
                messages[locale] = tree
        data["messages"] = messages

        return cls.from_mapping(data)

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: If the locale, messages or cache size is invalid
        """
        if not isinstance(self.locale, str) or not self.locale.strip():
            raise ConfigurationError("Locale must be a non-empty string")
        if self.messages is None:
            raise ConfigurationError("Messages are required")
        if not isinstance(self.messages, Mapping):
            raise ConfigurationError("Messages must be a mapping of locale to messages")
        if self.fallback_locale is not None and (
            not isinstance(self.fallback_locale, str) or not self.fallback_locale.strip()
        ):
            raise ConfigurationError("Fallback locale must be a non-empty string")
        if isinstance(self.cache_size, bool) or not isinstance(self.cache_size, int) or self.cache_size <= 0:
            raise ConfigurationError("Cache size must be a positive integer")

        available = ", ".join(self.messages.keys())
        has_messages = len(self.messages) > 0

        if not has_messages and self.diagnostics:
            logger.warning("Messages are empty - all translations will return keys")

        if has_messages and self.locale not in self.messages and not self.fallback_locale:
            raise ConfigurationError(
                f"Locale '{self.locale}' not found in messages and no fallback locale "
                f"provided. Available locales: {available}"
            )

        if self.diagnostics:
            if self.locale not in self.messages and self.fallback_locale:
                logger.warning(
                    f"Locale '{self.locale}' not found in messages, will use fallback "
                    f"locale '{self.fallback_locale}'. Available locales: {available}"
                )
            if self.fallback_locale and self.fallback_locale not in self.messages:
                logger.warning(
                    f"Fallback locale '{self.fallback_locale}' not found in messages. "
                    f"Available locales: {available}"
                )


def load_catalog(path: str | Path) -> dict[str, Any]:
    """
    Load a single message catalog.

    Args:
        path: YAML or JSON file holding one locale's messages

    Returns:
        The message tree, or an empty dict if the file is missing,
        malformed or not a mapping

    Note:
        JSON is a subset of YAML, so both formats go through the
        YAML loader.
    """
    catalog_path = Path(path)
    try:
        with open(catalog_path, encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        logger.debug(f"Could not read catalog {catalog_path}: {e}")
        return {}

    if not content.strip():
        return {}

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.warning(f"Malformed catalog {catalog_path}: {e}. Skipping.")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            f"Catalog {catalog_path} contains invalid type: {type(data).__name__}, "
            "expected a mapping. Skipping."
        )
        return {}
    return data


def load_messages(directory: str | Path) -> dict[str, dict[str, Any]]:
    """
    Load every catalog in a directory.

    Args:
        directory: Directory containing ``<locale>.yaml``/``.yml``/``.json``

    Returns:
        Mapping of locale (the file stem) to message tree
    """
    catalog_dir = Path(directory)
    if not catalog_dir.is_dir():
        logger.warning(f"Catalog directory {catalog_dir} does not exist")
        return {}

    messages: dict[str, dict[str, Any]] = {}
    for catalog_path in sorted(catalog_dir.iterdir()):
        if catalog_path.suffix.lower() not in CATALOG_SUFFIXES or not catalog_path.is_file():
            continue
        locale = catalog_path.stem
        tree = load_catalog(catalog_path)
        messages[locale] = {**messages.get(locale, {}), **tree}
    return messages


def coerce_config(config: Any = None, **overrides: Any) -> I18nConfig:
    """
    Normalize the accepted configuration forms into a validated copy.

    Args:
        config: An ``I18nConfig``, a mapping of its fields, or None when
            everything is passed as keyword arguments
        **overrides: Field values applied on top of ``config``

    Returns:
        A validated ``I18nConfig`` whose messages are a private deep copy

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    if config is None and not overrides:
        raise ConfigurationError("Configuration is required")

    if isinstance(config, I18nConfig):
        data = {f.name: getattr(config, f.name) for f in fields(I18nConfig)}
    elif isinstance(config, Mapping):
        data = dict(config)
    elif config is None:
        data = {}
    else:
        raise ConfigurationError(
            f"Configuration must be an I18nConfig or a mapping, got {type(config).__name__}"
        )
    data.update(overrides)

    resolved = I18nConfig.from_mapping(data)
    resolved.validate()

    resolved.messages = copy.deepcopy(dict(resolved.messages))
    resolved.plugins = list(resolved.plugins or [])
    return resolved
