"""
Tests for engine configuration and catalog loading.

Tests cover:
- I18nConfig validation
- Catalog loading from YAML and JSON files
- Loading a full configuration from YAML
"""

import json
import tempfile
import unittest
from pathlib import Path


class TestI18nConfig(unittest.TestCase):
    """Tests for I18nConfig."""

    def test_defaults(self):
        from lingo.config import I18nConfig

        config = I18nConfig(locale="en", messages={"en": {}})

        self.assertIsNone(config.fallback_locale)
        self.assertEqual(config.plugins, [])
        self.assertFalse(config.warn_on_missing_translations)
        self.assertTrue(config.diagnostics)
        self.assertEqual(config.cache_size, 1000)

    def test_from_mapping_requires_fields(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        with self.assertRaises(ConfigurationError):
            I18nConfig.from_mapping({"locale": "en"})
        with self.assertRaises(ConfigurationError):
            I18nConfig.from_mapping(None)

    def test_invalid_cache_size(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        for size in (0, -5, True, "10"):
            config = I18nConfig(locale="en", messages={"en": {}}, cache_size=size)
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_invalid_fallback(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        config = I18nConfig(locale="en", messages={"en": {}}, fallback_locale="  ")
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_missing_locale_warns_with_fallback(self):
        from lingo.config import I18nConfig

        config = I18nConfig(locale="de", messages={"en": {}}, fallback_locale="en")

        with self.assertLogs("lingo.config", level="WARNING") as logs:
            config.validate()

        self.assertIn("will use fallback locale 'en'", logs.output[0])

    def test_missing_fallback_warns(self):
        from lingo.config import I18nConfig

        config = I18nConfig(locale="en", messages={"en": {}}, fallback_locale="fr")

        with self.assertLogs("lingo.config", level="WARNING") as logs:
            config.validate()

        self.assertIn("Fallback locale 'fr' not found", logs.output[0])

    def test_diagnostics_off_silences_warnings(self):
        from lingo.config import I18nConfig

        config = I18nConfig(locale="en", messages={}, diagnostics=False)

        with self.assertNoLogs("lingo.config", level="WARNING"):
            config.validate()

    def test_configuration_error_is_value_error(self):
        from lingo.errors import ConfigurationError, I18nError

        self.assertTrue(issubclass(ConfigurationError, ValueError))
        self.assertTrue(issubclass(ConfigurationError, I18nError))


class TestCatalogLoading(unittest.TestCase):
    """Tests for load_catalog and load_messages."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_load_yaml_catalog(self):
        from lingo.config import load_catalog

        catalog = self.path / "en.yaml"
        catalog.write_text("greeting: Hello\nnav:\n  home: Home\n", encoding="utf-8")

        self.assertEqual(load_catalog(catalog), {"greeting": "Hello", "nav": {"home": "Home"}})

    def test_load_json_catalog(self):
        from lingo.config import load_catalog

        catalog = self.path / "es.json"
        catalog.write_text(json.dumps({"greeting": "¡Hola!"}), encoding="utf-8")

        self.assertEqual(load_catalog(catalog), {"greeting": "¡Hola!"})

    def test_bad_catalogs_return_empty(self):
        """Test that missing, empty, malformed and non-mapping files are skipped."""
        from lingo.config import load_catalog

        empty = self.path / "empty.yaml"
        empty.write_text("   \n", encoding="utf-8")
        malformed = self.path / "bad.yaml"
        malformed.write_text("key: [unclosed\n", encoding="utf-8")
        listing = self.path / "list.yaml"
        listing.write_text("- a\n- b\n", encoding="utf-8")

        self.assertEqual(load_catalog(self.path / "missing.yaml"), {})
        self.assertEqual(load_catalog(empty), {})
        with self.assertLogs("lingo.config", level="WARNING"):
            self.assertEqual(load_catalog(malformed), {})
        with self.assertLogs("lingo.config", level="WARNING"):
            self.assertEqual(load_catalog(listing), {})

    def test_load_messages_directory(self):
        from lingo.config import load_messages

        (self.path / "en.yaml").write_text("greeting: Hello\n", encoding="utf-8")
        (self.path / "fr.yml").write_text("greeting: Bonjour\n", encoding="utf-8")
        (self.path / "de.json").write_text('{"greeting": "Hallo"}', encoding="utf-8")
        (self.path / "notes.txt").write_text("ignored", encoding="utf-8")

        messages = load_messages(self.path)

        self.assertEqual(set(messages), {"en", "fr", "de"})
        self.assertEqual(messages["fr"]["greeting"], "Bonjour")

    def test_load_messages_missing_directory(self):
        from lingo.config import load_messages

        with self.assertLogs("lingo.config", level="WARNING"):
            self.assertEqual(load_messages(self.path / "nope"), {})


class TestConfigFromYaml(unittest.TestCase):
    """Tests for I18nConfig.from_yaml."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_inline_messages(self):
        from lingo import create_i18n
        from lingo.config import I18nConfig

        config_file = self.path / "i18n.yaml"
        config_file.write_text(
            "locale: es\n"
            "fallback_locale: en\n"
            "cache_size: 50\n"
            "messages:\n"
            "  en:\n"
            "    greeting: Hello\n"
            "    farewell: Bye\n"
            "  es:\n"
            "    greeting: Hola\n",
            encoding="utf-8",
        )

        config = I18nConfig.from_yaml(config_file)
        self.assertEqual(config.cache_size, 50)

        i18n = create_i18n(config)
        self.assertEqual(i18n.t("greeting"), "Hola")
        self.assertEqual(i18n.t("farewell"), "Bye")

    def test_messages_dir(self):
        """Test catalogs loaded relative to the config file."""
        from lingo.config import I18nConfig

        locales = self.path / "locales"
        locales.mkdir()
        (locales / "en.yaml").write_text("greeting: Hello\nfarewell: Bye\n", encoding="utf-8")

        config_file = self.path / "i18n.yaml"
        config_file.write_text(
            "locale: en\nmessages_dir: locales\nmessages:\n  en:\n    farewell: Goodbye\n",
            encoding="utf-8",
        )

        config = I18nConfig.from_yaml(config_file)

        self.assertEqual(config.messages["en"]["greeting"], "Hello")
        self.assertEqual(config.messages["en"]["farewell"], "Goodbye")

    def test_malformed_file(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        config_file = self.path / "i18n.yaml"
        config_file.write_text("locale: [en\n", encoding="utf-8")

        with self.assertRaises(ConfigurationError):
            I18nConfig.from_yaml(config_file)

    def test_missing_file(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        with self.assertRaises(ConfigurationError):
            I18nConfig.from_yaml(self.path / "missing.yaml")

    def test_non_mapping_document(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        config_file = self.path / "i18n.yaml"
        config_file.write_text("- en\n- es\n", encoding="utf-8")

        with self.assertRaises(ConfigurationError):
            I18nConfig.from_yaml(config_file)

    def test_code_only_keys_rejected(self):
        from lingo.config import I18nConfig
        from lingo.errors import ConfigurationError

        config_file = self.path / "i18n.yaml"
        config_file.write_text("locale: en\nmessages: {}\nplugins: [icu]\n", encoding="utf-8")

        with self.assertRaises(ConfigurationError):
            I18nConfig.from_yaml(config_file)


if __name__ == "__main__":
    unittest.main()
