"""
Tests for locale-aware formatting.

Tests cover:
- Number presets
- Currency formatting and unknown currencies
- Date presets
- Relative time
- Locale tag normalization
"""

import unittest
from datetime import date, datetime, timedelta


class TestNumberFormatting(unittest.TestCase):
    """Tests for the number formatter."""

    def test_default(self):
        """Test default decimal formatting."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_number(1234567.891, "", "en"), "1,234,567.891")
        self.assertEqual(registry.format_number(-1234.56, None, "en"), "-1,234.56")

    def test_german_grouping(self):
        """Test locale-specific separators."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_number(1234567, "", "de"), "1.234.567")

    def test_non_number(self):
        """Test that non-numbers are stringified."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_number("abc", "", "en"), "abc")
        self.assertEqual(registry.format_number(True, "", "en"), "True")

    def test_presets(self):
        """Test named number presets."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry(
            {
                "number": {
                    "percent": {"style": "percent"},
                    "fixed": "#,##0.00",
                    "compact": {"style": "compact"},
                    "price": {"style": "currency", "currency": "EUR"},
                }
            }
        )

        self.assertEqual(registry.format_number(0.25, "percent", "en"), "25%")
        self.assertEqual(registry.format_number(1234.5, "fixed", "en"), "1,234.50")
        self.assertEqual(registry.format_number(1234567, "compact", "en"), "1M")
        self.assertEqual(registry.format_number(1234.5, "price", "en"), "€1,234.50")

    def test_spec_with_formatter_prefix(self):
        """Test that a placeholder-style spec selects the preset."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry({"number": {"percent": {"style": "percent"}}})
        self.assertEqual(registry.format_number(0.5, "number:percent", "en"), "50%")

    def test_unknown_preset_uses_default(self):
        """Test that an unknown preset falls back to decimal."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_number(1000, "nope", "en"), "1,000")

    def test_unknown_locale_falls_back(self):
        """Test that unknown locales format as English."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_number(1234.5, "", "xx-YY"), "1,234.5")


class TestCurrencyFormatting(unittest.TestCase):
    """Tests for the currency formatter."""

    def test_usd_default(self):
        """Test the default currency."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_currency(1234.5, "currency", "en"), "$1,234.50")
        self.assertEqual(registry.format_currency(1234.5, None, "en"), "$1,234.50")

    def test_explicit_currency(self):
        """Test an explicit, lowercase currency code."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_currency(1234.5, "currency:eur", "en"), "€1,234.50")

    def test_unknown_currency(self):
        """Test the plain-text fallback for an unknown code."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        with self.assertLogs("lingo.formatter", level="ERROR"):
            result = registry.format_currency(10, "currency:QQQ", "en")

        self.assertEqual(result, "QQQ 10")


class TestDateFormatting(unittest.TestCase):
    """Tests for the date formatter."""

    def test_default_short_date(self):
        """Test the default numeric date."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_date(date(2024, 1, 15), "", "en"), "01/15/2024")
        self.assertEqual(registry.format_date(datetime(2024, 1, 15, 9, 30), "", "en"), "01/15/2024")

    def test_short_date_is_two_digit(self):
        """Test that the default date pads month and day in each locale's order."""
        from lingo.formatter import FormatterRegistry, short_date_pattern

        registry = FormatterRegistry()
        value = date(2024, 3, 5)

        self.assertEqual(short_date_pattern("en"), "MM/dd/y")
        self.assertEqual(registry.format_date(value, "", "en"), "03/05/2024")
        self.assertEqual(registry.format_date(value, "", "de"), "05.03.2024")

    def test_presets(self):
        """Test width and skeleton presets."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry(
            {"date": {"long": "long", "short_month": {"skeleton": "yMMMd"}}}
        )
        value = date(2024, 1, 15)

        self.assertEqual(registry.format_date(value, "long", "en"), "January 15, 2024")
        self.assertEqual(registry.format_date(value, "date:short_month", "en"), "Jan 15, 2024")

    def test_non_date(self):
        """Test that non-dates are stringified."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(registry.format_date("tomorrow", "", "en"), "tomorrow")


class TestRegistry(unittest.TestCase):
    """Tests for FormatterRegistry bookkeeping."""

    def test_builtins_present(self):
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertEqual(set(registry), {"number", "date", "currency"})
        self.assertTrue(registry.is_builtin("date"))

    def test_register_and_restore(self):
        """Test shadowing and restoring a built-in."""
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        registry.register("number", lambda value, spec, locale: "shadowed")
        self.assertEqual(registry["number"](1, "", "en"), "shadowed")

        self.assertTrue(registry.restore_builtin("number"))
        self.assertEqual(registry["number"](1000, "", "en"), "1,000")

    def test_restore_unknown(self):
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        self.assertFalse(registry.restore_builtin("custom"))

    def test_unregister(self):
        from lingo.formatter import FormatterRegistry

        registry = FormatterRegistry()
        registry.register("custom", lambda value, spec, locale: "x")
        registry.unregister("custom")
        registry.unregister("custom")

        self.assertNotIn("custom", registry)


class TestRelativeTime(unittest.TestCase):
    """Tests for format_relative_time."""

    def setUp(self):
        self.base = datetime(2024, 1, 15, 12, 0, 0)

    def test_future_and_past(self):
        from lingo.formatter import format_relative_time

        base = self.base
        self.assertEqual(format_relative_time(base + timedelta(hours=2), base, "en"), "in 2 hours")
        self.assertEqual(format_relative_time(base - timedelta(days=3), base, "en"), "3 days ago")
        self.assertEqual(format_relative_time(base + timedelta(days=1), base, "en"), "in 1 day")
        self.assertEqual(
            format_relative_time(base - timedelta(seconds=30), base, "en"), "30 seconds ago"
        )

    def test_rounding(self):
        """Test that the quotient is rounded within the unit."""
        from lingo.formatter import format_relative_time

        value = self.base + timedelta(seconds=90)
        self.assertEqual(format_relative_time(value, self.base, "en"), "in 2 minutes")

    def test_half_rounds_up(self):
        """Test that a quotient ending in .5 rounds toward positive infinity."""
        from lingo.formatter import format_relative_time

        base = self.base
        self.assertEqual(format_relative_time(base + timedelta(seconds=150), base, "en"), "in 3 minutes")
        self.assertEqual(format_relative_time(base + timedelta(hours=2, minutes=30), base, "en"), "in 3 hours")
        self.assertEqual(format_relative_time(base - timedelta(seconds=150), base, "en"), "2 minutes ago")

    def test_now(self):
        """Test sub-second deltas."""
        from lingo.formatter import format_relative_time

        self.assertEqual(format_relative_time(self.base, self.base, "en"), "now")
        self.assertEqual(format_relative_time(self.base, self.base, "es"), "ahora")
        self.assertEqual(format_relative_time(self.base, self.base, "xx"), "now")

    def test_default_base_is_now(self):
        from lingo.formatter import format_relative_time

        value = datetime.now() + timedelta(days=3, minutes=1)
        self.assertEqual(format_relative_time(value, locale="en"), "in 3 days")

    def test_invalid_input(self):
        """Test that non-datetimes are rejected."""
        from lingo.errors import ConfigurationError
        from lingo.formatter import format_relative_time

        with self.assertRaises(ConfigurationError):
            format_relative_time("2024-01-15", self.base)
        with self.assertRaises(ConfigurationError):
            format_relative_time(self.base, "2024-01-15")


class TestLocales(unittest.TestCase):
    """Tests for locale tag handling."""

    def test_normalize_locale(self):
        from lingo.locales import normalize_locale

        self.assertEqual(normalize_locale("en-US"), "en_US")
        self.assertEqual(normalize_locale("en_US.UTF-8"), "en_US")
        self.assertEqual(normalize_locale("sr_RS@latin"), "sr_RS")
        self.assertEqual(normalize_locale("C"), "en")
        self.assertEqual(normalize_locale(""), "en")

    def test_language_of(self):
        from lingo.locales import language_of

        self.assertEqual(language_of("fr-CA"), "fr")
        self.assertEqual(language_of("PT_br"), "pt")

    def test_get_babel_locale(self):
        from lingo.locales import get_babel_locale

        self.assertEqual(get_babel_locale("pt-BR").language, "pt")
        self.assertEqual(get_babel_locale("de-XX").language, "de")
        self.assertEqual(get_babel_locale("not a locale").language, "en")


if __name__ == "__main__":
    unittest.main()
