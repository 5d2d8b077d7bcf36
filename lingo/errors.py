"""
Exception types for the lingo translation engine.

Only configuration problems are raised to callers. Resolution-time faults
(missing messages, missing parameters, failing plugins or formatters) are
recovered inside the engine and never surface as exceptions.
"""


class I18nError(Exception):
    """Base class for all lingo errors."""


class ConfigurationError(I18nError, ValueError):
    """Raised for invalid engine configuration or invalid API arguments."""
