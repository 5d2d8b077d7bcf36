"""
Plugins for lingo.

Provides the plugin pipeline and the bundled plugins:
- markdown: inline Markdown to HTML
- icu: minimal ICU plural/select arguments
"""

from lingo.plugins.base import Plugin, PluginPipeline, get_hook
from lingo.plugins.icu import create_icu_plugin
from lingo.plugins.markdown import create_markdown_plugin

__all__ = [
    "Plugin",
    "PluginPipeline",
    "get_hook",
    "create_icu_plugin",
    "create_markdown_plugin",
]
