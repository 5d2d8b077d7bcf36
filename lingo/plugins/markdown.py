"""
Markdown plugin: renders a small inline Markdown subset to HTML.

Supported syntax: ``**bold**``, ``*italic*``, `` `code` `` and
``[text](url)``. The message text is HTML-escaped first, and links with
script-capable schemes are neutralized.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from typing import Any

from lingo.plugins.base import Plugin

BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
ITALIC_PATTERN = re.compile(r"\*(.*?)\*")
CODE_PATTERN = re.compile(r"`(.*?)`")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

BLOCKED_SCHEMES = ("javascript:", "data:", "vbscript:", "file:")


def sanitize_href(href: str) -> str:
    """Replace hrefs using a blocked scheme with '#'."""
    # Entities are decoded so that "javascript&#58;" cannot slip through
    normalized = re.sub(r"\s+", "", html.unescape(href)).lower()
    if normalized.startswith(BLOCKED_SCHEMES):
        return "#"
    return href.strip()


def render_markdown(text: str) -> str:
    result = html.escape(text, quote=True)
    result = BOLD_PATTERN.sub(r"<strong>\1</strong>", result)
    result = ITALIC_PATTERN.sub(r"<em>\1</em>", result)
    result = CODE_PATTERN.sub(r"<code>\1</code>", result)
    return LINK_PATTERN.sub(
        lambda m: f'<a href="{sanitize_href(m.group(2))}">{m.group(1)}</a>', result
    )


def create_markdown_plugin() -> Plugin:
    """Create the ``markdown`` transform plugin."""

    def transform(key: str, text: str, params: Mapping[str, Any], locale: str) -> str:
        return render_markdown(text)

    return Plugin(name="markdown", transform=transform)
