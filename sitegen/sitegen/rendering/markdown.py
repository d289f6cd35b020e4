"""Markdown to HTML conversion."""

from __future__ import annotations

from markdown_it import MarkdownIt

_md = MarkdownIt("commonmark", {"html": True}).enable("table")


def render_markdown(content: str) -> str:
    """Render a Markdown body to an HTML fragment."""
    if not content.strip():
        return ""
    return _md.render(content).strip()
