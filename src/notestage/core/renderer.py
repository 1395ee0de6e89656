"""Markdown rendering.

Converts note sources to HTML with markdown-it-py. Math spans are typeset
to MathML on the server so pages need no client-side math script.
"""

import html
import logging
from typing import Any

from latex2mathml.converter import convert as latex_to_mathml
from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

logger = logging.getLogger(__name__)


def render_math(source: str, options: dict[str, Any]) -> str:
    """Typeset a LaTeX expression as MathML.

    Falls back to the escaped source (with its dollar delimiters) when the
    expression cannot be converted, so one bad formula never breaks a page.
    Only structural errors such as a dangling ``^`` fail; unknown macros are
    not errors and come through as identifiers (``<mi>\\foo</mi>``).

    Args:
        source: LaTeX source without delimiters
        options: Plugin options; ``display_mode`` selects block rendering

    Returns:
        MathML markup or an escaped ``<code class="math-error">`` fallback
    """
    display = bool(options.get("display_mode"))
    try:
        return latex_to_mathml(source, display="block" if display else "inline")
    except Exception as e:
        logger.warning(f"Math rendering failed for {source!r}: {e}")
        delimiter = "$$" if display else "$"
        return f'<code class="math-error">{html.escape(f"{delimiter}{source}{delimiter}")}</code>'


class MarkdownRenderer:
    """Renders markdown documents to HTML.

    Supports tables, footnotes, strikethrough, task lists, smart punctuation
    and ``$...$`` / ``$$...$$`` math. Raw HTML passes through unchanged since
    all content is first-party.
    """

    def __init__(self, *, typographer: bool = True) -> None:
        """Initialize renderer.

        Args:
            typographer: Enable smart quotes and dash/ellipsis replacements
        """
        self._md = (
            MarkdownIt("commonmark", {"html": True, "typographer": typographer})
            .enable(["table", "strikethrough"])
            .use(footnote_plugin)
            .use(tasklists_plugin)
            .use(dollarmath_plugin, renderer=render_math)
        )
        if typographer:
            self._md.enable(["replacements", "smartquotes"])

    def render(self, markdown_text: str) -> str:
        """Render markdown text to HTML.

        Args:
            markdown_text: Markdown source

        Returns:
            Rendered HTML fragment
        """
        logger.debug(f"Rendering {len(markdown_text)} characters of markdown")
        return self._md.render(markdown_text, {})
