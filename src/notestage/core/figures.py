"""HTML post-processing for rendered notes.

Textual passes over already-rendered HTML. The tag vocabulary is small and
authored by us, so regular expressions are enough here.
"""

import re

# A paragraph wrapper is captured so a lone image's <p> can be dropped
# around its figure.
IMG_TAG_RE = re.compile(
    r"(?P<open><p>\s*)?<img\s+(?P<attrs>[^>]*?)\s*/?>(?P<close>\s*</p>)?",
    re.IGNORECASE,
)
SRC_ATTR_RE = re.compile(r'\bsrc="([^"]*)"')
ALT_ATTR_RE = re.compile(r'\balt="([^"]*)"')
TITLE_ATTR_RE = re.compile(r'\btitle="([^"]*)"')

NOTE_BLOCK_RE = re.compile(r"<blockquote>(\s*<p>)\s*\[!NOTE\]")


def _attr(pattern: re.Pattern[str], attrs: str) -> str:
    match = pattern.search(attrs)
    return match.group(1) if match else ""


def caption_images(html: str) -> str:
    """Rewrite image tags into numbered, captioned figures.

    Each image is normalized to ``src``/``alt``/``style`` attributes, with the
    ``title`` attribute used as the CSS width. Images with alt text are
    wrapped in a ``<figure>`` numbered in document order starting at 1;
    images without alt text stay bare and do not consume a number. A figure
    replaces the paragraph that held only its image, since <figure> cannot
    sit inside <p>.

    Args:
        html: Rendered page HTML

    Returns:
        HTML with images rewritten
    """
    figure_number = 0

    def replace(match: re.Match[str]) -> str:
        nonlocal figure_number
        attrs = match.group("attrs")
        opening = match.group("open") or ""
        closing = match.group("close") or ""
        src = _attr(SRC_ATTR_RE, attrs)
        alt = _attr(ALT_ATTR_RE, attrs)
        title = _attr(TITLE_ATTR_RE, attrs)

        style = f"width: {title};" if title else ""
        img = f'<img src="{src}" alt="{alt}" style="{style}">'
        if not alt:
            return f"{opening}{img}{closing}"

        figure_number += 1
        figure = (
            f'<figure class="image-container">{img}'
            f"<figcaption><strong>Fig. {figure_number}:</strong> {alt}</figcaption>"
            "</figure>"
        )
        if opening and closing:
            return figure
        # Images sharing a paragraph keep the wrapper.
        return f"{opening}{figure}{closing}"

    return IMG_TAG_RE.sub(replace, html)


def format_notes(html: str) -> str:
    """Style ``> [!NOTE]`` blockquotes as note callouts.

    Args:
        html: Rendered page HTML

    Returns:
        HTML with note blockquotes classed and their marker replaced
    """
    return NOTE_BLOCK_RE.sub(r'<blockquote class="note">\1<strong>NOTE</strong>', html)
