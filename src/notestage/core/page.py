"""Page composition.

Ties routing, rendering, post-processing and navigation together into the
values handed to the layout template.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment

from notestage.core.figures import caption_images, format_notes
from notestage.core.navigation import NavItem, find_item, scan
from notestage.core.recent import DEFAULT_RECENT_LIMIT, recent
from notestage.core.renderer import MarkdownRenderer
from notestage.core.resolver import (
    build_url,
    is_root,
    read_document,
    resolve,
    resolve_directory,
)
from notestage.core.titles import format_title
from notestage.core.types import URLPath

logger = logging.getLogger(__name__)

NOT_FOUND_HTML = "<h1>404 Not Found</h1>"


@dataclass(frozen=True)
class RenderedPage:
    """Composed page ready for the layout template."""

    title: str
    page_title: str
    sidebar_html: str
    body_html: str
    active_path: URLPath
    fragment: bool = False


@dataclass(frozen=True)
class NotFoundPage:
    """Outcome for paths that do not resolve to a note or folder."""

    path: str
    body_html: str = NOT_FOUND_HTML


def is_fragment_request(headers: Mapping[str, str] | None) -> bool:
    """Check for an htmx partial navigation request."""
    if not headers:
        return False
    for name, value in headers.items():
        if name.lower() == "hx-request":
            return value.strip().lower() == "true"
    return False


class PageComposer:
    """Composes pages from URL segments.

    Everything is computed per call: the navigation tree and the recent list
    are rebuilt from the filesystem each time.
    """

    def __init__(
        self,
        source_dir: Path,
        env: Environment,
        *,
        site_title: str = "Notes",
        base_path: str = "",
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        renderer: MarkdownRenderer | None = None,
    ) -> None:
        """Initialize composer.

        Args:
            source_dir: Root directory containing markdown sources
            env: Jinja environment providing sidebar and fragment templates
            site_title: Title of the landing page and of every layout
            base_path: Normalized URL prefix ("" or "/notes")
            recent_limit: Number of entries in the "Recently Added" table
            renderer: Markdown renderer; a default one is created if omitted
        """
        self._source_dir = source_dir
        self._env = env
        self._site_title = site_title
        self._base_path = base_path
        self._recent_limit = recent_limit
        self._renderer = renderer or MarkdownRenderer()

    @property
    def source_dir(self) -> Path:
        """Root directory containing markdown sources."""
        return self._source_dir

    @property
    def site_title(self) -> str:
        """Site title shown in the layout."""
        return self._site_title

    def navigation(self) -> list[NavItem]:
        """Scan the sidebar tree."""
        return scan(self._source_dir, self._base_path)

    def compose(
        self,
        segments: Sequence[str],
        headers: Mapping[str, str] | None = None,
    ) -> RenderedPage | NotFoundPage:
        """Compose the page for a request path.

        Args:
            segments: Decoded URL segments relative to the site prefix
            headers: Request headers; ``HX-Request`` marks a fragment request

        Returns:
            RenderedPage on success, NotFoundPage when nothing matches
        """
        segments = list(segments)
        root = is_root(segments)
        active_path = build_url(self._base_path, [] if root else segments)

        source_path = resolve(self._source_dir, segments)
        if source_path is not None:
            markdown_text = read_document(source_path)
            if markdown_text is None:
                return NotFoundPage(path="/".join(segments))
            items = self.navigation()
            body_html = self._render_body(markdown_text)
            if root:
                body_html += self._render_recent()
        else:
            directory = resolve_directory(self._source_dir, segments)
            if directory is None:
                logger.debug(f"No page for /{'/'.join(segments)}")
                return NotFoundPage(path="/".join(segments))
            items = self.navigation()
            body_html = self._render_section(segments, items, active_path)

        return RenderedPage(
            title=self._site_title,
            page_title=self._site_title if root else format_title(segments[-1]),
            sidebar_html=self._render_sidebar(items, active_path),
            body_html=body_html,
            active_path=active_path,
            fragment=is_fragment_request(headers),
        )

    def _render_body(self, markdown_text: str) -> str:
        html = self._renderer.render(markdown_text)
        html = format_notes(html)
        return caption_images(html)

    def _render_recent(self) -> str:
        items = recent(self._source_dir, self._recent_limit, self._base_path)
        return self._env.get_template("recent.html").render(items=items)

    def _render_section(
        self,
        segments: list[str],
        items: list[NavItem],
        active_path: URLPath,
    ) -> str:
        """Render a generated overview for a folder without index.md."""
        section = find_item(items, active_path)
        return self._env.get_template("section.html").render(
            title=format_title(segments[-1]),
            children=section.children if section is not None else [],
        )

    def _render_sidebar(self, items: list[NavItem], active_path: URLPath) -> str:
        return self._env.get_template("sidebar.html").render(
            items=items,
            active_path=active_path,
            site_title=self._site_title,
            home_path=build_url(self._base_path, []),
        )
