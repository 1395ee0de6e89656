"""Recently modified notes for the landing page."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from notestage.core.navigation import iter_documents
from notestage.core.resolver import build_url
from notestage.core.titles import format_title
from notestage.core.types import INDEX_STEM, URLPath

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10


@dataclass(frozen=True)
class RecentItem:
    """A note with its last modification time."""

    title: str
    path: URLPath
    category: str
    modified: float

    @property
    def modified_date(self) -> str:
        """Modification date as YYYY-MM-DD in local time."""
        return datetime.fromtimestamp(self.modified).strftime("%Y-%m-%d")


def recent(
    content_root: Path,
    limit: int = DEFAULT_RECENT_LIMIT,
    base_path: str = "",
) -> list[RecentItem]:
    """Collect the most recently modified notes.

    Walks every markdown document except the landing page. Files whose
    metadata cannot be read are skipped.

    Args:
        content_root: Root directory holding markdown sources
        limit: Maximum number of items to return
        base_path: URL prefix applied to item paths

    Returns:
        Items ordered by modification time, newest first; ties keep walk order
    """
    if limit <= 0:
        return []

    items: list[RecentItem] = []
    for source_path, file_segments in iter_documents(content_root):
        category = format_title(file_segments[0]) if len(file_segments) > 1 else ""
        segments = file_segments
        if segments[-1] == INDEX_STEM:
            segments = segments[:-1]
            if not segments:
                continue

        try:
            modified = source_path.stat().st_mtime
        except OSError as e:
            logger.debug(f"Skipping {source_path}: {e}")
            continue

        items.append(
            RecentItem(
                title=format_title(segments[-1]),
                path=build_url(base_path, segments),
                category=category,
                modified=modified,
            )
        )

    items.sort(key=lambda item: item.modified, reverse=True)
    return items[:limit]
