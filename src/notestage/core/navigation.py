"""Navigation tree builder.

Scans the content directory into an ordered sidebar tree. The tree is built
fresh for every request; the filesystem is the only source of truth.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypedDict

from notestage.core.resolver import build_url
from notestage.core.titles import format_title, sort_key
from notestage.core.types import IMAGES_DIR, INDEX_STEM, MARKDOWN_SUFFIX, URLPath

logger = logging.getLogger(__name__)


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    title: str
    path: str
    children: list[NavItemDict]


@dataclass
class NavItem:
    """Navigation item with children for the sidebar tree."""

    title: str
    path: URLPath
    children: list[NavItem] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"title": self.title, "path": self.path}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def contains(self, path: str) -> bool:
        """Check whether this item or any descendant links to path."""
        if self.path == path:
            return True
        return any(child.contains(path) for child in self.children)


def scan(content_root: Path, base_path: str = "") -> list[NavItem]:
    """Build the navigation tree for a content directory.

    Folders become sections, ``.md`` files become leaves. ``images`` folders
    and hidden entries are skipped at every depth, and ``index.md`` is the
    page of its folder rather than a leaf of its own.

    Args:
        content_root: Root directory holding markdown sources
        base_path: URL prefix applied to every item path

    Returns:
        Root-level NavItems ordered by sort key
    """
    return _scan_dir(content_root, [], base_path)


def find_item(items: list[NavItem], path: str) -> NavItem | None:
    """Find the item linking to path anywhere in the tree."""
    for item in items:
        if item.path == path:
            return item
        found = find_item(item.children, path)
        if found is not None:
            return found
    return None


def iter_documents(content_root: Path) -> Iterator[tuple[Path, list[str]]]:
    """Yield every markdown document under content_root in navigation order.

    Yields:
        (file path, URL segments) pairs; segments have the extension stripped
    """
    yield from _walk(content_root, [])


def list_entries(directory: Path) -> list[tuple[Path, bool]]:
    """List navigable entries of a directory, sorted by sort key.

    Unreadable directories and entries are skipped.

    Returns:
        (path, is_dir) pairs for sub-folders and markdown files
    """
    try:
        children = list(directory.iterdir())
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return []

    entries: list[tuple[Path, bool]] = []
    for child in children:
        if child.name.startswith("."):
            continue
        try:
            is_dir = child.is_dir()
        except OSError as e:
            logger.debug(f"Skipping unreadable entry {child}: {e}")
            continue

        if is_dir:
            if child.name == IMAGES_DIR:
                continue
            entries.append((child, True))
        elif child.suffix == MARKDOWN_SUFFIX:
            entries.append((child, False))

    entries.sort(key=lambda entry: _entry_key(entry[0], entry[1]))
    return entries


def _entry_key(path: Path, is_dir: bool) -> tuple[int, str, str]:
    name = path.name if is_dir else path.stem
    key = sort_key(name)
    return key.rank, key.clean_name, name


def _scan_dir(directory: Path, parents: list[str], base_path: str) -> list[NavItem]:
    """Recursively build NavItems for one directory level."""
    items: list[NavItem] = []
    for path, is_dir in list_entries(directory):
        if is_dir:
            segments = [*parents, path.name]
            items.append(
                NavItem(
                    title=format_title(path.name),
                    path=build_url(base_path, segments),
                    children=_scan_dir(path, segments, base_path),
                )
            )
        elif path.stem != INDEX_STEM:
            items.append(
                NavItem(
                    title=format_title(path.stem),
                    path=build_url(base_path, [*parents, path.stem]),
                )
            )
    return items


def _walk(directory: Path, parents: list[str]) -> Iterator[tuple[Path, list[str]]]:
    for path, is_dir in list_entries(directory):
        if is_dir:
            yield from _walk(path, [*parents, path.name])
        else:
            yield path, [*parents, path.stem]
