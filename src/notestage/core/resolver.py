"""Route resolution from URL segments to markdown sources.

Every user-supplied segment is validated before it touches the filesystem,
and the final path is confined to the content root.
"""

import logging
from pathlib import Path, PurePosixPath, PureWindowsPath
from urllib.parse import quote

from notestage.core.types import IMAGES_DIR, INDEX_STEM, MARKDOWN_SUFFIX, URLPath

logger = logging.getLogger(__name__)


def split_path(url_path: str) -> list[str]:
    """Split an already-decoded request path into non-empty segments.

    Args:
        url_path: Path relative to the site prefix (e.g., "/chapter/topic")

    Returns:
        List of segments (e.g., ["chapter", "topic"])
    """
    return [part for part in url_path.split("/") if part]


def build_url(base_path: str, segments: list[str]) -> URLPath:
    """Build a link for URL segments under the site prefix.

    Args:
        base_path: Normalized site prefix ("" or "/notes")
        segments: Raw path segments

    Returns:
        Quoted URL path (e.g., "/notes/1%29%20Basics/intro")
    """
    if not segments:
        return URLPath(f"{base_path}/")
    quoted = "/".join(quote(segment, safe="") for segment in segments)
    return URLPath(f"{base_path}/{quoted}")


def is_root(segments: list[str]) -> bool:
    """Check whether segments address the landing page."""
    return not segments or segments == [INDEX_STEM]


def is_safe_segment(segment: str) -> bool:
    """Check that a segment cannot escape its parent directory."""
    if not segment or segment in (".", ".."):
        return False
    if ".." in segment:
        return False
    if any(char in segment for char in ("/", "\\", "\x00")):
        return False
    if PurePosixPath(segment).is_absolute() or PureWindowsPath(segment).drive:
        return False
    return True


def resolve(content_root: Path, segments: list[str]) -> Path | None:
    """Resolve URL segments to a markdown source file.

    Handles the index.md convention for the root and for folders. Hidden
    entries and anything inside an images folder are not routable, matching
    what the navigation scan shows.

    Args:
        content_root: Root directory holding markdown sources
        segments: Decoded URL segments

    Returns:
        Path to the source file, or None when nothing readable matches
    """
    if is_root(segments):
        return _confine(content_root, content_root / f"{INDEX_STEM}{MARKDOWN_SUFFIX}")

    if not all(is_safe_segment(segment) for segment in segments):
        logger.debug(f"Rejected unsafe path segments: {segments!r}")
        return None
    if any(segment.startswith(".") for segment in segments):
        return None

    *parents, last = segments
    if not _is_reserved(parents):
        candidate = content_root.joinpath(*parents, f"{last}{MARKDOWN_SUFFIX}")
        resolved = _confine(content_root, candidate)
        if resolved is not None:
            return resolved

    if _is_reserved(segments):
        return None
    index_candidate = content_root.joinpath(*segments, f"{INDEX_STEM}{MARKDOWN_SUFFIX}")
    return _confine(content_root, index_candidate)


def resolve_directory(content_root: Path, segments: list[str]) -> Path | None:
    """Resolve URL segments to a navigable folder inside the content root.

    Hidden folders and image folders are not navigable.

    Returns:
        Path to the directory, or None when segments do not name one
    """
    if not segments or not all(is_safe_segment(segment) for segment in segments):
        return None
    if _is_reserved(segments):
        return None

    candidate = content_root.joinpath(*segments)
    try:
        root = content_root.resolve()
        resolved = candidate.resolve()
    except OSError:
        return None

    if not resolved.is_relative_to(root) or not resolved.is_dir():
        return None
    return candidate


def read_document(source_path: Path) -> str | None:
    """Read a markdown source as UTF-8 text.

    Returns:
        File contents, or None when the file cannot be read
    """
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {source_path}: {e}")
        return None


def _is_reserved(folders: list[str]) -> bool:
    """Check for hidden or image folders, which are never routed."""
    return any(folder == IMAGES_DIR or folder.startswith(".") for folder in folders)


def _confine(content_root: Path, candidate: Path) -> Path | None:
    """Return candidate if it is a file located inside content_root."""
    try:
        root = content_root.resolve()
        resolved = candidate.resolve()
    except OSError:
        return None

    if not resolved.is_relative_to(root):
        logger.debug(f"Rejected path outside content root: {candidate}")
        return None
    if not resolved.is_file():
        return None
    return candidate
