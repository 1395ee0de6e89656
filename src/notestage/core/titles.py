"""Display titles and sibling ordering for content names.

Folder and file names carry an optional ordering prefix, e.g. ``"2) Signals"``.
The prefix controls sidebar order and is hidden from display titles.
"""

import re
import sys
from typing import NamedTuple

ORDER_PREFIX_RE = re.compile(r"^(\d+)\)\s*(.*)$", re.DOTALL)


class SortKey(NamedTuple):
    """Ordering key derived from a raw filesystem name."""

    rank: int
    clean_name: str


def _split_order_prefix(raw: str) -> tuple[int | None, str]:
    """Split a raw name into its numeric prefix and the remaining name.

    Returns:
        (rank, rest) when the name has a ``"N) "`` prefix, (None, raw) otherwise
    """
    match = ORDER_PREFIX_RE.match(raw)
    if match is None:
        return None, raw
    return int(match.group(1)), match.group(2)


def strip_order_prefix(raw: str) -> str:
    """Return the name without its ``"N) "`` ordering prefix."""
    return _split_order_prefix(raw)[1]


def sort_key(raw: str) -> SortKey:
    """Build the sibling ordering key for a raw name.

    Names without a numeric prefix sort after all prefixed names and keep
    their full name as the secondary key.

    Args:
        raw: File stem or folder name (e.g., "1) analog_circuits")

    Returns:
        SortKey of (rank, clean_name)
    """
    rank, rest = _split_order_prefix(raw)
    if rank is None:
        return SortKey(rank=sys.maxsize, clean_name=raw)
    return SortKey(rank=rank, clean_name=rest)


def format_title(raw: str) -> str:
    """Format a filesystem name as a display title.

    Strips the ordering prefix, splits on underscores and upper-cases the
    first character of each word. Empty words are kept, so consecutive
    underscores produce consecutive spaces.

    Args:
        raw: File stem or folder name

    Returns:
        Display title (e.g., "1) analog_circuits" -> "Analog Circuits")
    """
    name = strip_order_prefix(raw)
    return " ".join(word[:1].upper() + word[1:] for word in name.split("_"))
