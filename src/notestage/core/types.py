"""Core type definitions."""

from typing import NewType

# URL path for routing and links (e.g., "/guide", "/notes/chapter/topic")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Folder name excluded from navigation and activity scans at every depth
IMAGES_DIR = "images"

# Document serving as the page of its containing folder
INDEX_STEM = "index"

MARKDOWN_SUFFIX = ".md"
