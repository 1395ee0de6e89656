"""Notestage - a Markdown notes wiki served as HTML."""

__version__ = "0.1.0"
