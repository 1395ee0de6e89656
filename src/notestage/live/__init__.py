"""Live reload support for development mode."""

from notestage.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
