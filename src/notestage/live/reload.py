"""Live reload over WebSocket.

Watches the notes directory and tells connected browsers which pages changed.
Any change to a matching file, deletions included, triggers a reload since the
sidebar is rebuilt from the filesystem on every request.
"""

import asyncio
import json
import logging
import weakref
from collections.abc import Iterable
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, DefaultFilter, awatch

from notestage.core.resolver import build_url
from notestage.core.types import INDEX_STEM

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["*.md"]


class NoteFilter(DefaultFilter):
    """watchfiles filter accepting files under a root that match glob patterns.

    Patterns are matched against the path relative to the root, right to left,
    so ``*.md`` matches notes at any depth. The default ignores of watchfiles
    (VCS folders, editor swap files) still apply.
    """

    def __init__(self, root: Path, patterns: list[str]) -> None:
        super().__init__()
        self.root = root
        self.patterns = patterns

    def __call__(self, change: Change, path: str) -> bool:
        return super().__call__(change, path) and self.matches(Path(path))

    def matches(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return False
        return any(relative.match(pattern) for pattern in self.patterns)


class LiveReloadManager:
    """Tracks live reload clients and the file watcher feeding them."""

    def __init__(
        self,
        source_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        base_path: str = "",
    ) -> None:
        """Initialize the live reload manager.

        Args:
            source_dir: Notes directory to watch
            watch_patterns: Glob patterns relative to source_dir (default: ["*.md"])
            base_path: URL prefix of the page paths sent to clients
        """
        self._source_dir = source_dir
        self._filter = NoteFilter(source_dir, watch_patterns or DEFAULT_WATCH_PATTERNS)
        self._base_path = base_path
        self._clients: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def client_count(self) -> int:
        """Number of open client connections."""
        return sum(1 for ws in self._clients if not ws.closed)

    @property
    def running(self) -> bool:
        """Whether the file watcher is active."""
        return self._watch_task is not None

    async def start(self) -> None:
        """Start watching; calling it twice keeps the first watcher."""
        if self._watch_task is not None:
            return
        logger.info(f"Watching {self._source_dir} for changes")
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop watching and disconnect every client."""
        task, self._watch_task = self._watch_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        for ws in list(self._clients):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Hold a client connection open until it goes away.

        Clients never send anything meaningful; incoming messages are ignored.
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self._clients.add(ws)
        logger.debug(f"Live reload client connected ({self.client_count} open)")

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    logger.debug(f"Live reload connection error: {ws.exception()}")
                    break
        finally:
            self._clients.discard(ws)

        return ws

    def matches_patterns(self, path: Path) -> bool:
        """Check whether a path under the notes directory is watched."""
        return self._filter.matches(path)

    def to_url_path(self, file_path: Path) -> str:
        """Map a note file to the URL of the page rendering it.

        ``index.md`` files map to their folder (or to the landing page).
        """
        segments = list(file_path.relative_to(self._source_dir).with_suffix("").parts)
        if segments and segments[-1] == INDEX_STEM:
            segments.pop()
        return build_url(self._base_path, segments)

    def changed_pages(self, changes: Iterable[tuple[Change, str]]) -> list[str]:
        """Collapse a batch of file changes into the sorted set of page URLs."""
        pages = {
            self.to_url_path(Path(path))
            for _, path in changes
            if self.matches_patterns(Path(path))
        }
        return sorted(pages)

    async def _watch_files(self) -> None:
        async for changes in awatch(self._source_dir, watch_filter=self._filter):
            for page in self.changed_pages(changes):
                logger.info(f"Changed: {page}")
                await self.broadcast_reload(page)

    async def broadcast_reload(self, path: str) -> None:
        """Send a reload event for one page to every open client.

        Args:
            path: URL path of the changed page
        """
        message = json.dumps({"type": "reload", "path": path})
        for ws in list(self._clients):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                logger.debug("Live reload client went away during send")


def create_live_reload_routes(
    manager: LiveReloadManager,
    base_path: str = "",
) -> list[web.RouteDef]:
    return [web.get(f"{base_path}/ws/live-reload", manager.handle_websocket)]
