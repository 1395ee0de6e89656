"""Tests for live reload."""

import asyncio
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from watchfiles import Change

from notestage.live import LiveReloadManager
from notestage.live.reload import create_live_reload_routes


class TestMatchesPatterns:
    """Tests for LiveReloadManager.matches_patterns()."""

    def test__markdown_at_any_depth__matches(self, content_dir: Path) -> None:
        """Default pattern matches markdown files in nested folders."""
        manager = LiveReloadManager(content_dir)

        assert manager.matches_patterns(content_dir / "topic.md")
        assert manager.matches_patterns(content_dir / "a" / "b" / "topic.md")

    def test__other_files__ignored(self, content_dir: Path) -> None:
        """Non-markdown files and files outside the source are ignored."""
        manager = LiveReloadManager(content_dir)

        assert not manager.matches_patterns(content_dir / "images" / "plot.png")
        assert not manager.matches_patterns(content_dir.parent / "outside.md")

    def test__custom_patterns__used(self, content_dir: Path) -> None:
        """Custom patterns replace the default."""
        manager = LiveReloadManager(content_dir, ["*.png"])

        assert manager.matches_patterns(content_dir / "images" / "plot.png")
        assert not manager.matches_patterns(content_dir / "topic.md")


class TestToUrlPath:
    """Tests for LiveReloadManager.to_url_path()."""

    @pytest.mark.parametrize(
        ("relative", "expected"),
        [
            ("topic.md", "/topic"),
            ("index.md", "/"),
            ("chapter/index.md", "/chapter"),
            ("1) Basics/first_steps.md", "/1%29%20Basics/first_steps"),
        ],
    )
    def test__source_file__maps_to_page(
        self, content_dir: Path, relative: str, expected: str
    ) -> None:
        """Map source files to the URL of the page they render."""
        manager = LiveReloadManager(content_dir)

        assert manager.to_url_path(content_dir / relative) == expected

    def test__base_path__prefixes_url(self, content_dir: Path) -> None:
        """Prefix paths with the site base path."""
        manager = LiveReloadManager(content_dir, base_path="/notes")

        assert manager.to_url_path(content_dir / "chapter" / "topic.md") == (
            "/notes/chapter/topic"
        )


class TestWebSocket:
    """Tests for the live reload endpoint."""

    @pytest.mark.asyncio
    async def test__broadcast__sends_reload_message(
        self, aiohttp_client: Any, content_dir: Path
    ) -> None:
        """Connected clients receive reload events."""
        manager = LiveReloadManager(content_dir, base_path="/notes")
        app = web.Application()
        app.router.add_routes(create_live_reload_routes(manager, "/notes"))
        client = await aiohttp_client(app)

        ws = await client.ws_connect("/notes/ws/live-reload")
        for _ in range(100):
            if manager.client_count:
                break
            await asyncio.sleep(0.01)
        await manager.broadcast_reload("/notes/topic")

        message = await ws.receive_json(timeout=5)
        assert message == {"type": "reload", "path": "/notes/topic"}
        await ws.close()

    @pytest.mark.asyncio
    async def test__start_and_stop__toggle_watcher(self, content_dir: Path) -> None:
        """Start runs one watcher and stop cancels it."""
        manager = LiveReloadManager(content_dir)

        await manager.start()
        await manager.start()
        assert manager.running

        await manager.stop()
        assert not manager.running


class TestChangedPages:
    """Tests for LiveReloadManager.changed_pages()."""

    def test__batch__collapsed_to_pages(self, content_dir: Path) -> None:
        """Deduplicate pages, keep deletions and drop unwatched files."""
        manager = LiveReloadManager(content_dir)
        changes = [
            (Change.modified, str(content_dir / "chapter" / "index.md")),
            (Change.added, str(content_dir / "chapter" / "index.md")),
            (Change.deleted, str(content_dir / "old.md")),
            (Change.modified, str(content_dir / "images" / "plot.png")),
        ]

        assert manager.changed_pages(changes) == ["/chapter", "/old"]
