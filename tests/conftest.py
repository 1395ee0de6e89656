"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from jinja2 import Environment

from notestage.config import (
    Config,
    DocsConfig,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
    StaticConfig,
)
from notestage.layout import create_environment


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create an empty content directory."""
    content = tmp_path / "content"
    content.mkdir(exist_ok=True)
    return content


@pytest.fixture
def env() -> Environment:
    """Jinja environment with the bundled templates."""
    return create_environment()


@pytest.fixture
def test_config(tmp_path: Path, content_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Static directories point at paths that don't exist, so only the content
    mount is registered.
    """
    return Config(
        server=ServerConfig(),
        docs=DocsConfig(source_dir=content_dir),
        site=SiteConfig(title="Test Notes"),
        static=StaticConfig(
            assets_dir=tmp_path / "assets",
            dist_dir=tmp_path / "dist",
            style_dir=tmp_path / "style",
        ),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def write_note(content_dir: Path) -> Callable[..., Path]:
    """Return a helper writing markdown notes under content_dir."""

    def write(relative: str, text: str = "# Note\n\nContent.") -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return write
