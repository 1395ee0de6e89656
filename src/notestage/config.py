"""Configuration management for Notestage.

Settings come from a ``notestage.toml`` file, found explicitly or by searching
the current directory and its parents. Every section is optional and relative
paths are resolved against the directory holding the file.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "notestage.toml"

THEMES = ("light", "dark")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Notes directory configuration."""

    source_dir: Path = field(default_factory=lambda: Path("content"))


@dataclass
class SiteConfig:
    """Site presentation configuration."""

    title: str = "Notes"
    base_path: str = ""
    theme: str = "light"
    recent_limit: int = 10


@dataclass
class StaticConfig:
    """Static asset directories, each mounted only if it exists."""

    assets_dir: Path = field(default_factory=lambda: Path("assets"))
    dist_dir: Path = field(default_factory=lambda: Path("dist"))
    style_dir: Path = field(default_factory=lambda: Path("style"))


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = False
    watch_patterns: list[str] | None = None


def normalize_base_path(value: str) -> str:
    """Normalize a URL prefix to "" or "/segment[/segment...]".

    Raises:
        ValueError: If the prefix contains a ".." segment
    """
    parts = [part for part in value.strip().split("/") if part]
    if ".." in parts:
        raise ValueError("site.base_path must not contain '..'")
    return "/" + "/".join(parts) if parts else ""


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level table, or an empty one when it is absent."""
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"{name} section must be a dictionary")
    return value


def _string(section: dict[str, Any], name: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"{name}.{key} must be a string")
    return value


def _integer(section: dict[str, Any], name: str, key: str, default: int) -> int:
    value = section.get(key, default)
    # TOML booleans are ints in Python
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name}.{key} must be an integer")
    return value


def _boolean(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{name}.{key} must be a boolean")
    return value


def _string_list(section: dict[str, Any], name: str, key: str) -> list[str] | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"{name}.{key} must be a list")
    if not all(isinstance(item, str) for item in value):
        raise ValueError(f"{name}.{key} items must be strings")
    return list(value)


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    site: SiteConfig
    static: StaticConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration.

        Args:
            config_path: Explicit config file; discovered when omitted

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If the file is not valid TOML or a value is invalid
        """
        if config_path is None:
            config_path = cls._discover_config()
            if config_path is None:
                return cls._default()
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls._load_from_file(config_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Find the nearest notestage.toml in the current directory or a parent."""
        cwd = Path.cwd()
        for directory in (cwd, *cwd.parents):
            candidate = directory / CONFIG_FILENAME
            if candidate.exists():
                return candidate
        return None

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            docs=DocsConfig(),
            site=SiteConfig(),
            static=StaticConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        root = path.parent
        return cls(
            server=cls._parse_server(_section(data, "server")),
            docs=cls._parse_docs(_section(data, "docs"), root),
            site=cls._parse_site(_section(data, "site")),
            static=cls._parse_static(_section(data, "static"), root),
            live_reload=cls._parse_live_reload(_section(data, "live_reload")),
            config_path=path,
        )

    @staticmethod
    def _parse_server(section: dict[str, Any]) -> ServerConfig:
        defaults = ServerConfig()
        return ServerConfig(
            host=_string(section, "server", "host", defaults.host),
            port=_integer(section, "server", "port", defaults.port),
        )

    @staticmethod
    def _parse_docs(section: dict[str, Any], root: Path) -> DocsConfig:
        return DocsConfig(source_dir=root / _string(section, "docs", "source_dir", "content"))

    @staticmethod
    def _parse_site(section: dict[str, Any]) -> SiteConfig:
        defaults = SiteConfig()

        theme = section.get("theme", defaults.theme)
        if theme not in THEMES:
            raise ValueError(f"site.theme must be one of: {', '.join(THEMES)}")

        recent_limit = _integer(section, "site", "recent_limit", defaults.recent_limit)
        if recent_limit < 0:
            raise ValueError("site.recent_limit must not be negative")

        return SiteConfig(
            title=_string(section, "site", "title", defaults.title),
            base_path=normalize_base_path(_string(section, "site", "base_path", "")),
            theme=theme,
            recent_limit=recent_limit,
        )

    @staticmethod
    def _parse_static(section: dict[str, Any], root: Path) -> StaticConfig:
        # Each directory defaults to its key without the "_dir" suffix.
        return StaticConfig(
            **{
                key: root / _string(section, "static", key, key.removesuffix("_dir"))
                for key in ("assets_dir", "dist_dir", "style_dir")
            }
        )

    @staticmethod
    def _parse_live_reload(section: dict[str, Any]) -> LiveReloadConfig:
        return LiveReloadConfig(
            enabled=_boolean(section, "live_reload", "enabled", False),
            watch_patterns=_string_list(section, "live_reload", "watch_patterns"),
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        base_path: str | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Return a copy with command-line overrides applied.

        None means "keep the configured value".
        """
        server = replace(
            self.server,
            host=self.server.host if host is None else host,
            port=self.server.port if port is None else port,
        )
        docs = self.docs if source_dir is None else replace(self.docs, source_dir=source_dir)
        site = (
            self.site
            if base_path is None
            else replace(self.site, base_path=normalize_base_path(base_path))
        )
        live_reload = (
            self.live_reload
            if live_reload_enabled is None
            else replace(self.live_reload, enabled=live_reload_enabled)
        )
        return replace(self, server=server, docs=docs, site=site, live_reload=live_reload)
