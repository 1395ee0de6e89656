"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest

from notestage.config import (
    Config,
    DocsConfig,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
    StaticConfig,
    normalize_base_path,
)


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[docs]
source_dir = "notes"

[site]
title = "Lab Notebook"
base_path = "/lab/"
theme = "dark"
recent_limit = 5

[static]
style_dir = "theme"

[live_reload]
enabled = true
watch_patterns = ["*.md", "*.png"]
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.docs.source_dir == tmp_path / "notes"
        assert config.site.title == "Lab Notebook"
        assert config.site.base_path == "/lab"
        assert config.site.theme == "dark"
        assert config.site.recent_limit == 5
        assert config.static.style_dir == tmp_path / "theme"
        assert config.static.assets_dir == tmp_path / "assets"
        assert config.live_reload.enabled is True
        assert config.live_reload.watch_patterns == ["*.md", "*.png"]
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.docs.source_dir == tmp_path / "content"
        assert config.site == SiteConfig()
        assert config.static.dist_dir == tmp_path / "dist"
        assert config.live_reload.enabled is False
        assert config.live_reload.watch_patterns is None

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit path."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "missing.toml")

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        """Return defaults when no config file is discovered."""
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.server == ServerConfig()
        assert config.docs == DocsConfig()
        assert config.site == SiteConfig()
        assert config.static == StaticConfig()
        assert config.live_reload == LiveReloadConfig()
        assert config.config_path is None

    def test__invalid_toml__raises_error(self, tmp_path: Path) -> None:
        """Report malformed TOML as a configuration error."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text("[server\nport = 1")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        """Find config in current directory."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text("")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            assert Config._discover_config() == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        """Find config in a parent directory."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text("")
        subdir = tmp_path / "a" / "b"
        subdir.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=subdir):
            assert Config._discover_config() == config_file


class TestSectionValidation:
    """Tests for per-section validation."""

    @pytest.mark.parametrize(
        ("toml", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ("[server]\nhost = 1", "server.host must be a string"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("[docs]\nsource_dir = 1", "docs.source_dir must be a string"),
            ("[site]\ntitle = 1", "site.title must be a string"),
            ('[site]\ntheme = "blue"', "site.theme must be one of"),
            ("[site]\nrecent_limit = -1", "site.recent_limit must not be negative"),
            ('[site]\nbase_path = "/a/../b"', "must not contain"),
            ("[static]\nassets_dir = 1", "static.assets_dir must be a string"),
            ('[live_reload]\nenabled = "yes"', "live_reload.enabled must be a boolean"),
            (
                '[live_reload]\nwatch_patterns = "*.md"',
                "live_reload.watch_patterns must be a list",
            ),
            (
                "[live_reload]\nwatch_patterns = [1]",
                "live_reload.watch_patterns items must be strings",
            ),
        ],
    )
    def test__invalid_value__raises_error(
        self, tmp_path: Path, toml: str, message: str
    ) -> None:
        """Reject values of the wrong type or range."""
        config_file = tmp_path / "notestage.toml"
        config_file.write_text(toml)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestNormalizeBasePath:
    """Tests for normalize_base_path()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("", ""),
            ("/", ""),
            ("notes", "/notes"),
            ("/notes/", "/notes"),
            ("//team//notes/", "/team/notes"),
        ],
    )
    def test__prefix__normalized(self, value: str, expected: str) -> None:
        """Normalize to an empty prefix or a leading-slash path."""
        assert normalize_base_path(value) == expected


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__no_overrides__returns_equal_config(self, test_config: Config) -> None:
        """Return an equal config when nothing is overridden."""
        assert test_config.with_overrides() == test_config

    def test__overrides__replace_values(
        self, test_config: Config, tmp_path: Path
    ) -> None:
        """Apply only the given overrides, leaving the original untouched."""
        config = test_config.with_overrides(
            port=9000,
            source_dir=tmp_path / "other",
            base_path="wiki/",
            live_reload_enabled=True,
        )

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9000
        assert config.docs.source_dir == tmp_path / "other"
        assert config.site.base_path == "/wiki"
        assert config.site.title == "Test Notes"
        assert config.live_reload.enabled is True
        assert test_config.server.port == 8080
        assert test_config.live_reload.enabled is False
