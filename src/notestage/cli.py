"""CLI interface for Notestage.

Command-line tool for serving and inspecting a notes directory.
"""

import logging
from pathlib import Path

import click

from notestage.config import Config
from notestage.core.navigation import NavItem
from notestage.core.page import NotFoundPage, PageComposer
from notestage.core.resolver import split_path
from notestage.layout import create_environment

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover notestage.toml)",
)
source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def cli(verbose: bool) -> None:
    """Notestage - Markdown notes served as a wiki."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    config_path: Path | None,
    *,
    source_dir: Path | None = None,
    host: str | None = None,
    port: int | None = None,
    base_path: str | None = None,
    live_reload_enabled: bool | None = None,
) -> Config:
    """Load configuration, reporting problems as CLI errors."""
    try:
        return Config.load(config_path).with_overrides(
            host=host,
            port=port,
            source_dir=source_dir,
            base_path=base_path,
            live_reload_enabled=live_reload_enabled,
        )
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def _create_composer(config: Config) -> PageComposer:
    return PageComposer(
        config.docs.source_dir,
        create_environment(),
        site_title=config.site.title,
        base_path=config.site.base_path,
        recent_limit=config.site.recent_limit,
    )


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--base-path",
    default=None,
    help="URL prefix for all routes and links, e.g. /notes (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: disabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    base_path: str | None,
    live_reload: bool | None,
) -> None:
    """Start the notes server."""
    from notestage.server import run_server

    config = _load_config(
        config_path,
        host=host,
        port=port,
        source_dir=source_dir,
        base_path=base_path,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    if config.site.base_path:
        click.echo(f"Base path: {config.site.base_path}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command()
@config_option
@source_dir_option
def tree(config_path: Path | None, source_dir: Path | None) -> None:
    """Print the navigation tree."""
    config = _load_config(config_path, source_dir=source_dir)
    items = _create_composer(config).navigation()
    if not items:
        click.echo("No notes found.")
        return
    _echo_items(items, 0)


def _echo_items(items: list[NavItem], depth: int) -> None:
    for item in items:
        click.echo(f"{'  ' * depth}{item.title}  ({item.path})")
        _echo_items(item.children, depth + 1)


@cli.command()
@click.argument("path", default="/")
@config_option
@source_dir_option
def render(path: str, config_path: Path | None, source_dir: Path | None) -> None:
    """Print the rendered body HTML of the page at PATH."""
    config = _load_config(config_path, source_dir=source_dir)
    page = _create_composer(config).compose(split_path(path))
    if isinstance(page, NotFoundPage):
        raise click.ClickException("Not Found")
    click.echo(page.body_html)
