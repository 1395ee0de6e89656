"""aiohttp server for Notestage.

Application factory and route registration.
"""

import logging

from aiohttp import web

from notestage.api.navigation import create_navigation_routes
from notestage.api.pages import create_pages_routes
from notestage.app_keys import (
    composer_key,
    environment_key,
    live_reload_enabled_key,
    site_key,
)
from notestage.config import Config
from notestage.core.page import PageComposer
from notestage.layout import create_environment
from notestage.live import LiveReloadManager
from notestage.live.reload import create_live_reload_routes

logger = logging.getLogger(__name__)

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    base_path = config.site.base_path

    env = create_environment()
    composer = PageComposer(
        config.docs.source_dir,
        env,
        site_title=config.site.title,
        base_path=base_path,
        recent_limit=config.site.recent_limit,
    )

    app[composer_key] = composer
    app[environment_key] = env
    app[site_key] = config.site
    app[live_reload_enabled_key] = config.live_reload.enabled

    # API routes (must be registered first to take precedence over page routes)
    app.router.add_routes(create_navigation_routes(base_path))

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.docs.source_dir,
            watch_patterns=config.live_reload.watch_patterns,
            base_path=base_path,
        )
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager, base_path))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    static_mounts = (
        ("/assets", config.static.assets_dir),
        ("/content", config.docs.source_dir),
        ("/dist", config.static.dist_dir),
        ("/style", config.static.style_dir),
    )
    for prefix, directory in static_mounts:
        if directory.is_dir():
            app.router.add_static(f"{base_path}{prefix}", directory)
        else:
            logger.debug(f"Not serving {prefix}: {directory} does not exist")

    # Page routes - must be last to catch all remaining paths
    app.router.add_routes(create_pages_routes(base_path))

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
