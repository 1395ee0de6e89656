"""Page endpoints.

Serves composed notes as full HTML documents, or as content fragments for
htmx navigation.
"""

import logging

from aiohttp import web

from notestage.app_keys import (
    composer_key,
    environment_key,
    live_reload_enabled_key,
    site_key,
)
from notestage.core.page import NotFoundPage
from notestage.core.resolver import split_path
from notestage.layout import render_layout, render_not_found

logger = logging.getLogger(__name__)


def create_pages_routes(base_path: str = "") -> list[web.RouteDef]:
    routes = [web.get(f"{base_path}/{{path:.*}}", get_page)]
    if base_path:
        routes.insert(0, web.get(base_path, get_page))
    return routes


async def get_page(request: web.Request) -> web.Response:
    path = request.match_info.get("path", "")
    composer = request.app[composer_key]
    env = request.app[environment_key]
    site = request.app[site_key]

    page = composer.compose(split_path(path), request.headers)

    if isinstance(page, NotFoundPage):
        logger.info(f"Not found: /{page.path}")
        return web.Response(
            text=render_not_found(env, page),
            content_type="text/html",
            status=404,
        )

    html = render_layout(
        env,
        page,
        theme=site.theme,
        base_path=site.base_path,
        live_reload=request.app[live_reload_enabled_key],
    )
    return web.Response(text=html, content_type="text/html")
