"""Navigation API endpoints.

Provides full navigation tree and subtree endpoints.
"""

from aiohttp import web

from notestage.app_keys import composer_key, site_key
from notestage.core.navigation import find_item
from notestage.core.resolver import build_url, split_path


def create_navigation_routes(base_path: str = "") -> list[web.RouteDef]:
    return [
        web.get(f"{base_path}/api/navigation", get_navigation),
        web.get(f"{base_path}/api/navigation/{{path:.*}}", get_navigation_subtree),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    composer = request.app[composer_key]
    items = composer.navigation()
    return web.json_response({"items": [item.to_dict() for item in items]})


async def get_navigation_subtree(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    composer = request.app[composer_key]
    items = composer.navigation()

    base_path = request.app[site_key].base_path
    section = find_item(items, build_url(base_path, split_path(path)))
    if section is None:
        return web.json_response(
            {"error": "Section not found", "path": path},
            status=404,
        )

    return web.json_response({"items": [item.to_dict() for item in section.children]})
