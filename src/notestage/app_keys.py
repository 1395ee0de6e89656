"""Application keys for type-safe app configuration access."""

from aiohttp import web
from jinja2 import Environment

from notestage.config import SiteConfig
from notestage.core.page import PageComposer

composer_key = web.AppKey("composer", PageComposer)
environment_key = web.AppKey("environment", Environment)
site_key = web.AppKey("site", SiteConfig)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
