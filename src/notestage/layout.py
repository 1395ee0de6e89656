"""Layout rendering with the Jinja templates bundled in the package.

Templates live in ``notestage/templates`` and are loaded through the package
loader, so they work from wheels and editable installs alike.
"""

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from notestage.core.page import NotFoundPage, RenderedPage


def create_environment() -> Environment:
    """Create the Jinja environment for page templates."""
    return Environment(
        loader=PackageLoader("notestage", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_layout(
    env: Environment,
    page: RenderedPage,
    *,
    theme: str = "light",
    base_path: str = "",
    live_reload: bool = False,
) -> str:
    """Render a composed page to a full HTML document.

    Fragment pages (htmx navigation) render only the content block.

    Args:
        env: Jinja environment
        page: Composed page
        theme: Initial color theme ("light" or "dark")
        base_path: URL prefix for static asset links
        live_reload: Include the live reload client script

    Returns:
        HTML string
    """
    template = env.get_template("content.html" if page.fragment else "layout.html")
    return template.render(
        title=page.title,
        page_title=page.page_title,
        sidebar_html=Markup(page.sidebar_html),
        body_html=Markup(page.body_html),
        theme=theme,
        site_url_prefix=base_path,
        live_reload=live_reload,
    )


def render_not_found(env: Environment, page: NotFoundPage) -> str:
    """Render the minimal Not Found document."""
    return env.get_template("not_found.html").render(body_html=Markup(page.body_html))
