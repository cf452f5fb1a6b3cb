"""
HTML rendering for the browser view.

The page is a single Jinja2 template; by default the stylesheet and script are
inlined so the document is self-contained, and both stay servable on their own
for development.
"""
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from traindb.presentation.view import TableView

PRESENTATION_DIR = Path(__file__).parent
STATIC_DIR = PRESENTATION_DIR / "static"
TEMPLATE_DIR = PRESENTATION_DIR / "templates"


def _load_asset(name: str) -> str:
    asset = STATIC_DIR / name
    if not asset.exists():
        raise FileNotFoundError(f"Frontend asset not found: {asset}")
    return asset.read_text(encoding="utf-8")


def nl2br(value) -> Markup:
    """Escapes the value and turns newlines into <br> tags."""
    return Markup("<br>").join(escape(line) for line in str(value).split("\n"))


@lru_cache()
def get_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["nl2br"] = nl2br
    return env


@lru_cache()
def get_css() -> str:
    return _load_asset("styles.css")


@lru_cache()
def get_js() -> str:
    return _load_asset("app.js")


def render_page(view: TableView, inline_assets: bool = True) -> str:
    template = get_environment().get_template("index.html")
    return template.render(
        view=view,
        state=view.state,
        inline_assets=inline_assets,
        css=Markup(get_css()) if inline_assets else None,
        js=Markup(get_js()) if inline_assets else None,
    )
