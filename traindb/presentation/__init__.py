from .view import ViewState, TableView, build_table, PAGE_SIZE
from .render import render_page, get_css, get_js

__all__ = [
    "ViewState",
    "TableView",
    "build_table",
    "PAGE_SIZE",
    "render_page",
    "get_css",
    "get_js",
]
