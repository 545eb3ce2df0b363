"""
HTML rendering for the OER list.

The functions here are pure: the same inputs always produce the same
markup and nothing is read from or written to the controller.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .schemas import ListState, ResourceSummary

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TOGGLE_PREFIX = "/oer/toggle/"

templates = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


def render_item_row(item: ResourceSummary, is_open: bool, toggle_action: str) -> str:
    """Render one resource row.

    The detail panel is always part of the markup; ``is_open`` only
    switches its class and the chevron orientation.  ``toggle_action``
    is the URL the row header posts to when clicked.
    """
    return templates.get_template("item_row.html").render(
        item=item, is_open=is_open, toggle_action=toggle_action
    )


def render_resource_list(state: ListState) -> str:
    """Render the loader, error, rows and pagination controls.

    Each row goes through :func:`render_item_row`.
    """
    rows = [
        Markup(render_item_row(item, index == state.expanded_index, f"{TOGGLE_PREFIX}{index}"))
        for index, item in enumerate(state.items)
    ]
    return templates.get_template("resource_list.html").render(state=state, rows=rows)


def render_page(list_html: str, ready: bool = False, refresh_seconds: int = 0) -> str:
    """Render the page frame around an already rendered list."""
    return templates.get_template("page.html").render(
        list_html=list_html, ready=ready, refresh_seconds=refresh_seconds
    )
