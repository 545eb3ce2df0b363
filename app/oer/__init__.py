"""
OER package for the collection viewer.

This package contains the list controller that pages through one or
more WordPress OER collections, the schemas it keeps its state in,
the HTML renderers and the routes that expose the page.  The
controller is the only stateful piece; everything it shows is derived
from ``ListState``.
"""

from .router import router as oer_router  # noqa: F401
