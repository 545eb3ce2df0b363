"""
Page shell for the OER viewer.

The shell renders the static frame (header, footer) and mounts the
resource list inside an ``ErrorBoundary``.  A rendering fault in the
list replaces only the list with a notice; the rest of the page keeps
rendering.  The boundary never recovers once faulted.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .controller import ResourceListController
from .render import render_page, render_resource_list


logger = logging.getLogger(__name__)

FALLBACK_HTML = '<h2 class="error">Something went wrong.</h2>'
# Seconds between page reloads while a fetch cycle is still loading
LOADING_REFRESH_SECONDS = 1


class BoundaryState(str, Enum):
    HEALTHY = "healthy"
    FAULTED = "faulted"


class ErrorBoundary:
    """Catches rendering faults of its children and shows a fallback."""

    def __init__(self, fallback: str = FALLBACK_HTML) -> None:
        self.state = BoundaryState.HEALTHY
        self._fallback = fallback

    @property
    def faulted(self) -> bool:
        return self.state is BoundaryState.FAULTED

    def render(self, render_children: Callable[[], str]) -> str:
        if self.faulted:
            return self._fallback
        try:
            return render_children()
        except Exception:
            logger.exception("Rendering the resource list failed")
            self.state = BoundaryState.FAULTED
            return self._fallback


class Shell:
    """Static page frame hosting the resource list controller."""

    def __init__(
        self,
        controller: ResourceListController,
        on_ready: Optional[Callable[[], None]] = None,
    ) -> None:
        self.controller = controller
        self.boundary = ErrorBoundary()
        self.mounted = False
        self._on_ready = on_ready

    def mount(self) -> None:
        """Start the controller and signal that the page is ready."""
        self.controller.mount()
        self.mounted = True
        if self._on_ready is not None:
            self._on_ready()

    def render_list(self) -> str:
        return render_resource_list(self.controller.state)

    def render(self) -> str:
        list_html = self.boundary.render(self.render_list)
        loading = self.controller.state.loading and not self.boundary.faulted
        return render_page(
            list_html=list_html,
            ready=self.mounted,
            refresh_seconds=LOADING_REFRESH_SECONDS if loading else 0,
        )
