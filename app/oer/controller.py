"""
Controller for the paginated OER list.

``ResourceListController`` owns the ``ListState`` of the list.  It
turns user actions (mount, next/previous page, refresh, expanding a
row) into requests against the configured collection endpoints and
feeds every outcome back through :func:`app.oer.state.reduce`.

All requests of a fetch cycle, including the taxonomy lookups started
by expanding a row, belong to that cycle's ``CancelScope``.  Starting
a new cycle cancels the previous scope as a whole.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Set, Tuple

import httpx

from .cancellation import CancelScope
from .diagnostics import DiagnosticsSink, LoggingDiagnostics
from .errors import OerClientError
from .schemas import ListState
from .state import (
    CycleStarted,
    EnrichmentResolved,
    Event,
    ExpansionToggled,
    LoadingPolicy,
    PageRequestFailed,
    PageResponseArrived,
    reduce,
)
from .wp_service import fetch_resource_page, fetch_term_names


logger = logging.getLogger(__name__)

RESULTS_PER_PAGE = 12

Listener = Callable[[ListState], None]


def partition_page_size(page_size: int, source_count: int) -> List[int]:
    """Split ``page_size`` across ``source_count`` endpoints.

    Every endpoint gets ``page_size // source_count`` results except
    the last one, which also takes the remainder, so the limits always
    add up to ``page_size``.
    """
    if source_count < 1:
        raise ValueError("source_count must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    share = page_size // source_count
    limits = [share] * source_count
    limits[-1] = share + page_size % source_count
    return limits


class ResourceListController:
    """Fetches, pages and enriches the resources of one or more endpoints.

    Parameters
    ----------
    client : httpx.AsyncClient
        Client used for every request.  The controller does not close it.
    endpoints : Sequence[str]
        Collection endpoints, queried in this order.  Must not be empty.
    page_size : int
        Number of resources requested per page across all endpoints.
    loading_policy : LoadingPolicy
        Whether ``loading`` clears on the first settled source or only
        once all sources of the cycle have settled.
    diagnostics : DiagnosticsSink, optional
        Receives taxonomy lookup failures.  Defaults to logging.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoints: Sequence[str],
        page_size: int = RESULTS_PER_PAGE,
        loading_policy: LoadingPolicy = LoadingPolicy.FIRST_RESPONSE,
        diagnostics: Optional[DiagnosticsSink] = None,
    ) -> None:
        if not endpoints:
            raise ValueError("At least one resource endpoint is required")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._client = client
        self._endpoints: Tuple[str, ...] = tuple(endpoints)
        self._page_size = page_size
        self._loading_policy = loading_policy
        self._diagnostics: DiagnosticsSink = diagnostics or LoggingDiagnostics()
        self._state = ListState()
        self._scope: Optional[CancelScope] = None
        self._listeners: List[Listener] = []
        # (cycle, index, key) of taxonomy lookups currently running
        self._enriching: Set[Tuple[int, int, str]] = set()

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def endpoints(self) -> Tuple[str, ...]:
        return self._endpoints

    @property
    def page_size(self) -> int:
        return self._page_size

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with the new state after every change."""
        self._listeners.append(listener)

    def dispatch(self, event: Event) -> ListState:
        previous = self._state
        self._state = reduce(previous, event, self._loading_policy)
        if self._state is not previous:
            for listener in self._listeners:
                listener(self._state)
        return self._state

    # Pagination -------------------------------------------------------

    def mount(self) -> None:
        """Load the first page.  Must be called from a running event loop."""
        self.fetch_page()

    def fetch_page(self, page: Optional[int] = None) -> None:
        """Start a fetch cycle for ``page`` (default: the current page)."""
        target = self._state.page if page is None else max(1, page)
        cycle = self._state.cycle + 1
        self.dispatch(CycleStarted(cycle=cycle, page=target, source_count=len(self._endpoints)))

        if self._scope is not None:
            self._scope.cancel()
        self._scope = CancelScope(cycle)
        self._enriching.clear()

        limits = partition_page_size(self._page_size, len(self._endpoints))
        logger.info("Loading page %s from %s endpoint(s), limits=%s", target, len(self._endpoints), limits)
        for endpoint, limit in zip(self._endpoints, limits):
            self._scope.spawn(self._load_source(cycle, endpoint, target, limit))

    def next_page(self) -> None:
        self.fetch_page(self._state.page + 1)

    def previous_page(self) -> None:
        if self._state.page > 1:
            self.fetch_page(self._state.page - 1)

    def refresh(self) -> None:
        self.fetch_page()

    async def _load_source(self, cycle: int, endpoint: str, page: int, per_page: int) -> None:
        try:
            resources, total = await fetch_resource_page(
                self._client, endpoint, page=page, per_page=per_page
            )
        except asyncio.CancelledError:
            logger.debug("Request to %s cancelled (cycle %s)", endpoint, cycle)
            raise
        except OerClientError as exc:
            logger.warning("Failed to load resources: %s", exc)
            self.dispatch(PageRequestFailed(cycle=cycle))
            return
        self.dispatch(PageResponseArrived(cycle=cycle, items=tuple(resources), total=total))

    # Expansion --------------------------------------------------------

    def toggle_expand(self, index: int) -> None:
        """Open or close the row at ``index`` and resolve its taxonomy names.

        Every slot with a link and no value yet gets one lookup,
        whether the row is being opened or closed.  Resolved slots and
        slots with a lookup already running are left alone.
        """
        if not 0 <= index < len(self._state.items):
            raise IndexError(f"No resource at index {index}")
        self.dispatch(ExpansionToggled(index=index))

        state = self._state
        item = state.items[index]
        for key, slot in item.meta.items():
            marker = (state.cycle, index, key)
            if not slot.needs_fetch or marker in self._enriching:
                continue
            self._enriching.add(marker)
            self._scope.spawn(self._resolve_slot(state.cycle, index, key, slot.url))

    async def _resolve_slot(self, cycle: int, index: int, key: str, url: str) -> None:
        marker = (cycle, index, key)
        try:
            value = await fetch_term_names(self._client, url)
        except asyncio.CancelledError:
            logger.debug("Lookup of %s for resource %s cancelled", key, index)
            raise
        except OerClientError as exc:
            self._diagnostics.report(f"Failed to load {key} for resource {index}", exc)
            return
        finally:
            self._enriching.discard(marker)
        self.dispatch(EnrichmentResolved(cycle=cycle, index=index, key=key, value=value))

    # Lifecycle --------------------------------------------------------

    async def settle(self) -> None:
        """Wait until no request of the current cycle is running."""
        while self._scope is not None and self._scope.pending:
            await self._scope.wait()

    async def aclose(self) -> None:
        """Cancel every running request and wait for them to unwind."""
        if self._scope is not None:
            self._scope.cancel()
            await self._scope.wait()
