"""
State transitions for the resource list.

The controller never edits ``ListState`` directly.  Every change is an
event passed through :func:`reduce`, which returns the next state and
leaves the previous one untouched.  Events that belong to a superseded
fetch cycle carry an old ``cycle`` number and are ignored, so a late
response can never leak into the list of a newer page.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .schemas import ListState, ResourceSummary

PAGE_LOAD_ERROR = "One or more resources failed to load"


class LoadingPolicy(str, Enum):
    """When the loading indicator is cleared during a fetch cycle."""

    # Cleared by the first source that settles.
    FIRST_RESPONSE = "first_response"
    # Cleared once every source of the cycle has settled.
    ALL_SETTLED = "all_settled"


@dataclass(frozen=True)
class CycleStarted:
    cycle: int
    page: int
    source_count: int


@dataclass(frozen=True)
class PageResponseArrived:
    cycle: int
    items: Tuple[ResourceSummary, ...]
    total: int


@dataclass(frozen=True)
class PageRequestFailed:
    cycle: int


@dataclass(frozen=True)
class ExpansionToggled:
    index: int


@dataclass(frozen=True)
class EnrichmentResolved:
    cycle: int
    index: int
    key: str
    value: str


Event = Union[
    CycleStarted,
    PageResponseArrived,
    PageRequestFailed,
    ExpansionToggled,
    EnrichmentResolved,
]


def _settle(state: ListState, policy: LoadingPolicy) -> Tuple[int, bool]:
    pending = max(state.pending - 1, 0)
    if policy is LoadingPolicy.ALL_SETTLED:
        return pending, pending > 0
    return pending, False


def reduce(
    state: ListState,
    event: Event,
    policy: LoadingPolicy = LoadingPolicy.FIRST_RESPONSE,
) -> ListState:
    """Return the state that follows ``state`` once ``event`` is applied."""
    if isinstance(event, CycleStarted):
        return state.model_copy(
            update={
                "items": (),
                "total": 0,
                "error": None,
                "expanded_index": None,
                "loading": True,
                "page": max(1, event.page),
                "cycle": event.cycle,
                "pending": event.source_count,
            }
        )

    if isinstance(event, PageResponseArrived):
        if event.cycle != state.cycle:
            return state
        pending, loading = _settle(state, policy)
        return state.model_copy(
            update={
                "items": state.items + tuple(event.items),
                "total": state.total + event.total,
                "pending": pending,
                "loading": loading,
            }
        )

    if isinstance(event, PageRequestFailed):
        if event.cycle != state.cycle:
            return state
        pending, loading = _settle(state, policy)
        return state.model_copy(
            update={"error": PAGE_LOAD_ERROR, "pending": pending, "loading": loading}
        )

    if isinstance(event, ExpansionToggled):
        if not 0 <= event.index < len(state.items):
            return state
        expanded = None if state.expanded_index == event.index else event.index
        return state.model_copy(update={"expanded_index": expanded})

    if isinstance(event, EnrichmentResolved):
        if event.cycle != state.cycle or not 0 <= event.index < len(state.items):
            return state
        item = state.items[event.index]
        slot = item.meta.get(event.key)
        if slot is None:
            return state
        # Copy only the path down to the slot; every other row and slot is reused.
        meta = dict(item.meta)
        meta[event.key] = slot.model_copy(update={"value": event.value})
        items = list(state.items)
        items[event.index] = item.model_copy(update={"meta": meta})
        return state.model_copy(update={"items": tuple(items)})

    raise TypeError(f"Unknown event: {event!r}")
