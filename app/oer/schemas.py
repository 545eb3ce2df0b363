"""
Pydantic schema definitions for the OER list.

``ResourceSummary`` keeps only the fields needed to render one row of
the list.  Institution and author names are not part of the listing
response; each row carries an ``AttributeSlot`` per taxonomy holding
the URL to resolve the names from and, once fetched, the joined
display value.  ``ListState`` is the whole state of the list
controller.  All three models are frozen: updates go through
``model_copy`` so untouched rows and slots keep their identity.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AttributeSlot(BaseModel):
    """A taxonomy value that is fetched on demand.

    ``url`` is ``None`` when the taxonomy does not apply to the
    resource; such a slot is never fetched.  ``value`` stays ``None``
    until the names have been resolved.
    """

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    value: Optional[str] = None

    @property
    def needs_fetch(self) -> bool:
        return bool(self.url) and self.value is None


class ResourceSummary(BaseModel):
    """A single catalogue entry as shown in the list."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    link: str
    meta: Dict[str, AttributeSlot] = Field(default_factory=dict)


class ListState(BaseModel):
    """State owned by the resource list controller.

    ``cycle`` numbers the fetch cycles so that results from a
    superseded cycle can be recognised and dropped.  ``pending`` counts
    the page requests of the current cycle that have not settled yet.
    """

    model_config = ConfigDict(frozen=True)

    items: Tuple[ResourceSummary, ...] = ()
    expanded_index: Optional[int] = None
    loading: bool = True
    error: Optional[str] = None
    page: int = Field(default=1, ge=1)
    total: int = 0
    cycle: int = 0
    pending: int = 0
