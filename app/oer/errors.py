"""Exceptions raised by the OER source client."""

from __future__ import annotations


class OerClientError(Exception):
    """Base class for failed requests against an OER collection."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class SourceFetchError(OerClientError):
    """A page of resources could not be loaded from a source endpoint."""


class EnrichmentFetchError(OerClientError):
    """Taxonomy names for a resource could not be loaded."""
