"""
WordPress REST integration for the OER list.

The BCcampus collection (and any compatible collection) exposes its
resources through the WordPress REST API.  This module wraps the two
requests the list needs:

* ``fetch_resource_page()``: load one page of resources from a
  collection endpoint.  Records are mapped into the
  ``ResourceSummary`` schema and the total number of matching
  resources is read from the ``X-WP-Total`` header.

* ``fetch_term_names()``: resolve a taxonomy link (institutions,
  authors) into a comma separated list of names.

Both functions are coroutines running on a shared
``httpx.AsyncClient`` so that the caller can run them concurrently
and cancel them when their results are no longer wanted.  Failures
are raised as ``SourceFetchError`` / ``EnrichmentFetchError``;
cancellation is left to propagate untouched.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .errors import EnrichmentFetchError, SourceFetchError
from .schemas import AttributeSlot, ResourceSummary


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://collection.bccampus.ca/wp-json/wp/v2/oer"
TOTAL_HEADER = "X-WP-Total"

# Display name of each meta slot and the taxonomy its link is taken from.
TAXONOMY_SLOTS: Dict[str, str] = {
    "Institutions": "institutions",
    "Authors": "authors",
}


async def _get_json(
    client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None
) -> Tuple[Any, httpx.Headers]:
    """Perform a GET and return the decoded JSON body with the headers.

    Transport errors, non-2xx statuses and undecodable bodies are
    raised as ``httpx.HTTPError`` or ``ValueError``; malformed URLs as
    ``httpx.InvalidURL``.
    """
    response = await client.get(url, params=params, headers={"Accept": "application/json"})
    response.raise_for_status()
    return response.json(), response.headers


def find_taxonomy_link(record: Dict[str, Any], taxonomy: str) -> Optional[str]:
    """Return the ``wp:term`` link of ``record`` for ``taxonomy``, if any."""
    links = record.get("_links") or {}
    for term in links.get("wp:term") or []:
        if isinstance(term, dict) and term.get("taxonomy") == taxonomy:
            return term.get("href") or None
    return None


def map_resource(record: Dict[str, Any]) -> ResourceSummary:
    """Map a raw WordPress record into a ``ResourceSummary``.

    The rendered title is HTML-escaped by WordPress (``&#8217;`` and
    friends); it is unescaped here and escaped again when rendered.
    Only the taxonomy links are kept for the meta slots, their values
    are resolved later on demand.
    """
    title = record.get("title")
    if isinstance(title, dict):
        title = title.get("rendered", "")
    meta = {
        name: AttributeSlot(url=find_taxonomy_link(record, taxonomy))
        for name, taxonomy in TAXONOMY_SLOTS.items()
    }
    return ResourceSummary(
        id=str(record["id"]),
        title=html.unescape(str(title or "")),
        link=str(record.get("link") or ""),
        meta=meta,
    )


def parse_total(headers: httpx.Headers) -> int:
    """Read the total result count; missing or malformed counts are 0."""
    raw = headers.get(TOTAL_HEADER)
    if raw is None:
        return 0
    try:
        return max(0, int(raw.strip()))
    except ValueError:
        logger.warning("Ignoring malformed %s header: %r", TOTAL_HEADER, raw)
        return 0


async def fetch_resource_page(
    client: httpx.AsyncClient,
    endpoint: str,
    page: int = 1,
    per_page: int = 12,
) -> Tuple[List[ResourceSummary], int]:
    """Load one page of resources from ``endpoint``.

    Returns the mapped resources in response order and the total
    number of resources the endpoint declares for the query.
    """
    params = {"page": max(1, int(page)), "per_page": int(per_page)}
    try:
        data, headers = await _get_json(client, endpoint, params=params)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise SourceFetchError(endpoint, str(exc)) from exc
    if not isinstance(data, list):
        raise SourceFetchError(endpoint, "expected a list of resources")
    try:
        resources = [map_resource(record) for record in data]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SourceFetchError(endpoint, f"malformed resource record: {exc}") from exc
    total = parse_total(headers)
    logger.debug(
        "Loaded %s resources from %s (page=%s, per_page=%s, total=%s)",
        len(resources), endpoint, page, per_page, total,
    )
    return resources, total


async def fetch_term_names(client: httpx.AsyncClient, url: str) -> str:
    """Resolve a taxonomy link into a comma separated list of names."""
    try:
        data, _ = await _get_json(client, url)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise EnrichmentFetchError(url, str(exc)) from exc
    if not isinstance(data, list):
        raise EnrichmentFetchError(url, "expected a list of terms")
    names = [
        str(item["name"])
        for item in data
        if isinstance(item, dict) and item.get("name") is not None
    ]
    return ", ".join(names)
