import asyncio
from typing import Dict, List, Optional, Set, Tuple

import httpx

SOURCE_A = "https://a.example.org/wp-json/wp/v2/oer"
SOURCE_B = "https://b.example.org/wp-json/wp/v2/oer"


def make_record(
    record_id: int,
    title: str = "Introduction to Chemistry",
    institutions: Optional[str] = None,
    authors: Optional[str] = None,
) -> dict:
    terms = []
    if institutions:
        terms.append({"taxonomy": "institutions", "embeddable": True, "href": institutions})
    if authors:
        terms.append({"taxonomy": "authors", "embeddable": True, "href": authors})
    terms.append({"taxonomy": "subject", "embeddable": True, "href": f"https://a.example.org/subject?post={record_id}"})
    return {
        "id": record_id,
        "title": {"rendered": title},
        "link": f"https://collection.bccampus.ca/textbooks/resource-{record_id}/",
        "_links": {"wp:term": terms},
    }


def term_url(kind: str, record_id: int) -> str:
    return f"https://a.example.org/wp-json/wp/v2/{kind}?post={record_id}"


class FakeOerApi:
    """In-memory WordPress collection served through ``httpx.MockTransport``.

    ``hold()`` returns an event that keeps matching requests waiting
    until it is set, which lets a test control arrival order.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.sources: Dict[str, Tuple[List[dict], int]] = {}
        self.terms: Dict[str, List[str]] = {}
        self.failing: Set[str] = set()
        self._gates: List[Tuple[str, Optional[int], asyncio.Event]] = []

    def add_source(self, endpoint: str, records: List[dict], total: int) -> None:
        self.sources[endpoint] = (records, total)

    def add_terms(self, url: str, names: List[str]) -> None:
        self.terms[url] = names

    def fail(self, url: str) -> None:
        self.failing.add(url)

    def hold(self, url: str, page: Optional[int] = None) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates.append((url, page, gate))
        return gate

    def requests_to(self, url: str) -> List[httpx.Request]:
        """Requests sent to ``url``; without a query string any query matches."""
        if "?" in url:
            return [r for r in self.requests if str(r.url) == url]
        return [r for r in self.requests if str(r.url).split("?")[0] == url]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        base = url.split("?")[0]
        page = request.url.params.get("page")
        for gate_url, gate_page, gate in self._gates:
            if gate_url in (url, base) and (gate_page is None or str(gate_page) == page):
                await gate.wait()

        if url in self.failing or base in self.failing:
            return httpx.Response(500, json={"code": "internal_server_error"})
        if base in self.sources:
            records, total = self.sources[base]
            per_page = int(request.url.params.get("per_page", "10"))
            start = (int(page or 1) - 1) * per_page
            return httpx.Response(
                200,
                json=records[start:start + per_page],
                headers={"X-WP-Total": str(total)},
            )
        if url in self.terms:
            return httpx.Response(200, json=[{"id": i, "name": n} for i, n in enumerate(self.terms[url])])
        return httpx.Response(404, json={"code": "rest_no_route"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())


class RecordingDiagnostics:
    def __init__(self) -> None:
        self.reports: List[Tuple[str, BaseException]] = []

    def report(self, message: str, exc: BaseException) -> None:
        self.reports.append((message, exc))


async def wait_until(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


def settle_app(test_client) -> None:
    """Block until the app's controller has no request running."""
    controller = test_client.app.state.shell.controller
    test_client.portal.call(controller.settle)
