import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import create_app
from tests.helpers import SOURCE_A, FakeOerApi, make_record, term_url


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_api():
    api = FakeOerApi()
    records = [
        make_record(
            n,
            title=f"Resource {n}",
            institutions=term_url("institutions", n),
            authors=term_url("authors", n),
        )
        for n in range(1, 31)
    ]
    api.add_source(SOURCE_A, records, total=len(records))
    for n in range(1, 31):
        api.add_terms(term_url("institutions", n), ["BCcampus", "Douglas College"])
        api.add_terms(term_url("authors", n), [f"Author {n}"])
    return api


@pytest.fixture()
def settings():
    return Settings(OER_ENDPOINTS=SOURCE_A, OER_PAGE_SIZE=12, LOG_LEVEL="DEBUG")


@pytest.fixture()
def client(fake_api, settings):
    app = create_app(settings, transport=fake_api.transport())
    with TestClient(app) as test_client:
        yield test_client

