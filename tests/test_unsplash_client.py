import pytest

from api import unsplash_client
from api.unsplash_client import UnsplashAPIError, search_photos
from constants import UNSPLASH_SEARCH_URL


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.payload = payload

    def json(self):
        return self.payload


@pytest.fixture
def captured_get(monkeypatch):
    calls = []

    def install(response):
        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return response
        monkeypatch.setattr(unsplash_client.requests, "get", fake_get)
        return calls

    return install


def test_sends_query_parameters_and_client_id_header(captured_get):
    calls = captured_get(FakeResponse(payload={"results": [{"id": "a"}]}))

    results = search_photos(
        query="vegan burger",
        orientation="portrait",
        access_key="secret",
        per_page=10,
        page=2,
        order_by="latest",
        timeout=5,
    )

    assert results == [{"id": "a"}]
    url, kwargs = calls[0]
    assert url == UNSPLASH_SEARCH_URL
    assert kwargs["params"] == {
        "query": "vegan burger",
        "orientation": "portrait",
        "per_page": 10,
        "page": 2,
        "order_by": "latest",
    }
    assert kwargs["headers"]["Authorization"] == "Client-ID secret"
    assert kwargs["timeout"] == 5


def test_omits_page_and_order_when_not_given(captured_get):
    calls = captured_get(FakeResponse(payload={"results": []}))

    search_photos(query="q", orientation="landscape", access_key="k", per_page=3)

    assert calls[0][1]["params"] == {"query": "q", "orientation": "landscape", "per_page": 3}


def test_missing_results_key_is_empty_list(captured_get):
    captured_get(FakeResponse(payload={"total": 0}))

    assert search_photos(query="q", orientation="landscape", access_key="k", per_page=3) == []


def test_non_success_status_raises(captured_get):
    captured_get(FakeResponse(status_code=403, payload={"errors": ["Rate Limit Exceeded"]}))

    with pytest.raises(UnsplashAPIError) as exc_info:
        search_photos(query="q", orientation="landscape", access_key="k", per_page=3)

    assert exc_info.value.status_code == 403
