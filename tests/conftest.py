from io import BytesIO

import pytest
from PIL import Image

from models import ImageResult


class FakeSearch:
    """Stands in for api.unsplash_client.search_photos; replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeResolver:
    """Async resolver returning a fixed ImageResult and recording its inputs."""

    def __init__(self, result=None, error=None, on_resolve=None):
        self.result = result or ImageResult(url="https://images.example/photo.jpg", source_description="burger")
        self.error = error
        self.on_resolve = on_resolve
        self.calls = []

    async def resolve(self, keywords, aspect_ratio):
        self.calls.append((keywords, aspect_ratio))
        if self.on_resolve is not None:
            self.on_resolve()
        if self.error is not None:
            raise self.error
        return self.result


def photo(url="https://images.example/regular.jpg", full=None, description=None, alt_description=None):
    urls = {}
    if url is not None:
        urls["regular"] = url
    if full is not None:
        urls["full"] = full
    return {"urls": urls, "description": description, "alt_description": alt_description}


@pytest.fixture
def make_png():
    def _make_png(size=(300, 200), color=(20, 60, 160)):
        buffer = BytesIO()
        Image.new("RGB", size, color).save(buffer, format="PNG")
        return buffer.getvalue()
    return _make_png


@pytest.fixture
def fake_search():
    return FakeSearch


@pytest.fixture
def fake_resolver():
    return FakeResolver


@pytest.fixture
def make_photo():
    return photo
