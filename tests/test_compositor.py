from io import BytesIO

import pytest
import requests
from PIL import Image, ImageChops

import compositor
from compositor import Compositor, ImageTooLargeError, fetch_image_bytes, line_positions, load_caption_font, wrap_text
from constants import BACKGROUND_FILENAME, COMPOSITED_FILENAME, EXPORT_FALLBACK_NOTICE, FALLBACK_MEDIA_TYPE
from utils import encode_data_url


def measure(text):
    return len(text)


def test_wrap_breaks_before_the_overflowing_token():
    assert wrap_text("aaa bbb ccc", measure, 7) == ["aaa bbb", "ccc"]


def test_wide_caption_wraps_into_lines_within_max_width():
    text = "the quick brown fox jumps over the lazy dog again and again"
    lines = wrap_text(text, measure, 15)

    assert len(lines) >= 2
    for line in lines:
        assert measure(line) <= 15 or " " not in line
    assert " ".join(lines) == text


def test_overlong_token_overflows_on_its_own_line():
    lines = wrap_text("short averyveryverylongword end", measure, 10)

    assert lines == ["short", "averyveryverylongword", "end"]


def test_text_without_spaces_is_one_unbroken_line():
    assert wrap_text("세상에서가장맛있는버거", measure, 3) == ["세상에서가장맛있는버거"]


def test_first_token_never_produces_an_empty_line():
    assert wrap_text("toolongword", measure, 3) == ["toolongword"]


def test_spacing_between_words_is_preserved():
    assert wrap_text("50%  할인", measure, 100) == ["50%  할인"]


def test_line_positions_center_the_block():
    assert line_positions(3, 50, 100, 10) == [(50, 90), (50, 100), (50, 110)]
    assert line_positions(1, 50, 100, 10) == [(50, 100)]
    assert line_positions(2, 50, 100, 10) == [(50, 95), (50, 105)]


def test_font_falls_back_when_path_is_missing():
    font = load_caption_font(24, font_path="/nonexistent/font.ttf")

    assert font.getlength("promo") > 0


def test_export_draws_caption_at_native_resolution(make_png):
    background = make_png(size=(320, 180))
    compositor = Compositor(fetch=lambda url: background)

    artifact = compositor.export("https://images.example/photo.jpg", "맛있는 비건 버거 50% 할인")

    assert artifact.filename == COMPOSITED_FILENAME
    assert artifact.composited
    assert artifact.media_type == "image/png"
    assert artifact.notice is None
    assert artifact.source_url == "https://images.example/photo.jpg"

    rendered = Image.open(BytesIO(artifact.content))
    assert rendered.format == "PNG"
    assert rendered.size == (320, 180)

    original = Image.open(BytesIO(background)).convert("RGBA")
    assert ImageChops.difference(rendered.convert("RGBA"), original).getbbox() is not None


def test_export_is_pixel_identical_across_runs(make_png):
    background = make_png(size=(240, 240))
    compositor = Compositor(fetch=lambda url: background)

    first = compositor.export("https://images.example/a.jpg", "Weekend sale on every burger in the shop")
    second = compositor.export("https://images.example/a.jpg", "Weekend sale on every burger in the shop")

    first_image = Image.open(BytesIO(first.content)).convert("RGBA")
    second_image = Image.open(BytesIO(second.content)).convert("RGBA")
    assert first_image.size == second_image.size == (240, 240)
    assert ImageChops.difference(first_image, second_image).getbbox() is None


def test_export_accepts_data_urls(make_png):
    compositor = Compositor()

    artifact = compositor.export(encode_data_url(make_png(size=(90, 60))), "promo")

    assert artifact.composited
    assert Image.open(BytesIO(artifact.content)).size == (90, 60)
    assert artifact.data_url.startswith("data:image/png;base64,")


def test_unreachable_image_exports_background_notice_without_bytes():
    def fail(url):
        raise requests.ConnectionError("connection refused")

    artifact = Compositor(fetch=fail).export("https://images.example/gone.jpg", "promo")

    assert artifact.filename == BACKGROUND_FILENAME
    assert artifact.content is None
    assert artifact.data_url is None
    assert not artifact.composited
    assert artifact.notice == EXPORT_FALLBACK_NOTICE
    assert artifact.source_url == "https://images.example/gone.jpg"


def test_undecodable_image_exports_raw_background_bytes():
    artifact = Compositor(fetch=lambda url: b"<html>not an image</html>").export("https://images.example/x", "promo")

    assert artifact.filename == BACKGROUND_FILENAME
    assert artifact.content == b"<html>not an image</html>"
    assert artifact.media_type == FALLBACK_MEDIA_TYPE
    assert not artifact.composited
    assert artifact.notice == EXPORT_FALLBACK_NOTICE


@pytest.mark.parametrize("bad_url", ["data:image/png;base64,@@@", "data:text/plain;base64,aGk="])
def test_malformed_data_url_degrades_to_background(bad_url):
    artifact = Compositor().export(bad_url, "promo")

    assert not artifact.composited
    assert artifact.content is None


class FakeStreamResponse:
    """Streaming requests.Response stand-in that records how much was read."""

    def __init__(self, chunks, headers=None, status_code=200):
        self.chunks = chunks
        self.headers = headers or {}
        self.status_code = status_code
        self.is_redirect = status_code in (301, 302, 303, 307, 308)
        self.chunks_read = 0
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size=1):
        for chunk in self.chunks:
            self.chunks_read += 1
            yield chunk


@pytest.fixture
def stream_get(monkeypatch):
    calls = []

    def install(response):
        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return response
        monkeypatch.setattr(compositor.requests, "get", fake_get)
        return calls

    return install


def test_fetch_streams_the_download(stream_get, make_png):
    png = make_png(size=(10, 10))
    calls = stream_get(FakeStreamResponse([png[:20], png[20:]]))

    assert fetch_image_bytes("https://images.example/photo.jpg", timeout=3) == png

    url, kwargs = calls[0]
    assert url == "https://images.example/photo.jpg"
    assert kwargs["stream"] is True
    assert kwargs["allow_redirects"] is False
    assert kwargs["timeout"] == 3


def test_fetch_stops_reading_once_the_size_cap_is_passed(stream_get):
    response = FakeStreamResponse([b"x" * 40] * 100)
    stream_get(response)

    with pytest.raises(ImageTooLargeError):
        fetch_image_bytes("https://images.example/huge.jpg", max_bytes=100)

    assert response.chunks_read == 3
    assert response.closed


def test_fetch_rejects_declared_oversized_body_without_reading(stream_get):
    response = FakeStreamResponse([b"x"], headers={"Content-Length": "5000"})
    stream_get(response)

    with pytest.raises(ImageTooLargeError):
        fetch_image_bytes("https://images.example/huge.jpg", max_bytes=100)

    assert response.chunks_read == 0


def test_fetch_refuses_redirects(stream_get):
    stream_get(FakeStreamResponse([], headers={"Location": "http://10.0.0.1/"}, status_code=302))

    with pytest.raises(ValueError):
        fetch_image_bytes("https://images.example/moved.jpg")


@pytest.mark.parametrize(
    "bad_url",
    ["http://images.example/photo.jpg", "https://169.254.169.254/latest/meta-data/", "file:///etc/passwd"],
)
def test_fetch_rejects_urls_before_any_request(stream_get, bad_url):
    calls = stream_get(FakeStreamResponse([b"secret"]))

    with pytest.raises(ValueError):
        fetch_image_bytes(bad_url)

    assert calls == []


def test_oversized_data_url_is_rejected(make_png):
    with pytest.raises(ImageTooLargeError):
        fetch_image_bytes(encode_data_url(make_png(size=(50, 50))), max_bytes=10)


def test_oversized_image_degrades_to_redirectable_fallback(stream_get):
    stream_get(FakeStreamResponse([b"x" * 64] * 10))

    artifact = Compositor(fetch=lambda url: fetch_image_bytes(url, max_bytes=100)).export(
        "https://images.example/huge.jpg", "promo"
    )

    assert not artifact.composited
    assert artifact.content is None
    assert artifact.notice == EXPORT_FALLBACK_NOTICE
