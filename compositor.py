"""
Caption compositing for the downloadable promo image.

Draws the caption onto the background photo at the photo's native
resolution and serializes the result to PNG. When the photo cannot be
loaded, the export degrades to a background-only download with a notice
instead of failing.
"""
# stdlib imports
import logging
import re
from collections.abc import Callable
from io import BytesIO

# third-party imports
import requests
from PIL import Image, ImageDraw, ImageFilter, ImageFont

# local imports
from constants import (
    BACKGROUND_FILENAME,
    CAPTION_FILL,
    CAPTION_FONT_CANDIDATES,
    CAPTION_FONT_DIVISOR,
    CAPTION_LINE_HEIGHT_RATIO,
    CAPTION_MAX_WIDTH_RATIO,
    COMPOSITED_FILENAME,
    EXPORT_FALLBACK_NOTICE,
    FALLBACK_MEDIA_TYPE,
    IMAGE_DOWNLOAD_CHUNK_SIZE,
    MAX_IMAGE_BYTES,
    PNG_MEDIA_TYPE,
    SHADOW_BLUR,
    SHADOW_COLOR,
    SHADOW_OFFSET,
    USER_AGENT,
)
from models import ExportArtifact
from utils import check_image_url, decode_data_url


logger = logging.getLogger(__name__)

# Whitespace runs are kept as their own tokens so spacing survives wrapping
_TOKEN_PATTERN = re.compile(r"(\s+)")


def wrap_text(text: str, measure: Callable[[str], float], max_width: float) -> list[str]:
    """
    Greedy line fill.

    Each token is tentatively appended to the current line; if the result is
    wider than max_width (and it is not the very first token) the current
    line is committed and the token starts the next one. A single token wider
    than max_width is never split and overflows on its own line.

    Args:
        text: Caption text.
        measure: Returns the rendered width of a string.
        max_width: Maximum line width in the same unit as measure().

    Returns:
        Lines in drawing order, stripped of surrounding whitespace.
    """
    tokens = _TOKEN_PATTERN.split(text)
    lines = []
    line = ""

    for n, token in enumerate(tokens):
        test_line = line + token
        if measure(test_line) > max_width and n > 0:
            lines.append(line.strip())
            line = token
        else:
            line = test_line

    lines.append(line.strip())
    return lines


def line_positions(
    line_count: int,
    center_x: float,
    center_y: float,
    line_height: float,
) -> list[tuple[float, float]]:
    """Anchor points for each line, with the block centered on center_y."""
    start_y = center_y - ((line_count - 1) * line_height) / 2
    return [(center_x, start_y + i * line_height) for i in range(line_count)]


def _find_font(candidates: list[str], size: int):
    """Try loading a font from a list of candidate paths."""
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return None


def load_caption_font(size: int, font_path: str | None = None):
    """
    Load the caption font at the given pixel size.

    Order: explicit font_path, bold system fonts with Hangul coverage,
    Pillow's built-in scalable font.
    """
    candidates = [font_path] if font_path else []
    candidates.extend(CAPTION_FONT_CANDIDATES)

    font = _find_font(candidates, size)
    if font is None:
        logger.debug("No caption font found on disk, using Pillow's default font")
        font = ImageFont.load_default(size=size)
    return font


class ImageTooLargeError(ValueError):
    """Raised when an image exceeds the download size limit."""


def fetch_image_bytes(image_url: str, timeout: float = 15, max_bytes: int = MAX_IMAGE_BYTES) -> bytes:
    """
    Return the raw bytes behind an image URL.

    Supports data URLs (decoded in-process) and public https URLs. Downloads
    are streamed and abandoned as soon as they pass max_bytes.

    Raises:
        ValueError: For malformed data URLs or a URL rejected by check_image_url.
        ImageTooLargeError: For images larger than max_bytes.
        requests.RequestException: For network errors or non-2xx responses.
    """
    check_image_url(image_url)

    if image_url.startswith("data:"):
        _, raw_bytes = decode_data_url(image_url)
        if len(raw_bytes) > max_bytes:
            raise ImageTooLargeError(f"Image is larger than {max_bytes} bytes")
        return raw_bytes

    with requests.get(
        image_url,
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
        stream=True,
        allow_redirects=False,
    ) as response:
        response.raise_for_status()
        # Redirect targets are not re-checked, so they are not followed
        if response.is_redirect:
            raise ValueError(f"Image URL redirects to {response.headers.get('Location')}")

        declared = response.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            raise ImageTooLargeError(f"Image is larger than {max_bytes} bytes ({declared} declared)")

        buffer = bytearray()
        for chunk in response.iter_content(chunk_size=IMAGE_DOWNLOAD_CHUNK_SIZE):
            buffer.extend(chunk)
            if len(buffer) > max_bytes:
                raise ImageTooLargeError(f"Image is larger than {max_bytes} bytes")

    return bytes(buffer)


class Compositor:
    """
    Renders the caption over the background image.

    Every export re-fetches and re-draws from scratch; nothing is cached.
    """

    def __init__(
        self,
        font_path: str | None = None,
        timeout: float = 15,
        fetch: Callable[[str], bytes] | None = None,
    ):
        """
        Args:
            font_path: Optional caption font file (overrides the system candidates).
            timeout: Image download timeout in seconds.
            fetch: Callable returning the bytes behind a URL (defaults to
                   fetch_image_bytes with the configured timeout).
        """
        self.font_path = font_path
        self.timeout = timeout
        self.fetch = fetch or (lambda url: fetch_image_bytes(url, timeout=self.timeout))


    def export(self, image_url: str, caption: str) -> ExportArtifact:
        """
        Build the downloadable artifact for an image URL and caption.

        Args:
            image_url: Background image (https or data URL).
            caption: Text to draw over the image.

        Returns:
            ExportArtifact named promo-image-with-text.png on success, or a
            background-only promo-image-background.png artifact (content may be
            None if nothing could be downloaded) with a user-facing notice.
            The fallback keeps the .png download name but is typed
            application/octet-stream, since its bytes failed to decode and
            their real format is unknown.
        """
        raw_bytes = None
        try:
            raw_bytes = self.fetch(image_url)
            image = Image.open(BytesIO(raw_bytes))
            # Force decoding now so truncated/corrupt files fail here
            image.load()

        except Exception as e:
            logger.error(f"Failed to load image for compositing, exporting background only: {str(e)}")
            return ExportArtifact(
                filename=BACKGROUND_FILENAME,
                content=raw_bytes,
                media_type=FALLBACK_MEDIA_TYPE,
                source_url=image_url,
                composited=False,
                notice=EXPORT_FALLBACK_NOTICE,
            )

        png_bytes = self.render(image, caption)
        logger.info(f"Composited caption onto {image.size[0]}x{image.size[1]} image")

        return ExportArtifact(
            filename=COMPOSITED_FILENAME,
            content=png_bytes,
            media_type=PNG_MEDIA_TYPE,
            source_url=image_url,
            composited=True,
        )


    def render(self, image: Image.Image, caption: str) -> bytes:
        """
        Draw the wrapped, shadowed caption centered on the image.

        The surface has the image's natural size, so no scaling happens.

        Returns:
            PNG bytes of the composited image.
        """
        surface = image.convert("RGBA")
        width, height = surface.size

        font_size = max(1, width // CAPTION_FONT_DIVISOR)
        font = load_caption_font(font_size, self.font_path)
        max_width = width * CAPTION_MAX_WIDTH_RATIO
        line_height = font_size * CAPTION_LINE_HEIGHT_RATIO

        draw = ImageDraw.Draw(surface)
        lines = wrap_text(caption, lambda s: draw.textlength(s, font=font), max_width)
        positions = line_positions(len(lines), width / 2, height / 2, line_height)

        # Shadow: offset copy of the text on its own layer, then blurred.
        # A canvas blur of N corresponds to a Gaussian sigma of N / 2.
        shadow_layer = Image.new("RGBA", surface.size, (0, 0, 0, 0))
        shadow_draw = ImageDraw.Draw(shadow_layer)
        offset_x, offset_y = SHADOW_OFFSET
        for line, (x, y) in zip(lines, positions):
            shadow_draw.text((x + offset_x, y + offset_y), line, font=font, fill=SHADOW_COLOR, anchor="mm")
        shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(radius=SHADOW_BLUR / 2))

        surface = Image.alpha_composite(surface, shadow_layer)

        draw = ImageDraw.Draw(surface)
        for line, (x, y) in zip(lines, positions):
            draw.text((x, y), line, font=font, fill=CAPTION_FILL, anchor="mm")

        buffer = BytesIO()
        surface.save(buffer, format="PNG")
        return buffer.getvalue()
