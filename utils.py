"""
Utility functions for the promo image generator.
"""
# stdlib imports
import base64
import ipaddress
from urllib.parse import quote, urlsplit

# local imports
from constants import ALLOWED_IMAGE_SCHEMES, PNG_MEDIA_TYPE


# Data URL utilities
def encode_data_url(raw_bytes: bytes, mime_type: str = PNG_MEDIA_TYPE) -> str:
    """
    Build a data URL in the format 'data:<mime-type>;base64,<payload>'.

    Args:
        raw_bytes: Encoded image data (e.g. PNG bytes).
        mime_type: MIME type written into the header (default: "image/png").

    Returns:
        The data URL as a string.
    """
    payload = base64.b64encode(raw_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{payload}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """
    Parse data URLs in the format 'data:<mime-type>;base64,<payload>'.

    Returns:
        (mime_type, raw_bytes)
    """
    if not isinstance(data_url, str) or not data_url.startswith("data:image"):
        raise ValueError("Invalid data URL: must start with 'data:image'.")

    try:
        # Format: "data:<mime-type>;base64,<payload>"
        header, b64data = data_url.split(",", 1)
        mime_type = header.split(";", 1)[0].split(":", 1)[1]

        raw_bytes = base64.b64decode(b64data, validate=True)

        return mime_type, raw_bytes

    except Exception as e:
        raise ValueError(f"Failed to parse and decode data URL: {e}") from e


# HTTP header utilities
def content_disposition(filename: str) -> str:
    """Return an attachment Content-Disposition header value for a download."""
    return f'attachment; filename="{filename}"'


def header_safe(text: str) -> str:
    """
    Percent-encode text so it fits in an HTTP header.

    Header values must be latin-1; the export notice is Korean.
    """
    return quote(text, safe=" .,")


# Image URL utilities
def check_image_url(image_url: str) -> str:
    """
    Validate a background image URL before the server touches it.

    Accepts data:image URLs (decoded locally) and https URLs whose host is a
    public name or a globally routable address.

    Returns:
        The URL unchanged.

    Raises:
        ValueError: For any other scheme, a missing host, localhost or a
            private/link-local/loopback IP literal.
    """
    if image_url.startswith("data:"):
        return image_url

    parts = urlsplit(image_url)
    if parts.scheme.lower() not in ALLOWED_IMAGE_SCHEMES:
        raise ValueError(f"Unsupported image URL scheme: {parts.scheme or '(none)'!r}")

    host = parts.hostname
    if not host:
        raise ValueError("Image URL has no host")
    if host == "localhost" or host.endswith(".localhost"):
        raise ValueError("Image URL points at a local host")

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        # Regular host name
        return image_url

    if not address.is_global:
        raise ValueError(f"Image URL points at a non-public address: {host}")
    return image_url
