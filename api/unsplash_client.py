"""
Unsplash photo search client.

Thin wrapper around GET /search/photos. It only knows HTTP: building the
request, checking the status and returning the `results` list. Choosing a
photo and falling back to placeholders is the ImageResolver's job.
"""

# third-party imports
import requests

# local imports
from constants import UNSPLASH_SEARCH_URL, USER_AGENT


class UnsplashAPIError(Exception):
    """Raised when the search endpoint answers with a non-success status."""

    def __init__(self, status_code: int):
        super().__init__(f"Unsplash API error: {status_code}")
        self.status_code = status_code


def search_photos(
    query: str,
    orientation: str,
    access_key: str,
    per_page: int,
    page: int | None = None,
    order_by: str | None = None,
    timeout: float = 15,
) -> list[dict]:
    """
    Search Unsplash photos and return the raw result objects.

    Args:
        query: Space-separated English search terms.
        orientation: "portrait", "landscape" or "squarish".
        access_key: Unsplash access key, sent as "Client-ID <key>".
        per_page: Number of results to request.
        page: Optional result page (omitted from the request when None).
        order_by: Optional ordering (omitted from the request when None).
        timeout: Request timeout in seconds.

    Returns:
        The response's `results` list (may be empty).

    Raises:
        UnsplashAPIError: If the response status is not 2xx.
        requests.RequestException: On network failures and timeouts.
        ValueError: If the body is not valid JSON.
    """
    params = {
        "query": query,
        "orientation": orientation,
        "per_page": per_page,
    }
    if page is not None:
        params["page"] = page
    if order_by is not None:
        params["order_by"] = order_by

    response = requests.get(
        UNSPLASH_SEARCH_URL,
        params=params,
        headers={
            "Authorization": f"Client-ID {access_key}",
            "User-Agent": USER_AGENT,
        },
        timeout=timeout,
    )

    if not response.ok:
        raise UnsplashAPIError(response.status_code)

    data = response.json()
    return data.get("results") or []
