"""
Background image selection for a KeywordSet.

Contract: resolve() always returns an ImageResult and never raises.
Every failure path ends in a placeholder URL:
- no access key          -> "No API Key" placeholder, no network call
- no results, twice      -> "No Image Found" placeholder
- bad status / exception -> "Error Loading Image" placeholder
"""
# stdlib imports
import asyncio
import logging
import random
from collections.abc import Callable

# local imports
from api.unsplash_client import UnsplashAPIError, search_photos
from constants import (
    FALLBACK_SEARCH_PER_PAGE,
    FALLBACK_SEARCH_QUERY,
    PLACEHOLDER_ERROR_LOADING,
    PLACEHOLDER_NO_API_KEY,
    PLACEHOLDER_NO_IMAGE_FOUND,
    SEARCH_MAX_RANDOM_PAGE,
    SEARCH_ORDER_OPTIONS,
    SEARCH_PER_PAGE,
)
from models import AspectRatio, ImageResult, KeywordSet


logger = logging.getLogger(__name__)


# 3:4 and 4:3 have no dedicated hint and fall through to "landscape"
ORIENTATION_BY_ASPECT_RATIO = {
    AspectRatio.STORY: "portrait",
    AspectRatio.WIDE: "landscape",
    AspectRatio.SQUARE: "squarish",
}
DEFAULT_ORIENTATION = "landscape"


def get_orientation(aspect_ratio: AspectRatio) -> str:
    """Map an aspect ratio to the search service's orientation hint."""
    return ORIENTATION_BY_ASPECT_RATIO.get(AspectRatio(aspect_ratio), DEFAULT_ORIENTATION)


class ImageResolver:
    """
    Finds a stock photo for translated keywords.

    Randomizes result page, ordering and the picked result so repeated
    identical inputs do not keep returning the same photo.
    """

    def __init__(
        self,
        access_key: str | None,
        timeout: float = 15,
        rng: random.Random | None = None,
        search: Callable[..., list[dict]] = search_photos,
    ):
        """
        Args:
            access_key: Unsplash access key; None switches to placeholder mode.
            timeout: Per-request timeout in seconds.
            rng: Random source for page/order/result picks (inject a seeded
                 random.Random to pin results in tests).
            search: Blocking search callable with the signature of
                    api.unsplash_client.search_photos.
        """
        self.access_key = access_key
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.search = search


    async def resolve(self, keywords: KeywordSet, aspect_ratio: AspectRatio) -> ImageResult:
        """
        Resolve keywords to an image URL.

        Args:
            keywords: Translated search terms.
            aspect_ratio: Requested aspect ratio (mapped to an orientation hint).

        Returns:
            ImageResult with a photo URL, or a placeholder URL on any failure.
        """
        if not self.access_key:
            logger.warning("UNSPLASH_ACCESS_KEY is not set. Using fallback image.")
            return ImageResult(url=PLACEHOLDER_NO_API_KEY, is_placeholder=True)

        try:
            orientation = get_orientation(aspect_ratio)
            return await self._search_and_pick(keywords, orientation)

        except Exception as e:
            logger.error(f"Error fetching image from Unsplash: {str(e)}")
            return ImageResult(url=PLACEHOLDER_ERROR_LOADING, is_placeholder=True)


    async def _run_search(self, **params) -> list[dict]:
        # requests is blocking; keep the event loop free while it waits
        return await asyncio.to_thread(
            self.search,
            access_key=self.access_key,
            timeout=self.timeout,
            **params,
        )


    def _pick_photo(self, results: list[dict]) -> ImageResult:
        """Pick one result uniformly at random (not the first)."""
        index = self.rng.randrange(len(results))
        photo = results[index]

        description = photo.get("description") or photo.get("alt_description")
        logger.info(
            f"Found image ({index + 1}/{len(results)}): {description or 'No description'}"
        )

        urls = photo["urls"]
        url = urls.get("regular") or urls.get("full")
        if not url:
            raise ValueError("Selected photo has neither a regular nor a full URL")

        return ImageResult(url=url, source_description=description)


    async def _search_and_pick(self, keywords: KeywordSet, orientation: str) -> ImageResult:
        page = self.rng.randint(1, SEARCH_MAX_RANDOM_PAGE)
        order_by = self.rng.choice(SEARCH_ORDER_OPTIONS)

        logger.info(
            f"Searching Unsplash with keywords: '{keywords.query}' "
            f"(orientation={orientation}, page={page}, order_by={order_by})"
        )

        # Non-2xx raises UnsplashAPIError -> error placeholder in resolve()
        results = await self._run_search(
            query=keywords.query,
            orientation=orientation,
            per_page=SEARCH_PER_PAGE,
            page=page,
            order_by=order_by,
        )

        if results:
            return self._pick_photo(results)

        logger.info("No results found for keywords, trying fallback query")
        return await self._search_fallback(orientation)


    async def _search_fallback(self, orientation: str) -> ImageResult:
        """One fixed, broader search. No page or order randomization."""
        try:
            results = await self._run_search(
                query=FALLBACK_SEARCH_QUERY,
                orientation=orientation,
                per_page=FALLBACK_SEARCH_PER_PAGE,
            )
        except UnsplashAPIError as e:
            logger.warning(f"Fallback search failed: {str(e)}")
            results = []

        if results:
            return self._pick_photo(results)

        logger.info("Fallback search returned nothing, using placeholder image")
        return ImageResult(url=PLACEHOLDER_NO_IMAGE_FOUND, is_placeholder=True)
