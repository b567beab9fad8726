"""In-memory page store with a short-lived cache in front of texttv.nu."""

import asyncio
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from pydantic import ValidationError

from .exceptions import FetchFailureError, InvalidArgumentError, TextTVError
from .types import (
    MAX_PAGE_NUMBER,
    MIN_PAGE_NUMBER,
    CacheEntry,
    CacheEntryStats,
    CacheStats,
    ContentField,
    PageContent,
    PageResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION_MS = 30 * 1000
DEFAULT_CLEANUP_PROBABILITY = 0.1


class PagePayloadFetcher(Protocol):
    async def fetch_page_payload(self, page_number: int) -> Any: ...


def validate_page_number(page_number: Any) -> int:
    """Return the page number if it is an integer in [100, 999].

    Raises:
        InvalidArgumentError: If the value is not a valid page identifier.
    """
    if (
        isinstance(page_number, bool)
        or not isinstance(page_number, int)
        or not MIN_PAGE_NUMBER <= page_number <= MAX_PAGE_NUMBER
    ):
        raise InvalidArgumentError(
            f"Invalid page number: {page_number}. "
            f"Page numbers must be between {MIN_PAGE_NUMBER} and {MAX_PAGE_NUMBER}."
        )
    return page_number


def _join_content(value: ContentField) -> str:
    if isinstance(value, list):
        return "\n".join(value)
    return value or ""


def normalize_page(page: Union[PageResponse, Dict[str, Any]]) -> PageContent:
    """Normalize an upstream page object into PageContent.

    Precedence: non-empty ``content_plain`` wins over ``content``; list
    values are joined with newlines; a missing timestamp becomes 0.
    """
    if not isinstance(page, PageResponse):
        page = PageResponse.model_validate(page)

    if page.content_plain:
        text = _join_content(page.content_plain)
    elif page.content:
        text = _join_content(page.content)
    else:
        text = ""

    return PageContent(
        text=text, date_updated_unix=max(page.date_updated_unix or 0, 0)
    )


def placeholder_for(page_number: Any, error: Exception) -> PageContent:
    """Build the stand-in content used for a page that failed in a batch."""
    return PageContent(
        text=f"Error: Page {page_number} could not be retrieved - {error}",
        date_updated_unix=0,
    )


class PageStore:
    """Validates page numbers, caches pages and fetches them from upstream.

    The cache is owned by the instance. Entries older than the freshness
    window are refreshed on access and swept opportunistically with a fixed
    probability per uncached lookup.
    """

    def __init__(
        self,
        client: PagePayloadFetcher,
        cache_duration_ms: float = DEFAULT_CACHE_DURATION_MS,
        cleanup_probability: float = DEFAULT_CLEANUP_PROBABILITY,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._client = client
        self._cache: Dict[int, CacheEntry] = {}
        self._cache_duration_ms = cache_duration_ms
        self._cleanup_probability = cleanup_probability
        self._clock = clock or (lambda: time.time() * 1000)
        self._rng = rng or random.Random()

    @property
    def cache_duration_ms(self) -> float:
        return self._cache_duration_ms

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp_ms > self._cache_duration_ms

    def _get_cached_page(self, page_number: int) -> Optional[PageContent]:
        entry = self._cache.get(page_number)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            del self._cache[page_number]
            return None
        return entry.content

    def _set_cached_page(self, page_number: int, content: PageContent) -> None:
        self._cache[page_number] = CacheEntry(
            content=content, timestamp_ms=self._clock()
        )

    def cleanup_expired(self) -> int:
        """Evict every expired entry and return how many were removed."""
        now = self._clock()
        expired = [n for n, e in self._cache.items() if self._is_expired(e, now)]
        for page_number in expired:
            del self._cache[page_number]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired cache entries")
        return len(expired)

    async def get_page(self, page_number: int) -> PageContent:
        """Get a single page, from cache when fresh.

        If upstream returns several page objects the first one is used.

        Raises:
            InvalidArgumentError: If page_number is outside [100, 999].
            FetchFailureError: If the page cannot be fetched or parsed.
        """
        validate_page_number(page_number)

        cached = self._get_cached_page(page_number)
        if cached is not None:
            logger.debug(f"Cache hit for page {page_number}")
            return cached

        if self._rng.random() < self._cleanup_probability:
            self.cleanup_expired()

        try:
            payload = await self._client.fetch_page_payload(page_number)
            if not isinstance(payload, list) or not payload:
                raise FetchFailureError(
                    f"Page {page_number} does not exist or is not available"
                )
            content = normalize_page(payload[0])
        except FetchFailureError as e:
            logger.warning(f"Failed to fetch page {page_number}: {e}")
            raise FetchFailureError(f"Failed to fetch page {page_number}: {e}") from e
        except ValidationError as e:
            logger.warning(f"Malformed payload for page {page_number}: {e}")
            raise FetchFailureError(
                f"Failed to fetch page {page_number}: malformed page data"
            ) from e

        self._set_cached_page(page_number, content)
        logger.info(f"Fetched page {page_number} ({len(content.text)} chars)")
        return content

    async def _get_page_or_placeholder(self, page_number: int) -> PageContent:
        try:
            return await self.get_page(page_number)
        except TextTVError as e:
            return placeholder_for(page_number, e)

    async def get_pages(self, page_numbers: Sequence[int]) -> List[PageContent]:
        """Get several pages concurrently.

        Results are in input order. A page that fails yields a placeholder
        instead of failing the whole batch.
        """
        tasks = [self._get_page_or_placeholder(n) for n in page_numbers]
        return list(await asyncio.gather(*tasks))

    async def get_page_range(self, start: int, end: int) -> List[PageContent]:
        """Get the inclusive range of pages start..end."""
        return await self.get_pages(list(range(start, end + 1)))

    async def search_pages(
        self, query: str, page_numbers: Sequence[int]
    ) -> List[PageContent]:
        """Return the pages whose text contains query, ignoring case."""
        pages = await self.get_pages(page_numbers)
        needle = query.lower()
        return [page for page in pages if needle in page.text.lower()]

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.debug("Cleared page cache")

    def cache_stats(self) -> CacheStats:
        """Snapshot of the cache with entry ages computed now."""
        now = self._clock()
        entries = [
            CacheEntryStats(
                page_number=page_number,
                age_seconds=int((now - entry.timestamp_ms) / 1000 + 0.5),
            )
            for page_number, entry in self._cache.items()
        ]
        return CacheStats(size=len(self._cache), entries=entries)
