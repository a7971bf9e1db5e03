"""Per-listing pagination state.

A ``PaginationCursor`` owns the accumulated records of one listing (the
exhibition browser, one exhibition's artworks, one artist's artworks) and
sequences page loads against a synchronous fetch function. Fetches run in a
worker thread via ``asyncio.to_thread`` so the event loop stays responsive;
all state is written back on the loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, TypeVar

from .config import config
from .errors import CatalogError
from .models import Artwork, Exhibition, PageResponse, ResultKind, SearchResult

if TYPE_CHECKING:
    from .adapters.harvard import HarvardArtAdapter

T = TypeVar("T")

FetchPage = Callable[[int, int], PageResponse[T]]

logger = logging.getLogger(__name__)


class PaginationCursor(Generic[T]):
    """Tracks page number, more-pages flag, loading flags and records for one listing."""

    def __init__(self, fetch_page: FetchPage, page_size: int = config.PAGE_SIZE, name: str = "listing") -> None:
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.name = name

        self.records: list[T] = []
        self.current_page = 1
        self.has_more_pages = True
        self.is_loading_first = False
        self.is_loading_more = False
        self.error: CatalogError | None = None

        # Bumped by every first-page load; stale load_more results are dropped
        self._generation = 0
        self._last_failed: Callable[[], Awaitable[None]] | None = None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None

    @property
    def is_loading(self) -> bool:
        return self.is_loading_first or self.is_loading_more

    async def _fetch(self, page: int) -> PageResponse[T]:
        return await asyncio.to_thread(self._fetch_page, page, self.page_size)

    async def load_first(self) -> None:
        """Replace the records with page 1. No-op while a first-page load is running.

        On failure the current records are kept and ``error`` is set.
        """
        if self.is_loading_first:
            return

        self._generation += 1
        self.is_loading_first = True
        self.error = None
        logger.debug("%s: loading page 1", self.name)

        try:
            response = await self._fetch(1)
        except CatalogError as exc:
            logger.warning("%s: first page failed: %s", self.name, exc.message)
            self.error = exc
            self._last_failed = self.load_first
            return
        finally:
            self.is_loading_first = False

        self.records = list(response.records)
        self.current_page = 1
        self.has_more_pages = response.info.has_next_page
        self._last_failed = None
        logger.info("%s: loaded %d records (more=%s)", self.name, len(self.records), self.has_more_pages)

    async def load_more(self) -> None:
        """Append the next page. No-op while any load is running or when no pages remain."""
        if self.is_loading_more or self.is_loading_first or not self.has_more_pages:
            return

        generation = self._generation
        next_page = self.current_page + 1
        self.is_loading_more = True
        logger.debug("%s: loading page %d", self.name, next_page)

        try:
            response = await self._fetch(next_page)
        except CatalogError as exc:
            if generation == self._generation:
                logger.warning("%s: page %d failed: %s", self.name, next_page, exc.message)
                self.error = exc
                self._last_failed = self.load_more
            return
        finally:
            self.is_loading_more = False

        if generation != self._generation:
            logger.debug("%s: dropping page %d from a reset listing", self.name, next_page)
            return

        self.records.extend(response.records)
        self.current_page = next_page
        self.has_more_pages = response.info.has_next_page
        self._last_failed = None

    async def refresh(self) -> None:
        """Clear all state and load page 1 again."""
        self.records = []
        self.current_page = 1
        self.has_more_pages = True
        self.error = None
        await self.load_first()

    async def retry(self) -> None:
        """Re-run the operation that last failed, if any."""
        operation = self._last_failed
        if operation is None:
            return
        self.error = None
        await operation()

    def clear_error(self) -> None:
        self.error = None


def exhibitions_cursor(adapter: "HarvardArtAdapter", page_size: int = config.PAGE_SIZE) -> PaginationCursor[Exhibition]:
    return PaginationCursor(
        lambda page, size: adapter.fetch_exhibitions(page=page, size=size),
        page_size=page_size,
        name="exhibitions",
    )


def exhibition_artworks_cursor(
    adapter: "HarvardArtAdapter", exhibition_id: int, page_size: int = config.PAGE_SIZE
) -> PaginationCursor[Artwork]:
    return PaginationCursor(
        lambda page, size: adapter.fetch_artworks_in_exhibition(exhibition_id, page=page, size=size),
        page_size=page_size,
        name=f"exhibition:{exhibition_id}",
    )


def artist_artworks_cursor(
    adapter: "HarvardArtAdapter", artist_id: int, page_size: int = config.PAGE_SIZE
) -> PaginationCursor[Artwork]:
    return PaginationCursor(
        lambda page, size: adapter.fetch_artworks_by_artist(artist_id, page=page, size=size),
        page_size=page_size,
        name=f"artist:{artist_id}",
    )


def result_artworks_cursor(
    adapter: "HarvardArtAdapter", result: SearchResult, page_size: int = config.PAGE_SIZE
) -> PaginationCursor[Artwork] | None:
    """Artworks listing opened from a search result, or None when it has none.

    Exhibitions list their artworks and artists their works. Results rebuilt
    from a history preview carry no catalog id and get no listing.
    """
    entity = result.entity
    if result.kind is ResultKind.EXHIBITION and entity.id and entity.id > 0:
        return exhibition_artworks_cursor(adapter, entity.id, page_size)
    if result.kind is ResultKind.ARTIST and entity.id and entity.id > 0:
        return artist_artworks_cursor(adapter, entity.id, page_size)
    return None
