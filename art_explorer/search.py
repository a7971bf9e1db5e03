"""Debounced, cancelable, category-aware search.

``SearchCoordinator`` turns free-text input into ``SearchResult`` lists. Typed
input goes through ``schedule_search`` (debounced); explicit submissions go
through ``search``. Every new request bumps a generation counter and cancels
the pending debounce task, along with any fetch that task started. Results
and errors are only written while the generation that produced them is still
current, so a superseded request can never overwrite a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .config import config
from .errors import CatalogError
from .models import PageResponse, SearchCategory, SearchResult

if TYPE_CHECKING:
    from .adapters.harvard import HarvardArtAdapter
    from .history import SearchHistoryStore

logger = logging.getLogger(__name__)

# Per-category cap and order for the merged "All" view
ALL_CATEGORY_LIMIT = 5
ALL_CATEGORY_ORDER = (SearchCategory.ARTWORK, SearchCategory.EXHIBITIONS, SearchCategory.ARTISTS)


class SearchState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    SETTLED = "settled"
    FAILED = "failed"
    CANCELED = "canceled"


class SearchCoordinator:
    """Search state for one search screen."""

    def __init__(
        self,
        adapter: "HarvardArtAdapter",
        history: "SearchHistoryStore | None" = None,
        page_size: int = config.PAGE_SIZE,
        debounce_delay: float = config.SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.adapter = adapter
        self.history = history
        self.page_size = page_size
        self.debounce_delay = debounce_delay

        self.results: list[SearchResult] = []
        self.state = SearchState.IDLE
        self.error: CatalogError | None = None
        self.is_loading = False
        self.is_loading_more = False
        self.has_more_pages = True

        # Cursor: the last executed (query, category, page)
        self.query = ""
        self.category: SearchCategory | None = None
        self.current_page = 1

        self._generation = 0
        self._task: asyncio.Task | None = None
        self._last_failed: Callable[[], Awaitable[None]] | None = None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None

    # -- Entry points ----------------------------------------------------------

    def schedule_search(self, query: str, category: SearchCategory = SearchCategory.ALL) -> asyncio.Task | None:
        """
        Debounced search for keystroke-driven input. Must be called from a
        running event loop.

        Returns the debounce task, or None when the query is blank (results
        are cleared immediately in that case).
        """
        generation = self._supersede()
        trimmed = query.strip()
        if not trimmed:
            self._reset_results()
            self.state = SearchState.IDLE
            return None

        self.state = SearchState.DEBOUNCING
        self._task = asyncio.get_running_loop().create_task(
            self._debounced(trimmed, category, generation)
        )
        return self._task

    async def search(self, query: str, category: SearchCategory = SearchCategory.ALL) -> None:
        """Immediate search, used on explicit submission. Records the query in history."""
        generation = self._supersede()
        trimmed = query.strip()
        if not trimmed:
            self._reset_results()
            self.state = SearchState.IDLE
            return

        if self.history is not None:
            self.history.add_search_to_history(trimmed, category)

        await self._run_search(trimmed, category, generation)

    async def load_more_results(self) -> None:
        """Fetch the next page for the last executed query and category."""
        if not self.query or self.category is None:
            return
        # The pending query will replace these results
        if self.state is SearchState.DEBOUNCING:
            return
        if self.is_loading or self.is_loading_more or not self.has_more_pages:
            return

        generation = self._generation
        query, category = self.query, self.category
        next_page = self.current_page + 1
        self.is_loading_more = True

        try:
            results, has_more = await self._fetch(query, category, next_page)
        except CatalogError as exc:
            if generation == self._generation:
                logger.warning("Loading page %d for %r failed: %s", next_page, query, exc.message)
                self.error = exc
                self._last_failed = self.load_more_results
            return
        finally:
            if generation == self._generation:
                self.is_loading_more = False

        if generation != self._generation:
            return

        self.results.extend(results)
        self.current_page = next_page
        self.has_more_pages = has_more
        self._last_failed = None

    def record_click(self, result: SearchResult) -> None:
        """Log a clicked result against the query/category that produced it."""
        if self.history is None:
            return
        self.history.add_clicked_result_to_history(result, self.query, self.category or SearchCategory.ALL)

    async def retry(self) -> None:
        """Re-run the operation that last failed: the search itself or the failed page."""
        operation = self._last_failed
        if operation is None:
            return
        self._last_failed = None
        self.error = None
        await operation()

    def cancel(self) -> None:
        """Abandon any pending or in-flight search without touching results."""
        in_progress = self.state in (SearchState.DEBOUNCING, SearchState.FETCHING)
        self._supersede()
        if in_progress:
            self.state = SearchState.CANCELED

    def clear_results(self) -> None:
        self._supersede()
        self._reset_results()
        self.state = SearchState.IDLE

    def clear_error(self) -> None:
        self.error = None

    async def wait_idle(self) -> None:
        """Wait until no debounce or search task is pending."""
        while True:
            task = self._task
            if task is None or task.done() or task is asyncio.current_task():
                return
            await asyncio.gather(task, return_exceptions=True)

    # -- Internals -------------------------------------------------------------

    def _supersede(self) -> int:
        """Invalidate everything in flight and return the new generation."""
        self._generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        self.is_loading = False
        self.is_loading_more = False
        return self._generation

    def _reset_results(self) -> None:
        self.results = []
        self.query = ""
        self.category = None
        self.current_page = 1
        self.has_more_pages = True
        self.error = None
        self._last_failed = None

    async def _rerun(self) -> None:
        if self.query and self.category is not None:
            await self._run_search(self.query, self.category, self._supersede())

    async def _debounced(self, query: str, category: SearchCategory, generation: int) -> None:
        await asyncio.sleep(self.debounce_delay)
        if generation != self._generation:
            return
        await self._run_search(query, category, generation)

    async def _run_search(self, query: str, category: SearchCategory, generation: int) -> None:
        if generation != self._generation:
            return
        # A fresh first page invalidates any page load still in flight
        self._generation += 1
        generation = self._generation
        self.is_loading_more = False
        self._last_failed = None

        if (query, category) != (self.query, self.category):
            self.results = []
            self.current_page = 1
            self.has_more_pages = True
            self.query = query
            self.category = category

        self.state = SearchState.FETCHING
        self.is_loading = True
        self.error = None
        logger.info("Searching %s for %r", category.value, query)

        try:
            results, has_more = await self._fetch(query, category, 1)
        except CatalogError as exc:
            if generation == self._generation:
                logger.warning("Search for %r failed: %s", query, exc.message)
                self.error = exc
                self.state = SearchState.FAILED
                self._last_failed = self._rerun
            return
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            return

        self.results = results
        self.current_page = 1
        self.has_more_pages = has_more
        self.state = SearchState.SETTLED
        logger.info("Search for %r returned %d results", query, len(results))

    async def _fetch(self, query: str, category: SearchCategory, page: int) -> tuple[list[SearchResult], bool]:
        """Dispatch one page of ``category`` to the adapter."""
        if category is SearchCategory.ALL:
            return await self._fetch_all(query), False

        fetch, wrap = self._dispatch(category)
        response = await asyncio.to_thread(fetch, query, page=page, size=self.page_size)
        return [wrap(record) for record in response.records], response.info.has_next_page

    async def _fetch_all(self, query: str) -> list[SearchResult]:
        """Query artworks, exhibitions and artists concurrently; first few of each."""
        calls = []
        for category in ALL_CATEGORY_ORDER:
            fetch, _ = self._dispatch(category)
            calls.append(asyncio.to_thread(fetch, query, page=1, size=self.page_size))
        responses: list[PageResponse[Any]] = await asyncio.gather(*calls)

        merged: list[SearchResult] = []
        for category, response in zip(ALL_CATEGORY_ORDER, responses):
            _, wrap = self._dispatch(category)
            merged.extend(wrap(record) for record in response.records[:ALL_CATEGORY_LIMIT])
        return merged

    def _dispatch(self, category: SearchCategory) -> tuple[Callable[..., PageResponse[Any]], Callable[[Any], SearchResult]]:
        if category is SearchCategory.ARTWORK:
            return self.adapter.search_artworks, SearchResult.artwork
        if category is SearchCategory.EXHIBITIONS:
            return self.adapter.search_exhibitions, SearchResult.exhibition
        if category is SearchCategory.ARTISTS:
            return self.adapter.search_people, SearchResult.artist
        if category is SearchCategory.MEDIUMS:
            return self.adapter.search_classifications, SearchResult.medium
        raise ValueError(f"No single endpoint for category {category}")


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
