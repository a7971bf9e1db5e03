"""
Unit tests for art_explorer/paging.py.

Mocking strategy:
- cursors are built over plain fetch functions returning PageResponse objects
- slow fetches are held open with threading.Event gates so a second
  operation can run while the first is still in its worker thread
"""

import asyncio
import threading
from unittest.mock import MagicMock

from art_explorer.errors import TransportFailure
from art_explorer.models import (
    Artwork,
    Classification,
    Exhibition,
    PageInfo,
    PageResponse,
    Person,
    ResultKind,
    SearchResult,
    SearchResultPreview,
)
from art_explorer.paging import (
    PaginationCursor,
    artist_artworks_cursor,
    exhibition_artworks_cursor,
    exhibitions_cursor,
    result_artworks_cursor,
)


def _page(records, page=1, pages=1):
    info = PageInfo(total_records=len(records), records_per_query=20, page=page, pages=pages)
    return PageResponse(info=info, records=list(records))


def _exhibitions(start, count):
    return [Exhibition(id=i, title=f'Exhibition {i}') for i in range(start, start + count)]


def _three_pages():
    pages = {
        1: _page(_exhibitions(1, 20), page=1, pages=3),
        2: _page(_exhibitions(21, 20), page=2, pages=3),
        3: _page(_exhibitions(41, 5), page=3, pages=3),
    }
    calls = []

    def fetch(page, size):
        calls.append((page, size))
        return pages[page]

    return fetch, calls


# ---------------------------------------------------------------------------
# Paging through a listing
# ---------------------------------------------------------------------------

def test_load_first_then_more_until_exhausted():
    fetch, calls = _three_pages()
    cursor = PaginationCursor(fetch, page_size=20)

    async def scenario():
        await cursor.load_first()
        assert cursor.has_more_pages
        assert cursor.current_page == 1
        await cursor.load_more()
        await cursor.load_more()

    asyncio.run(scenario())

    assert cursor.current_page == 3
    assert not cursor.has_more_pages
    assert len(cursor.records) == 45
    assert calls == [(1, 20), (2, 20), (3, 20)]


def test_records_are_not_duplicated_across_pages():
    fetch, _ = _three_pages()
    cursor = PaginationCursor(fetch, page_size=20)

    async def scenario():
        await cursor.load_first()
        await cursor.load_more()
        await cursor.load_more()
        await cursor.load_more()

    asyncio.run(scenario())

    ids = [record.id for record in cursor.records]
    assert len(ids) == len(set(ids))


def test_load_more_is_noop_when_no_pages_remain():
    fetch = MagicMock(return_value=_page(_exhibitions(1, 3)))
    cursor = PaginationCursor(fetch, page_size=20)

    async def scenario():
        await cursor.load_first()
        await cursor.load_more()

    asyncio.run(scenario())

    fetch.assert_called_once_with(1, 20)
    assert not cursor.has_more_pages


def test_refresh_returns_to_page_one():
    fetch, calls = _three_pages()
    cursor = PaginationCursor(fetch, page_size=20)

    async def scenario():
        await cursor.load_first()
        await cursor.load_more()
        await cursor.refresh()

    asyncio.run(scenario())

    assert cursor.current_page == 1
    assert len(cursor.records) == 20
    assert cursor.has_more_pages
    assert calls[-1] == (1, 20)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_failed_load_more_keeps_records_and_sets_error():
    fetch, _ = _three_pages()

    def flaky(page, size):
        if page == 2:
            raise TransportFailure('Could not connect')
        return fetch(page, size)

    cursor = PaginationCursor(flaky, page_size=20)

    async def scenario():
        await cursor.load_first()
        await cursor.load_more()

    asyncio.run(scenario())

    assert len(cursor.records) == 20
    assert cursor.current_page == 1
    assert cursor.error_message == 'Could not connect'
    assert not cursor.is_loading_first
    assert not cursor.is_loading_more


def test_failed_first_load_keeps_previous_records():
    fetch, _ = _three_pages()
    cursor = PaginationCursor(fetch, page_size=20)
    asyncio.run(cursor.load_first())

    cursor._fetch_page = MagicMock(side_effect=TransportFailure())
    asyncio.run(cursor.load_first())

    assert len(cursor.records) == 20
    assert isinstance(cursor.error, TransportFailure)
    assert not cursor.is_loading


def test_retry_reruns_failed_page():
    fetch, calls = _three_pages()
    failures = {'left': 1}

    def flaky(page, size):
        if page == 2 and failures['left']:
            failures['left'] -= 1
            raise TransportFailure()
        return fetch(page, size)

    cursor = PaginationCursor(flaky, page_size=20)

    async def scenario():
        await cursor.load_first()
        await cursor.load_more()
        assert cursor.error is not None
        await cursor.retry()

    asyncio.run(scenario())

    assert cursor.error is None
    assert cursor.current_page == 2
    assert len(cursor.records) == 40


def test_retry_without_failure_is_noop():
    fetch = MagicMock()
    cursor = PaginationCursor(fetch)
    asyncio.run(cursor.retry())
    fetch.assert_not_called()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

def test_concurrent_first_loads_issue_one_request():
    fetch, calls = _three_pages()
    cursor = PaginationCursor(fetch, page_size=20)

    async def scenario():
        await asyncio.gather(cursor.load_first(), cursor.load_first())

    asyncio.run(scenario())

    assert calls == [(1, 20)]
    assert len(cursor.records) == 20


def test_stale_load_more_is_dropped_after_refresh():
    fetch, calls = _three_pages()
    started = threading.Event()
    gate = threading.Event()

    def slow(page, size):
        if page == 2:
            started.set()
            gate.wait(5)
        return fetch(page, size)

    cursor = PaginationCursor(slow, page_size=20)

    async def scenario():
        await cursor.load_first()
        more = asyncio.create_task(cursor.load_more())
        await asyncio.to_thread(started.wait, 5)
        await cursor.refresh()
        gate.set()
        await more

    asyncio.run(scenario())

    assert cursor.current_page == 1
    assert [record.id for record in cursor.records] == list(range(1, 21))
    assert cursor.has_more_pages


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def test_cursor_factories_bind_adapter_calls():
    adapter = MagicMock()
    adapter.fetch_exhibitions.return_value = _page([])
    adapter.fetch_artworks_in_exhibition.return_value = _page([])
    adapter.fetch_artworks_by_artist.return_value = _page([])

    async def scenario():
        await exhibitions_cursor(adapter, page_size=10).load_first()
        await exhibition_artworks_cursor(adapter, 5, page_size=10).load_first()
        await artist_artworks_cursor(adapter, 34147, page_size=10).load_first()

    asyncio.run(scenario())

    adapter.fetch_exhibitions.assert_called_once_with(page=1, size=10)
    adapter.fetch_artworks_in_exhibition.assert_called_once_with(5, page=1, size=10)
    adapter.fetch_artworks_by_artist.assert_called_once_with(34147, page=1, size=10)


# ---------------------------------------------------------------------------
# Listings opened from search results
# ---------------------------------------------------------------------------

def test_artist_result_opens_artworks_by_artist():
    adapter = MagicMock()
    adapter.fetch_artworks_by_artist.return_value = _page([Artwork(id=1, title='Water Lilies')], pages=2)
    cursor = result_artworks_cursor(adapter, SearchResult.artist(Person(id=34147, display_name='Claude Monet')))

    asyncio.run(cursor.load_first())

    adapter.fetch_artworks_by_artist.assert_called_once_with(34147, page=1, size=cursor.page_size)
    assert [a.title for a in cursor.records] == ['Water Lilies']
    assert cursor.has_more_pages


def test_exhibition_result_opens_exhibition_artworks():
    adapter = MagicMock()
    adapter.fetch_artworks_in_exhibition.return_value = _page([])
    cursor = result_artworks_cursor(adapter, SearchResult.exhibition(Exhibition(id=5, title='Van Gogh')))

    asyncio.run(cursor.load_first())

    adapter.fetch_artworks_in_exhibition.assert_called_once_with(5, page=1, size=cursor.page_size)


def test_results_without_listing():
    adapter = MagicMock()
    assert result_artworks_cursor(adapter, SearchResult.artwork(Artwork(id=1))) is None
    assert result_artworks_cursor(adapter, SearchResult.medium(Classification(id=3, name='Prints'))) is None
    assert result_artworks_cursor(adapter, SearchResult.artist(Person(display_name='Anonymous'))) is None


def test_history_preview_navigates_without_catalog_request():
    preview = SearchResultPreview(
        title='Claude Monet', subtitle='Artist', description='', image_url=None, kind=ResultKind.ARTIST
    )
    adapter = MagicMock()

    result = preview.to_search_result()

    assert result.kind is ResultKind.ARTIST
    assert result.title == 'Claude Monet'
    assert result_artworks_cursor(adapter, result) is None
    assert adapter.method_calls == []
