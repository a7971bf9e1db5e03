"""Harvard Art Explorer - Streamlit application."""

import asyncio
import logging
from datetime import datetime

import streamlit as st

from art_explorer.adapters import get_adapter
from art_explorer.config import config
from art_explorer.errors import CatalogError
from art_explorer.favorites import FavoritesStore
from art_explorer.history import SearchHistoryStore
from art_explorer.models import Artwork, Exhibition, ResultKind, SearchCategory, SearchResult
from art_explorer.overview import SEARCH_RESULTS_TITLE, OverviewService
from art_explorer.paging import exhibition_artworks_cursor, exhibitions_cursor, result_artworks_cursor
from art_explorer.search import SearchCoordinator
from art_explorer.storage import SettingsStore

# Configuration
SOURCE = "HAM"
MAX_LOG_ENTRIES = 200
CATEGORY_OPTIONS = [c.value for c in SearchCategory]
PLACEHOLDERS = {
    SearchCategory.ARTWORK: "Search for an artwork",
    SearchCategory.EXHIBITIONS: "Search for exhibitions",
    SearchCategory.ARTISTS: "Search for artists",
    SearchCategory.MEDIUMS: "Search for mediums",
    SearchCategory.ALL: "Search artworks, exhibitions and artists",
}

st.set_page_config(page_title="Harvard Art Explorer", layout="wide")


# =============================================================================
# Logging
# =============================================================================

def _append_log(level: str, message: str):
    """Append a log entry to session state."""
    if "debug_logs" not in st.session_state:
        st.session_state.debug_logs = []
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    entry = f"{timestamp} | {level:<5} | {message}"
    st.session_state.debug_logs.append(entry)
    # Keep last 200 entries
    st.session_state.debug_logs = st.session_state.debug_logs[-MAX_LOG_ENTRIES:]


def log_event(message: str):
    _append_log("INFO", message)


def adapter_log_callback(level: str, message: str):
    """Callback for adapters to log through our system."""
    _append_log(level, message)


class SessionLogHandler(logging.Handler):
    """Routes art_explorer module logs into the debug console."""

    def emit(self, record: logging.LogRecord) -> None:
        level = "WARN" if record.levelname == "WARNING" else record.levelname
        _append_log(level, f"[{record.name}] {record.getMessage()}")


def install_log_handler():
    logger = logging.getLogger("art_explorer")
    if not any(isinstance(h, SessionLogHandler) for h in logger.handlers):
        logger.addHandler(SessionLogHandler())
        logger.setLevel(logging.INFO)


# =============================================================================
# Shared resources
# =============================================================================

@st.cache_resource
def get_settings() -> SettingsStore:
    return SettingsStore(config.SETTINGS_FILE)


@st.cache_resource
def get_favorites() -> FavoritesStore:
    return FavoritesStore(get_settings())


@st.cache_resource
def get_history() -> SearchHistoryStore:
    return SearchHistoryStore(get_settings())


def init_session_state():
    """Initialize all session state variables."""
    if "adapter" not in st.session_state:
        adapter = get_adapter(SOURCE)
        adapter.set_logger(adapter_log_callback)
        st.session_state.adapter = adapter

    defaults = {
        "debug_logs": [],
        "exhibitions": exhibitions_cursor(st.session_state.adapter),
        "selected_exhibition": None,
        "exhibition_artworks": None,
        "search": SearchCoordinator(st.session_state.adapter, history=get_history()),
        "search_category": SearchCategory.ALL.value,
        "search_detail": None,
        "search_detail_artworks": None,
        "overviews": {},
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


install_log_handler()
init_session_state()


def run(coro):
    """Drive one coroutine to completion for this script run."""
    return asyncio.run(coro)


# =============================================================================
# UI Components
# =============================================================================

def render_error(cursor_or_search, retry_label: str, key: str):
    """Show the current error with an explicit retry action."""
    if not cursor_or_search.error_message:
        return
    st.error(cursor_or_search.error_message)
    if st.button(retry_label, key=key):
        log_event(f"Retry requested: {key}")
        run(cursor_or_search.retry())
        st.rerun()


def render_favorite_button(artwork: Artwork, exhibition: Exhibition, key: str):
    favorites = get_favorites()
    label = "♥ Unfavorite" if favorites.is_favorite(artwork.id) else "♡ Favorite"
    if st.button(label, key=key):
        favorites.toggle_favorite(artwork, exhibition)
        st.rerun()


def render_overview(artwork: Artwork, exhibition: Exhibition, key: str):
    overviews = st.session_state.overviews
    if artwork.id in overviews:
        st.info(overviews[artwork.id])
        return
    if st.button("Generate overview", key=key):
        with st.spinner("Writing overview..."):
            try:
                overviews[artwork.id] = OverviewService().generate_overview(artwork, exhibition)
            except CatalogError as e:
                st.error(e.message)
                return
        st.rerun()


def render_artwork_card(artwork: Artwork, exhibition: Exhibition, key_prefix: str):
    col_image, col_meta = st.columns([1, 2], gap="medium")
    with col_image:
        if artwork.image_url:
            st.image(artwork.image_url, use_container_width=True)
    with col_meta:
        st.markdown(f"**{artwork.display_title}**")
        st.caption(f"{artwork.display_artist} · {artwork.display_date}")
        with st.expander("Description", expanded=False):
            st.write(artwork.display_description)
            if artwork.id > 0:
                render_overview(artwork, exhibition, key=f"{key_prefix}-overview-{artwork.id}")
        # Artworks rebuilt from a history preview have no catalog id
        if artwork.id > 0:
            render_favorite_button(artwork, exhibition, key=f"{key_prefix}-fav-{artwork.id}")


def render_browse_tab():
    cursor = st.session_state.exhibitions

    col_load, col_refresh = st.columns(2)
    with col_load:
        if not cursor.records and st.button("Load Exhibitions", type="primary"):
            with st.spinner("Fetching exhibitions..."):
                run(cursor.load_first())
            st.rerun()
    with col_refresh:
        if cursor.records and st.button("Refresh"):
            run(cursor.refresh())
            st.rerun()

    render_error(cursor, "Try Again", key="retry-exhibitions")

    for exhibition in cursor.records:
        with st.container(border=True):
            col_image, col_meta = st.columns([1, 3])
            with col_image:
                if exhibition.image_url:
                    st.image(exhibition.image_url, use_container_width=True)
            with col_meta:
                st.subheader(exhibition.display_title)
                st.caption(exhibition.display_date_range)
                if st.button("View artworks", key=f"open-{exhibition.id}"):
                    open_exhibition(exhibition)
                    st.rerun()

    if cursor.records and cursor.has_more_pages:
        if st.button("Load More", key="more-exhibitions"):
            run(cursor.load_more())
            st.rerun()

    selected = st.session_state.selected_exhibition
    if selected is not None:
        render_exhibition_detail(selected)


def open_exhibition(exhibition: Exhibition):
    log_event(f"Opening exhibition {exhibition.id}")
    st.session_state.selected_exhibition = exhibition
    cursor = exhibition_artworks_cursor(st.session_state.adapter, exhibition.id)
    st.session_state.exhibition_artworks = cursor
    run(cursor.load_first())


def render_exhibition_detail(exhibition: Exhibition):
    cursor = st.session_state.exhibition_artworks
    st.divider()
    st.markdown(f"### {exhibition.display_title}")
    st.caption(exhibition.display_date_range)
    st.write(exhibition.display_description)

    render_error(cursor, "Try Again", key="retry-exhibition-artworks")
    if not cursor.records and not cursor.error:
        st.caption("No artworks with images in this exhibition.")

    for artwork in cursor.records:
        render_artwork_card(artwork, exhibition, key_prefix=f"ex{exhibition.id}")

    if cursor.has_more_pages and cursor.records:
        if st.button("Load More Artworks", key="more-exhibition-artworks"):
            run(cursor.load_more())
            st.rerun()


def open_result(result: SearchResult):
    """Show a search result (or a history preview) in the search detail pane."""
    log_event(f"Opening {result.kind.value} result: {result.title}")
    cursor = result_artworks_cursor(st.session_state.adapter, result)
    st.session_state.search_detail = result
    st.session_state.search_detail_artworks = cursor
    if cursor is not None:
        run(cursor.load_first())


def close_result():
    st.session_state.search_detail = None
    st.session_state.search_detail_artworks = None


def render_result_detail(result: SearchResult):
    cursor = st.session_state.search_detail_artworks
    with st.container(border=True):
        col_title, col_close = st.columns([5, 1])
        col_title.markdown(f"### {result.title}")
        if col_close.button("Close", key="close-detail"):
            close_result()
            st.rerun()

        if result.subtitle:
            st.caption(result.subtitle)

        if result.kind is ResultKind.ARTWORK:
            context = Exhibition(id=0, title=SEARCH_RESULTS_TITLE)
            render_artwork_card(result.entity, context, key_prefix="detail")
            return
        if result.kind is ResultKind.MEDIUM:
            st.write(f"Medium: {result.title}")
            return

        if result.description:
            st.write(result.description)
        if cursor is None:
            st.caption("Search for this again to browse its artworks.")
            return

        render_error(cursor, "Try Again", key="retry-detail-artworks")
        if not cursor.records and not cursor.error:
            st.caption("No artworks with images found.")

        context = result.entity if result.kind is ResultKind.EXHIBITION else Exhibition(id=0, title=SEARCH_RESULTS_TITLE)
        for artwork in cursor.records:
            render_artwork_card(artwork, context, key_prefix=f"detail-{result.id}")

        if cursor.has_more_pages and cursor.records:
            if st.button("Load More Artworks", key="more-detail-artworks"):
                run(cursor.load_more())
                st.rerun()


def render_search_result(result: SearchResult, index: int):
    coordinator = st.session_state.search
    with st.container(border=True):
        col_image, col_meta = st.columns([1, 4])
        with col_image:
            if result.image_url:
                st.image(result.image_url, use_container_width=True)
        with col_meta:
            st.markdown(f"**{result.title}**  \n_{result.kind.value}_")
            if result.subtitle:
                st.caption(result.subtitle)
            if st.button("Open", key=f"result-{index}-{result.id}"):
                coordinator.record_click(result)
                open_result(result)
                st.rerun()


def render_search_tab():
    coordinator = st.session_state.search
    category = SearchCategory(
        st.selectbox("Category", CATEGORY_OPTIONS, key="search_category")
    )
    query = st.text_input("Search", placeholder=PLACEHOLDERS[category], key="search_query")

    if st.button("Search", type="primary"):
        log_event(f"Search submitted: {query!r} in {category.value}")
        close_result()
        with st.spinner("Searching..."):
            run(coordinator.search(query, category))
        st.rerun()

    detail = st.session_state.search_detail
    if detail is not None:
        render_result_detail(detail)

    render_error(coordinator, "Retry Search", key="retry-search")

    if not coordinator.query:
        render_history()
        return

    if not coordinator.results and not coordinator.error:
        st.info("No results found. Try different keywords or check your spelling.")

    for index, result in enumerate(coordinator.results):
        render_search_result(result, index)

    if coordinator.has_more_pages and coordinator.results:
        if st.button("Load More Results"):
            run(coordinator.load_more_results())
            st.rerun()


def render_history():
    history = get_history()
    if not len(history):
        st.caption("Recent searches will appear here.")
        return

    col_title, col_clear = st.columns([4, 1])
    col_title.markdown("**Recent searches**")
    if col_clear.button("Clear"):
        history.clear_search_history()
        st.rerun()

    for item in history.recent_searches:
        col_text, col_run, col_delete = st.columns([5, 1, 1])
        col_text.write(f"{item.display_title} · {item.display_category} · {item.time_ago()}")
        if item.is_clicked_result and item.result_preview is not None:
            if col_run.button("→", key=f"open-{item.id}"):
                open_result(item.result_preview.to_search_result())
                st.rerun()
        elif col_run.button("↻", key=f"rerun-{item.id}"):
            run(st.session_state.search.search(item.query, item.category))
            st.rerun()
        if col_delete.button("✕", key=f"delete-{item.id}"):
            history.remove_search_from_history(item.id)
            st.rerun()


def render_favorites_tab():
    favorites = get_favorites()
    groups = favorites.grouped_favorites()
    if not groups:
        st.caption("Artworks you favorite will appear here, grouped by exhibition.")
        return

    for title in favorites.sorted_exhibition_titles():
        st.markdown(f"### {title}")
        for favorite in groups[title]:
            col_image, col_meta = st.columns([1, 3])
            with col_image:
                if favorite.image_url:
                    st.image(favorite.image_url, use_container_width=True)
            with col_meta:
                st.markdown(f"**{favorite.title}**")
                st.caption(f"{favorite.artist} · {favorite.dated}")
                st.write(favorite.description)


def render_sidebar():
    with st.sidebar:
        st.subheader("Harvard Art Explorer")
        st.caption(f"{len(get_favorites())} favorites · {len(get_history())} recent searches")

        # Debug console
        with st.expander("Debug Console", expanded=False):
            if st.button("Clear Logs"):
                st.session_state.debug_logs = []
            log_text = "\n".join(st.session_state.debug_logs) if st.session_state.debug_logs else "No logs yet."
            st.code(log_text, language=None)


# =============================================================================
# Main Application
# =============================================================================

def main():
    """Main application entry point."""
    render_sidebar()

    st.markdown("### Harvard Art Explorer")
    st.caption("[Harvard Art Museums API](https://api.harvardartmuseums.org)")

    browse_tab, search_tab, favorites_tab = st.tabs(["Browse", "Search", "Favorites"])
    with browse_tab:
        render_browse_tab()
    with search_tab:
        render_search_tab()
    with favorites_tab:
        render_favorites_tab()


if __name__ == "__main__":
    main()
