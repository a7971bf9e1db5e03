"""Recent searches and clicked results, persisted through the settings store."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import List, Tuple

from .models import SearchCategory, SearchHistoryItem, SearchResult
from .storage import SettingsStore

logger = logging.getLogger(__name__)

SEARCH_HISTORY_KEY = "SearchHistory"
MAX_HISTORY_ITEMS = 10


class SearchHistoryStore:
    """
    Most-recent-first log of searches, capped at ``max_items`` entries.

    Re-adding an equivalent entry moves it to the front instead of
    duplicating it. Loaded once at construction, saved whole after every
    change; a missing or corrupt blob loads as an empty log.
    """

    def __init__(
        self,
        settings: SettingsStore,
        key: str = SEARCH_HISTORY_KEY,
        max_items: int = MAX_HISTORY_ITEMS,
    ) -> None:
        self._settings = settings
        self._key = key
        self.max_items = max_items
        self._items: List[SearchHistoryItem] = self._load()

    @property
    def recent_searches(self) -> Tuple[SearchHistoryItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add_search_to_history(self, query: str, category: SearchCategory) -> None:
        """Record a submitted query. Blank queries are ignored."""
        trimmed = query.strip()
        if not trimmed:
            return

        needle = trimmed.lower()
        self._items = [
            item for item in self._items
            if not (item.query.lower() == needle and item.category == category)
        ]
        self._insert(SearchHistoryItem(query=trimmed, category=category, timestamp=datetime.now()))

    def add_clicked_result_to_history(
        self, result: SearchResult, original_query: str, category: SearchCategory
    ) -> None:
        """Record a clicked result, replacing any earlier entry with the same title."""
        needle = result.title.lower()
        self._items = [
            item for item in self._items
            if not (item.result_preview is not None and item.result_preview.title.lower() == needle)
        ]
        self._insert(SearchHistoryItem(
            query=original_query,
            category=category,
            timestamp=datetime.now(),
            result_preview=result.to_preview(),
            is_clicked_result=True,
        ))

    def remove_search_from_history(self, item_id: str) -> None:
        self._items = [item for item in self._items if item.id != item_id]
        self._save()

    def clear_search_history(self) -> None:
        self._items = []
        self._save()

    def _insert(self, item: SearchHistoryItem) -> None:
        self._items.insert(0, item)
        del self._items[self.max_items:]
        self._save()

    def _load(self) -> List[SearchHistoryItem]:
        raw = self._settings.get(self._key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise TypeError(f"expected a list, got {type(items).__name__}")
            return [SearchHistoryItem.from_dict(item) for item in items]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Discarding unreadable search history: %s", exc)
            return []

    def _save(self) -> None:
        try:
            self._settings.set(self._key, json.dumps([item.to_dict() for item in self._items]))
        except OSError as exc:
            logger.error("Could not save %s: %s", self._key, exc)
