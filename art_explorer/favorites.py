"""Favorited artworks, persisted through the settings store."""

from __future__ import annotations

import json
import logging
from typing import Dict, List, Tuple

from .models import Artwork, Exhibition, FavoriteArtwork
from .storage import SettingsStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = "FavoriteArtworks"


class FavoritesStore:
    """
    The set of favorited artworks, keyed by artwork id.

    Loaded once at construction and saved whole after every toggle. A missing
    or corrupt blob loads as an empty set.
    """

    def __init__(self, settings: SettingsStore, key: str = FAVORITES_KEY) -> None:
        self._settings = settings
        self._key = key
        self._favorites: List[FavoriteArtwork] = self._load()

    @property
    def favorites(self) -> Tuple[FavoriteArtwork, ...]:
        return tuple(self._favorites)

    def __len__(self) -> int:
        return len(self._favorites)

    def is_favorite(self, artwork_id: int) -> bool:
        return any(f.id == artwork_id for f in self._favorites)

    def toggle_favorite(self, artwork: Artwork, from_exhibition: Exhibition) -> bool:
        """Remove the artwork if present, otherwise snapshot and append it.

        Returns True when the artwork is a favorite after the call.
        """
        for index, favorite in enumerate(self._favorites):
            if favorite.id == artwork.id:
                del self._favorites[index]
                logger.info("Removed favorite %s (%s)", artwork.id, favorite.title)
                self._save()
                return False

        snapshot = FavoriteArtwork.snapshot(artwork, from_exhibition)
        self._favorites.append(snapshot)
        logger.info("Added favorite %s (%s) from %r", artwork.id, snapshot.title, snapshot.exhibition_title)
        self._save()
        return True

    def grouped_favorites(self) -> Dict[str, List[FavoriteArtwork]]:
        """Favorites grouped by the exhibition title stored when each was added."""
        groups: Dict[str, List[FavoriteArtwork]] = {}
        for favorite in self._favorites:
            groups.setdefault(favorite.exhibition_title, []).append(favorite)
        return groups

    def sorted_exhibition_titles(self) -> List[str]:
        return sorted(self.grouped_favorites())

    def _load(self) -> List[FavoriteArtwork]:
        raw = self._settings.get(self._key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise TypeError(f"expected a list, got {type(items).__name__}")
            return [FavoriteArtwork.from_dict(item) for item in items]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Discarding unreadable favorites: %s", exc)
            return []

    def _save(self) -> None:
        try:
            self._settings.set(self._key, json.dumps([f.to_dict() for f in self._favorites]))
        except OSError as exc:
            logger.error("Could not save %s: %s", self._key, exc)
