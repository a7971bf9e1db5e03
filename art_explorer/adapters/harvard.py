"""Harvard Art Museums adapter."""

from __future__ import annotations

from . import register
from .base import CatalogAdapter
from ..config import config
from ..models import Artwork, Classification, Exhibition, PageResponse, Person

DEFAULT_PAGE_SIZE = config.PAGE_SIZE

# Appended to free-text queries so well-documented records rank first
RELEVANCE_TERMS = (
    "Harvard OR museum OR collection OR gallery OR masterpiece OR famous "
    "OR important OR significant OR major"
)


@register
class HarvardArtAdapter(CatalogAdapter):
    """Adapter for the Harvard Art Museums API."""

    name = "Harvard Art Museums"
    short_name = "HAM"
    base_url = config.HAM_BASE_URL

    def default_api_key(self) -> str:
        return config.HAM_API_KEY

    @staticmethod
    def boosted_query(query: str) -> str:
        return f"{query} AND ({RELEVANCE_TERMS})"

    # -- Exhibitions ---------------------------------------------------------

    def fetch_exhibitions(self, page: int = 1, size: int = DEFAULT_PAGE_SIZE) -> PageResponse[Exhibition]:
        """Browse exhibitions, ordered by relevance to the boost terms."""
        self.check_paging(page, size)
        params = {"q": RELEVANCE_TERMS, "size": size, "page": page}
        return self.fetch_page("/exhibition", params, Exhibition.from_dict)

    def search_exhibitions(self, query: str, page: int = 1, size: int = DEFAULT_PAGE_SIZE) -> PageResponse[Exhibition]:
        self.check_paging(page, size)
        params = {"q": self.boosted_query(query), "size": size, "page": page}
        return self.fetch_page("/exhibition", params, Exhibition.from_dict)

    # -- Artworks ------------------------------------------------------------
    # Artwork queries always require a primary image (hasimage=1).

    def fetch_artworks_in_exhibition(
        self, exhibition_id: int, page: int = 1, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Artwork]:
        self.check_entity_id(exhibition_id, "exhibition id")
        self.check_paging(page, size)
        params = {"exhibition": exhibition_id, "size": size, "page": page, "hasimage": 1}
        return self.fetch_page("/object", params, Artwork.from_dict)

    def fetch_artworks_by_artist(
        self, artist_id: int, page: int = 1, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Artwork]:
        self.check_entity_id(artist_id, "artist id")
        self.check_paging(page, size)
        params = {"person": artist_id, "size": size, "page": page, "hasimage": 1}
        return self.fetch_page("/object", params, Artwork.from_dict)

    def search_artworks(self, query: str, page: int = 1, size: int = DEFAULT_PAGE_SIZE) -> PageResponse[Artwork]:
        self.check_paging(page, size)
        params = {"q": self.boosted_query(query), "size": size, "page": page, "hasimage": 1}
        return self.fetch_page("/object", params, Artwork.from_dict)

    # -- People and classifications -------------------------------------------
    # Sent as-is; the boost terms over-filter these endpoints.

    def search_people(self, query: str, page: int = 1, size: int = DEFAULT_PAGE_SIZE) -> PageResponse[Person]:
        self.check_paging(page, size)
        params = {"q": query, "size": size, "page": page}
        return self.fetch_page("/person", params, Person.from_dict)

    def search_classifications(
        self, query: str, page: int = 1, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Classification]:
        self.check_paging(page, size)
        params = {"q": query, "size": size, "page": page}
        return self.fetch_page("/classification", params, Classification.from_dict)
