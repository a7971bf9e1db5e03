"""Data models for the Art Explorer application."""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

from .dates import format_date_range

T = TypeVar("T")

UNTITLED = "Untitled"
UNKNOWN_ARTIST = "Unknown Artist"
DATE_UNKNOWN = "Date unknown"
NO_DESCRIPTION = "No description available"


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    return value


def _optional_text(value: Any) -> str | None:
    """Dates arrive as strings or bare year integers depending on the endpoint."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return _optional_str(value)


def _required_int(data: dict[str, Any], *keys: str) -> int:
    """Return the first integer found under any of the given keys."""
    for key in keys:
        if data.get(key) is not None:
            value = _optional_int(data[key])
            if value is not None:
                return value
    raise KeyError(keys[0])


@dataclass
class Person:
    """A person attached to artworks, or an artist returned by people search."""

    id: int | None = None
    name: str | None = None
    display_name: str | None = None
    role: str | None = None
    object_count: int | None = None
    birth_date: str | None = None
    death_date: str | None = None
    birthplace: str | None = None

    @property
    def effective_name(self) -> str:
        if self.display_name:
            return self.display_name
        if self.name:
            return self.name
        return UNKNOWN_ARTIST

    @property
    def display_count(self) -> str:
        return f"{self.object_count} objects" if self.object_count is not None else ""

    @property
    def display_dates(self) -> str:
        if self.birth_date and self.death_date:
            return f"{self.birth_date} - {self.death_date}"
        if self.birth_date:
            return f"b. {self.birth_date}"
        if self.death_date:
            return f"d. {self.death_date}"
        return ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Person":
        id_value = data.get("personid", data.get("id"))
        return cls(
            id=_optional_int(id_value),
            name=_optional_str(data.get("name")),
            display_name=_optional_str(data.get("displayname")),
            role=_optional_str(data.get("role")),
            object_count=_optional_int(data.get("objectcount")),
            birth_date=_optional_text(data.get("birthdate", data.get("datebegin"))),
            death_date=_optional_text(data.get("deathdate", data.get("dateend"))),
            birthplace=_optional_str(data.get("birthplace")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "personid": self.id,
            "name": self.name,
            "displayname": self.display_name,
            "role": self.role,
            "objectcount": self.object_count,
            "birthdate": self.birth_date,
            "deathdate": self.death_date,
            "birthplace": self.birthplace,
        }


@dataclass
class Artwork:
    """A collection object as returned by the ``/object`` endpoint."""

    id: int
    title: str | None = None
    dated: str | None = None
    description: str | None = None
    label_text: str | None = None
    primary_image_url: str | None = None
    people: list[Person] = field(default_factory=list)

    # Set only on the copy taken when the artwork is favorited from a listing
    exhibition_id: int | None = None
    exhibition_title: str | None = None

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    @property
    def display_artist(self) -> str:
        names = [p.effective_name for p in self.people if p.display_name or p.name]
        return ", ".join(names) if names else UNKNOWN_ARTIST

    @property
    def display_date(self) -> str:
        return self.dated or DATE_UNKNOWN

    @property
    def display_description(self) -> str:
        if self.description:
            return self.description
        if self.label_text:
            return self.label_text
        return NO_DESCRIPTION

    @property
    def image_url(self) -> str | None:
        return self.primary_image_url or None

    def with_provenance(self, exhibition: "Exhibition") -> "Artwork":
        """Copy tagged with the exhibition it was found in."""
        return replace(self, exhibition_id=exhibition.id, exhibition_title=exhibition.display_title)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artwork":
        people = data.get("people") or []
        if not isinstance(people, list):
            raise TypeError("people must be a list")
        return cls(
            id=_required_int(data, "objectid", "id"),
            title=_optional_str(data.get("title")),
            dated=_optional_str(data.get("dated")),
            description=_optional_str(data.get("description")),
            label_text=_optional_str(data.get("labeltext")),
            primary_image_url=_optional_str(data.get("primaryimageurl")),
            people=[Person.from_dict(p) for p in people],
        )


@dataclass
class Exhibition:
    """An exhibition as returned by the ``/exhibition`` endpoint."""

    id: int
    title: str | None = None
    description: str | None = None
    primary_image_url: str | None = None
    begin_date: str | None = None
    end_date: str | None = None

    @property
    def display_title(self) -> str:
        return self.title or "Unknown Exhibition"

    @property
    def display_description(self) -> str:
        return self.description or NO_DESCRIPTION

    @property
    def display_date_range(self) -> str:
        return format_date_range(self.begin_date, self.end_date)

    @property
    def image_url(self) -> str | None:
        return self.primary_image_url or None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Exhibition":
        return cls(
            id=_required_int(data, "id", "exhibitionid"),
            title=_optional_str(data.get("title")),
            description=_optional_str(data.get("description")),
            primary_image_url=_optional_str(data.get("primaryimageurl")),
            begin_date=_optional_str(data.get("begindate")),
            end_date=_optional_str(data.get("enddate")),
        )


@dataclass
class Classification:
    """A medium/category facet from the ``/classification`` endpoint."""

    id: int
    name: str | None = None
    object_count: int | None = None

    @property
    def display_name(self) -> str:
        return self.name or "Unknown Medium"

    @property
    def display_count(self) -> str:
        return f"{self.object_count} objects" if self.object_count is not None else ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Classification":
        return cls(
            id=_required_int(data, "classificationid", "id"),
            name=_optional_str(data.get("name")),
            object_count=_optional_int(data.get("objectcount")),
        )


@dataclass
class PageInfo:
    """Paging metadata from the ``info`` block of every list response."""

    total_records: int
    records_per_query: int
    page: int
    pages: int
    next_url: str | None = None
    prev_url: str | None = None

    @property
    def has_next_page(self) -> bool:
        return self.page < self.pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PageInfo":
        return cls(
            total_records=_required_int(data, "totalrecords"),
            records_per_query=_required_int(data, "totalrecordsperquery"),
            page=_required_int(data, "page"),
            pages=_required_int(data, "pages"),
            next_url=_optional_str(data.get("next")),
            prev_url=_optional_str(data.get("prev")),
        )


@dataclass
class PageResponse(Generic[T]):
    """One page of typed records, in the order the server returned them."""

    info: PageInfo
    records: list[T] = field(default_factory=list)

    @classmethod
    def from_dict(
        cls, data: Any, parse_record: Callable[[dict[str, Any]], T]
    ) -> "PageResponse[T]":
        if not isinstance(data, dict):
            raise TypeError("response body must be an object")
        records = data["records"]
        if not isinstance(records, list):
            raise TypeError("records must be a list")
        return cls(
            info=PageInfo.from_dict(data["info"]),
            records=[parse_record(r) for r in records],
        )


class SearchCategory(str, Enum):
    """Which backend facet(s) a search is dispatched to."""

    EXHIBITIONS = "Exhibitions"
    ARTWORK = "Artwork"
    ARTISTS = "Artists"
    MEDIUMS = "Mediums"
    ALL = "All"


class ResultKind(str, Enum):
    ARTWORK = "artwork"
    EXHIBITION = "exhibition"
    ARTIST = "artist"
    MEDIUM = "medium"


SearchEntity = Union[Artwork, Exhibition, Person, Classification]


@dataclass(frozen=True)
class SearchResult:
    """
    A single search hit of one of four kinds.

    Build instances through the per-kind constructors so ``kind`` and
    ``entity`` always agree. Accessors branch exhaustively on ``kind``.
    """

    kind: ResultKind
    entity: SearchEntity

    @classmethod
    def artwork(cls, artwork: Artwork) -> "SearchResult":
        return cls(ResultKind.ARTWORK, artwork)

    @classmethod
    def exhibition(cls, exhibition: Exhibition) -> "SearchResult":
        return cls(ResultKind.EXHIBITION, exhibition)

    @classmethod
    def artist(cls, person: Person) -> "SearchResult":
        return cls(ResultKind.ARTIST, person)

    @classmethod
    def medium(cls, classification: Classification) -> "SearchResult":
        return cls(ResultKind.MEDIUM, classification)

    @property
    def id(self) -> str:
        if self.kind is ResultKind.ARTWORK:
            return f"artwork_{self.entity.id}"
        if self.kind is ResultKind.EXHIBITION:
            return f"exhibition_{self.entity.id}"
        if self.kind is ResultKind.ARTIST:
            if self.entity.id is not None:
                return f"artist_{self.entity.id}"
            # Stable across processes, unlike hash()
            digest = hashlib.sha1(self.entity.effective_name.encode("utf-8")).hexdigest()
            return f"artist_{digest[:12]}"
        if self.kind is ResultKind.MEDIUM:
            return f"medium_{self.entity.id}"
        raise ValueError(f"Unknown result kind: {self.kind}")

    @property
    def title(self) -> str:
        if self.kind is ResultKind.ARTWORK:
            return self.entity.display_title
        if self.kind is ResultKind.EXHIBITION:
            return self.entity.display_title
        if self.kind is ResultKind.ARTIST:
            return self.entity.effective_name
        if self.kind is ResultKind.MEDIUM:
            return self.entity.display_name
        raise ValueError(f"Unknown result kind: {self.kind}")

    @property
    def subtitle(self) -> str:
        if self.kind is ResultKind.ARTWORK:
            return self.entity.display_artist
        if self.kind is ResultKind.EXHIBITION:
            return self.entity.display_date_range
        if self.kind in (ResultKind.ARTIST, ResultKind.MEDIUM):
            return self.entity.display_count
        raise ValueError(f"Unknown result kind: {self.kind}")

    @property
    def description(self) -> str:
        if self.kind is ResultKind.ARTWORK:
            return self.entity.display_description
        if self.kind is ResultKind.EXHIBITION:
            return self.entity.display_description
        if self.kind is ResultKind.ARTIST:
            return self.entity.role or ""
        if self.kind is ResultKind.MEDIUM:
            return "Medium/Classification"
        raise ValueError(f"Unknown result kind: {self.kind}")

    @property
    def image_url(self) -> str | None:
        if self.kind in (ResultKind.ARTWORK, ResultKind.EXHIBITION):
            return self.entity.image_url
        if self.kind in (ResultKind.ARTIST, ResultKind.MEDIUM):
            return None
        raise ValueError(f"Unknown result kind: {self.kind}")

    def to_preview(self) -> "SearchResultPreview":
        return SearchResultPreview(
            title=self.title,
            subtitle=self.subtitle,
            description=self.description,
            image_url=self.image_url,
            kind=self.kind,
        )


@dataclass(frozen=True)
class SearchResultPreview:
    """Denormalized copy of a clicked search result, kept in history."""

    title: str
    subtitle: str
    description: str
    image_url: str | None
    kind: ResultKind

    def to_search_result(self) -> SearchResult:
        """Rebuild a minimal result for navigation. Original ids are not kept."""
        description = self.description or None
        if self.kind is ResultKind.ARTWORK:
            return SearchResult.artwork(Artwork(
                id=0,
                title=self.title,
                dated=self.subtitle,
                description=description,
                primary_image_url=self.image_url,
            ))
        if self.kind is ResultKind.EXHIBITION:
            return SearchResult.exhibition(Exhibition(
                id=0,
                title=self.title,
                description=description,
                primary_image_url=self.image_url,
            ))
        if self.kind is ResultKind.ARTIST:
            return SearchResult.artist(Person(
                name=self.title,
                display_name=self.title,
                role=self.subtitle,
            ))
        if self.kind is ResultKind.MEDIUM:
            return SearchResult.medium(Classification(id=0, name=self.title))
        raise ValueError(f"Unknown result kind: {self.kind}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "imageURL": self.image_url,
            "type": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResultPreview":
        return cls(
            title=data["title"],
            subtitle=data["subtitle"],
            description=data["description"],
            image_url=data.get("imageURL"),
            kind=ResultKind(data["type"]),
        )


@dataclass(frozen=True)
class FavoriteArtwork:
    """Snapshot of an artwork's display fields taken when it was favorited."""

    id: int
    title: str
    artist: str
    dated: str
    description: str
    image_url: str | None
    exhibition_id: int
    exhibition_title: str

    @classmethod
    def snapshot(cls, artwork: Artwork, exhibition: Exhibition) -> "FavoriteArtwork":
        tagged = artwork.with_provenance(exhibition)
        return cls(
            id=tagged.id,
            title=tagged.display_title,
            artist=tagged.display_artist,
            dated=tagged.display_date,
            description=tagged.display_description,
            image_url=tagged.primary_image_url,
            exhibition_id=tagged.exhibition_id,
            exhibition_title=tagged.exhibition_title,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "dated": self.dated,
            "description": self.description,
            "imageURL": self.image_url,
            "exhibitionId": self.exhibition_id,
            "exhibitionTitle": self.exhibition_title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FavoriteArtwork":
        return cls(
            id=int(data["id"]),
            title=data["title"],
            artist=data["artist"],
            dated=data["dated"],
            description=data["description"],
            image_url=data.get("imageURL"),
            exhibition_id=int(data["exhibitionId"]),
            exhibition_title=data["exhibitionTitle"],
        )


@dataclass(frozen=True)
class SearchHistoryItem:
    """One entry in the recent-search log: a submitted query or a clicked result."""

    query: str
    category: SearchCategory
    timestamp: datetime = field(default_factory=datetime.now)
    result_preview: SearchResultPreview | None = None
    is_clicked_result: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def display_title(self) -> str:
        if self.is_clicked_result and self.result_preview is not None:
            return self.result_preview.title
        return self.query

    @property
    def display_category(self) -> str:
        return self.category.value

    def time_ago(self, now: datetime | None = None) -> str:
        """Short relative age, e.g. ``"5m ago"``."""
        seconds = int(((now or datetime.now()) - self.timestamp).total_seconds())
        if seconds < 60:
            return "just now"
        if seconds < 3600:
            return f"{seconds // 60}m ago"
        if seconds < 86400:
            return f"{seconds // 3600}h ago"
        return f"{seconds // 86400}d ago"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "query": self.query,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "resultPreview": self.result_preview.to_dict() if self.result_preview else None,
            "isClickedResult": self.is_clicked_result,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchHistoryItem":
        preview = data.get("resultPreview")
        return cls(
            id=data["id"],
            query=data["query"],
            category=SearchCategory(data["category"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            result_preview=SearchResultPreview.from_dict(preview) if preview else None,
            # Entries written before clicked results were tracked lack this flag
            is_clicked_result=bool(data.get("isClickedResult", False)),
        )
