"""
Unit tests for the data models (art_explorer/models.py).
Covers display fallbacks, API decoding, the SearchResult union and the
persisted forms of favorites and history entries.
"""

from datetime import datetime, timedelta

import pytest

from art_explorer.models import (
    Artwork,
    Classification,
    Exhibition,
    FavoriteArtwork,
    PageInfo,
    PageResponse,
    Person,
    ResultKind,
    SearchCategory,
    SearchHistoryItem,
    SearchResult,
)


# ---------------------------------------------------------------------------
# Display fallbacks
# ---------------------------------------------------------------------------

def test_artwork_defaults_when_fields_missing():
    art = Artwork(id=1)
    assert art.display_title == 'Untitled'
    assert art.display_artist == 'Unknown Artist'
    assert art.display_date == 'Date unknown'
    assert art.display_description == 'No description available'
    assert art.image_url is None


def test_artwork_description_falls_back_to_label_text():
    art = Artwork(id=1, description='', label_text='Gallery label')
    assert art.display_description == 'Gallery label'


def test_artwork_artist_joins_named_people_only():
    art = Artwork(id=1, people=[
        Person(display_name='Claude Monet'),
        Person(),
        Person(name='Camille Pissarro'),
    ])
    assert art.display_artist == 'Claude Monet, Camille Pissarro'


def test_person_effective_name_precedence():
    assert Person(name='Monet', display_name='Claude Monet').effective_name == 'Claude Monet'
    assert Person(name='Monet', display_name='').effective_name == 'Monet'
    assert Person().effective_name == 'Unknown Artist'


def test_person_display_dates():
    assert Person(birth_date='1840', death_date='1926').display_dates == '1840 - 1926'
    assert Person(birth_date='1840').display_dates == 'b. 1840'
    assert Person(death_date='1926').display_dates == 'd. 1926'
    assert Person().display_dates == ''


def test_classification_display():
    assert Classification(id=1).display_name == 'Unknown Medium'
    assert Classification(id=1, name='Prints', object_count=12).display_count == '12 objects'
    assert Classification(id=1, name='Prints').display_count == ''


# ---------------------------------------------------------------------------
# API decoding
# ---------------------------------------------------------------------------

def test_artwork_from_api_record():
    art = Artwork.from_dict({
        'objectid': 299843,
        'title': 'Self-Portrait Dedicated to Paul Gauguin',
        'dated': '1888',
        'labeltext': None,
        'primaryimageurl': 'https://nrs.harvard.edu/urn-3:HUAM:DDC251942',
        'people': [{'personid': 34147, 'name': 'Vincent van Gogh', 'displayname': 'Vincent van Gogh', 'role': 'Artist'}],
    })
    assert art.id == 299843
    assert art.display_artist == 'Vincent van Gogh'
    assert art.people[0].id == 34147
    assert art.exhibition_id is None


def test_artwork_from_dict_requires_id():
    with pytest.raises(KeyError):
        Artwork.from_dict({'title': 'No id'})


def test_artwork_from_dict_rejects_wrong_types():
    with pytest.raises(TypeError):
        Artwork.from_dict({'objectid': 1, 'title': 5})


def test_person_accepts_integer_years():
    person = Person.from_dict({'id': 3, 'displayname': 'Rembrandt', 'datebegin': 1606, 'dateend': 1669})
    assert person.display_dates == '1606 - 1669'


def test_classification_from_dict():
    c = Classification.from_dict({'classificationid': 23, 'name': 'Prints', 'objectcount': 65000})
    assert c.id == 23
    assert c.object_count == 65000


def test_page_info_has_next_page():
    info = PageInfo.from_dict({'totalrecords': 60, 'totalrecordsperquery': 20, 'page': 1, 'pages': 3})
    assert info.has_next_page
    assert not info.has_previous_page
    last = PageInfo(total_records=60, records_per_query=20, page=3, pages=3)
    assert not last.has_next_page
    assert last.has_previous_page


def test_page_response_preserves_server_order():
    data = {
        'info': {'totalrecords': 2, 'totalrecordsperquery': 20, 'page': 1, 'pages': 1},
        'records': [{'id': 9, 'title': 'B'}, {'id': 3, 'title': 'A'}],
    }
    page = PageResponse.from_dict(data, Exhibition.from_dict)
    assert [e.id for e in page.records] == [9, 3]


def test_page_response_requires_info_and_records():
    with pytest.raises(KeyError):
        PageResponse.from_dict({'records': []}, Exhibition.from_dict)
    with pytest.raises(TypeError):
        PageResponse.from_dict({'info': {}, 'records': 'nope'}, Exhibition.from_dict)


# ---------------------------------------------------------------------------
# SearchResult union
# ---------------------------------------------------------------------------

def test_search_result_ids_per_kind(artwork, exhibition):
    assert SearchResult.artwork(artwork).id == 'artwork_42'
    assert SearchResult.exhibition(exhibition).id == 'exhibition_5'
    assert SearchResult.artist(Person(id=7, name='Monet')).id == 'artist_7'
    assert SearchResult.medium(Classification(id=23, name='Prints')).id == 'medium_23'


def test_artist_without_id_gets_stable_name_based_id():
    first = SearchResult.artist(Person(name='Anonymous Master'))
    second = SearchResult.artist(Person(name='Anonymous Master'))
    other = SearchResult.artist(Person(name='Someone Else'))
    assert first.id == second.id
    assert first.id != other.id
    assert first.id.startswith('artist_')


def test_search_result_accessors(artwork, exhibition):
    art = SearchResult.artwork(artwork)
    assert art.title == 'The Starry Night'
    assert art.subtitle == 'Vincent van Gogh'
    assert art.image_url == 'https://nrs.harvard.edu/starry.jpg'

    ex = SearchResult.exhibition(exhibition)
    assert ex.subtitle == 'Mar 01, 2020 - Jun 30, 2020'

    artist = SearchResult.artist(Person(id=1, display_name='Claude Monet', role='Artist', object_count=30))
    assert artist.subtitle == '30 objects'
    assert artist.description == 'Artist'
    assert artist.image_url is None

    medium = SearchResult.medium(Classification(id=2, name='Photographs'))
    assert medium.description == 'Medium/Classification'
    assert medium.image_url is None


def test_preview_rebuilds_minimal_result(artwork):
    preview = SearchResult.artwork(artwork).to_preview()
    assert preview.kind is ResultKind.ARTWORK
    rebuilt = preview.to_search_result()
    assert rebuilt.kind is ResultKind.ARTWORK
    assert rebuilt.title == 'The Starry Night'
    assert rebuilt.entity.id == 0


# ---------------------------------------------------------------------------
# Snapshots and history entries
# ---------------------------------------------------------------------------

def test_favorite_snapshot_denormalizes_display_fields(artwork, exhibition):
    fav = FavoriteArtwork.snapshot(artwork, exhibition)
    assert fav.id == 42
    assert fav.artist == 'Vincent van Gogh'
    assert fav.exhibition_title == 'Van Gogh Exhibition'
    assert FavoriteArtwork.from_dict(fav.to_dict()) == fav


def test_history_item_decodes_without_clicked_flag():
    item = SearchHistoryItem.from_dict({
        'id': 'abc',
        'query': 'Monet',
        'category': 'Artwork',
        'timestamp': '2025-09-02T10:00:00',
    })
    assert item.is_clicked_result is False
    assert item.result_preview is None
    assert item.category is SearchCategory.ARTWORK


def test_history_item_display_title_uses_clicked_result(artwork):
    preview = SearchResult.artwork(artwork).to_preview()
    item = SearchHistoryItem(query='starry', category=SearchCategory.ALL,
                             result_preview=preview, is_clicked_result=True)
    assert item.display_title == 'The Starry Night'
    assert item.display_category == 'All'


def test_history_item_time_ago():
    now = datetime(2025, 9, 2, 12, 0, 0)
    item = SearchHistoryItem(query='x', category=SearchCategory.ALL, timestamp=now - timedelta(minutes=5))
    assert item.time_ago(now) == '5m ago'
    assert SearchHistoryItem(query='x', category=SearchCategory.ALL, timestamp=now).time_ago(now) == 'just now'


def test_history_items_get_unique_ids():
    a = SearchHistoryItem(query='x', category=SearchCategory.ALL)
    b = SearchHistoryItem(query='x', category=SearchCategory.ALL)
    assert a.id != b.id


def test_with_provenance_tags_a_copy(artwork, exhibition):
    tagged = artwork.with_provenance(exhibition)
    assert (tagged.exhibition_id, tagged.exhibition_title) == (5, 'Van Gogh Exhibition')
    assert artwork.exhibition_id is None
    assert tagged.id == artwork.id
