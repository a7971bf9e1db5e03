"""
Shared fixtures for the Art Explorer test suite.

HTTP is never performed: adapters receive a MagicMock session whose ``get``
returns real ``requests.Response`` objects built by ``make_response``.
"""

import json

import pytest
import requests

from art_explorer.models import Artwork, Exhibition, PageInfo, PageResponse, Person


def _make_response(status=200, payload=None, text=None):
    response = requests.Response()
    response.status_code = status
    response.encoding = 'utf-8'
    body = text if text is not None else json.dumps(payload if payload is not None else {})
    response._content = body.encode('utf-8')
    response.url = 'https://api.harvardartmuseums.org/test'
    return response


def _page_payload(records, page=1, pages=1, total=None):
    return {
        'info': {
            'totalrecords': total if total is not None else len(records),
            'totalrecordsperquery': 20,
            'page': page,
            'pages': pages,
            'next': None,
            'prev': None,
        },
        'records': records,
    }


def _page(records, page=1, pages=1):
    info = PageInfo(total_records=len(records), records_per_query=20, page=page, pages=pages)
    return PageResponse(info=info, records=list(records))


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def page_payload():
    return _page_payload


@pytest.fixture
def make_page():
    return _page


@pytest.fixture
def artwork():
    return Artwork(
        id=42,
        title='The Starry Night',
        dated='1889',
        description='Swirling night sky over a village.',
        primary_image_url='https://nrs.harvard.edu/starry.jpg',
        people=[Person(id=7, name='Vincent van Gogh', role='Artist')],
    )


@pytest.fixture
def exhibition():
    return Exhibition(id=5, title='Van Gogh Exhibition', begin_date='2020-03-01', end_date='2020-06-30')
