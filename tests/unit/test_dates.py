"""Unit tests for exhibition date parsing (art_explorer/dates.py)."""

from datetime import date

import pytest

from art_explorer.dates import extract_year, format_date, format_date_range, parse_date


@pytest.mark.parametrize('text, expected', [
    ('2020-03-01', date(2020, 3, 1)),
    ('03/01/2020', date(2020, 3, 1)),
    ('25/12/2019', date(2019, 12, 25)),
    ('March 1, 2020', date(2020, 3, 1)),
    ('Mar 1, 2020', date(2020, 3, 1)),
])
def test_parse_known_formats(text, expected):
    assert parse_date(text) == expected


def test_ambiguous_slash_date_reads_month_first():
    assert parse_date('01/02/2020') == date(2020, 1, 2)


def test_parse_unknown_format_returns_none():
    assert parse_date('Spring 2020') is None
    assert parse_date('') is None
    assert parse_date(None) is None


def test_extract_year():
    assert extract_year('Spring 2020') == '2020'
    assert extract_year('sometime') is None


def test_format_date_keeps_bare_year():
    assert format_date('1998') == '1998'


def test_format_date_falls_back_to_year_then_raw():
    assert format_date('Spring 2020') == '2020'
    assert format_date('ongoing') == 'ongoing'


def test_range_with_both_bounds():
    assert format_date_range('2020-03-01', '2020-06-30') == 'Mar 01, 2020 - Jun 30, 2020'


def test_range_with_one_bound():
    assert format_date_range('2020-03-01', None) == 'From Mar 01, 2020'
    assert format_date_range('', '2021') == 'Until 2021'


def test_range_with_no_bounds():
    assert format_date_range(None, '   ') == 'Date unknown'
