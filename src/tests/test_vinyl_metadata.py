"""Tests for vinyl attribute extraction from Discogs formats."""

import pytest

from vinylshelf.core.platform.discogs.models import DiscogsFormat
from vinylshelf.core.platform.discogs.vinyl_metadata import (
    extract_record_size,
    extract_vinyl_color,
    find_vinyl_format,
    is_shaped_vinyl,
)


def vinyl(descriptions, text=None):
    return [{"name": "Vinyl", "qty": "1", "descriptions": descriptions, "text": text}]


@pytest.mark.parametrize(
    "descriptions, expected",
    [
        (["LP", "Album", '12"', "33 ⅓ RPM"], '12"'),
        (['7"', "Single", "45 RPM"], '7"'),
        (["LP", "Album"], None),
    ],
)
def test_extract_record_size(descriptions, expected):
    assert extract_record_size(vinyl(descriptions)) == expected


@pytest.mark.parametrize(
    "descriptions, text, expected",
    [
        (["LP", "Blue Vinyl"], None, "Blue Vinyl"),
        (["LP", "Clear"], "Transparent", "Clear"),
        (["LP", "Album"], "Red Marble", "Red Marble"),
        (["LP", "Album"], "Limited to 500 copies", None),
    ],
)
def test_extract_vinyl_color(descriptions, text, expected):
    assert extract_vinyl_color(vinyl(descriptions, text)) == expected


@pytest.mark.parametrize(
    "descriptions, expected",
    [
        (['12"', "Picture Disc", "Album"], True),
        (["LP", "Album", "Gatefold"], False),
        (['7"', "Shaped"], True),
    ],
)
def test_is_shaped_vinyl(descriptions, expected):
    assert is_shaped_vinyl(vinyl(descriptions)) is expected


def test_only_the_vinyl_entry_is_inspected():
    formats = [
        {"name": "CD", "descriptions": ['12"', "Picture Disc", "Blue"]},
        {"name": "Vinyl", "descriptions": ["LP"], "text": "Black"},
    ]

    assert extract_record_size(formats) is None
    assert extract_vinyl_color(formats) == "Black"
    assert is_shaped_vinyl(formats) is False


def test_accepts_parsed_formats():
    formats = [DiscogsFormat(name="Vinyl", descriptions=['10"', "Splatter"])]

    assert find_vinyl_format(formats) is formats[0]
    assert extract_record_size(formats) == '10"'
    assert extract_vinyl_color(formats) == "Splatter"


@pytest.mark.parametrize(
    "formats",
    [
        None,
        [],
        [{"name": "CD", "descriptions": ["Album"]}],
        [{"name": "Vinyl"}],
        [{"name": "Vinyl", "descriptions": None, "text": "Blue"}],
        [{"name": "Vinyl", "descriptions": [None]}],
        ["not a dict", 42],
        42,
    ],
)
def test_extractors_are_total(formats):
    assert extract_record_size(formats) is None
    assert extract_vinyl_color(formats) is None
    assert is_shaped_vinyl(formats) is False
