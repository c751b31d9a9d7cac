"""Tests for importing and refreshing records from Discogs releases."""

from unittest.mock import MagicMock

import pytest
from discogs_fixtures import release_payload

from vinylshelf.core.data.exceptions import DuplicateKeyError
from vinylshelf.core.data.models.db import DataSource
from vinylshelf.core.platform.discogs.exceptions import DiscogsApiError
from vinylshelf.core.platform.discogs.models import DiscogsRelease
from vinylshelf.core.platform.discogs.release_import import (
    fetch_release_into_collection,
    refresh_record_from_discogs,
    release_to_record_data,
)


def make_release(release_id: int = 1, **overrides) -> DiscogsRelease:
    return DiscogsRelease.from_discogs_dict(release_payload(release_id, **overrides))


@pytest.fixture
def mock_client():
    return MagicMock()


def test_release_to_record_data_maps_fields():
    release = make_release(
        7,
        artists=[{"name": "Björk"}, {"name": "Guest"}],
        formats=[{"name": "Vinyl", "descriptions": ["LP", '12"', "Picture Disc"], "text": "Clear"}],
    )

    data = release_to_record_data(release)

    assert data["artist_name"] == "Björk"
    assert data["album_title"] == "Album 7"
    assert data["label_name"] == "One Little Indian"
    assert data["catalog_number"] == "TPLP7"
    assert data["record_size"] == '12"'
    assert data["is_shaped_vinyl"] is True
    # No description names a color, so the free-text field is used
    assert data["vinyl_color"] == "Clear"
    assert "discogs_id" not in data


def test_release_to_record_data_defaults():
    release = DiscogsRelease.from_discogs_dict({"id": 3, "title": "Untitled", "year": 0})

    data = release_to_record_data(release)

    assert data["artist_name"] == "Unknown Artist"
    assert data["year_released"] is None
    assert data["label_name"] is None
    assert data["genres"] == []
    assert data["styles"] == []
    assert data["discogs_uri"] == "https://www.discogs.com/release/3"


def test_fetch_release_into_collection(mock_client, record_repo):
    mock_client.get_release.return_value = make_release(
        42, identifiers=[{"type": "Barcode", "value": "5016958031624"}]
    )

    record = fetch_release_into_collection(mock_client, record_repo, 42)

    mock_client.get_release.assert_called_once_with(42)
    assert record.discogs_id == "42"
    assert record.upc_code == "5016958031624"
    assert record.data_source is DataSource.DISCOGS
    assert record.is_synced_with_discogs is False


def test_fetch_release_already_in_collection(mock_client, record_repo):
    mock_client.get_release.return_value = make_release(42)
    fetch_release_into_collection(mock_client, record_repo, 42)

    with pytest.raises(DuplicateKeyError):
        fetch_release_into_collection(mock_client, record_repo, 42)


def test_fetch_release_remote_failure(mock_client, record_repo):
    mock_client.get_release.side_effect = DiscogsApiError("Discogs API error: 404 Not Found", status=404)

    with pytest.raises(DiscogsApiError):
        fetch_release_into_collection(mock_client, record_repo, 404)

    assert record_repo.get_all() == []


def test_refresh_record_from_discogs(mock_client, record_repo):
    mock_client.get_release.return_value = make_release(42)
    record = fetch_release_into_collection(mock_client, record_repo, 42)
    record_repo.update(record.record_id, {"vinyl_color": "Wrong", "is_synced_with_discogs": True})

    mock_client.get_release.return_value = make_release(
        42,
        title="Album 42 (Remastered)",
        formats=[{"name": "Vinyl", "descriptions": ["LP", "Blue Vinyl"]}],
    )
    refreshed = refresh_record_from_discogs(mock_client, record_repo, record.record_id)

    mock_client.get_release.assert_called_with("42")
    assert refreshed.album_title == "Album 42 (Remastered)"
    assert refreshed.vinyl_color == "Blue Vinyl"
    assert refreshed.record_size is None
    assert refreshed.discogs_id == "42"
    assert refreshed.is_synced_with_discogs is True


def test_refresh_from_explicit_release(mock_client, record_repo):
    record = record_repo.create({"artist_name": "Unknown", "album_title": "White label"})
    mock_client.get_release.return_value = make_release(99)

    refreshed = refresh_record_from_discogs(mock_client, record_repo, record.record_id, "99")

    mock_client.get_release.assert_called_once_with("99")
    assert refreshed.artist_name == "Artist 99"


def test_refresh_missing_record_returns_none(mock_client, record_repo):
    assert refresh_record_from_discogs(mock_client, record_repo, "no-such-id", "1") is None
    mock_client.get_release.assert_not_called()


def test_refresh_without_discogs_id_raises(mock_client, record_repo):
    record = record_repo.create({"artist_name": "Unknown", "album_title": "White label"})

    with pytest.raises(ValueError):
        refresh_record_from_discogs(mock_client, record_repo, record.record_id)
