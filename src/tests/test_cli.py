"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from discogs_fixtures import collection_page_payload, release_payload

from vinylshelf.cli.database import database
from vinylshelf.cli.discogs import discogs
from vinylshelf.cli.main import cli
from vinylshelf.cli.records import records
from vinylshelf.core.data.database import reset_engine
from vinylshelf.core.platform.discogs.exceptions import DiscogsApiError
from vinylshelf.core.platform.discogs.models import DiscogsCollectionPage, DiscogsRelease


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the CLI at a throwaway database and Discogs account."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'vinylshelf.db'}")
    monkeypatch.setenv("DISCOGS_USERNAME", "collector")
    monkeypatch.setenv("DISCOGS_TOKEN", "secret-token")
    monkeypatch.delenv("DISCOGS_USER_AGENT", raising=False)
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def mock_client_class():
    with patch("vinylshelf.cli.discogs.DiscogsApiClient") as mock_class:
        yield mock_class


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "version" in result.output


def test_add_list_and_delete_records(runner):
    result = runner.invoke(records, ["add", "--artist", "The Cure", "--title", "Disintegration", "--year", "1989"])
    assert result.exit_code == 0, result.output
    record_id = result.output.strip().splitlines()[-1].removeprefix("Record ID: ")

    runner.invoke(records, ["add", "--artist", "Air", "--title", "Moon Safari"])

    result = runner.invoke(records, ["list"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert "Air - Moon Safari" in lines[0]
    assert "The Cure - Disintegration (1989)" in lines[1]
    assert lines[-1] == "2 records"

    result = runner.invoke(records, ["delete", record_id, "--yes"])
    assert result.exit_code == 0
    assert "Record deleted." in result.output

    result = runner.invoke(records, ["list"])
    assert result.output.strip().splitlines()[-1] == "1 records"


def test_delete_unknown_record(runner):
    result = runner.invoke(records, ["delete", "missing", "--yes"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_buckets_and_bucket_filter(runner):
    for artist in ("Air", "Can", "Zappa", "2Pac"):
        runner.invoke(records, ["add", "--artist", artist, "--title", "LP"])

    result = runner.invoke(records, ["buckets", "--max-size", "2"])
    assert result.exit_code == 0
    labels = [line.split()[0] for line in result.output.strip().splitlines()]
    assert labels == ["A–C", "Z", "#"]

    result = runner.invoke(records, ["list", "--bucket", "#"])
    assert "2Pac - LP" in result.output
    assert "Air" not in result.output


def test_list_search(runner):
    runner.invoke(records, ["add", "--artist", "Portishead", "--title", "Dummy"])
    runner.invoke(records, ["add", "--artist", "Massive Attack", "--title", "Mezzanine"])

    result = runner.invoke(records, ["list", "--search", "dumm"])

    assert "1 records match" in result.output
    assert "Portishead - Dummy" in result.output


def test_status_reports_missing_settings(runner, monkeypatch):
    monkeypatch.delenv("DISCOGS_USERNAME")

    result = runner.invoke(discogs, ["status"])

    assert result.exit_code == 0
    assert "not configured" in result.output
    assert "DISCOGS_USERNAME" in result.output


def test_sync_json_streams_progress(runner, mock_client_class):
    client = mock_client_class.return_value
    client.get_user_collection.return_value = DiscogsCollectionPage.from_discogs_dict(
        collection_page_payload([1, 2])
    )

    result = runner.invoke(discogs, ["sync", "--json"])

    assert result.exit_code == 0, result.output
    frames = [f for f in result.output.split("\n\n") if f]
    payloads = [json.loads(f.removeprefix("data: ")) for f in frames]
    assert payloads[-1]["phase"] == "done"
    assert payloads[-1]["pulled"] == 2
    mock_client_class.assert_called_once_with(user_agent="MyRecordCollection/1.0", token="secret-token")

    result = runner.invoke(records, ["list"])
    assert "Artist 1 - Album 1" in result.output


def test_sync_without_username(runner, mock_client_class, monkeypatch):
    monkeypatch.delenv("DISCOGS_USERNAME")

    result = runner.invoke(discogs, ["sync"])
    assert result.exit_code == 1
    assert "DISCOGS_USERNAME" in result.output

    result = runner.invoke(discogs, ["sync", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip().removeprefix("data: "))
    assert payload["phase"] == "done"
    assert payload["errors"] == ["DISCOGS_USERNAME is required for sync"]


def test_search_requires_criteria(runner, mock_client_class):
    result = runner.invoke(discogs, ["search", "--artist", "Björk"])

    assert result.exit_code == 2
    mock_client_class.return_value.search_by_artist_and_title.assert_not_called()


def test_fetch_and_refresh(runner, mock_client_class):
    client = mock_client_class.return_value
    client.get_release.return_value = DiscogsRelease.from_discogs_dict(release_payload(42))

    result = runner.invoke(discogs, ["fetch", "42"])
    assert result.exit_code == 0, result.output
    assert "Added Artist 42 - Album 42" in result.output
    record_id = result.output.strip().splitlines()[-1].removeprefix("Record ID: ")

    result = runner.invoke(discogs, ["fetch", "42"])
    assert "already in your collection" in result.output

    client.get_release.return_value = DiscogsRelease.from_discogs_dict(release_payload(42, title="Album 42 (Deluxe)"))
    result = runner.invoke(discogs, ["refresh", record_id])
    assert result.exit_code == 0, result.output
    assert "Refreshed Artist 42 - Album 42 (Deluxe)" in result.output


def test_fetch_remote_failure(runner, mock_client_class):
    mock_client_class.return_value.get_release.side_effect = DiscogsApiError(
        "Discogs API error: 404 Not Found", status=404
    )

    result = runner.invoke(discogs, ["fetch", "404"])

    assert result.exit_code == 1
    assert "404" in result.output


def test_database_init_creates_file(runner, tmp_path):
    db_file = tmp_path / "data" / "shelf.db"

    result = runner.invoke(database, ["init", "--path", str(db_file)])

    assert result.exit_code == 0, result.output
    assert db_file.exists()
    assert "Database initialized" in result.output
