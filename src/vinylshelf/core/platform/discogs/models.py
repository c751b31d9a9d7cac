"""Discogs data models."""

import contextlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, cast

from loguru import logger


def extract_first_item(items: Any, key_name: str = "name") -> str | None:
    """Extract a key from the first dict of a list.

    Args:
        items: List of dicts as returned by the Discogs API (may be None)
        key_name: Name of the key to extract

    Returns:
        Extracted value or None
    """
    if not isinstance(items, list) or not items:
        return None

    first_item = items[0]
    if isinstance(first_item, dict):
        value = first_item.get(key_name)
        return cast(str | None, value) if value else None
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _optional_int(value: Any) -> int | None:
    # Discogs reports an unknown year as 0 and search results carry it as a string
    if value in (None, "", 0, "0"):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class DiscogsFormat:
    """One entry of a release's ``formats`` array."""

    name: str
    qty: str | None = None
    descriptions: list[str] = field(default_factory=list)
    text: str | None = None

    @classmethod
    def from_discogs_dict(cls, format_dict: dict[str, Any]) -> "DiscogsFormat":
        return cls(
            name=cast(str, format_dict.get("name") or ""),
            qty=cast(str | None, format_dict.get("qty")),
            descriptions=_string_list(format_dict.get("descriptions")),
            text=cast(str | None, format_dict.get("text")),
        )


def parse_formats(format_data: Any) -> list[DiscogsFormat]:
    """Parse a raw ``formats`` array, ignoring malformed entries."""
    if not isinstance(format_data, list):
        return []
    return [DiscogsFormat.from_discogs_dict(f) for f in format_data if isinstance(f, dict)]


@dataclass
class DiscogsSearchResult:
    """Lightweight release entry from the database search endpoint."""

    id: int
    title: str
    year: str | None = None
    thumb: str | None = None
    cover_image: str | None = None
    resource_url: str | None = None
    uri: str | None = None
    type: str = "release"
    catno: str | None = None
    barcode: list[str] = field(default_factory=list)

    @classmethod
    def from_discogs_dict(cls, result: dict[str, Any]) -> "DiscogsSearchResult":
        """Create a search result from one entry of the ``results`` array.

        Raises:
            ValueError: If the entry has no usable release id
        """
        try:
            result_id = int(result["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid search result id: {result.get('id')!r}") from e

        year = result.get("year")
        return cls(
            id=result_id,
            title=cast(str, result.get("title", "")),
            year=str(year) if year else None,
            thumb=result.get("thumb") or None,
            cover_image=result.get("cover_image") or None,
            resource_url=result.get("resource_url") or None,
            uri=result.get("uri") or None,
            type=cast(str, result.get("type", "release")),
            catno=result.get("catno") or None,
            barcode=_string_list(result.get("barcode")),
        )


@dataclass
class DiscogsRelease:
    """Representation of a Discogs release.

    Used both for the full ``/releases/{id}`` payload and for the
    ``basic_information`` block embedded in collection listings, which share
    the descriptive fields.
    """

    id: int
    title: str
    artists: list[str] = field(default_factory=list)
    year: int | None = None
    label: str | None = None
    catno: str | None = None
    genres: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    thumb_url: str | None = None
    cover_url: str | None = None
    uri: str | None = None
    resource_url: str | None = None
    formats: list[DiscogsFormat] = field(default_factory=list)
    barcode: str | None = None

    @property
    def artist(self) -> str:
        """First credited artist, as stored on local records."""
        return self.artists[0] if self.artists else "Unknown Artist"

    @classmethod
    def from_discogs_dict(cls, release_dict: dict[str, Any]) -> "DiscogsRelease":
        """Create a DiscogsRelease from a Discogs API response dictionary.

        Args:
            release_dict: Release payload or collection ``basic_information``

        Returns:
            DiscogsRelease instance

        Raises:
            ValueError: If the payload has no release id
        """
        release_id = release_dict.get("id")
        if not release_id:
            raise ValueError("No release_id in data")

        artist_data = release_dict.get("artists") or []
        artists = [
            cast(str, a["name"])
            for a in artist_data
            if isinstance(a, dict) and a.get("name")
        ]

        labels = release_dict.get("labels")

        # Full releases carry images instead of a top-level cover_image
        cover_url = release_dict.get("cover_image") or extract_first_item(
            release_dict.get("images"), "uri"
        )

        barcode: str | None = None
        for identifier in release_dict.get("identifiers") or []:
            if isinstance(identifier, dict) and identifier.get("type") == "Barcode":
                barcode = identifier.get("value")
                break

        resource_url = release_dict.get("resource_url") or None
        uri = release_dict.get("uri") or resource_url
        if not uri:
            uri = f"https://www.discogs.com/release/{release_id}"

        return cls(
            id=int(release_id),
            title=cast(str, release_dict.get("title", "")),
            artists=artists,
            year=_optional_int(release_dict.get("year")),
            label=extract_first_item(labels, "name"),
            catno=extract_first_item(labels, "catno"),
            genres=_string_list(release_dict.get("genres")),
            styles=_string_list(release_dict.get("styles")),
            thumb_url=release_dict.get("thumb") or None,
            cover_url=cover_url or None,
            uri=uri,
            resource_url=resource_url,
            formats=parse_formats(release_dict.get("formats")),
            barcode=barcode,
        )


@dataclass
class DiscogsCollectionItem:
    """One entry of a user's collection listing."""

    release: DiscogsRelease
    instance_id: int | None = None
    date_added: datetime | None = None
    rating: int | None = None

    @property
    def release_id(self) -> str:
        """Release id in the string form used as the local join key."""
        return str(self.release.id)

    @classmethod
    def from_discogs_dict(cls, item: dict[str, Any]) -> "DiscogsCollectionItem":
        basic_info = item.get("basic_information") or {}
        release = DiscogsRelease.from_discogs_dict(basic_info)

        date_added = None
        with contextlib.suppress(KeyError, ValueError, AttributeError, TypeError):
            date_added = datetime.fromisoformat(item["date_added"].replace("Z", "+00:00"))

        return cls(
            release=release,
            instance_id=item.get("instance_id"),
            date_added=date_added,
            rating=item.get("rating"),
        )


@dataclass
class DiscogsPagination:
    """Pagination block of a paged Discogs listing."""

    page: int = 1
    pages: int = 1
    per_page: int = 50
    items: int = 0

    @classmethod
    def from_discogs_dict(cls, pagination: dict[str, Any]) -> "DiscogsPagination":
        return cls(
            page=int(pagination.get("page", 1)),
            pages=int(pagination.get("pages", 1)),
            per_page=int(pagination.get("per_page", 50)),
            items=int(pagination.get("items", 0)),
        )


@dataclass
class DiscogsCollectionPage:
    """One page of a user's collection.

    Entries that cannot be parsed are kept in ``malformed_items`` as
    ``(position, reason)`` pairs, with 1-based positions within the page.
    """

    pagination: DiscogsPagination
    items: list[DiscogsCollectionItem] = field(default_factory=list)
    malformed_items: list[tuple[int, str]] = field(default_factory=list)

    @classmethod
    def from_discogs_dict(cls, response: dict[str, Any]) -> "DiscogsCollectionPage":
        items: list[DiscogsCollectionItem] = []
        malformed: list[tuple[int, str]] = []
        for position, raw_item in enumerate(response.get("releases") or [], start=1):
            if not isinstance(raw_item, dict):
                malformed.append((position, "collection entry is not an object"))
                continue
            try:
                items.append(DiscogsCollectionItem.from_discogs_dict(raw_item))
            except (ValueError, TypeError, AttributeError) as e:
                logger.debug(f"Malformed collection entry at position {position}: {e}")
                malformed.append((position, str(e)))

        return cls(
            pagination=DiscogsPagination.from_discogs_dict(response.get("pagination") or {}),
            items=items,
            malformed_items=malformed,
        )


@dataclass
class MarketStats:
    """Marketplace statistics for a release."""

    lowest_price: float | None = None
    currency: str | None = None
    num_for_sale: int | None = None

    @classmethod
    def from_discogs_dict(cls, stats: dict[str, Any]) -> "MarketStats":
        lowest = stats.get("lowest_price") or {}
        return cls(
            lowest_price=lowest.get("value") if isinstance(lowest, dict) else None,
            currency=lowest.get("currency") if isinstance(lowest, dict) else None,
            num_for_sale=stats.get("num_for_sale"),
        )
