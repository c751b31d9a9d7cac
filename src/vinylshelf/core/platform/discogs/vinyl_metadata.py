"""Vinyl attribute extraction from Discogs format descriptions.

Discogs describes a pressing through a ``formats`` array whose entries carry
free-text ``descriptions`` (``["LP", "Album", '12"']``) and an optional
free-text ``text`` field (``"Transparent Red"``). These helpers pick the
``Vinyl`` entry and pull structured attributes out of it. They never raise on
malformed input.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from vinylshelf.core.platform.discogs.models import DiscogsFormat

VINYL_FORMAT_NAME = "Vinyl"

SIZE_MARKERS = ('"', "inch", "7", "10", "12")

COLOR_KEYWORDS = (
    "Vinyl",
    "Colored",
    "Clear",
    "Transparent",
    "Marble",
    "Splatter",
    "Black",
    "White",
    "Red",
    "Blue",
    "Green",
    "Yellow",
    "Purple",
    "Pink",
    "Orange",
    "Grey",
    "Gray",
)

SHAPED_MARKERS = ("Picture Disc", "Shaped", "Shape", "Picture")

FormatLike = DiscogsFormat | dict[str, Any]


def _as_format(entry: Any) -> DiscogsFormat | None:
    if isinstance(entry, DiscogsFormat):
        return entry
    if isinstance(entry, dict):
        return DiscogsFormat.from_discogs_dict(entry)
    return None


def find_vinyl_format(formats: Iterable[FormatLike] | None) -> DiscogsFormat | None:
    """Return the first format entry named exactly ``Vinyl``, if any."""
    if not formats:
        return None

    try:
        for entry in formats:
            fmt = _as_format(entry)
            if fmt is not None and fmt.name == VINYL_FORMAT_NAME:
                return fmt
    except TypeError:
        return None
    return None


def _vinyl_descriptions(formats: Iterable[FormatLike] | None) -> tuple[DiscogsFormat | None, list[str]]:
    vinyl = find_vinyl_format(formats)
    if vinyl is None:
        return None, []
    return vinyl, [d for d in vinyl.descriptions if isinstance(d, str)]


def _contains_any(value: str, markers: Sequence[str]) -> bool:
    return any(marker in value for marker in markers)


def extract_record_size(formats: Iterable[FormatLike] | None) -> str | None:
    """Return the raw size description (e.g. ``12"``) of the vinyl entry.

    Args:
        formats: Discogs ``formats`` array

    Returns:
        The first matching description verbatim, or None
    """
    _, descriptions = _vinyl_descriptions(formats)
    for description in descriptions:
        if _contains_any(description, SIZE_MARKERS):
            return description
    return None


def extract_vinyl_color(formats: Iterable[FormatLike] | None) -> str | None:
    """Return the color description of the vinyl entry.

    A matching description wins over the entry's free-text field, which is only
    consulted when no description mentions a color keyword.

    Args:
        formats: Discogs ``formats`` array

    Returns:
        The matching description or free text verbatim, or None
    """
    vinyl, descriptions = _vinyl_descriptions(formats)
    if vinyl is None or not descriptions:
        return None

    for description in descriptions:
        if _contains_any(description, COLOR_KEYWORDS):
            return description

    if vinyl.text and _contains_any(vinyl.text, COLOR_KEYWORDS):
        return vinyl.text
    return None


def is_shaped_vinyl(formats: Iterable[FormatLike] | None) -> bool:
    """Check whether the vinyl entry describes a picture disc or shaped record."""
    _, descriptions = _vinyl_descriptions(formats)
    return any(_contains_any(description, SHAPED_MARKERS) for description in descriptions)
