"""Alphabetical page buckets for browsing the collection by artist.

Records are grouped by the first letter of the artist sort key. A letter with
more than ``max_size`` records is split by second letter (labels like
``Ba–Bm``); small neighbouring letters are merged greedily (labels like
``A–C``). Artists that don't start with A-Z land in ``#``, which is never
split or merged and always comes last.
"""

import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field

MAX_BUCKET_SIZE = 50

RANGE_SEPARATOR = "\u2013"

_LEADING_ARTICLE = re.compile(r"^(The|A)\s+", re.IGNORECASE)
_LEADING_NON_ALNUM = re.compile(r"^[^a-zA-Z0-9]+")


@dataclass
class AlphaBucket:
    """One page of records for the alphabetical navigation."""

    label: str
    record_ids: list[str] = field(default_factory=list)


@dataclass
class _RawPage:
    first_letter: str
    is_split: bool
    label: str
    record_ids: list[str]


def artist_sort_key(name: str) -> str:
    """Normalize an artist name for sorting.

    Strips diacritics, a leading "The " or "A ", and leading non-alphanumeric
    characters.
    """
    decomposed = unicodedata.normalize("NFD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = _LEADING_ARTICLE.sub("", stripped)
    return _LEADING_NON_ALNUM.sub("", stripped)


def _first_char(name: str) -> str:
    key = artist_sort_key(name)
    ch = key[:1].upper()
    return ch if "A" <= ch <= "Z" and len(ch) == 1 else "#"


def _second_char(name: str) -> str:
    key = artist_sort_key(name)
    return key[1].upper() if len(key) > 1 else ""


def _range_label(start: str, end: str) -> str:
    return start if start == end else f"{start}{RANGE_SEPARATOR}{end}"


def _split_letter(letter: str, group: list[tuple[str, str]], max_size: int) -> list[_RawPage]:
    by_second: dict[str, list[str]] = {}
    for record_id, artist_name in group:
        by_second.setdefault(_second_char(artist_name), []).append(record_id)

    chars = sorted(by_second)
    pages: list[_RawPage] = []
    sub_ids: list[str] = []
    start_char = chars[0]

    for i, ch in enumerate(chars):
        ids = by_second[ch]
        if sub_ids and len(sub_ids) + len(ids) > max_size:
            end_char = chars[i - 1]
            label = _range_label(f"{letter}{start_char.lower()}", f"{letter}{end_char.lower()}")
            pages.append(_RawPage(letter, True, label, sub_ids))
            sub_ids = []
            start_char = ch
        sub_ids.extend(ids)

    label = _range_label(f"{letter}{start_char.lower()}", f"{letter}{chars[-1].lower()}")
    pages.append(_RawPage(letter, True, label, sub_ids))
    return pages


def compute_buckets(
    records: Iterable[tuple[str, str]], max_size: int = MAX_BUCKET_SIZE
) -> list[AlphaBucket]:
    """Compute alphabetical buckets.

    Args:
        records: ``(record_id, artist_name)`` pairs, sorted by artist sort key
        max_size: Split threshold for a letter and merge limit for a page

    Returns:
        Buckets in alphabetical order with ``#`` last
    """
    by_first: dict[str, list[tuple[str, str]]] = {}
    for record_id, artist_name in records:
        by_first.setdefault(_first_char(artist_name), []).append((record_id, artist_name))

    if not by_first:
        return []

    letters = sorted(letter for letter in by_first if letter != "#")

    raw_pages: list[_RawPage] = []
    for letter in letters:
        group = by_first[letter]
        if len(group) <= max_size:
            raw_pages.append(_RawPage(letter, False, letter, [r[0] for r in group]))
        else:
            raw_pages.extend(_split_letter(letter, group, max_size))

    buckets: list[AlphaBucket] = []
    merge_ids: list[str] = []
    merge_start: _RawPage | None = None
    merge_last: _RawPage | None = None

    def flush() -> None:
        nonlocal merge_ids, merge_start, merge_last
        if merge_start is None or merge_last is None:
            return
        buckets.append(AlphaBucket(_range_label(merge_start.label, merge_last.label), merge_ids))
        merge_ids, merge_start, merge_last = [], None, None

    for page in raw_pages:
        if page.is_split:
            flush()
            buckets.append(AlphaBucket(page.label, page.record_ids))
            continue

        if merge_ids and len(merge_ids) + len(page.record_ids) > max_size:
            flush()

        merge_ids.extend(page.record_ids)
        if merge_start is None:
            merge_start = page
        merge_last = page

    flush()

    if "#" in by_first:
        buckets.append(AlphaBucket("#", [r[0] for r in by_first["#"]]))

    return buckets
