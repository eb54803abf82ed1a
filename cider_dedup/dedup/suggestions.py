"""Prefix/substring lookup for name and brand autocomplete.

Lookups are a single linear pass with a substring test as the first,
cheapest rejection; no similarity scoring is involved. Values whose
normalized form starts with the typed prefix rank above values that merely
contain it, and collection order is kept within each group.
"""
from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Tuple

from cider_dedup.performance import normalize

DEFAULT_MAX_SUGGESTIONS = 5
DEFAULT_MIN_PREFIX_LENGTH = 2


def _normalized_pairs(values: Iterable[Any]) -> Iterator[Tuple[str, str]]:
    for value in values:
        if value is None:
            continue
        display = value if isinstance(value, str) else str(value)
        norm = normalize(display)
        if norm:
            yield norm, display.strip()


def rank_by_prefix(pairs: Iterable[Tuple[str, str]], prefix: str, limit: int) -> List[str]:
    """Return up to ``limit`` display values matching the normalized ``prefix``.

    ``pairs`` yields ``(normalized, display)`` tuples. Values are
    de-duplicated on their normalized form before truncation; the first
    spelling seen is the one returned.
    """
    starts: List[str] = []
    contains: List[str] = []
    seen = set()

    for norm, display in pairs:
        if prefix not in norm or norm in seen:
            continue
        seen.add(norm)
        if norm.startswith(prefix):
            starts.append(display)
            if len(starts) >= limit:
                break
        elif len(contains) < limit:
            contains.append(display)

    return (starts + contains)[:limit]


def suggest(
    prefix: Any,
    values: Iterable[Any],
    limit: int = DEFAULT_MAX_SUGGESTIONS,
    min_length: int = DEFAULT_MIN_PREFIX_LENGTH,
) -> List[str]:
    """One-shot lookup over raw values; nothing is retained after the call."""
    norm_prefix = normalize(prefix)
    if len(norm_prefix) < min_length:
        return []
    return rank_by_prefix(_normalized_pairs(values), norm_prefix, limit)


class SuggestionIndex:
    """Pre-normalized, de-duplicated values of one collection snapshot.

    The engine builds nothing between calls; a caller that queries the same
    snapshot on every keystroke can build an index once and discard it when
    the snapshot changes.

    Usage::

        index = SuggestionIndex.from_values(record.name for record in records)
        index.lookup("asp")   # ["Aspall Dry Cider", "Aspall Imperial Dry"]
    """

    def __init__(self, entries: Iterable[Tuple[str, str]]):
        self._entries: List[Tuple[str, str]] = []
        seen = set()
        for norm, display in entries:
            if norm in seen:
                continue
            seen.add(norm)
            self._entries.append((norm, display))

    @classmethod
    def from_values(cls, values: Iterable[Any]) -> "SuggestionIndex":
        return cls(_normalized_pairs(values))

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(
        self,
        prefix: Any,
        limit: int = DEFAULT_MAX_SUGGESTIONS,
        min_length: int = DEFAULT_MIN_PREFIX_LENGTH,
    ) -> List[str]:
        norm_prefix = normalize(prefix)
        if len(norm_prefix) < min_length:
            return []
        return rank_by_prefix(self._entries, norm_prefix, limit)
