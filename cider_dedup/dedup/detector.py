"""Duplicate detection engine.

``DuplicateDetectionEngine`` is a stateless service: every call takes the new
candidate and a snapshot of the existing collection and returns a plain
value. It never stores the snapshot, so one instance can be shared by any
number of callers.

* ``quick_check``  - exact name/brand short circuit plus a budgeted fuzzy
  pass, for feedback while the user types.
* ``full_check``   - scores every record, ranks them and classifies the best
  one as duplicate, similar or unrelated.
* ``suggest_names`` / ``suggest_brands`` - prefix lookup for autocomplete.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Sequence

from cider_dedup.config import DedupConfig, get_config
from cider_dedup.dedup.result import DuplicateCheckResult, QuickCheckResult, RankedMatch
from cider_dedup.dedup.strategies import (
    BudgetedFuzzyMatch,
    ExactNameBrandMatch,
    QuickCheckStrategy,
    QuickProbe,
    describe,
)
from cider_dedup.dedup.suggestions import suggest
from cider_dedup.errors import CollectionError
from cider_dedup.matching.fields import FieldMatcher
from cider_dedup.models import ComparisonCandidate, StoredCandidate
from cider_dedup.utils.logger import log_classification, log_debug, log_warning

NO_MATCH_MESSAGE = "No similar ciders found"


# ---------------------------------------------------------------------------
# Collection boundary
# ---------------------------------------------------------------------------


def _to_candidate(value: Any) -> Optional[ComparisonCandidate]:
    if isinstance(value, ComparisonCandidate):
        return value
    if isinstance(value, Mapping):
        return ComparisonCandidate.from_record(value)
    return None


def _to_stored(position: int, entry: Any) -> Optional[StoredCandidate]:
    if isinstance(entry, StoredCandidate):
        return entry
    if isinstance(entry, ComparisonCandidate):
        return StoredCandidate(ref=position, candidate=entry)
    if isinstance(entry, Mapping):
        return StoredCandidate(
            ref=entry.get("id", position),
            candidate=ComparisonCandidate.from_record(entry),
        )
    if isinstance(entry, (tuple, list)) and len(entry) == 2:
        candidate = _to_candidate(entry[1])
        if candidate is not None:
            return StoredCandidate(ref=entry[0], candidate=candidate)
    return None


def ensure_collection(existing: Any) -> None:
    """Check that ``existing`` can be iterated as records, without iterating it.

    Raises:
        CollectionError: if ``existing`` is ``None``, a string, a mapping,
            or not iterable at all.
    """
    if existing is None:
        raise CollectionError("existing collection is required, got None")
    if isinstance(existing, (str, bytes, Mapping)) or not isinstance(existing, Iterable):
        raise CollectionError(
            f"existing collection must be an iterable of records, got {type(existing).__name__}"
        )


def coerce_collection(existing: Any) -> List[StoredCandidate]:
    """Reduce a collection snapshot to ``StoredCandidate`` values.

    Accepts ``StoredCandidate`` objects, ``(ref, candidate)`` pairs, bare
    ``ComparisonCandidate`` values (ref is the position) and raw mappings
    (ref is the ``id`` key, or the position). Entries of any other shape
    are skipped.

    Raises:
        CollectionError: see ``ensure_collection``.
    """
    ensure_collection(existing)

    stored: List[StoredCandidate] = []
    skipped = 0
    for position, entry in enumerate(existing):
        item = _to_stored(position, entry)
        if item is None:
            skipped += 1
            continue
        stored.append(item)

    if skipped:
        log_warning("Skipped unrecognised collection entries", skipped=skipped, kept=len(stored))
    return stored


def _coerce_new_item(new_item: Any) -> ComparisonCandidate:
    candidate = _to_candidate(new_item)
    return candidate if candidate is not None else ComparisonCandidate()


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class DuplicateDetectionEngine:
    """Decide whether a new cider already exists in a collection.

    Args:
        config: Thresholds, weights and limits. Defaults to ``get_config()``.
        matcher: Field matcher; built from ``config`` if *None*.
        quick_strategies: Ordered quick-check chain. Defaults to an exact
            name/brand match followed by a budgeted fuzzy scan.

    Usage::

        engine = DuplicateDetectionEngine()
        result = engine.full_check(new_cider, existing_ciders)
        if result.is_duplicate:
            warn(result.message)
    """

    def __init__(
        self,
        config: Optional[DedupConfig] = None,
        matcher: Optional[FieldMatcher] = None,
        quick_strategies: Optional[List[QuickCheckStrategy]] = None,
    ):
        self.config = config if config is not None else get_config()
        self.matcher = matcher if matcher is not None else FieldMatcher.from_config(self.config)
        self.quick_strategies = (
            quick_strategies if quick_strategies is not None else self._default_quick_strategies()
        )

    def _default_quick_strategies(self) -> List[QuickCheckStrategy]:
        return [
            ExactNameBrandMatch(),
            BudgetedFuzzyMatch(
                matcher=self.matcher,
                budget=self.config.quick_check_budget,
                duplicate_threshold=self.config.duplicate_threshold,
                similar_threshold=self.config.similar_threshold,
            ),
        ]

    @property
    def duplicate_threshold(self) -> float:
        return self.config.duplicate_threshold

    @property
    def similar_threshold(self) -> float:
        return self.config.similar_threshold

    # ------------------------------------------------------------------ #
    # Quick check                                                          #
    # ------------------------------------------------------------------ #

    def quick_check(self, name: Any, brand: Any, existing: Any) -> QuickCheckResult:
        """Cheap check of the name and brand being typed.

        Returns an empty result without reading the collection when both
        fields are empty after normalization. Otherwise runs the strategy
        chain and returns on the first duplicate; if none fires, the most
        confident non-duplicate result is returned.
        """
        ensure_collection(existing)
        probe = QuickProbe.from_fields(name, brand)
        if probe.is_empty:
            return QuickCheckResult()
        records = coerce_collection(existing)

        started = time.perf_counter()
        best = QuickCheckResult()
        for strategy in self.quick_strategies:
            result = strategy.check(probe, records)
            if result.is_duplicate:
                log_debug(
                    "Quick check hit",
                    strategy=strategy.name,
                    confidence=round(result.confidence, 4),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                return result
            if result.confidence > best.confidence:
                best = result

        log_debug(
            "Quick check finished without duplicate",
            confidence=round(best.confidence, 4),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return best

    # ------------------------------------------------------------------ #
    # Full check                                                           #
    # ------------------------------------------------------------------ #

    def rank(self, new_item: Any, existing: Any) -> List[RankedMatch]:
        """Score every record and sort best first; ties keep collection order."""
        candidate = _coerce_new_item(new_item)
        ranked = [
            RankedMatch(
                candidate_ref=stored.ref,
                candidate=stored.candidate,
                match=self.matcher.match_score(candidate, stored.candidate),
            )
            for stored in coerce_collection(existing)
        ]
        # sorted() is stable, also with reverse=True
        return sorted(ranked, key=lambda r: r.score, reverse=True)

    def full_check(self, new_item: Any, existing: Any) -> DuplicateCheckResult:
        """Compare ``new_item`` with every existing record and classify the best match."""
        started = time.perf_counter()
        ranked = self.rank(new_item, existing)

        if not ranked:
            log_debug("Full check against empty collection")
            return DuplicateCheckResult(message=NO_MATCH_MESSAGE)

        top = ranked[0]
        similar = self._top_similar(ranked)

        if top.score >= self.duplicate_threshold:
            result = DuplicateCheckResult(
                is_duplicate=True,
                confidence=top.score,
                message=describe("Possible duplicate", top.match.reasons),
                existing_match=top,
                similar_matches=similar,
            )
            outcome = "duplicate"
        elif top.score >= self.similar_threshold:
            result = DuplicateCheckResult(
                has_similar=True,
                confidence=top.score,
                message=describe("Similar cider found", top.match.reasons),
                similar_matches=similar,
            )
            outcome = "similar"
        else:
            result = DuplicateCheckResult(message=NO_MATCH_MESSAGE)
            outcome = "none"

        log_classification(
            outcome,
            result.confidence,
            compared=len(ranked),
            top_ref=top.candidate_ref if outcome != "none" else None,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return result

    def _top_similar(self, ranked: Sequence[RankedMatch]) -> List[RankedMatch]:
        similar: List[RankedMatch] = []
        for match in ranked:
            if match.score < self.similar_threshold or len(similar) >= self.config.max_similar_matches:
                break
            similar.append(match)
        return similar

    # ------------------------------------------------------------------ #
    # Suggestions                                                          #
    # ------------------------------------------------------------------ #

    def suggest_names(self, prefix: Any, existing: Any) -> List[str]:
        """Autocomplete names of existing records for a typed prefix."""
        records = coerce_collection(existing)
        return suggest(
            prefix,
            (stored.candidate.name for stored in records),
            limit=self.config.max_suggestions,
            min_length=self.config.min_suggestion_length,
        )

    def suggest_brands(self, prefix: Any, existing: Any) -> List[str]:
        """Autocomplete brands of existing records for a typed prefix."""
        records = coerce_collection(existing)
        return suggest(
            prefix,
            (stored.candidate.brand for stored in records),
            limit=self.config.max_suggestions,
            min_length=self.config.min_suggestion_length,
        )
