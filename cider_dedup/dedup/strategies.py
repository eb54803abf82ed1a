"""Quick-check strategies for keystroke-time duplicate feedback.

Each strategy implements the ``QuickCheckStrategy`` protocol: a ``check``
method that receives the normalized probe and the existing records and
returns a ``QuickCheckResult``. Strategies are ordered from cheapest
(string equality) to most expensive (budgeted fuzzy scoring), and every
one of them does a bounded amount of work per record.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Sequence

from cider_dedup.dedup.result import QuickCheckResult
from cider_dedup.matching.fields import FieldMatcher
from cider_dedup.models import ComparisonCandidate, StoredCandidate
from cider_dedup.performance import normalize
from cider_dedup.utils.logger import log_debug

EXACT_MATCH_MESSAGE = "Exact match found"


@dataclass(frozen=True)
class QuickProbe:
    """The name/brand being typed, raw and normalized."""

    candidate: ComparisonCandidate
    name: str
    brand: str

    @classmethod
    def from_fields(cls, name, brand) -> "QuickProbe":
        candidate = ComparisonCandidate(name=name, brand=brand)
        return cls(
            candidate=candidate,
            name=normalize(candidate.name),
            brand=normalize(candidate.brand),
        )

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.brand


def describe(prefix: str, reasons) -> str:
    """Render an advisory message such as ``"Possible duplicate: Same brand"``."""
    if not reasons:
        return prefix
    return f"{prefix}: {', '.join(reasons)}"


# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class QuickCheckStrategy(abc.ABC):
    """Abstract base for quick-check strategies."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short machine-readable name for debug logs."""

    @abc.abstractmethod
    def check(self, probe: QuickProbe, existing: Sequence[StoredCandidate]) -> QuickCheckResult:
        """Run the strategy.

        Args:
            probe: Normalized name and brand being checked.
            existing: Records of the collection snapshot, in collection order.

        Returns:
            A ``QuickCheckResult``. When ``is_duplicate`` is ``False`` the
            engine moves on to the next strategy and keeps the best
            confidence seen so far.
        """


# ---------------------------------------------------------------------------
# Strategy 1 - Exact normalized name + brand
# ---------------------------------------------------------------------------


class ExactNameBrandMatch(QuickCheckStrategy):
    """Report a record whose normalized name and brand both equal the probe's."""

    @property
    def name(self) -> str:
        return "exact_name_brand"

    def check(self, probe: QuickProbe, existing: Sequence[StoredCandidate]) -> QuickCheckResult:
        for stored in existing:
            if (
                normalize(stored.candidate.name) == probe.name
                and normalize(stored.candidate.brand) == probe.brand
            ):
                log_debug("Exact name/brand match", ref=stored.ref)
                return QuickCheckResult(
                    is_duplicate=True,
                    confidence=1.0,
                    message=EXACT_MATCH_MESSAGE,
                )

        return QuickCheckResult(is_duplicate=False)


# ---------------------------------------------------------------------------
# Strategy 2 - Budgeted fuzzy scan
# ---------------------------------------------------------------------------


class BudgetedFuzzyMatch(QuickCheckStrategy):
    """Score name and brand against at most ``budget`` records.

    Scanning stops early once a record reaches the duplicate threshold,
    since no later record can change what the UI shows.
    """

    def __init__(
        self,
        matcher: FieldMatcher,
        budget: int,
        duplicate_threshold: float,
        similar_threshold: float,
    ):
        self.matcher = matcher
        self.budget = budget
        self.duplicate_threshold = duplicate_threshold
        self.similar_threshold = similar_threshold

    @property
    def name(self) -> str:
        return "budgeted_fuzzy"

    def check(self, probe: QuickProbe, existing: Sequence[StoredCandidate]) -> QuickCheckResult:
        best_score = 0.0
        best_reasons = ()
        compared = 0

        for stored in existing:
            if compared >= self.budget:
                break
            compared += 1
            reduced = ComparisonCandidate(name=stored.candidate.name, brand=stored.candidate.brand)
            match = self.matcher.match_score(probe.candidate, reduced)
            if match.score > best_score:
                best_score = match.score
                best_reasons = match.reasons
            if best_score >= self.duplicate_threshold:
                break

        log_debug("Budgeted fuzzy scan finished", compared=compared, best_score=round(best_score, 4))

        if best_score >= self.duplicate_threshold:
            return QuickCheckResult(
                is_duplicate=True,
                confidence=best_score,
                message=describe("Possible duplicate", best_reasons),
            )
        if best_score >= self.similar_threshold:
            return QuickCheckResult(
                is_duplicate=False,
                confidence=best_score,
                message=describe("Similar cider found", best_reasons),
            )
        return QuickCheckResult(is_duplicate=False)
