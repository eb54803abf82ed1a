"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from cider_dedup.models import ComparisonCandidate, MatchResult


@dataclass(frozen=True)
class RankedMatch:
    """An existing record scored against the new candidate."""

    candidate_ref: Any
    candidate: ComparisonCandidate
    match: MatchResult

    @property
    def score(self) -> float:
        return self.match.score


@dataclass
class DuplicateCheckResult:
    """Result of a full duplicate check.

    Attributes:
        is_duplicate: Top score reached the duplicate threshold.
        has_similar: Top score reached only the similar threshold.
        confidence: Top score, or 0.0 when nothing reached the similar
            threshold.
        message: Advisory text for the UI.
        existing_match: The top match when ``is_duplicate`` is set.
        similar_matches: Up to three matches at or above the similar
            threshold, best first.
    """

    is_duplicate: bool = False
    has_similar: bool = False
    confidence: float = 0.0
    message: str = ""
    existing_match: Optional[RankedMatch] = None
    similar_matches: List[RankedMatch] = field(default_factory=list)

    @property
    def suggestion_text(self) -> str:
        return self.message


@dataclass
class QuickCheckResult:
    """Result of the keystroke-time duplicate check."""

    is_duplicate: bool = False
    confidence: float = 0.0
    message: str = ""
