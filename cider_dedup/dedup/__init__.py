"""Duplicate detection for new cider entries.

Quick checks run a chain of strategies ordered from cheapest to most
expensive; full checks score and rank the whole collection snapshot.
"""

from cider_dedup.dedup.result import DuplicateCheckResult, QuickCheckResult, RankedMatch
from cider_dedup.dedup.detector import DuplicateDetectionEngine, coerce_collection, ensure_collection
from cider_dedup.dedup.suggestions import SuggestionIndex

__all__ = [
    "DuplicateCheckResult",
    "DuplicateDetectionEngine",
    "QuickCheckResult",
    "RankedMatch",
    "SuggestionIndex",
    "coerce_collection",
    "ensure_collection",
]
