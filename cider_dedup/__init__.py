"""Duplicate and similarity detection for a personal cider collection."""

from cider_dedup.models import ComparisonCandidate, ContainerType, FieldTag, MatchResult, StoredCandidate
from cider_dedup.dedup import (
    DuplicateCheckResult,
    DuplicateDetectionEngine,
    QuickCheckResult,
    RankedMatch,
    SuggestionIndex,
)
from cider_dedup.errors import CollectionError, ConfigurationError, DedupError

__version__ = "0.1.0"

__all__ = [
    "CollectionError",
    "ComparisonCandidate",
    "ConfigurationError",
    "ContainerType",
    "DedupError",
    "DuplicateCheckResult",
    "DuplicateDetectionEngine",
    "FieldTag",
    "MatchResult",
    "QuickCheckResult",
    "RankedMatch",
    "StoredCandidate",
    "SuggestionIndex",
]
