"""String normalization, similarity scoring and per-field matching."""

from cider_dedup.matching.utils import normalize_text
from cider_dedup.matching.similarity import SimilarityScorer, similarity
from cider_dedup.matching.fields import FieldMatcher, FieldWeights

__all__ = [
    "FieldMatcher",
    "FieldWeights",
    "SimilarityScorer",
    "normalize_text",
    "similarity",
]
