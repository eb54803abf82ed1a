"""String similarity for names and brands.

The score blends two signals computed on normalized text:

* an edit-distance score, ``1 - levenshtein(a, b) / max(len(a), len(b), 1)``,
  which rewards near-identical spelling ("cyder" vs "cider");
* a token-overlap score, the Jaccard index of the word sets, which rewards
  reordered multi-word names ("apple cider traditional" vs
  "traditional apple cider").
"""
from __future__ import annotations
import math
from typing import Any

from rapidfuzz.distance import Levenshtein

from cider_dedup.errors import ConfigurationError
from cider_dedup.matching.utils import tokenize
from cider_dedup.performance import normalize

DEFAULT_EDIT_DISTANCE_WEIGHT = 0.6
DEFAULT_TOKEN_OVERLAP_WEIGHT = 0.4


def edit_distance_score(a: str, b: str) -> float:
    if a == b:
        return 1.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b), 1)


def token_overlap_score(a: str, b: str) -> float:
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    if not tokens_a and not tokens_b:
        return 1.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


class SimilarityScorer:
    """Blend of edit-distance and token-overlap similarity.

    Args:
        edit_distance_weight: Share of the Levenshtein score.
        token_overlap_weight: Share of the token Jaccard score.

    Raises:
        ConfigurationError: if a weight is negative, NaN, or both are zero.
    """

    def __init__(
        self,
        edit_distance_weight: float = DEFAULT_EDIT_DISTANCE_WEIGHT,
        token_overlap_weight: float = DEFAULT_TOKEN_OVERLAP_WEIGHT,
    ):
        for label, weight in (
            ("edit_distance_weight", edit_distance_weight),
            ("token_overlap_weight", token_overlap_weight),
        ):
            if not isinstance(weight, (int, float)) or math.isnan(weight) or math.isinf(weight) or weight < 0:
                raise ConfigurationError(f"{label} must be a finite, non-negative number, got {weight!r}")
        if edit_distance_weight + token_overlap_weight <= 0:
            raise ConfigurationError("edit_distance_weight and token_overlap_weight cannot both be zero")

        total = edit_distance_weight + token_overlap_weight
        self.edit_distance_weight = edit_distance_weight / total
        self.token_overlap_weight = token_overlap_weight / total

    @classmethod
    def from_config(cls, config) -> "SimilarityScorer":
        return cls(config.edit_distance_weight, config.token_overlap_weight)

    def similarity(self, a: Any, b: Any) -> float:
        """Similarity in [0, 1] of two raw strings; normalizes both first."""
        return self.normalized_similarity(normalize(a), normalize(b))

    def normalized_similarity(self, a: str, b: str) -> float:
        """Similarity in [0, 1] of two strings that are already normalized."""
        if a == b:
            return 1.0
        score = (
            self.edit_distance_weight * edit_distance_score(a, b)
            + self.token_overlap_weight * token_overlap_score(a, b)
        )
        return min(1.0, max(0.0, score))


_default_scorer = SimilarityScorer()


def similarity(a: Any, b: Any) -> float:
    """Similarity of two strings with the default 0.6 / 0.4 blend."""
    return _default_scorer.similarity(a, b)
