"""Weighted multi-field matching between two candidates.

Brand, strength and container are scored only when both candidates carry a
value; the name is scored whenever either side has one. The composite
score is the sum of weighted contributions divided by the total weight of
those comparable fields. A record missing its ABV is not penalised against
one that has it. A candidate without a name stays below the similar
threshold against a named record, yet still scores 1.0 against itself.

| Field     | Weight | Contribution                                          |
|-----------|--------|-------------------------------------------------------|
| name      | 0.55   | string similarity                                     |
| brand     | 0.25   | 1.0 on equality, similarity if >= 0.6, else 0         |
| strength  | 0.10   | 1.0 / 0.7 / 0.4 for a difference of 0 / <=0.3 / <=0.8 |
| container | 0.10   | 1.0 on the same container type (and label, for other) |
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Optional, Set

from cider_dedup.errors import ConfigurationError
from cider_dedup.matching.similarity import SimilarityScorer
from cider_dedup.models import ComparisonCandidate, FieldTag, MatchResult
from cider_dedup.performance import normalize

NAME_IDENTICAL_THRESHOLD = 0.95
NAME_VERY_SIMILAR_THRESHOLD = 0.85
NAME_SOME_SIMILARITY_THRESHOLD = 0.70
BRAND_PARTIAL_THRESHOLD = 0.6

# (max ABV difference, share of the strength weight, reason)
STRENGTH_BANDS = (
    (0.0, 1.0, "Identical ABV"),
    (0.3, 0.7, "Very similar ABV"),
    (0.8, 0.4, "Similar ABV"),
)
_ABV_TOLERANCE = 1e-9


def _is_unit_interval(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and 0.0 <= value <= 1.0


@dataclass(frozen=True)
class FieldWeights:
    """Per-field weights; validated on construction."""

    name: float = 0.55
    brand: float = 0.25
    strength: float = 0.10
    container_type: float = 0.10

    def __post_init__(self):
        for tag in FieldTag:
            weight = self.weight_of(tag)
            if not isinstance(weight, (int, float)) or math.isnan(weight) or math.isinf(weight) or weight < 0:
                raise ConfigurationError(f"{tag.value} weight must be a finite, non-negative number, got {weight!r}")
        if self.total <= 0:
            raise ConfigurationError("at least one field weight must be positive")

    def weight_of(self, tag: FieldTag) -> float:
        return {
            FieldTag.NAME: self.name,
            FieldTag.BRAND: self.brand,
            FieldTag.STRENGTH: self.strength,
            FieldTag.CONTAINER_TYPE: self.container_type,
        }[tag]

    @property
    def total(self) -> float:
        return self.name + self.brand + self.strength + self.container_type


class FieldMatcher:
    """Score a new candidate against an existing one.

    Args:
        weights: Field weights, defaults to 0.55 / 0.25 / 0.10 / 0.10.
        scorer: String similarity used for names and brands.
        brand_partial_threshold: Brand similarity below this contributes 0.
        name_identical_threshold: Name similarity reported as nearly identical.

    Usage::

        matcher = FieldMatcher()
        result = matcher.match_score(new_item, existing_item)
        if result.score >= 0.85:
            print(", ".join(result.reasons))
    """

    def __init__(
        self,
        weights: Optional[FieldWeights] = None,
        scorer: Optional[SimilarityScorer] = None,
        brand_partial_threshold: float = BRAND_PARTIAL_THRESHOLD,
        name_identical_threshold: float = NAME_IDENTICAL_THRESHOLD,
    ):
        for label, threshold in (
            ("brand_partial_threshold", brand_partial_threshold),
            ("name_identical_threshold", name_identical_threshold),
        ):
            if not _is_unit_interval(threshold):
                raise ConfigurationError(f"{label} must be a finite number in [0, 1], got {threshold!r}")

        self.weights = weights if weights is not None else FieldWeights()
        self.scorer = scorer if scorer is not None else SimilarityScorer()
        self.brand_partial_threshold = brand_partial_threshold
        self.name_identical_threshold = name_identical_threshold

    @classmethod
    def from_config(cls, config) -> "FieldMatcher":
        return cls(
            weights=config.field_weights(),
            scorer=SimilarityScorer.from_config(config),
            brand_partial_threshold=config.brand_partial_threshold,
            name_identical_threshold=config.name_identical_threshold,
        )

    def match_score(self, new_item: ComparisonCandidate, existing: ComparisonCandidate) -> MatchResult:
        """Compute the composite score, matched fields and reasons for a pair."""
        reasons: List[str] = []
        matched: Set[FieldTag] = set()
        weighted = 0.0
        comparable = 0.0

        # Name
        name_a = normalize(new_item.name)
        name_b = normalize(existing.name)
        if name_a or name_b:
            # a name on one side only still counts against the pair
            comparable += self.weights.name
        if name_a and name_b:
            name_score = self.scorer.normalized_similarity(name_a, name_b)
            if name_score > 0 and self.weights.name > 0:
                weighted += self.weights.name * name_score
                matched.add(FieldTag.NAME)
            reason = self._name_reason(name_score)
            if reason:
                reasons.append(reason)

        # Brand
        brand_a = normalize(new_item.brand)
        brand_b = normalize(existing.brand)
        if brand_a and brand_b:
            comparable += self.weights.brand
            if brand_a == brand_b:
                brand_score = 1.0
                reasons.append("Same brand")
            else:
                brand_score = self.scorer.normalized_similarity(brand_a, brand_b)
                if brand_score < self.brand_partial_threshold:
                    brand_score = 0.0
            if brand_score > 0 and self.weights.brand > 0:
                weighted += self.weights.brand * brand_score
                matched.add(FieldTag.BRAND)

        # Strength
        abv_a = new_item.strength_percent
        abv_b = existing.strength_percent
        if abv_a is not None and abv_b is not None:
            comparable += self.weights.strength
            share, reason = self._strength_band(abs(abv_a - abv_b))
            if share > 0:
                reasons.append(reason)
                if self.weights.strength > 0:
                    weighted += self.weights.strength * share
                    matched.add(FieldTag.STRENGTH)

        # Container type
        container_a = new_item.container_type
        container_b = existing.container_type
        if container_a is not None and container_b is not None:
            comparable += self.weights.container_type
            if container_a == container_b and existing.container_label == new_item.container_label:
                reasons.append("Same container type")
                if self.weights.container_type > 0:
                    weighted += self.weights.container_type
                    matched.add(FieldTag.CONTAINER_TYPE)

        score = weighted / comparable if comparable > 0 else 0.0
        return MatchResult(
            score=min(1.0, max(0.0, score)),
            matched_fields=frozenset(matched),
            reasons=tuple(reasons),
        )

    def _name_reason(self, name_score: float) -> Optional[str]:
        if name_score >= self.name_identical_threshold:
            return "Names are nearly identical"
        if name_score >= NAME_VERY_SIMILAR_THRESHOLD:
            return "Names are very similar"
        if name_score >= NAME_SOME_SIMILARITY_THRESHOLD:
            return "Names have some similarity"
        return None

    @staticmethod
    def _strength_band(difference: float):
        for max_difference, share, reason in STRENGTH_BANDS:
            if difference <= max_difference + _ABV_TOLERANCE:
                return share, reason
        return 0.0, None
