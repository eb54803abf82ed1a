"""Configuration management using Pydantic BaseSettings.

Thresholds and weights default to the values the classification rules are
tuned for. Every setting can be overridden through an environment variable
prefixed with ``CIDER_DEDUP_`` (e.g. ``CIDER_DEDUP_DUPLICATE_THRESHOLD``) or
a ``.env`` file.
"""
import math
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class DedupConfig(BaseSettings):
    """Engine thresholds, field weights and lookup limits."""

    # Classification thresholds
    duplicate_threshold: float = Field(0.85, ge=0.0, le=1.0, description="Minimum score classified as a duplicate")
    similar_threshold: float = Field(0.50, ge=0.0, le=1.0, description="Minimum score classified as similar")

    # Field weights
    name_weight: float = Field(0.55, ge=0.0, description="Weight of the name field")
    brand_weight: float = Field(0.25, ge=0.0, description="Weight of the brand field")
    strength_weight: float = Field(0.10, ge=0.0, description="Weight of the ABV field")
    container_weight: float = Field(0.10, ge=0.0, description="Weight of the container type field")

    # String similarity blend
    edit_distance_weight: float = Field(0.6, ge=0.0, description="Share of the Levenshtein score")
    token_overlap_weight: float = Field(0.4, ge=0.0, description="Share of the token Jaccard score")

    # Field rules
    brand_partial_threshold: float = Field(0.6, ge=0.0, le=1.0, description="Minimum brand similarity that still contributes")
    name_identical_threshold: float = Field(0.95, ge=0.0, le=1.0, description="Name similarity reported as nearly identical")

    # Lookup limits
    quick_check_budget: int = Field(10, ge=1, le=10000, description="Records compared by the quick fuzzy pass")
    max_similar_matches: int = Field(3, ge=1, le=50, description="Similar matches returned by a full check")
    max_suggestions: int = Field(5, ge=1, le=100, description="Autocomplete suggestions returned")
    min_suggestion_length: int = Field(2, ge=1, le=20, description="Shortest normalized prefix that yields suggestions")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="CIDER_DEDUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        'duplicate_threshold', 'similar_threshold',
        'name_weight', 'brand_weight', 'strength_weight', 'container_weight',
        'edit_distance_weight', 'token_overlap_weight',
        'brand_partial_threshold', 'name_identical_threshold',
    )
    @classmethod
    def validate_finite(cls, v):
        if math.isnan(v) or math.isinf(v):
            raise ValueError('value must be a finite number')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f'Invalid log level: {v}. Valid options: {_VALID_LOG_LEVELS}')
        return v.upper()

    @model_validator(mode='after')
    def validate_relations(self):
        if self.similar_threshold >= self.duplicate_threshold:
            raise ValueError('similar_threshold must be lower than duplicate_threshold')
        if self.name_weight + self.brand_weight + self.strength_weight + self.container_weight <= 0:
            raise ValueError('at least one field weight must be positive')
        if self.edit_distance_weight + self.token_overlap_weight <= 0:
            raise ValueError('edit_distance_weight and token_overlap_weight cannot both be zero')
        return self

    def field_weights(self):
        """Return the field weights as a ``FieldWeights`` value."""
        from cider_dedup.matching.fields import FieldWeights

        return FieldWeights(
            name=self.name_weight,
            brand=self.brand_weight,
            strength=self.strength_weight,
            container_type=self.container_weight,
        )

    def validate_configuration(self) -> List[str]:
        """Return non-fatal issues with the current configuration."""
        issues = []

        weight_sum = self.name_weight + self.brand_weight + self.strength_weight + self.container_weight
        if not math.isclose(weight_sum, 1.0, abs_tol=1e-6):
            issues.append(f"Field weights sum to {weight_sum:.3f}, expected 1.0")

        blend_sum = self.edit_distance_weight + self.token_overlap_weight
        if not math.isclose(blend_sum, 1.0, abs_tol=1e-6):
            issues.append(f"Similarity blend weights sum to {blend_sum:.3f}, expected 1.0")

        if self.duplicate_threshold < 0.7:
            issues.append("DUPLICATE_THRESHOLD is very low, distinct ciders may be flagged as duplicates")

        if self.name_weight < self.brand_weight:
            issues.append("Brand outweighs name, ciders from one brand will look alike")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration."""
        from cider_dedup.utils.logger import log_info

        log_info("Configuration loaded",
                 duplicate_threshold=self.duplicate_threshold,
                 similar_threshold=self.similar_threshold,
                 name_weight=self.name_weight,
                 brand_weight=self.brand_weight,
                 strength_weight=self.strength_weight,
                 container_weight=self.container_weight,
                 quick_check_budget=self.quick_check_budget,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> DedupConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = DedupConfig()
    return _config


def reload_config() -> DedupConfig:
    """Reload configuration from environment variables."""
    global _config
    _config = DedupConfig()
    return _config
