"""Value types exchanged with the engine.

Raw storage rows are reduced to ``ComparisonCandidate`` at the boundary by
``ComparisonCandidate.from_record``; everything past that point works with
typed, immutable values.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Tuple


class ContainerType(str, Enum):
    """Packaging a cider was served in."""

    BOTTLE = "bottle"
    CAN = "can"
    BAG_IN_BOX = "bag_in_box"
    DRAUGHT = "draught"
    KEG = "keg"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> Optional["ContainerType"]:
        """Map a raw label to a container type.

        Empty or missing values map to ``None``; labels that are not
        recognised map to ``OTHER``.
        """
        if value is None:
            return None
        if isinstance(value, ContainerType):
            return value
        label = normalize_container_label(value)
        if not label:
            return None
        return _CONTAINER_ALIASES.get(label, cls.OTHER)


def normalize_container_label(value: Any) -> str:
    """Case-folded, whitespace-collapsed form of a raw container label."""
    if value is None:
        return ""
    if isinstance(value, ContainerType):
        return value.value
    return " ".join(str(value).casefold().replace("_", " ").replace("-", " ").split())


_CONTAINER_ALIASES = {
    "bottle": ContainerType.BOTTLE,
    "bottled": ContainerType.BOTTLE,
    "can": ContainerType.CAN,
    "canned": ContainerType.CAN,
    "tin": ContainerType.CAN,
    "bag in box": ContainerType.BAG_IN_BOX,
    "bib": ContainerType.BAG_IN_BOX,
    "box": ContainerType.BAG_IN_BOX,
    "draught": ContainerType.DRAUGHT,
    "draft": ContainerType.DRAUGHT,
    "tap": ContainerType.DRAUGHT,
    "keg": ContainerType.KEG,
    "cask": ContainerType.KEG,
    "other": ContainerType.OTHER,
}


class FieldTag(str, Enum):
    """Fields that can contribute to a match."""

    NAME = "name"
    BRAND = "brand"
    STRENGTH = "strength"
    CONTAINER_TYPE = "container_type"


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def coerce_strength(value: Any) -> Optional[float]:
    """Turn a raw ABV value into a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


@dataclass(frozen=True)
class ComparisonCandidate:
    """A record reduced to the fields that matter for matching.

    ``container_label`` is derived: for ``ContainerType.OTHER`` it keeps the
    raw label so that "pouch" and "growler" stay distinct; it is empty for
    every other container type.
    """

    name: str = ""
    brand: str = ""
    strength_percent: Optional[float] = None
    container_type: Optional[ContainerType] = None
    container_label: str = field(default="", repr=False)

    def __post_init__(self):
        raw_container = self.container_type
        container = ContainerType.parse(raw_container)
        object.__setattr__(self, "name", _coerce_text(self.name))
        object.__setattr__(self, "brand", _coerce_text(self.brand))
        object.__setattr__(self, "strength_percent", coerce_strength(self.strength_percent))
        object.__setattr__(self, "container_type", container)
        if container is ContainerType.OTHER:
            label = self.container_label or normalize_container_label(raw_container)
        else:
            label = ""
        object.__setattr__(self, "container_label", normalize_container_label(label))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ComparisonCandidate":
        """Build a candidate from a raw storage row or form payload."""
        strength = None
        for key in ("strength_percent", "strengthPercent", "strength", "abv"):
            if record.get(key) is not None:
                strength = record.get(key)
                break
        container = record.get("container_type")
        if container is None:
            container = record.get("containerType")
        return cls(
            name=record.get("name"),
            brand=record.get("brand"),
            strength_percent=strength,
            container_type=container,
        )

    @property
    def is_blank(self) -> bool:
        return (
            not self.name.strip()
            and not self.brand.strip()
            and self.strength_percent is None
            and self.container_type is None
        )


@dataclass(frozen=True)
class StoredCandidate:
    """An existing record together with the caller's opaque reference."""

    ref: Any
    candidate: ComparisonCandidate


@dataclass(frozen=True)
class MatchResult:
    """Composite score for one pair of candidates.

    Attributes:
        score: Weighted similarity in [0, 1].
        matched_fields: Fields whose contribution was non-zero.
        reasons: Human-readable explanations in name, brand, strength,
            container order.
    """

    score: float
    matched_fields: FrozenSet[FieldTag] = frozenset()
    reasons: Tuple[str, ...] = ()
