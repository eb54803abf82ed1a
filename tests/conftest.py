"""Pytest configuration and fixtures for cider-dedup tests."""

import pytest

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cider_dedup.config import DedupConfig
from cider_dedup.dedup import DuplicateDetectionEngine
from cider_dedup.models import ComparisonCandidate, StoredCandidate


def make_record(ref, name, brand, abv=None, container=None):
    """Build a ``StoredCandidate`` the way the storage layer hands them over."""
    return StoredCandidate(
        ref=ref,
        candidate=ComparisonCandidate(
            name=name,
            brand=brand,
            strength_percent=abv,
            container_type=container,
        ),
    )


@pytest.fixture
def config():
    """Default configuration, independent of the environment."""
    return DedupConfig(_env_file=None)


@pytest.fixture
def engine(config):
    return DuplicateDetectionEngine(config)


@pytest.fixture
def sample_collection():
    """A small collection snapshot in storage order."""
    return [
        make_record("cider1", "Aspall Dry Cider", "Aspall", 5.5, "bottle"),
        make_record("cider2", "Thatchers Gold", "Thatchers", 4.8, "can"),
        make_record("cider3", "Strongbow Original", "Strongbow", 5.0, "bottle"),
        make_record("cider4", "Aspall Imperial Dry", "Aspall", 8.2, "bottle"),
        make_record("cider5", "Old Mout Pineapple & Raspberry", "Old Mout", 4.0, "bottle"),
        make_record("cider6", "Rekorderlig Strawberry & Lime", "Rekorderlig", 4.0, "bottle"),
        make_record("cider7", "Thatchers Haze", "Thatchers", 4.5, "can"),
        make_record("cider8", "Aspall Draught Suffolk Cyder", "Aspall", 5.5, "draft"),
    ]


@pytest.fixture
def sample_records(sample_collection):
    """The same collection as raw storage rows."""
    return [
        {
            "id": stored.ref,
            "name": stored.candidate.name,
            "brand": stored.candidate.brand,
            "abv": stored.candidate.strength_percent,
            "containerType": stored.candidate.container_type.value,
        }
        for stored in sample_collection
    ]
