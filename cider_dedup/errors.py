"""Exceptions raised by the duplicate detection engine.

Malformed field values never raise; they degrade to zero contributions.
Only programming errors at the call site surface as exceptions.
"""


class DedupError(Exception):
    """Base class for engine errors."""


class ConfigurationError(DedupError, ValueError):
    """Weights or thresholds that cannot produce meaningful scores."""


class CollectionError(DedupError, TypeError):
    """The collection of existing records cannot be iterated as records."""
