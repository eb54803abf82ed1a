"""Memoization helpers for the hot comparison paths.

Caches are keyed on the input string alone, so they never hold state tied
to a particular collection snapshot.
"""

from functools import lru_cache
from typing import Any, Dict

from cider_dedup.utils.logger import log_info

_NORMALIZE_CACHE_SIZE = 8192


@lru_cache(maxsize=_NORMALIZE_CACHE_SIZE)
def cached_normalize_text(text: str) -> str:
    """Cached version of text normalization for frequently compared strings."""
    from cider_dedup.matching.utils import normalize_text

    return normalize_text(text)


def normalize(text: Any) -> str:
    """Normalize through the cache when the value is a hashable string."""
    if isinstance(text, str):
        return cached_normalize_text(text)
    from cider_dedup.matching.utils import normalize_text

    return normalize_text(text)


def get_cache_stats() -> Dict[str, Any]:
    """Get normalization cache statistics."""
    info = cached_normalize_text.cache_info()
    total_requests = info.hits + info.misses
    hit_rate = (info.hits / total_requests * 100) if total_requests > 0 else 0

    return {
        "size": info.currsize,
        "max_size": info.maxsize,
        "hits": info.hits,
        "misses": info.misses,
        "hit_rate_percent": round(hit_rate, 2),
    }


def clear_performance_caches() -> None:
    """Clear all performance-related caches."""
    cached_normalize_text.cache_clear()
    log_info("Normalization cache cleared")
