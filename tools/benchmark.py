"""Performance benchmark for the duplicate detection engine.

Generates a synthetic collection of cider records and times full checks,
quick checks and name suggestions against it.

Usage:
    python tools/benchmark.py --records <n> --runs <runs>

Example:
    python tools/benchmark.py --records 20000 --runs 5
"""

import argparse
import json
import random
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from cider_dedup.config import DedupConfig
from cider_dedup.dedup import DuplicateDetectionEngine
from cider_dedup.models import ComparisonCandidate, ContainerType
from cider_dedup.performance import clear_performance_caches, get_cache_stats
from cider_dedup.utils.logger import set_level

_BRANDS = ["Aspall", "Thatchers", "Westons", "Sheppy's", "Henney's", "Orchard Pig",
           "Old Mout", "Rekorderlig", "Strongbow", "Hogan's", "Pilton", "Oliver's"]
_WORDS = ["Dry", "Medium", "Sweet", "Gold", "Haze", "Vintage", "Reserve", "Rosé",
          "Scrumpy", "Perry", "Bittersweet", "Russet", "Kingston", "Black", "Oak"]


def build_collection(size: int, seed: int = 7) -> List[Dict[str, Any]]:
    """Build ``size`` synthetic records with a fixed seed."""
    rng = random.Random(seed)
    containers = [c.value for c in ContainerType]
    records = []
    for i in range(size):
        brand = rng.choice(_BRANDS)
        words = rng.sample(_WORDS, k=rng.randint(1, 3))
        records.append({
            "id": f"cider_{i}",
            "name": f"{brand} {' '.join(words)} {i}",
            "brand": brand,
            "abv": round(rng.uniform(3.0, 8.5), 1),
            "containerType": rng.choice(containers),
        })
    return records


def time_operation(operation: Callable[[], Any], runs: int) -> Dict[str, float]:
    """Time ``runs`` calls of ``operation``.

    Returns:
        Dictionary with min/avg/max durations in milliseconds
    """
    durations = []
    for _ in range(runs):
        started = time.perf_counter()
        operation()
        durations.append(time.perf_counter() - started)
    return {
        "runs": runs,
        "avg_ms": round(sum(durations) * 1000 / len(durations), 2),
        "min_ms": round(min(durations) * 1000, 2),
        "max_ms": round(max(durations) * 1000, 2),
    }


def run_benchmark(size: int, runs: int) -> Dict[str, Any]:
    records = build_collection(size)
    set_level("WARNING")
    engine = DuplicateDetectionEngine(DedupConfig())
    probe = ComparisonCandidate(name="Aspall Dry Gold", brand="Aspall", strength_percent=5.5,
                                container_type="bottle")

    clear_performance_caches()
    results = {
        "records": size,
        "full_check": time_operation(lambda: engine.full_check(probe, records), runs),
        "quick_check": time_operation(lambda: engine.quick_check(probe.name, probe.brand, records), runs),
        "suggest_names": time_operation(lambda: engine.suggest_names("asp", records), runs),
        "suggest_brands": time_operation(lambda: engine.suggest_brands("th", records), runs),
    }
    results["normalize_cache"] = get_cache_stats()
    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark the duplicate detection engine.")
    parser.add_argument("--records", type=int, default=10000, help="Synthetic collection size.")
    parser.add_argument("--runs", type=int, default=3, help="Timed runs per operation.")
    parser.add_argument("--output", type=str, help="Write results to this JSON file.")
    args = parser.parse_args()

    if args.records < 1 or args.runs < 1:
        parser.error("--records and --runs must be positive")

    results = run_benchmark(args.records, args.runs)
    print(json.dumps(results, indent=2))

    if args.output:
        Path(args.output).write_text(json.dumps(results, indent=2), encoding="utf-8")
        print(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
