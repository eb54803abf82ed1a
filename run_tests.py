#!/usr/bin/env python3
"""Test runner script for cider-dedup."""

import sys
import subprocess
from pathlib import Path

# Test modules selectable by a short name, e.g. ``python run_tests.py engine``
SUITES = {
    "normalization": "test_normalization.py",
    "similarity": "test_similarity.py",
    "fields": "test_field_matcher.py",
    "engine": "test_engine.py",
    "suggestions": "test_suggestions.py",
    "models": "test_models.py",
    "config": "test_config.py",
    "logger": "test_logger.py",
    "cli": "test_cli.py",
}


def main():
    """Run tests with pytest."""
    project_root = Path(__file__).parent
    target = project_root / "tests"

    if len(sys.argv) > 1:
        suite = SUITES.get(sys.argv[1])
        if suite is None:
            print(f"Unknown suite '{sys.argv[1]}'. Choose from: {', '.join(SUITES)}")
            sys.exit(2)
        target = target / "unit" / suite

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        str(target),
        "-v",
        "--tb=short",
        "--color=yes",
    ]

    print(f"Running tests: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\nTests interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
