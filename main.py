"""Command line entry point for the cider duplicate detection engine.

Loads environment variables, reads a collection snapshot from a JSON file
(a list of records with ``id``, ``name``, ``brand``, ``abv`` and
``containerType``) and prints the engine's answer as JSON.

Usage:
    python main.py --collection ciders.json check --name "Aspall Dry Cyder" --brand Aspall --abv 5.5
    python main.py --collection ciders.json quick --name "Aspall Dry Cider" --brand Aspall
    python main.py --collection ciders.json suggest-names --prefix asp
"""
from dotenv import load_dotenv
import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

# Load environment variables first, before any other imports
load_dotenv()

from cider_dedup.config import get_config
from cider_dedup.dedup import DuplicateDetectionEngine
from cider_dedup.dedup.result import RankedMatch
from cider_dedup.models import ComparisonCandidate
from cider_dedup.utils.logger import log_error, set_level

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check a cider against an existing collection.")
    parser.add_argument('--collection', required=True, help='Path to a JSON file holding a list of cider records.')
    parser.add_argument('--log-level', type=str, help='Override CIDER_DEDUP_LOG_LEVEL.')
    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help='Full duplicate check of a candidate.')
    check.add_argument('--name', default='', help='Cider name.')
    check.add_argument('--brand', default='', help='Brand name.')
    check.add_argument('--abv', type=str, help='Strength in percent.')
    check.add_argument('--container', type=str, help='Container type (bottle, can, draught, ...).')

    quick = sub.add_parser('quick', help='Keystroke-time check of a name and brand.')
    quick.add_argument('--name', default='', help='Cider name.')
    quick.add_argument('--brand', default='', help='Brand name.')

    for command in ('suggest-names', 'suggest-brands'):
        suggest = sub.add_parser(command, help=f'Autocomplete lookup ({command.split("-")[1]}).')
        suggest.add_argument('--prefix', required=True, help='Typed prefix.')

    return parser


def load_collection(path: str) -> List[Dict[str, Any]]:
    """Read a JSON list of records; raises ``ValueError`` for any other shape."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get("ciders"), list):
        data = data["ciders"]
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of records")
    return data


def _ranked_to_dict(ranked: Optional[RankedMatch]) -> Optional[Dict[str, Any]]:
    if ranked is None:
        return None
    return {
        "ref": ranked.candidate_ref,
        "name": ranked.candidate.name,
        "brand": ranked.candidate.brand,
        "score": round(ranked.score, 4),
        "matched_fields": sorted(tag.value for tag in ranked.match.matched_fields),
        "reasons": list(ranked.match.reasons),
    }


def run(args: argparse.Namespace) -> Any:
    engine = DuplicateDetectionEngine(get_config())
    records = load_collection(args.collection)

    if args.command == 'check':
        candidate = ComparisonCandidate(
            name=args.name,
            brand=args.brand,
            strength_percent=args.abv,
            container_type=args.container,
        )
        result = engine.full_check(candidate, records)
        return {
            "is_duplicate": result.is_duplicate,
            "has_similar": result.has_similar,
            "confidence": round(result.confidence, 4),
            "message": result.message,
            "existing_match": _ranked_to_dict(result.existing_match),
            "similar_matches": [_ranked_to_dict(m) for m in result.similar_matches],
        }
    if args.command == 'quick':
        return asdict(engine.quick_check(args.name, args.brand, records))
    if args.command == 'suggest-names':
        return engine.suggest_names(args.prefix, records)
    return engine.suggest_brands(args.prefix, records)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    try:
        set_level(args.log_level or config.log_level)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    issues = config.validate_configuration()
    for issue in issues:
        print(f"warning: {issue}", file=sys.stderr)

    try:
        output = run(args)
    except (OSError, ValueError) as e:
        log_error("Could not read collection", path=args.collection, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
