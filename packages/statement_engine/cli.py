import argparse
import json
import sys
from typing import List, Optional

import pandas as pd

from packages.core.config import get_settings
from packages.core.logging import configure_logging

from .engine import StatementEngine
from .learning import JsonFileBackend, LearnedPatternStore, get_default_store


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _read_document(path: str) -> Optional[bytes]:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return None


def parse(engine: StatementEngine, args) -> int:
    buffer = _read_document(args.file)
    if buffer is None:
        return 1

    result = engine.parse_statement(buffer, bank=args.bank)
    if args.json or not result["success"]:
        _print_json(result)
        return 0 if result["success"] else 1

    print(f"Bank: {result['bank']}  Transactions: {result['count']}")
    for warning in result["warnings"]:
        print(f"Warning: {warning}")
    if result["parsed"]:
        df = pd.DataFrame(result["parsed"])
        print(df[["date", "normalizedMerchant", "amount", "category"]].to_string(index=False))
        print()
        for category, total in result["categories"].items():
            print(f"{category:<15} {total:>12.2f}")
    return 0


def summary(engine: StatementEngine, args) -> int:
    buffer = _read_document(args.file)
    if buffer is None:
        return 1

    account = engine.extract_account_summary(buffer)
    if account is None:
        print("Could not extract text from document", file=sys.stderr)
        return 1
    _print_json(account.to_dict())
    return 0


def learn_category(engine: StatementEngine, args) -> int:
    engine.learn_category_correction(args.merchant, args.category)
    print(f"Learned: {args.merchant} -> {args.category}")
    return 0


def learn_merchant(engine: StatementEngine, args) -> int:
    engine.learn_merchant_mapping(args.raw, args.canonical)
    print(f"Learned merchant: {args.raw} -> {args.canonical}")
    return 0


def add_pattern(engine: StatementEngine, args) -> int:
    engine.add_custom_pattern(args.keyword, args.category)
    print(f"Added custom pattern: {args.keyword} -> {args.category}")
    return 0


def stats(engine: StatementEngine, args) -> int:
    _print_json(engine.get_parsing_stats())
    return 0


COMMANDS = {
    "parse": parse,
    "summary": summary,
    "learn-category": learn_category,
    "learn-merchant": learn_merchant,
    "add-pattern": add_pattern,
    "stats": stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bank statement parsing engine")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_settings().APP_VERSION}"
    )
    parser.add_argument(
        "--store", type=str, default=None, help="Learned patterns file (overrides LEARNED_PATTERNS_PATH)"
    )
    subparsers = parser.add_subparsers(dest="command")

    # Parse
    parse_parser = subparsers.add_parser("parse", help="Parse a PDF statement into transactions")
    parse_parser.add_argument("file", type=str, help="Path to PDF statement")
    parse_parser.add_argument("--bank", type=str, default=None, help="Bank override (HDFC, ICICI, ...)")
    parse_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    # Summary
    summary_parser = subparsers.add_parser("summary", help="Extract account header fields")
    summary_parser.add_argument("file", type=str)

    # Learning
    cat_parser = subparsers.add_parser("learn-category", help="Correct a merchant's category")
    cat_parser.add_argument("merchant", type=str)
    cat_parser.add_argument("category", type=str)

    merchant_parser = subparsers.add_parser("learn-merchant", help="Map a raw description to a merchant")
    merchant_parser.add_argument("raw", type=str)
    merchant_parser.add_argument("canonical", type=str)

    pattern_parser = subparsers.add_parser("add-pattern", help="Add a keyword -> category rule")
    pattern_parser.add_argument("keyword", type=str)
    pattern_parser.add_argument("category", type=str)

    # Stats
    subparsers.add_parser("stats", help="Show parsing statistics")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 2

    settings = get_settings()
    configure_logging(settings)

    store = LearnedPatternStore(JsonFileBackend(args.store)) if args.store else get_default_store()
    engine = StatementEngine(store=store, settings=settings)
    return COMMANDS[args.command](engine, args)


if __name__ == "__main__":
    sys.exit(main())
