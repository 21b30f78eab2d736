"""
Command line entry point.

    python -m app.cli verify-rules [--matrix PATH] [--rules-dir DIR] [--check-links]

Exit codes: 0 all checks passed, 1 conformance failures or broken links,
2 reference matrix or rule files unusable.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from app.config import settings
from app.core.conformance import ConformanceHarness, read_matrix
from app.core.rule_loader import RuleCorpusError, load_corpus_from_dir


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="moveready",
        description="Azure migration readiness rule tooling",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    verify = commands.add_parser(
        "verify-rules",
        help="Replay the reference move matrix through the rule engine",
    )
    verify.add_argument(
        "--matrix",
        type=Path,
        default=settings.matrix_csv_path,
        help=f"Reference matrix CSV (default: {settings.matrix_csv_path})",
    )
    verify.add_argument(
        "--rules-dir",
        type=Path,
        default=settings.rules_dir,
        help="Directory holding the JSON rule files",
    )
    verify.add_argument(
        "--check-links",
        action="store_true",
        help="Also check every rule reference link over HTTP",
    )
    return parser.parse_args(argv)


def verify_rules(args: argparse.Namespace) -> int:
    try:
        corpus = load_corpus_from_dir(args.rules_dir)
    except RuleCorpusError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    rows = read_matrix(args.matrix)
    if rows is None:
        print(f"ERROR: reference matrix not found: {args.matrix}", file=sys.stderr)
        return 2

    harness = ConformanceHarness(
        corpus,
        args.matrix,
        timeout=settings.link_check_timeout,
        chunk_size=settings.link_check_chunk_size,
    )

    print("--- AZURE MIGRATION ENGINE CONFORMANCE ---")
    print(f"Matrix: {args.matrix} ({len(rows)} rows), rules: {len(corpus)}")

    logic = harness.check_rows(rows)
    for failure in logic.failures:
        print(
            f"[FAIL {failure.scenario}] row {failure.row} {failure.resource} "
            f"expected {failure.expected} got {failure.got}"
        )
        if failure.doc_link:
            print(f"    see {failure.doc_link}")

    print(f"TOTAL CHECKS: {logic.total}")
    print(f"PASSED:       {logic.passed}")
    print(f"FAILED:       {logic.failed}")

    broken = 0
    if args.check_links:
        links = asyncio.run(harness.check_links())
        for link in links.details:
            print(f"[BROKEN] {link.file} {link.rule_id} {link.url} ({link.status})")
        print(f"LINKS CHECKED: {links.checked}, BROKEN: {links.broken}")
        broken = links.broken

    return 1 if logic.failed or broken else 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.ERROR,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    args = parse_args(argv)
    if args.command == "verify-rules":
        return verify_rules(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
