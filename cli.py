#!/usr/bin/env python3
"""Frontmatter Lint: check and reorder frontmatter in articles and books."""

import argparse
import logging
import os
import sys

from config import DEFAULT_PRESET, PRESETS, default_config_path, load_rule_set
from services.runner import discover_files, run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frontmatter-lint",
        description="Validate frontmatter properties and their order.",
    )
    parser.add_argument(
        "--fix", action="store_true", help="Rewrite files whose properties are out of order"
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=DEFAULT_PRESET,
        help=f"Rule preset (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--config", default=None, help="JSON override file (default: <root>/<preset>-lint.config.json)"
    )
    parser.add_argument("--root", default=".", help="Repository root to lint (default: .)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """Entry point for the `frontmatter-lint` CLI command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else logging.INFO)

    config_path = args.config or default_config_path(args.preset, args.root)
    rules, err = load_rule_set(args.preset, config_path)
    if err:
        print(f"  {err} (using defaults)", file=sys.stderr)

    print(f"Running frontmatter lint ({args.preset}) in {os.path.abspath(args.root)}...")

    files = discover_files(args.root, rules)
    if not files:
        where = f'"{rules.content_pattern}"'
        if rules.books_dir:
            where += f' or "{rules.books_dir}/"'
        print(f"Warning: no files matched {where}.")

    report = run(args.root, rules, fix=args.fix, files=files)
    print(report.render(rules.canonical_order, fix=args.fix))

    # Fix mode always succeeds, even with unfixable problems left.
    if report.has_errors and not args.fix:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
