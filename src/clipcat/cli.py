# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""clipcat CLI: classify, validate, content-type commands.

Usage:
    clipcat classify [--url URL] [--label NAME[:CONF]]... [--json]
    clipcat validate [--label-rules PATH] [--domain-rules PATH]
    clipcat content-type URL
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from clipcat import LabelObservation
from clipcat.errors import ClipcatError
from clipcat.logging_config import DEFAULT_LEVEL, LOG_LEVELS
from clipcat.logging_config import configure as configure_logging

logger = logging.getLogger(__name__)


def _require_cli_deps() -> None:
    """Check that CLI optional dependencies are installed."""
    try:
        from tabulate import tabulate  # noqa: F401
    except ImportError as e:
        print(
            f"Missing CLI dependency: {e.name}\nInstall with: pip install clipcat[cli]",
            file=sys.stderr,
        )
        sys.exit(1)


def parse_label_arg(value: str) -> LabelObservation:
    """``NAME[:CONF]`` -> observation; a bare name counts as fully confident."""
    name, sep, conf = value.rpartition(":")
    if not sep:
        name, conf = value, "1.0"
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"empty label name in {value!r}")
    try:
        confidence = float(conf)
    except ValueError:
        raise argparse.ArgumentTypeError(f"confidence must be a number, got {conf!r}") from None
    return LabelObservation(name, confidence)


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify one item and print its category."""
    from clipcat.classifier import explain

    result = explain(args.url, args.labels)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(result.category)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Check rule tables for overlaps, dead entries and empty categories."""
    _require_cli_deps()
    from tabulate import tabulate

    from clipcat.rules import DOMAIN_RULES_PATH, LABEL_RULES_PATH, load_rule_tables, validate_rules

    label_path = Path(args.label_rules) if args.label_rules else LABEL_RULES_PATH
    domain_path = Path(args.domain_rules) if args.domain_rules else DOMAIN_RULES_PATH
    tables = load_rule_tables(label_path, domain_path)
    issues = validate_rules(tables)

    if issues:
        rows = [
            [str(i.kind), i.entry, str(i.category), str(i.other) if i.other else "", i.detail] for i in issues
        ]
        print(tabulate(rows, headers=["Issue", "Entry", "Category", "Conflicts with", "Detail"], tablefmt="simple"))
        print(f"\n{len(issues)} issue(s) found", file=sys.stderr)
        return 1

    print(
        f"{tables.keyword_count()} label keywords, {tables.domain_count()} domains, "
        f"{len(tables.generic_labels)} generic labels"
    )
    print("OK")
    return 0


def cmd_content_type(args: argparse.Namespace) -> int:
    """Print the content type of a URL."""
    from clipcat.content_type import detect_content_type

    print(detect_content_type(args.url))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Content category classifier",
        prog="clipcat",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LEVEL,
        choices=LOG_LEVELS,
        help="Log level (default: WARNING; DEBUG traces every decision)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _classify_epilog = """\
examples:
  %(prog)s --url https://www.ikea.com/fr/fr/p/billy   URL rule decides
  %(prog)s --label golden_retriever:0.91              High-confidence label
  %(prog)s --label dress:0.4 --label table:0.35       Weighted vote
  %(prog)s --label dog --json                         Decision details as JSON
"""
    p_classify = subparsers.add_parser(
        "classify",
        help="Classify one item from its URL and/or image labels",
        epilog=_classify_epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_classify.add_argument("--url", type=str, metavar="URL", help="Source URL of the clipped item")
    p_classify.add_argument(
        "--label",
        dest="labels",
        type=parse_label_arg,
        action="append",
        default=[],
        metavar="NAME[:CONF]",
        help="Vision label with optional confidence (repeatable; default confidence 1.0)",
    )
    p_classify.add_argument("--json", action="store_true", help="Print the full decision as JSON")

    p_validate = subparsers.add_parser("validate", help="Validate the rule tables")
    p_validate.add_argument("--label-rules", type=str, metavar="PATH", help="Label rules YAML (default: packaged)")
    p_validate.add_argument("--domain-rules", type=str, metavar="PATH", help="Domain rules YAML (default: packaged)")

    p_content = subparsers.add_parser("content-type", help="Detect the content type of a URL")
    p_content.add_argument("url", type=str, metavar="URL")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(json_output=args.json_logs, level=args.log_level)

    commands = {
        "classify": cmd_classify,
        "validate": cmd_validate,
        "content-type": cmd_content_type,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except ClipcatError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
