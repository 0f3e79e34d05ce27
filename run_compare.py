#!/usr/bin/env python
"""Compare an actual JSON file against an expected JSON template from the command line."""

import argparse
import json
import sys
from pathlib import Path

from flowcheck import (
    SmartJsonEngine,
    FlexibleComparator,
    CompareOptions,
    FlowCheckError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare a JSON response against an expected template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_compare.py expected.json actual.json
  python run_compare.py expected.json actual.json -r report.json
  python run_compare.py expected.json actual.json --mode flexible --ignore-order --ignore data.updatedAt
        """
    )

    parser.add_argument("expected", help="Path to expected JSON (may contain ${...} directives)")
    parser.add_argument("actual", help="Path to actual JSON")
    parser.add_argument(
        "-m", "--mode",
        choices=["directive", "flexible"],
        default="directive",
        help="Comparison engine (default: directive)"
    )
    parser.add_argument("-r", "--report", help="Path to output JSON report")
    parser.add_argument(
        "-i", "--ignore",
        action="append",
        default=[],
        metavar="PATH",
        help="Field path to ignore (flexible mode, repeatable)"
    )
    parser.add_argument("--ignore-order", action="store_true", help="Ignore array order (flexible mode)")
    parser.add_argument("--allow-extra", action="store_true", help="Allow extra actual fields (flexible mode)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate paths exist
    for label, path in (("Expected", args.expected), ("Actual", args.actual)):
        if not Path(path).exists():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            return 2

    expected = Path(args.expected).read_text(encoding='utf-8')
    actual = Path(args.actual).read_text(encoding='utf-8')

    if args.mode == "flexible":
        options = CompareOptions(
            ignored_paths=set(args.ignore),
            ignore_array_order=args.ignore_order,
            allow_extra_fields=args.allow_extra
        )
        comparator = FlexibleComparator(options)
    else:
        comparator = SmartJsonEngine()

    try:
        result = comparator.compare(expected, actual)
    except FlowCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        if result.is_match:
            print("MATCH")
        else:
            print(f"MISMATCH ({len(result.mismatches)} paths)")
            print(result.message)

    # Save report
    if args.report:
        with open(args.report, 'w') as f:
            json.dump(result.to_dict(), indent=2, fp=f, ensure_ascii=False)
        if not args.quiet:
            print(f"\nReport saved to: {args.report}")

    # Return exit code
    return 0 if result.is_match else 1


if __name__ == "__main__":
    sys.exit(main())
