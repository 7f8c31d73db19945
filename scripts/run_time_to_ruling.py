#!/usr/bin/env python
"""Compute the time-to-ruling distribution for one judge.

Usage:
    python -m scripts.run_time_to_ruling --records cases.csv --judge j-101
    python -m scripts.run_time_to_ruling --records cases.csv --judge j-101 --motion "summary judgment" --format csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path


def main() -> int:
    """Run time-to-ruling computation."""
    parser = argparse.ArgumentParser(
        description="Compute the time-to-ruling distribution for one judge"
    )
    parser.add_argument(
        "--records",
        type=Path,
        required=True,
        help="CSV or JSONL case table with judge_id and court_id columns",
    )
    parser.add_argument("--judge", type=str, required=True, help="judge_id to analyze")
    parser.add_argument(
        "--case-type",
        type=str,
        default=None,
        help="Only case types containing this text",
    )
    parser.add_argument(
        "--motion",
        type=str,
        default=None,
        help="Only records whose outcome or summary contains this text",
    )
    parser.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="json: full summary; csv: day,probability survival curve (default: json)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    from core.reporting.jsonl import time_to_ruling_to_dict
    from core.reporting.survival_csv import survival_curve_to_csv
    from service.runner.analytics_runner import AnalyticsRunner
    from service.sources.loaders import FrameRecordSource

    try:
        source = FrameRecordSource.from_path(args.records)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: Failed to load case table: {e}", file=sys.stderr)
        return 1

    summary = AnalyticsRunner(source).time_to_ruling(
        args.judge, case_type=args.case_type, outcome=args.motion
    )

    if args.format == "csv":
        sys.stdout.write(survival_curve_to_csv(summary))
    else:
        payload = {"judge_id": args.judge, **time_to_ruling_to_dict(summary)}
        print(json.dumps(payload, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
