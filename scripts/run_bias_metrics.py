#!/usr/bin/env python
"""Compute bias metrics for one judge from a local case table.

Usage:
    python -m scripts.run_bias_metrics --records cases.csv --judge j-101
    python -m scripts.run_bias_metrics --records cases.jsonl --judge j-101 --court c-7 --output out.jsonl
"""

import argparse
import logging
import sys
from pathlib import Path


def main() -> int:
    """Run bias metrics computation."""
    parser = argparse.ArgumentParser(
        description="Compute bias metrics for one judge from a local case table"
    )
    parser.add_argument(
        "--records",
        type=Path,
        required=True,
        help="CSV or JSONL case table with judge_id and court_id columns",
    )
    parser.add_argument(
        "--judge",
        type=str,
        required=True,
        help="judge_id of the decision-maker to analyze",
    )
    parser.add_argument(
        "--court",
        type=str,
        default=None,
        help="court_id for the baseline (default: the judge's most frequent court)",
    )
    parser.add_argument(
        "--granularity",
        choices=["year", "month"],
        default=None,
        help="Temporal bucket size (default: from settings)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSONL file path (default: stdout summary only)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every indicator and enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("Judicial Analytics - Bias Metrics")
    print("=" * 60)
    print(f"Records: {args.records}")
    print(f"Judge: {args.judge}")
    print()

    from service.config import get_settings
    from service.runner.analytics_runner import AnalyticsRunner
    from service.sources.loaders import FrameRecordSource

    settings = get_settings()
    if args.granularity:
        settings = settings.model_copy(update={"period_granularity": args.granularity})

    print("Loading case table...")
    try:
        source = FrameRecordSource.from_path(args.records)
    except (FileNotFoundError, ValueError) as e:
        print(f"  ERROR: Failed to load case table: {e}")
        return 1

    runner = AnalyticsRunner(source, settings)
    metrics = runner.bias_metrics(args.judge, court_id=args.court)

    if not metrics.has_data:
        print()
        print(f"  No decided records for judge {args.judge}")

    print()
    print(f"Records analyzed: {metrics.total_records}")
    print(f"  Unclassified: {metrics.unclassified_records}")
    print(f"  Baseline available: {metrics.baseline_available}")

    print()
    print("Case types:")
    for case_type, pattern in metrics.case_type_patterns.items():
        print(f"  {case_type}: {pattern.count} ({pattern.share_of_total:.1%})")

    print()
    print("Periods:")
    for period in metrics.temporal_patterns:
        print(f"  {period.period_label}: {period.record_count} records")

    from core.reporting.jsonl import summarize_indicators

    summary = summarize_indicators(metrics)
    print()
    print(f"Indicators: {summary['total_indicators']}")
    for label, count in summary["by_confidence"].items():
        print(f"  {label}: {count}")
    if args.verbose:
        for name, indicator in metrics.bias_indicators.items():
            deviation = (
                f"{indicator.deviation:+.3f}" if indicator.deviation is not None else "n/a"
            )
            print(
                f"    {name}: {deviation} "
                f"(n={indicator.sample_size}, {indicator.confidence}, {indicator.mode})"
            )

    if args.output:
        from core.reporting.jsonl import write_metrics

        count = write_metrics([(args.judge, metrics)], args.output)
        print()
        print(f"  Wrote {count} result to {args.output}")

    print()
    print("=" * 60)
    print("Analysis complete!")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
