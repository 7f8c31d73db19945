"""JSON output for judicial analytics results.

Converts BiasMetrics, CourtBaseline and TimeToRulingSummary into plain,
JSON-serializable dicts and writes them as JSONL for downstream analysis.
"""

import json
from collections import Counter
from pathlib import Path
from typing import IO, Any, Sequence

from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.durations import TimeToRulingSummary
from core.schemas.metrics import (
    VALID_CONFIDENCE,
    VALID_MODES,
    BiasIndicator,
    BiasMetrics,
    CaseTypePattern,
    OutcomeAnalysis,
    TemporalPeriod,
    ValueBand,
)


def case_type_pattern_to_dict(pattern: CaseTypePattern) -> dict:
    """Convert CaseTypePattern to serializable dict."""
    return {
        "case_type": pattern.case_type,
        "count": pattern.count,
        "share_of_total": pattern.share_of_total,
        "outcome_breakdown": dict(pattern.outcome_breakdown),
        "average_case_value": pattern.average_case_value,
        "value_sample_size": pattern.value_sample_size,
    }


def outcome_analysis_to_dict(analysis: OutcomeAnalysis) -> dict:
    """Convert OutcomeAnalysis to serializable dict."""
    return {
        "scope": analysis.scope,
        "rates": dict(analysis.rates),
        "sample_size": analysis.sample_size,
        "unknown_count": analysis.unknown_count,
        "category_rates": dict(analysis.category_rates),
        "average_duration_days": analysis.average_duration_days,
        "duration_sample_size": analysis.duration_sample_size,
    }


def temporal_period_to_dict(period: TemporalPeriod) -> dict:
    """Convert TemporalPeriod to serializable dict."""
    return {
        "period_label": period.period_label,
        "period_start": period.period_start.isoformat(),
        "record_count": period.record_count,
        "outcome_rates": dict(period.outcome_rates),
        "outcome_sample_size": period.outcome_sample_size,
        "average_duration_days": period.average_duration_days,
        "duration_sample_size": period.duration_sample_size,
    }


def bias_indicator_to_dict(indicator: BiasIndicator) -> dict:
    """Convert BiasIndicator to serializable dict."""
    return {
        "name": indicator.name,
        "deviation": indicator.deviation,
        "sample_size": indicator.sample_size,
        "confidence": indicator.confidence,
        "mode": indicator.mode,
        "subject_value": indicator.subject_value,
        "reference_value": indicator.reference_value,
        "baseline_sample_size": indicator.baseline_sample_size,
        "note": indicator.note,
    }


def value_band_to_dict(band: ValueBand) -> dict:
    """Convert ValueBand to serializable dict."""
    return {
        "value_range": band.value_range,
        "case_count": band.case_count,
        "settlement_rate": band.settlement_rate,
    }


def bias_metrics_to_dict(metrics: BiasMetrics) -> dict:
    """Convert BiasMetrics to serializable dict.

    Args:
        metrics: BiasMetrics to convert

    Returns:
        Dict suitable for JSON serialization, preserving every ordering
    """
    return {
        "case_type_patterns": {
            case_type: case_type_pattern_to_dict(p)
            for case_type, p in metrics.case_type_patterns.items()
        },
        "outcome_analysis": {
            scope: outcome_analysis_to_dict(a) for scope, a in metrics.outcome_analysis.items()
        },
        "temporal_patterns": [temporal_period_to_dict(p) for p in metrics.temporal_patterns],
        "bias_indicators": {
            name: bias_indicator_to_dict(i) for name, i in metrics.bias_indicators.items()
        },
        "case_value_trends": [value_band_to_dict(b) for b in metrics.case_value_trends],
        "total_records": metrics.total_records,
        "unclassified_records": metrics.unclassified_records,
        "undated_records": metrics.undated_records,
        "baseline_available": metrics.baseline_available,
    }


def baseline_to_dict(baseline: CourtBaseline | BaselineUnavailable) -> dict:
    """Convert a baseline result to serializable dict."""
    if isinstance(baseline, BaselineUnavailable):
        return {"court_id": baseline.court_id, "available": False, "reason": baseline.reason}

    return {
        "court_id": baseline.court_id,
        "available": True,
        "sample_size": baseline.sample_size,
        "case_type_patterns": {
            case_type: case_type_pattern_to_dict(p)
            for case_type, p in baseline.case_type_patterns.items()
        },
        "outcome_analysis": {
            scope: outcome_analysis_to_dict(a) for scope, a in baseline.outcome_analysis.items()
        },
        "temporal_patterns": [temporal_period_to_dict(p) for p in baseline.temporal_patterns],
    }


def time_to_ruling_to_dict(summary: TimeToRulingSummary) -> dict:
    """Convert TimeToRulingSummary to serializable dict."""
    return {
        "sample_size": summary.sample_size,
        "min_days": summary.min_days,
        "max_days": summary.max_days,
        "median_days": summary.median_days,
        "interval_low": summary.interval_low,
        "interval_high": summary.interval_high,
        "interval_label": summary.interval_label,
        "confidence": summary.confidence,
        "survival_curve": [
            {"elapsed_days": p.elapsed_days, "survival_probability": p.survival_probability}
            for p in summary.survival_curve
        ],
    }


def write_record(data: dict[str, Any], file: IO[str]) -> None:
    """Write a single dict as a JSONL line.

    Args:
        data: Serializable dict
        file: Open file handle to write to
    """
    file.write(json.dumps(data, ensure_ascii=False) + "\n")


def write_metrics(
    results: Sequence[tuple[str, BiasMetrics]],
    output_path: Path | str,
) -> int:
    """Write (subject_id, BiasMetrics) pairs to a JSONL file.

    Args:
        results: Sequence of (subject_id, BiasMetrics)
        output_path: Path to output JSONL file

    Returns:
        Number of lines written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(output_path, "w", encoding="utf-8") as f:
        for subject_id, metrics in results:
            write_record({"subject_id": subject_id, **bias_metrics_to_dict(metrics)}, f)
            count += 1

    return count


def read_metrics(input_path: Path | str) -> list[dict]:
    """Read metrics lines from a JSONL file.

    Args:
        input_path: Path to input JSONL file

    Returns:
        List of dicts (not hydrated to BiasMetrics objects)
    """
    input_path = Path(input_path)
    results = []

    with open(input_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                results.append(json.loads(line))

    return results


def summarize_indicators(metrics: BiasMetrics) -> dict:
    """Count indicators by confidence label and mode.

    Args:
        metrics: BiasMetrics to summarize

    Returns:
        Dict with per-label and per-mode counts (every label/mode present)
    """
    by_confidence = Counter(i.confidence for i in metrics.bias_indicators.values())
    by_mode = Counter(i.mode for i in metrics.bias_indicators.values())
    undetermined = sum(1 for i in metrics.bias_indicators.values() if i.deviation is None)

    return {
        "total_indicators": len(metrics.bias_indicators),
        "by_confidence": {label: by_confidence[label] for label in sorted(VALID_CONFIDENCE)},
        "by_mode": {mode: by_mode[mode] for mode in sorted(VALID_MODES)},
        "undetermined": undetermined,
    }
