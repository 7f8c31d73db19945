"""Bias metrics entry point.

Runs the case-type, outcome and temporal analyzers over one decision-maker's
records and feeds them, with an optional court baseline, to the bias
indicator calculator. Pure: no I/O, no shared state.
"""

from typing import Sequence

from core.analytics.bias import calculate_bias_indicators
from core.analytics.case_types import analyze_case_types
from core.analytics.outcomes import analyze_outcomes_by_type, analyze_value_bands
from core.analytics.temporal import analyze_temporal
from core.ids.canonical import GRANULARITY_YEAR
from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.case import CaseRecord
from core.schemas.metrics import HIGH_CONFIDENCE_THRESHOLD, MIN_SAMPLE_FLOOR, BiasMetrics


def compute_bias_metrics(
    records: Sequence[CaseRecord],
    baseline: CourtBaseline | BaselineUnavailable | None = None,
    granularity: str = GRANULARITY_YEAR,
    floor: int = MIN_SAMPLE_FLOOR,
    high: int = HIGH_CONFIDENCE_THRESHOLD,
) -> BiasMetrics:
    """Compute every metric for one decision-maker.

    Args:
        records: The decision-maker's normalized records
        baseline: Court baseline, BaselineUnavailable, or None
        granularity: Temporal granularity ("year" or "month")
        floor: Minimum sample size for better than "low" confidence
        high: Minimum sample size for "high" confidence

    Returns:
        BiasMetrics (zero-sample results for an empty record set)
    """
    case_type_patterns = analyze_case_types(records)
    # outcome scopes follow the case-type display order
    outcome_analysis = analyze_outcomes_by_type(records, case_types=list(case_type_patterns))
    temporal_patterns = analyze_temporal(records, granularity)

    bias_indicators = calculate_bias_indicators(
        case_type_patterns,
        outcome_analysis,
        temporal_patterns,
        baseline=baseline,
        floor=floor,
        high=high,
    )

    return BiasMetrics(
        case_type_patterns=case_type_patterns,
        outcome_analysis=outcome_analysis,
        temporal_patterns=temporal_patterns,
        bias_indicators=bias_indicators,
        case_value_trends=analyze_value_bands(records),
        total_records=len(records),
        unclassified_records=sum(1 for r in records if not r.is_classified),
        undated_records=sum(1 for r in records if r.decision_date is None),
        baseline_available=isinstance(baseline, CourtBaseline),
    )
