"""Time-to-ruling estimator.

Empirical, order-statistic summary of filing-to-decision durations:
- durations floored at 0 days
- median: mean of the middle pair on even counts
- interval bounds read off the sorted durations at floor(n * p)
- survival curve: (n - i) / n at every stride-th sorted index

No censoring model is applied; undecided matters are simply absent.
"""

import math
from typing import Sequence

from core.analytics.bias import label_confidence
from core.schemas.case import CaseRecord
from core.schemas.durations import (
    INTERVAL_HIGH_PERCENTILE,
    INTERVAL_LOW_PERCENTILE,
    SURVIVAL_CURVE_POINTS,
    SurvivalPoint,
    TimeToRulingSummary,
)
from core.schemas.metrics import HIGH_CONFIDENCE_THRESHOLD, MIN_SAMPLE_FLOOR


def _matches(text: str | None, needle: str) -> bool:
    return text is not None and needle in text.lower()


def filter_records(
    records: Sequence[CaseRecord],
    case_type: str | None = None,
    outcome: str | None = None,
) -> list[CaseRecord]:
    """Apply case-insensitive substring filters.

    Sentinel labels stand for missing values and never match a needle.

    Args:
        records: Normalized records
        case_type: Substring of the case type
        outcome: Substring of the outcome label or the summary text

    Returns:
        Records passing both filters
    """
    case_needle = case_type.strip().lower() if case_type else None
    outcome_needle = outcome.strip().lower() if outcome else None

    selected = []
    for record in records:
        if case_needle and not (record.is_classified and case_needle in record.case_type):
            continue
        if outcome_needle and not (
            (record.has_known_outcome and _matches(record.outcome, outcome_needle))
            or _matches(record.summary, outcome_needle)
        ):
            continue
        selected.append(record)
    return selected


def median(values: Sequence[float]) -> float | None:
    """Median of an ascending-sorted sequence (None when empty).

    Examples:
        >>> median([10, 20])
        15.0
        >>> median([1, 2, 9])
        2.0
    """
    n = len(values)
    if n == 0:
        return None
    mid = n // 2
    if n % 2:
        return float(values[mid])
    return (values[mid - 1] + values[mid]) / 2


def order_statistic(values: Sequence[int], percentile: float) -> int | None:
    """Read the value at index floor(n * percentile) of a sorted sequence."""
    if not 0.0 <= percentile < 1.0:
        raise ValueError(f"percentile must be in [0, 1), got {percentile}")
    if not values:
        return None
    return values[math.floor(len(values) * percentile)]


def survival_curve(
    durations: Sequence[int], target_points: int = SURVIVAL_CURVE_POINTS
) -> tuple[SurvivalPoint, ...]:
    """Downsampled empirical survival curve of sorted durations.

    Args:
        durations: Durations sorted ascending
        target_points: Approximate number of points to emit

    Returns:
        Points at every stride-th index, stride = max(1, n // target_points)
    """
    if target_points < 1:
        raise ValueError(f"target_points must be positive, got {target_points}")
    n = len(durations)
    stride = max(1, n // target_points)
    return tuple(
        SurvivalPoint(elapsed_days=durations[i], survival_probability=(n - i) / n)
        for i in range(0, n, stride)
    )


def interval_label(low: float, high: float) -> str:
    """Describe an order-statistic interval.

    Examples:
        >>> interval_label(0.1, 0.9)
        '80% range'
    """
    return f"{round((high - low) * 100)}% range"


def compute_time_to_ruling(
    records: Sequence[CaseRecord],
    case_type: str | None = None,
    outcome: str | None = None,
    target_points: int = SURVIVAL_CURVE_POINTS,
    low_percentile: float = INTERVAL_LOW_PERCENTILE,
    high_percentile: float = INTERVAL_HIGH_PERCENTILE,
    floor: int = MIN_SAMPLE_FLOOR,
    high: int = HIGH_CONFIDENCE_THRESHOLD,
) -> TimeToRulingSummary:
    """Summarize filing-to-decision durations.

    Only records with both a filing and a decision date contribute.

    Args:
        records: Normalized records
        case_type: Optional case-type substring filter
        outcome: Optional outcome/summary substring filter
        target_points: Survival curve size bound
        low_percentile: Lower interval order statistic
        high_percentile: Upper interval order statistic
        floor: Minimum sample size for better than "low" confidence
        high: Minimum sample size for "high" confidence

    Returns:
        TimeToRulingSummary (None scalars and empty curve when no durations)
    """
    if low_percentile > high_percentile:
        raise ValueError(
            f"low_percentile ({low_percentile}) must not exceed high_percentile ({high_percentile})"
        )

    durations = sorted(
        r.duration_days
        for r in filter_records(records, case_type=case_type, outcome=outcome)
        if r.duration_days is not None
    )
    n = len(durations)

    return TimeToRulingSummary(
        sample_size=n,
        min_days=durations[0] if n else None,
        max_days=durations[-1] if n else None,
        median_days=median(durations),
        interval_low=order_statistic(durations, low_percentile),
        interval_high=order_statistic(durations, high_percentile),
        interval_label=interval_label(low_percentile, high_percentile),
        confidence=label_confidence(n, floor, high),
        survival_curve=survival_curve(durations, target_points),
    )
