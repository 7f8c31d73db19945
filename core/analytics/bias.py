"""Bias indicator calculator.

Combines case-type, outcome and temporal patterns into named indicators.
With a court baseline each deviation is (subject - baseline); without one
the calculator falls back to internal dispersion, comparing the subject
against its own distribution. Every indicator is emitted, however small its
sample, with a confidence label derived from sample size.

Indicators:
- outcome_rate::<case type>::<outcome>: per-type outcome rate deviation
- temporal_volatility: coefficient of variation of the dominant outcome's
  rate across periods
- case_type_concentration: Herfindahl index of case-type shares
- settlement_preference: settled-category rate
- volume_trend: least-squares slope of per-period volume, relative to mean
- speed_score: mean filing-to-decision days; without a baseline the
  reference is a 180-day benchmark
- risk_tolerance: share of valued case types whose mean case value exceeds
  $100K
"""

import statistics
from typing import Sequence

from core.analytics.case_types import concentration_index
from core.ids.canonical import indicator_name
from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.metrics import (
    CATEGORY_SETTLED,
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MODERATE,
    HIGH_CONFIDENCE_THRESHOLD,
    MIN_SAMPLE_FLOOR,
    MODE_BASELINE,
    MODE_INTERNAL,
    OVERALL_SCOPE,
    BiasIndicator,
    CaseTypePattern,
    OutcomeAnalysis,
    TemporalPeriod,
)

# Neutral settlement rate used when there is no baseline
NEUTRAL_SETTLEMENT_RATE = 0.5

# Benchmark filing-to-decision duration used when there is no baseline
REFERENCE_DURATION_DAYS = 180.0

# A case type whose mean value exceeds this counts as high-value
HIGH_VALUE_THRESHOLD = 100_000.0
NEUTRAL_HIGH_VALUE_SHARE = 0.5


def label_confidence(
    sample_size: int,
    floor: int = MIN_SAMPLE_FLOOR,
    high: int = HIGH_CONFIDENCE_THRESHOLD,
) -> str:
    """Derive a confidence label from a sample size.

    Args:
        sample_size: Records behind a statistic
        floor: Below this the label is "low"
        high: Below this (and at or above floor) the label is "moderate"

    Returns:
        "low", "moderate" or "high"

    Examples:
        >>> label_confidence(19)
        'low'
        >>> label_confidence(20)
        'moderate'
        >>> label_confidence(100)
        'high'
    """
    if floor > high:
        raise ValueError(f"floor ({floor}) must not exceed high threshold ({high})")
    if sample_size < floor:
        return CONFIDENCE_LOW
    if sample_size < high:
        return CONFIDENCE_MODERATE
    return CONFIDENCE_HIGH


def coefficient_of_variation(values: Sequence[float]) -> float | None:
    """Population standard deviation over mean.

    Returns None for fewer than two values or a zero mean.
    """
    if len(values) < 2:
        return None
    mean = statistics.fmean(values)
    if mean == 0:
        return None
    return statistics.pstdev(values) / mean


def relative_trend(values: Sequence[float]) -> float | None:
    """Least-squares slope per period divided by the mean value.

    Returns None for fewer than two values or a zero mean.
    """
    if len(values) < 2:
        return None
    mean = statistics.fmean(values)
    if mean == 0:
        return None
    slope = statistics.linear_regression(range(len(values)), values).slope
    return slope / mean


def _dominant_outcome(overall: OutcomeAnalysis | None) -> str | None:
    if overall is None or not overall.rates:
        return None
    # rates are ordered by count desc, then label
    return next(iter(overall.rates))


def _volatility(periods: Sequence[TemporalPeriod], label: str | None) -> float | None:
    if label is None:
        return None
    populated = [p for p in periods if p.outcome_sample_size > 0]
    return coefficient_of_variation([p.outcome_rates.get(label, 0.0) for p in populated])


def _volume_trend(periods: Sequence[TemporalPeriod]) -> float | None:
    return relative_trend([float(p.record_count) for p in periods])


def high_value_share(patterns: dict[str, CaseTypePattern]) -> float | None:
    """Share of valued case types whose mean case value exceeds $100K.

    Case types without any case value are left out of the denominator.
    Returns None when no case type carries a value.
    """
    valued = [p for p in patterns.values() if p.average_case_value is not None]
    if not valued:
        return None
    high = sum(1 for p in valued if p.average_case_value > HIGH_VALUE_THRESHOLD)
    return high / len(valued)


class _IndicatorBuilder:
    """Assembles BiasIndicator objects with consistent labeling and notes."""

    def __init__(
        self,
        baseline: CourtBaseline | BaselineUnavailable | None,
        floor: int,
        high: int,
    ) -> None:
        self.baseline = baseline if isinstance(baseline, CourtBaseline) else None
        self.floor = floor
        self.high = high
        if isinstance(baseline, BaselineUnavailable):
            self.fallback_note = (
                f"no court baseline ({baseline.reason}); compared against the "
                "subject's own distribution"
            )
        elif baseline is None:
            self.fallback_note = (
                "no court baseline supplied; compared against the subject's own distribution"
            )
        else:
            self.fallback_note = (
                "baseline lacks this statistic; compared against the subject's own distribution"
            )

    def build(
        self,
        name: str,
        subject: float | None,
        reference: float | None,
        sample_size: int,
        use_baseline: bool,
        baseline_sample_size: int = 0,
        note: str = "",
    ) -> BiasIndicator:
        notes = [] if not note else [note]
        if not use_baseline:
            notes.append(self.fallback_note)
            baseline_sample_size = 0
        confidence = label_confidence(sample_size, self.floor, self.high)
        if confidence == CONFIDENCE_LOW:
            notes.append(f"sample size {sample_size} is below {self.floor}; indicative only")
        deviation = None if subject is None or reference is None else subject - reference
        return BiasIndicator(
            name=name,
            deviation=deviation,
            sample_size=sample_size,
            confidence=confidence,
            mode=MODE_BASELINE if use_baseline else MODE_INTERNAL,
            subject_value=subject,
            reference_value=reference,
            baseline_sample_size=baseline_sample_size,
            note="; ".join(notes),
        )


def _outcome_rate_indicators(
    builder: _IndicatorBuilder,
    outcome_analysis: dict[str, OutcomeAnalysis],
) -> list[BiasIndicator]:
    indicators = []
    overall = outcome_analysis.get(OVERALL_SCOPE)
    baseline = builder.baseline

    for case_type, scope in outcome_analysis.items():
        if case_type == OVERALL_SCOPE:
            continue

        peer = baseline.outcome_analysis.get(case_type) if baseline else None
        use_baseline = peer is not None and peer.has_data

        labels = set(scope.rates)
        if use_baseline:
            labels |= set(peer.rates)

        if not labels:
            indicators.append(
                builder.build(
                    name=indicator_name("outcome_rate", case_type),
                    subject=None,
                    reference=None,
                    sample_size=scope.sample_size,
                    use_baseline=use_baseline,
                    note="no known outcomes for this case type",
                )
            )
            continue

        for label in sorted(labels):
            subject = scope.rates.get(label, 0.0) if scope.has_data else None
            if use_baseline:
                reference = peer.rates.get(label, 0.0)
            elif overall is not None and overall.has_data:
                reference = overall.rates.get(label, 0.0)
            else:
                reference = None
            indicators.append(
                builder.build(
                    name=indicator_name("outcome_rate", case_type, label),
                    subject=subject,
                    reference=reference,
                    sample_size=scope.sample_size,
                    use_baseline=use_baseline,
                    baseline_sample_size=peer.sample_size if use_baseline else 0,
                )
            )

    return indicators


def calculate_bias_indicators(
    case_type_patterns: dict[str, CaseTypePattern],
    outcome_analysis: dict[str, OutcomeAnalysis],
    temporal_patterns: Sequence[TemporalPeriod],
    baseline: CourtBaseline | BaselineUnavailable | None = None,
    floor: int = MIN_SAMPLE_FLOOR,
    high: int = HIGH_CONFIDENCE_THRESHOLD,
) -> dict[str, BiasIndicator]:
    """Compute every bias indicator for one decision-maker.

    Args:
        case_type_patterns: Output of analyze_case_types
        outcome_analysis: Output of analyze_outcomes_by_type
        temporal_patterns: Output of analyze_temporal
        baseline: Court baseline, BaselineUnavailable, or None
        floor: Minimum sample size for better than "low" confidence
        high: Minimum sample size for "high" confidence

    Returns:
        Indicator name -> BiasIndicator, outcome-rate indicators first
    """
    builder = _IndicatorBuilder(baseline, floor, high)
    peer = builder.baseline
    overall = outcome_analysis.get(OVERALL_SCOPE)
    overall_sample = overall.sample_size if overall is not None else 0

    indicators = _outcome_rate_indicators(builder, outcome_analysis)

    # Temporal volatility of the dominant outcome
    dominant = _dominant_outcome(overall)
    subject_cv = _volatility(temporal_patterns, dominant)
    peer_cv = _volatility(peer.temporal_patterns, dominant) if peer else None
    use_peer = peer_cv is not None
    indicators.append(
        builder.build(
            name="temporal_volatility",
            subject=subject_cv,
            reference=peer_cv if use_peer else 0.0,
            sample_size=sum(p.outcome_sample_size for p in temporal_patterns),
            use_baseline=use_peer,
            baseline_sample_size=peer.sample_size if use_peer else 0,
            note="" if dominant is None else f"rate of '{dominant}' across periods",
        )
    )

    # Case-type concentration
    subject_hhi = concentration_index(case_type_patterns)
    peer_hhi = concentration_index(dict(peer.case_type_patterns)) if peer else None
    use_peer = peer_hhi is not None
    if use_peer:
        reference = peer_hhi
    elif case_type_patterns:
        reference = 1.0 / len(case_type_patterns)
    else:
        reference = None
    indicators.append(
        builder.build(
            name="case_type_concentration",
            subject=subject_hhi,
            reference=reference,
            sample_size=sum(p.count for p in case_type_patterns.values()),
            use_baseline=use_peer,
            baseline_sample_size=peer.sample_size if use_peer else 0,
        )
    )

    # Settlement preference
    subject_settled = (
        overall.category_rates.get(CATEGORY_SETTLED, 0.0)
        if overall is not None and overall.has_data
        else None
    )
    peer_overall = peer.outcome_analysis.get(OVERALL_SCOPE) if peer else None
    use_peer = peer_overall is not None and peer_overall.has_data
    indicators.append(
        builder.build(
            name="settlement_preference",
            subject=subject_settled,
            reference=(
                peer_overall.category_rates.get(CATEGORY_SETTLED, 0.0)
                if use_peer
                else NEUTRAL_SETTLEMENT_RATE
            ),
            sample_size=overall_sample,
            use_baseline=use_peer,
            baseline_sample_size=peer_overall.sample_size if use_peer else 0,
        )
    )

    # Volume trend
    peer_trend = _volume_trend(peer.temporal_patterns) if peer else None
    use_peer = peer_trend is not None
    indicators.append(
        builder.build(
            name="volume_trend",
            subject=_volume_trend(temporal_patterns),
            reference=peer_trend if use_peer else 0.0,
            sample_size=sum(p.record_count for p in temporal_patterns),
            use_baseline=use_peer,
            baseline_sample_size=peer.sample_size if use_peer else 0,
        )
    )

    # Speed, in days relative to the peer mean or the benchmark
    peer_days = peer_overall.average_duration_days if peer_overall is not None else None
    use_peer = peer_days is not None
    indicators.append(
        builder.build(
            name="speed_score",
            subject=overall.average_duration_days if overall is not None else None,
            reference=peer_days if use_peer else REFERENCE_DURATION_DAYS,
            sample_size=overall.duration_sample_size if overall is not None else 0,
            use_baseline=use_peer,
            baseline_sample_size=peer_overall.duration_sample_size if use_peer else 0,
            note="mean filing-to-decision days",
        )
    )

    # Risk tolerance
    peer_share = high_value_share(dict(peer.case_type_patterns)) if peer else None
    use_peer = peer_share is not None
    indicators.append(
        builder.build(
            name="risk_tolerance",
            subject=high_value_share(case_type_patterns),
            reference=peer_share if use_peer else NEUTRAL_HIGH_VALUE_SHARE,
            sample_size=sum(p.value_sample_size for p in case_type_patterns.values()),
            use_baseline=use_peer,
            baseline_sample_size=(
                sum(p.value_sample_size for p in peer.case_type_patterns.values())
                if use_peer
                else 0
            ),
        )
    )

    return {indicator.name: indicator for indicator in indicators}
