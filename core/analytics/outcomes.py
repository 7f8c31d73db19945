"""Outcome analyzer.

Rates are computed over records with a known outcome; the "unknown"
sentinel is counted separately and never enters a denominator.
"""

from collections import Counter
from typing import Sequence

from core.schemas.case import CaseRecord
from core.schemas.metrics import (
    CATEGORY_DISMISSED,
    CATEGORY_JUDGMENT,
    CATEGORY_OTHER,
    CATEGORY_SETTLED,
    OUTCOME_CATEGORIES,
    OVERALL_SCOPE,
    OutcomeAnalysis,
    ValueBand,
)

# Keyword rules, checked in order
_CATEGORY_KEYWORDS = (
    (CATEGORY_SETTLED, ("settl", "compromise", "agreement")),
    (CATEGORY_DISMISSED, ("dismiss", "withdraw")),
    (CATEGORY_JUDGMENT, ("judgment", "granted", "ruling", "verdict")),
)

# (label, inclusive lower bound, exclusive upper bound)
VALUE_BANDS = (
    ("< $10K", 0.0, 10_000.0),
    ("$10K - $50K", 10_000.0, 50_000.0),
    ("$50K - $250K", 50_000.0, 250_000.0),
    ("$250K+", 250_000.0, float("inf")),
)


def classify_outcome(label: str) -> str:
    """Map a canonical outcome label to a coarse category.

    Examples:
        >>> classify_outcome("settled before trial")
        'settled'
        >>> classify_outcome("motion granted")
        'judgment'
        >>> classify_outcome("denied")
        'other'
    """
    lowered = label.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return CATEGORY_OTHER


def ordered_counts(counter: Counter) -> dict[str, int]:
    """Order counts by descending count, then ascending label."""
    return dict(sorted(counter.items(), key=lambda item: (-item[1], item[0])))


def rate_map(counts: dict[str, int], denominator: int) -> dict[str, float]:
    """Divide each count by the denominator; empty when denominator is 0."""
    if denominator == 0:
        return {}
    return {label: count / denominator for label, count in counts.items()}


def analyze_outcomes(
    records: Sequence[CaseRecord],
    case_type: str | None = None,
) -> OutcomeAnalysis:
    """Compute outcome rates within one scope.

    Args:
        records: Normalized records
        case_type: Restrict to this case type; None means every record

    Returns:
        OutcomeAnalysis (empty rates and sample_size 0 for an empty scope)
    """
    scope = OVERALL_SCOPE if case_type is None else case_type
    in_scope = [r for r in records if case_type is None or r.case_type == case_type]

    known = Counter(r.outcome for r in in_scope if r.has_known_outcome)
    sample_size = sum(known.values())
    counts = ordered_counts(known)

    categories = Counter()
    for label, count in counts.items():
        categories[classify_outcome(label)] += count
    category_counts = {c: categories[c] for c in OUTCOME_CATEGORIES if categories[c]}
    durations = [r.duration_days for r in in_scope if r.duration_days is not None]

    return OutcomeAnalysis(
        scope=scope,
        rates=rate_map(counts, sample_size),
        sample_size=sample_size,
        unknown_count=len(in_scope) - sample_size,
        category_rates=rate_map(category_counts, sample_size),
        average_duration_days=sum(durations) / len(durations) if durations else None,
        duration_sample_size=len(durations),
    )


def analyze_outcomes_by_type(
    records: Sequence[CaseRecord],
    case_types: Sequence[str] | None = None,
) -> dict[str, OutcomeAnalysis]:
    """Compute the overall analysis plus one per case type.

    Args:
        records: Normalized records
        case_types: Case types to report, in display order. Defaults to every
            classified case type in ascending label order.

    Returns:
        Dict with "overall" first, then one entry per case type
    """
    if case_types is None:
        case_types = sorted({r.case_type for r in records if r.is_classified})

    analyses = {OVERALL_SCOPE: analyze_outcomes(records)}
    for case_type in case_types:
        analyses[case_type] = analyze_outcomes(records, case_type=case_type)
    return analyses


def analyze_value_bands(records: Sequence[CaseRecord]) -> tuple[ValueBand, ...]:
    """Settlement rate per case-value band.

    Every band is reported; an empty band has settlement_rate None.
    """
    bands = []
    for label, low, high in VALUE_BANDS:
        in_band = [
            r for r in records if r.case_value is not None and low <= r.case_value < high
        ]
        settled = sum(
            1 for r in in_band if classify_outcome(r.outcome) == CATEGORY_SETTLED
        )
        bands.append(
            ValueBand(
                value_range=label,
                case_count=len(in_band),
                settlement_rate=settled / len(in_band) if in_band else None,
            )
        )
    return tuple(bands)
