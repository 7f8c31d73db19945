"""Temporal pattern analyzer.

The full period range is generated before aggregation so that quiet
periods appear as zero-count buckets rather than gaps.
"""

from collections import Counter, defaultdict
from datetime import date
from typing import Sequence

from core.analytics.outcomes import ordered_counts, rate_map
from core.ids.canonical import (
    GRANULARITY_YEAR,
    iter_period_keys,
    period_key,
    period_label,
    validate_granularity,
)
from core.schemas.case import CaseRecord
from core.schemas.metrics import TemporalPeriod


def analyze_temporal(
    records: Sequence[CaseRecord],
    granularity: str = GRANULARITY_YEAR,
) -> tuple[TemporalPeriod, ...]:
    """Bucket records by decision date.

    Records without a decision date are skipped. The output spans from the
    earliest to the latest decision date inclusive.

    Args:
        records: Normalized records
        granularity: "year" or "month"

    Returns:
        Chronological, gap-free tuple of TemporalPeriod (empty if no dated records)
    """
    validate_granularity(granularity)
    dated = [r for r in records if r.decision_date is not None]
    if not dated:
        return ()

    buckets: dict[tuple[int, int], list[CaseRecord]] = defaultdict(list)
    for record in dated:
        buckets[period_key(record.decision_date, granularity)].append(record)

    periods = []
    for key in iter_period_keys(min(buckets), max(buckets), granularity):
        in_period = buckets.get(key, [])
        known = Counter(r.outcome for r in in_period if r.has_known_outcome)
        outcome_sample = sum(known.values())
        durations = [r.duration_days for r in in_period if r.duration_days is not None]

        periods.append(
            TemporalPeriod(
                period_label=period_label(key, granularity),
                period_start=date(key[0], key[1], 1),
                record_count=len(in_period),
                outcome_rates=rate_map(ordered_counts(known), outcome_sample),
                outcome_sample_size=outcome_sample,
                average_duration_days=sum(durations) / len(durations) if durations else None,
                duration_sample_size=len(durations),
            )
        )

    return tuple(periods)
