"""Court baseline provider.

Runs the same aggregation as the subject analyzers over the union of every
peer's records. An empty peer set yields BaselineUnavailable, never a
zero-filled baseline.
"""

from itertools import chain
from typing import Iterable, Sequence

from core.analytics.case_types import analyze_case_types
from core.analytics.outcomes import analyze_outcomes_by_type
from core.analytics.temporal import analyze_temporal
from core.ids.canonical import GRANULARITY_YEAR
from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.case import CaseRecord


def union_records(groups: Iterable[Sequence[CaseRecord]]) -> tuple[CaseRecord, ...]:
    """Concatenate per-decision-maker record sets into one peer set."""
    return tuple(chain.from_iterable(groups))


def compute_court_baseline(
    court_id: str | None,
    records: Sequence[CaseRecord],
    granularity: str = GRANULARITY_YEAR,
) -> CourtBaseline | BaselineUnavailable:
    """Aggregate peer statistics for one court.

    Args:
        court_id: Court identifier (None when the subject has no court)
        records: Every peer record in the court
        granularity: Temporal granularity, matching the subject's

    Returns:
        CourtBaseline, or BaselineUnavailable when there is nothing to aggregate
    """
    if court_id is None:
        return BaselineUnavailable(court_id=None, reason="subject has no court assignment")
    if not records:
        return BaselineUnavailable(court_id=court_id, reason="no peer records for court")

    patterns = analyze_case_types(records)
    return CourtBaseline(
        court_id=court_id,
        case_type_patterns=patterns,
        outcome_analysis=analyze_outcomes_by_type(records, case_types=list(patterns)),
        temporal_patterns=analyze_temporal(records, granularity),
        sample_size=len(records),
    )
