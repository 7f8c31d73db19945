"""Case-type pattern analyzer."""

from collections import Counter, defaultdict
from typing import Sequence

from core.analytics.outcomes import ordered_counts
from core.schemas.case import CaseRecord
from core.schemas.metrics import CaseTypePattern


def analyze_case_types(records: Sequence[CaseRecord]) -> dict[str, CaseTypePattern]:
    """Group records by case type in a single pass.

    Shares are taken against classified records only, so unclassified records
    neither appear as a pattern nor dilute the shares. An input with no
    classified record yields an empty dict.

    Args:
        records: Normalized records

    Returns:
        Case type -> CaseTypePattern, ordered by count desc then case type asc
    """
    counts: Counter = Counter()
    outcomes: dict[str, Counter] = defaultdict(Counter)
    values: dict[str, list[float]] = defaultdict(list)

    for record in records:
        if not record.is_classified:
            continue
        counts[record.case_type] += 1
        outcomes[record.case_type][record.outcome] += 1
        if record.case_value is not None:
            values[record.case_type].append(record.case_value)

    classified_total = sum(counts.values())
    patterns: dict[str, CaseTypePattern] = {}

    for case_type, count in ordered_counts(counts).items():
        type_values = values[case_type]
        patterns[case_type] = CaseTypePattern(
            case_type=case_type,
            count=count,
            share_of_total=count / classified_total,
            outcome_breakdown=ordered_counts(outcomes[case_type]),
            average_case_value=sum(type_values) / len(type_values) if type_values else None,
            value_sample_size=len(type_values),
        )

    return patterns


def concentration_index(patterns: dict[str, CaseTypePattern]) -> float | None:
    """Herfindahl index of case-type shares (1.0 = a single case type).

    Returns None when there are no patterns.
    """
    if not patterns:
        return None
    return sum(p.share_of_total**2 for p in patterns.values())
