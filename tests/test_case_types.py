"""Tests for the case-type pattern analyzer.

Exit Criteria:
- Shares across case types sum to 1.0 over classified records
- Unclassified records are excluded from patterns and share denominators
- Sentinel-only input yields an empty pattern set
- Ordering is count desc, then case type asc
"""

import math
from datetime import date

import pytest

from core.analytics.case_types import analyze_case_types, concentration_index
from core.schemas.case import CaseRecord


@pytest.fixture
def mixed_records() -> list[CaseRecord]:
    """Seven records: 3 civil, 2 criminal, 1 family, 1 unclassified."""
    return [
        CaseRecord(case_type="civil", outcome="granted", case_value=1000.0),
        CaseRecord(case_type="civil", outcome="denied", case_value=3000.0),
        CaseRecord(case_type="civil", outcome="granted"),
        CaseRecord(case_type="criminal", outcome="dismissed"),
        CaseRecord(case_type="criminal", outcome="dismissed"),
        CaseRecord(case_type="family", outcome="settled"),
        CaseRecord(outcome="granted"),
    ]


class TestAnalyzeCaseTypes:
    """Tests for analyze_case_types."""

    def test_counts(self, mixed_records: list[CaseRecord]) -> None:
        patterns = analyze_case_types(mixed_records)
        assert {t: p.count for t, p in patterns.items()} == {
            "civil": 3,
            "criminal": 2,
            "family": 1,
        }

    def test_shares_sum_to_one(self, mixed_records: list[CaseRecord]) -> None:
        patterns = analyze_case_types(mixed_records)
        assert math.isclose(sum(p.share_of_total for p in patterns.values()), 1.0, abs_tol=1e-9)

    def test_unclassified_excluded_from_denominator(
        self, mixed_records: list[CaseRecord]
    ) -> None:
        """Six classified records, so civil is 3/6 not 3/7."""
        patterns = analyze_case_types(mixed_records)
        assert "unclassified" not in patterns
        assert patterns["civil"].share_of_total == pytest.approx(0.5)

    def test_ordering(self) -> None:
        """Descending count, ties broken by ascending label."""
        records = [
            CaseRecord(case_type="zoning"),
            CaseRecord(case_type="appeal"),
            CaseRecord(case_type="tax"),
            CaseRecord(case_type="tax"),
        ]
        assert list(analyze_case_types(records)) == ["tax", "appeal", "zoning"]

    def test_outcome_breakdown(self, mixed_records: list[CaseRecord]) -> None:
        civil = analyze_case_types(mixed_records)["civil"]
        assert civil.outcome_breakdown == {"granted": 2, "denied": 1}
        assert list(civil.outcome_breakdown) == ["granted", "denied"]

    def test_average_case_value(self, mixed_records: list[CaseRecord]) -> None:
        patterns = analyze_case_types(mixed_records)
        assert patterns["civil"].average_case_value == pytest.approx(2000.0)
        assert patterns["civil"].value_sample_size == 2
        assert patterns["criminal"].average_case_value is None
        assert patterns["criminal"].value_sample_size == 0

    def test_empty(self) -> None:
        assert analyze_case_types([]) == {}

    def test_sentinel_only(self) -> None:
        """Only unclassified records: empty result, no division by zero."""
        assert analyze_case_types([CaseRecord(), CaseRecord()]) == {}

    def test_undated_records_still_counted(self) -> None:
        """Raw totals include records without a decision date."""
        records = [
            CaseRecord(case_type="civil", decision_date=date(2024, 1, 1)),
            CaseRecord(case_type="civil"),
        ]
        assert analyze_case_types(records)["civil"].count == 2


class TestConcentrationIndex:
    """Tests for concentration_index."""

    def test_single_type(self) -> None:
        patterns = analyze_case_types([CaseRecord(case_type="civil")] * 4)
        assert concentration_index(patterns) == pytest.approx(1.0)

    def test_uniform(self) -> None:
        records = [CaseRecord(case_type=t) for t in ["a", "b", "c", "d"]]
        assert concentration_index(analyze_case_types(records)) == pytest.approx(0.25)

    def test_empty(self) -> None:
        assert concentration_index({}) is None
