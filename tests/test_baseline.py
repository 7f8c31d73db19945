"""Tests for the court baseline provider.

Exit Criteria:
- An empty peer set yields BaselineUnavailable, never a zero-filled baseline
- A subject without a court yields BaselineUnavailable
- Baseline statistics match the subject analyzers run over the union
"""

from datetime import date

import pytest

from core.analytics.baseline import compute_court_baseline, union_records
from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.case import CaseRecord


@pytest.fixture
def peer_groups() -> list[list[CaseRecord]]:
    """Two decision-makers in the same court."""
    return [
        [
            CaseRecord(case_type="civil", outcome="granted", decision_date=date(2023, 1, 5)),
            CaseRecord(case_type="civil", outcome="denied", decision_date=date(2023, 4, 5)),
        ],
        [
            CaseRecord(case_type="criminal", outcome="dismissed", decision_date=date(2021, 2, 1)),
        ],
    ]


class TestUnionRecords:
    """Tests for union_records."""

    def test_concatenates_in_order(self, peer_groups: list[list[CaseRecord]]) -> None:
        union = union_records(peer_groups)
        assert len(union) == 3
        assert union[-1].case_type == "criminal"

    def test_empty(self) -> None:
        assert union_records([]) == ()


class TestComputeCourtBaseline:
    """Tests for compute_court_baseline."""

    def test_no_peers(self) -> None:
        baseline = compute_court_baseline("c1", [])
        assert isinstance(baseline, BaselineUnavailable)
        assert baseline.court_id == "c1"
        assert baseline.reason == "no peer records for court"
        assert baseline.available is False

    def test_no_court(self, peer_groups: list[list[CaseRecord]]) -> None:
        baseline = compute_court_baseline(None, union_records(peer_groups))
        assert isinstance(baseline, BaselineUnavailable)
        assert baseline.reason == "subject has no court assignment"

    def test_aggregates_union(self, peer_groups: list[list[CaseRecord]]) -> None:
        baseline = compute_court_baseline("c1", union_records(peer_groups))
        assert isinstance(baseline, CourtBaseline)
        assert baseline.sample_size == 3
        assert baseline.case_type_patterns["civil"].count == 2
        assert baseline.case_type_patterns["civil"].share_of_total == pytest.approx(2 / 3)
        assert list(baseline.outcome_analysis) == ["overall", "civil", "criminal"]
        assert baseline.outcome_analysis["civil"].rates["granted"] == pytest.approx(0.5)

    def test_temporal_range(self, peer_groups: list[list[CaseRecord]]) -> None:
        baseline = compute_court_baseline("c1", union_records(peer_groups))
        assert [p.period_label for p in baseline.temporal_patterns] == ["2021", "2022", "2023"]

    def test_month_granularity(self, peer_groups: list[list[CaseRecord]]) -> None:
        baseline = compute_court_baseline("c1", peer_groups[0], granularity="month")
        assert [p.period_label for p in baseline.temporal_patterns] == [
            "2023-01",
            "2023-02",
            "2023-03",
            "2023-04",
        ]

    def test_unclassified_only_peers_still_available(self) -> None:
        """Peers exist but carry no case type: baseline with empty patterns."""
        baseline = compute_court_baseline("c1", [CaseRecord(outcome="granted")])
        assert isinstance(baseline, CourtBaseline)
        assert dict(baseline.case_type_patterns) == {}
        assert baseline.outcome_analysis["overall"].sample_size == 1
