"""Tests for the bias metrics entry point.

Exit Criteria:
- The two-record civil example produces the documented patterns and rates
- Empty input returns zero-sample results without raising
- Repeated computation over the same records yields identical output
- Every indicator carries sample_size and confidence
"""

from datetime import date

import pytest

from core.analytics.baseline import compute_court_baseline
from core.analytics.metrics import compute_bias_metrics
from core.schemas.baseline import BaselineUnavailable
from core.schemas.case import CaseRecord
from core.schemas.metrics import VALID_CONFIDENCE


@pytest.fixture
def civil_pair() -> list[CaseRecord]:
    return [
        CaseRecord(
            case_type="civil",
            outcome="granted",
            filing_date=date(2024, 1, 1),
            decision_date=date(2024, 1, 11),
        ),
        CaseRecord(
            case_type="civil",
            outcome="denied",
            filing_date=date(2024, 2, 1),
            decision_date=date(2024, 2, 21),
        ),
    ]


class TestComputeBiasMetrics:
    """Tests for compute_bias_metrics."""

    def test_civil_pair(self, civil_pair: list[CaseRecord]) -> None:
        metrics = compute_bias_metrics(civil_pair)

        civil = metrics.case_type_patterns["civil"]
        assert civil.count == 2
        assert civil.share_of_total == pytest.approx(1.0)

        analysis = metrics.outcome_analysis["civil"]
        assert analysis.rates == {"denied": pytest.approx(0.5), "granted": pytest.approx(0.5)}
        assert analysis.sample_size == 2

        assert metrics.total_records == 2
        assert metrics.baseline_available is False

    def test_temporal_single_year(self, civil_pair: list[CaseRecord]) -> None:
        metrics = compute_bias_metrics(civil_pair)
        assert len(metrics.temporal_patterns) == 1
        assert metrics.temporal_patterns[0].average_duration_days == pytest.approx(15.0)

    def test_month_granularity(self, civil_pair: list[CaseRecord]) -> None:
        metrics = compute_bias_metrics(civil_pair, granularity="month")
        assert [p.period_label for p in metrics.temporal_patterns] == ["2024-01", "2024-02"]

    def test_empty(self) -> None:
        metrics = compute_bias_metrics([])
        assert metrics.case_type_patterns == {}
        assert metrics.outcome_analysis["overall"].sample_size == 0
        assert metrics.temporal_patterns == ()
        assert metrics.total_records == 0
        assert metrics.has_data is False
        assert len(metrics.case_value_trends) == 4

    def test_idempotent(self, civil_pair: list[CaseRecord]) -> None:
        records = tuple(civil_pair)
        assert compute_bias_metrics(records) == compute_bias_metrics(records)

    def test_indicators_qualified(self, civil_pair: list[CaseRecord]) -> None:
        metrics = compute_bias_metrics(civil_pair)
        assert metrics.bias_indicators
        for indicator in metrics.bias_indicators.values():
            assert indicator.sample_size >= 0
            assert indicator.confidence in VALID_CONFIDENCE

    def test_record_counters(self) -> None:
        records = [
            CaseRecord(case_type="civil", decision_date=date(2024, 1, 1)),
            CaseRecord(),
            CaseRecord(case_type="family"),
        ]
        metrics = compute_bias_metrics(records)
        assert metrics.unclassified_records == 1
        assert metrics.undated_records == 2

    def test_with_baseline(self, civil_pair: list[CaseRecord]) -> None:
        baseline = compute_court_baseline("c1", civil_pair * 3)
        metrics = compute_bias_metrics(civil_pair, baseline=baseline)
        assert metrics.baseline_available is True
        assert metrics.bias_indicators["outcome_rate::civil::granted"].mode == "baseline"
        assert metrics.bias_indicators["outcome_rate::civil::granted"].deviation == pytest.approx(
            0.0
        )

    def test_with_unavailable_baseline(self, civil_pair: list[CaseRecord]) -> None:
        unavailable = BaselineUnavailable(court_id=None, reason="subject has no court assignment")
        metrics = compute_bias_metrics(civil_pair, baseline=unavailable)
        assert metrics.baseline_available is False
        modes = {i.mode for i in metrics.bias_indicators.values()}
        assert modes == {"internal_dispersion"}
