"""Tests for the outcome analyzer.

Exit Criteria:
- Rates within a scope sum to 1.0 whenever sample_size > 0
- sample_size is the denominator actually used (known outcomes only)
- Empty scope yields empty rates and sample_size 0, never NaN
- Outcome categories and case-value bands follow the keyword rules
"""

import math
from datetime import date

import pytest

from core.analytics.outcomes import (
    VALUE_BANDS,
    analyze_outcomes,
    analyze_outcomes_by_type,
    analyze_value_bands,
    classify_outcome,
)
from core.schemas.case import CaseRecord


@pytest.fixture
def records() -> list[CaseRecord]:
    """Civil: 2 granted, 1 denied, 1 unknown. Criminal: 1 dismissed."""
    return [
        CaseRecord(case_type="civil", outcome="granted"),
        CaseRecord(case_type="civil", outcome="granted"),
        CaseRecord(case_type="civil", outcome="denied"),
        CaseRecord(case_type="civil"),
        CaseRecord(case_type="criminal", outcome="dismissed"),
    ]


# =============================================================================
# Test: classify_outcome
# =============================================================================


class TestClassifyOutcome:
    """Tests for coarse outcome categories."""

    @pytest.mark.parametrize(
        "label,category",
        [
            ("settled", "settled"),
            ("settlement reached", "settled"),
            ("compromise", "settled"),
            ("dismissed with prejudice", "dismissed"),
            ("withdrawn", "dismissed"),
            ("judgment for plaintiff", "judgment"),
            ("motion granted", "judgment"),
            ("jury verdict", "judgment"),
            ("denied", "other"),
            ("unknown", "other"),
        ],
    )
    def test_categories(self, label: str, category: str) -> None:
        assert classify_outcome(label) == category

    def test_settled_checked_first(self) -> None:
        """A label matching two rules takes the first."""
        assert classify_outcome("settlement agreement, case dismissed") == "settled"


# =============================================================================
# Test: analyze_outcomes
# =============================================================================


class TestAnalyzeOutcomes:
    """Tests for analyze_outcomes."""

    def test_scoped_rates(self, records: list[CaseRecord]) -> None:
        civil = analyze_outcomes(records, case_type="civil")
        assert civil.scope == "civil"
        assert civil.sample_size == 3
        assert civil.unknown_count == 1
        assert civil.rates["granted"] == pytest.approx(2 / 3)
        assert civil.rates["denied"] == pytest.approx(1 / 3)

    def test_unknown_excluded_from_rates(self, records: list[CaseRecord]) -> None:
        civil = analyze_outcomes(records, case_type="civil")
        assert "unknown" not in civil.rates

    def test_overall_scope(self, records: list[CaseRecord]) -> None:
        overall = analyze_outcomes(records)
        assert overall.scope == "overall"
        assert overall.sample_size == 4
        assert overall.unknown_count == 1

    def test_rates_sum_to_one(self, records: list[CaseRecord]) -> None:
        for scope in [None, "civil", "criminal"]:
            analysis = analyze_outcomes(records, case_type=scope)
            assert math.isclose(sum(analysis.rates.values()), 1.0, abs_tol=1e-9)
            assert math.isclose(sum(analysis.category_rates.values()), 1.0, abs_tol=1e-9)

    def test_rate_ordering(self, records: list[CaseRecord]) -> None:
        assert list(analyze_outcomes(records).rates) == ["granted", "denied", "dismissed"]

    def test_category_rates(self, records: list[CaseRecord]) -> None:
        overall = analyze_outcomes(records)
        assert overall.category_rates == {
            "dismissed": pytest.approx(0.25),
            "judgment": pytest.approx(0.5),
            "other": pytest.approx(0.25),
        }

    def test_empty_scope(self, records: list[CaseRecord]) -> None:
        """Scope with no records: empty rates, sample_size 0."""
        analysis = analyze_outcomes(records, case_type="probate")
        assert analysis.rates == {}
        assert analysis.sample_size == 0
        assert analysis.has_data is False

    def test_all_unknown(self) -> None:
        analysis = analyze_outcomes([CaseRecord(case_type="civil")] * 3)
        assert analysis.rates == {}
        assert analysis.sample_size == 0
        assert analysis.unknown_count == 3

    def test_empty_input(self) -> None:
        analysis = analyze_outcomes([])
        assert analysis.rates == {}
        assert analysis.category_rates == {}
        assert analysis.sample_size == 0
        assert analysis.average_duration_days is None
        assert analysis.duration_sample_size == 0

    def test_mean_duration(self) -> None:
        """Records without both dates are left out of the mean."""
        filed = date(2024, 1, 1)
        records = [
            CaseRecord(
                case_type="civil", outcome="granted", filing_date=filed, decision_date=date(2024, 1, 11)
            ),
            CaseRecord(case_type="civil", filing_date=filed, decision_date=date(2024, 1, 31)),
            CaseRecord(case_type="civil", outcome="denied", decision_date=date(2024, 2, 1)),
            CaseRecord(
                case_type="criminal", outcome="denied", filing_date=filed, decision_date=date(2024, 4, 10)
            ),
        ]
        civil = analyze_outcomes(records, case_type="civil")
        assert civil.average_duration_days == pytest.approx(20.0)
        assert civil.duration_sample_size == 2
        overall = analyze_outcomes(records)
        assert overall.average_duration_days == pytest.approx((10 + 30 + 100) / 3)
        assert overall.duration_sample_size == 3

    def test_no_durations(self, records: list[CaseRecord]) -> None:
        analysis = analyze_outcomes(records)
        assert analysis.average_duration_days is None
        assert analysis.duration_sample_size == 0


class TestAnalyzeOutcomesByType:
    """Tests for analyze_outcomes_by_type."""

    def test_overall_first(self, records: list[CaseRecord]) -> None:
        analyses = analyze_outcomes_by_type(records)
        assert list(analyses) == ["overall", "civil", "criminal"]

    def test_explicit_order(self, records: list[CaseRecord]) -> None:
        analyses = analyze_outcomes_by_type(records, case_types=["criminal", "civil"])
        assert list(analyses) == ["overall", "criminal", "civil"]

    def test_unclassified_has_no_scope(self) -> None:
        analyses = analyze_outcomes_by_type([CaseRecord(outcome="granted")])
        assert list(analyses) == ["overall"]
        assert analyses["overall"].sample_size == 1


# =============================================================================
# Test: analyze_value_bands
# =============================================================================


class TestValueBands:
    """Tests for case-value bands."""

    def test_all_bands_reported(self) -> None:
        bands = analyze_value_bands([])
        assert [b.value_range for b in bands] == [label for label, _, _ in VALUE_BANDS]
        assert all(b.case_count == 0 and b.settlement_rate is None for b in bands)

    def test_band_boundaries(self) -> None:
        """Lower bound inclusive, upper bound exclusive."""
        records = [
            CaseRecord(case_value=9_999.0, outcome="settled"),
            CaseRecord(case_value=10_000.0, outcome="settled"),
            CaseRecord(case_value=10_000.0, outcome="denied"),
            CaseRecord(case_value=1_000_000.0, outcome="denied"),
            CaseRecord(outcome="settled"),
        ]
        bands = {b.value_range: b for b in analyze_value_bands(records)}
        assert bands["< $10K"].case_count == 1
        assert bands["< $10K"].settlement_rate == pytest.approx(1.0)
        assert bands["$10K - $50K"].case_count == 2
        assert bands["$10K - $50K"].settlement_rate == pytest.approx(0.5)
        assert bands["$50K - $250K"].settlement_rate is None
        assert bands["$250K+"].settlement_rate == pytest.approx(0.0)
