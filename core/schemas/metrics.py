"""Metric schemas for judicial analytics.

Every rate or deviation is stored next to the sample size it was computed
from, so a consumer can never present an unqualified statistic.
"""

from dataclasses import dataclass, field
from datetime import date

# Confidence labels derived from sample size
CONFIDENCE_LOW = "low"
CONFIDENCE_MODERATE = "moderate"
CONFIDENCE_HIGH = "high"

VALID_CONFIDENCE = frozenset({CONFIDENCE_LOW, CONFIDENCE_MODERATE, CONFIDENCE_HIGH})

# Sample-size thresholds: below the floor is "low", below high is "moderate"
MIN_SAMPLE_FLOOR = 20
HIGH_CONFIDENCE_THRESHOLD = 100

# How an indicator's deviation was computed
MODE_BASELINE = "baseline"
MODE_INTERNAL = "internal_dispersion"

VALID_MODES = frozenset({MODE_BASELINE, MODE_INTERNAL})

# Scope key for an outcome analysis over every record
OVERALL_SCOPE = "overall"

# Coarse outcome categories
CATEGORY_SETTLED = "settled"
CATEGORY_DISMISSED = "dismissed"
CATEGORY_JUDGMENT = "judgment"
CATEGORY_OTHER = "other"

OUTCOME_CATEGORIES = (CATEGORY_SETTLED, CATEGORY_DISMISSED, CATEGORY_JUDGMENT, CATEGORY_OTHER)


@dataclass(frozen=True)
class CaseTypePattern:
    """Volume and outcome mix for one case type.

    Attributes:
        case_type: Canonical case type
        count: Records with this case type
        share_of_total: count / classified records (0-1)
        outcome_breakdown: Outcome label -> record count
        average_case_value: Mean case value (None when no valued records)
        value_sample_size: Records that carried a case value
    """

    case_type: str
    count: int
    share_of_total: float
    outcome_breakdown: dict[str, int] = field(default_factory=dict)
    average_case_value: float | None = None
    value_sample_size: int = 0


@dataclass(frozen=True)
class OutcomeAnalysis:
    """Outcome-rate distribution within one scope.

    Attributes:
        scope: Case type, or "overall"
        rates: Outcome label -> rate (0-1); empty when sample_size is 0
        sample_size: Denominator of every rate (known outcomes only)
        unknown_count: Records in scope whose outcome was unknown
        category_rates: Coarse category -> rate over the same denominator
        average_duration_days: Mean filing-to-decision days (None if no durations)
        duration_sample_size: Records in scope with both a filing and decision date
    """

    scope: str
    rates: dict[str, float] = field(default_factory=dict)
    sample_size: int = 0
    unknown_count: int = 0
    category_rates: dict[str, float] = field(default_factory=dict)
    average_duration_days: float | None = None
    duration_sample_size: int = 0

    @property
    def has_data(self) -> bool:
        """Check if any rate was computed."""
        return self.sample_size > 0


@dataclass(frozen=True)
class TemporalPeriod:
    """One bucket in a temporal pattern.

    Attributes:
        period_label: Display label (e.g., "2024" or "2024-03")
        period_start: First day of the period
        record_count: Records decided in the period (0 for empty periods)
        outcome_rates: Outcome label -> rate over known outcomes in the period
        outcome_sample_size: Known-outcome records in the period
        average_duration_days: Mean filing-to-decision days (None if no durations)
        duration_sample_size: Records in the period with a filing date
    """

    period_label: str
    period_start: date
    record_count: int = 0
    outcome_rates: dict[str, float] = field(default_factory=dict)
    outcome_sample_size: int = 0
    average_duration_days: float | None = None
    duration_sample_size: int = 0


@dataclass(frozen=True)
class ValueBand:
    """Settlement behaviour within one case-value range.

    Attributes:
        value_range: Display label (e.g., "$10K - $50K")
        case_count: Records whose case value falls in the band
        settlement_rate: Settled share of the band (None when empty)
    """

    value_range: str
    case_count: int = 0
    settlement_rate: float | None = None


@dataclass(frozen=True)
class BiasIndicator:
    """A named deviation statistic with its qualification.

    Attributes:
        name: Indicator name (e.g., "outcome_rate::civil::granted")
        deviation: Signed deviation (None when it could not be computed)
        sample_size: Subject records behind the statistic
        confidence: "low", "moderate" or "high", derived from sample_size
        mode: "baseline" or "internal_dispersion"
        subject_value: The subject's own statistic
        reference_value: What the subject was compared against
        baseline_sample_size: Peer records behind reference_value (0 in internal mode)
        note: Caveat for consumers
    """

    name: str
    deviation: float | None
    sample_size: int
    confidence: str
    mode: str
    subject_value: float | None = None
    reference_value: float | None = None
    baseline_sample_size: int = 0
    note: str = ""

    def __post_init__(self) -> None:
        """Validate confidence and mode are allowed values."""
        if self.confidence not in VALID_CONFIDENCE:
            raise ValueError(
                f"Invalid confidence '{self.confidence}'. Must be one of: {VALID_CONFIDENCE}"
            )
        if self.mode not in VALID_MODES:
            raise ValueError(f"Invalid mode '{self.mode}'. Must be one of: {VALID_MODES}")


@dataclass(frozen=True)
class BiasMetrics:
    """Everything computed for one decision-maker.

    Attributes:
        case_type_patterns: Case type -> pattern, ordered by count desc then label
        outcome_analysis: "overall" and each case type -> OutcomeAnalysis
        temporal_patterns: Gap-free chronological periods
        bias_indicators: Indicator name -> BiasIndicator
        case_value_trends: Fixed case-value bands
        total_records: Records received, including unclassified/undated ones
        unclassified_records: Records without a case type
        undated_records: Records without a decision date
        baseline_available: True if a court baseline was used
    """

    case_type_patterns: dict[str, CaseTypePattern] = field(default_factory=dict)
    outcome_analysis: dict[str, OutcomeAnalysis] = field(default_factory=dict)
    temporal_patterns: tuple[TemporalPeriod, ...] = ()
    bias_indicators: dict[str, BiasIndicator] = field(default_factory=dict)
    case_value_trends: tuple[ValueBand, ...] = ()
    total_records: int = 0
    unclassified_records: int = 0
    undated_records: int = 0
    baseline_available: bool = False

    @property
    def has_data(self) -> bool:
        """Check if any record was analyzed."""
        return self.total_records > 0
