"""Time-to-ruling schemas."""

from dataclasses import dataclass

# Default empirical interval, read off the sorted durations by index
INTERVAL_LOW_PERCENTILE = 0.1
INTERVAL_HIGH_PERCENTILE = 0.9

# Target number of survival points; the stride max(1, n // target) emits at
# most 2 * target - 1 points
SURVIVAL_CURVE_POINTS = 50


@dataclass(frozen=True)
class SurvivalPoint:
    """One point on the empirical survival curve.

    Attributes:
        elapsed_days: An observed duration
        survival_probability: Share of durations at or beyond this index
    """

    elapsed_days: int
    survival_probability: float


@dataclass(frozen=True)
class TimeToRulingSummary:
    """Distribution of filing-to-decision durations.

    Scalars are None when sample_size is 0; nothing is fabricated.

    Attributes:
        sample_size: Durations measured
        min_days: Shortest duration
        max_days: Longest duration
        median_days: Median duration (mean of middle pair on even counts)
        interval_low: Lower order-statistic bound
        interval_high: Upper order-statistic bound
        interval_label: What the interval covers (e.g., "80% range")
        confidence: Confidence label derived from sample_size
        survival_curve: Downsampled empirical survival curve
    """

    sample_size: int
    min_days: int | None
    max_days: int | None
    median_days: float | None
    interval_low: int | None
    interval_high: int | None
    interval_label: str
    confidence: str
    survival_curve: tuple[SurvivalPoint, ...] = ()

    @property
    def has_data(self) -> bool:
        """Check if any duration was measured."""
        return self.sample_size > 0
