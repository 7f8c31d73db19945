"""Two-column tabular output of a survival curve.

Rows are emitted in curve order, one per SurvivalPoint, under a
"day,probability" header.
"""

import pandas as pd

from core.schemas.durations import TimeToRulingSummary

CSV_COLUMNS = ("day", "probability")


def survival_curve_frame(summary: TimeToRulingSummary) -> pd.DataFrame:
    """Build a (day, probability) DataFrame in curve order."""
    return pd.DataFrame(
        {
            "day": [p.elapsed_days for p in summary.survival_curve],
            "probability": [p.survival_probability for p in summary.survival_curve],
        },
        columns=list(CSV_COLUMNS),
    )


def survival_curve_to_csv(summary: TimeToRulingSummary, float_format: str | None = "%.3f") -> str:
    """Render the survival curve as CSV text.

    Args:
        summary: TimeToRulingSummary whose curve to render
        float_format: printf-style format for probabilities (None for full precision)

    Returns:
        CSV text; just the header line for an empty curve
    """
    frame = survival_curve_frame(summary)
    return frame.to_csv(index=False, float_format=float_format, lineterminator="\n")
