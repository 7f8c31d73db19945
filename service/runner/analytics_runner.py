"""Analytics runner: the imperative shell around the analytics core.

Fetches raw rows from a RecordSource, normalizes them and calls the pure
computation entry points. Fetch failures propagate to the caller unchanged;
nothing is retried or cached here.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from core.analytics.baseline import compute_court_baseline
from core.analytics.metrics import compute_bias_metrics
from core.analytics.normalizer import normalize_records
from core.analytics.time_to_ruling import compute_time_to_ruling
from core.schemas.baseline import BaselineUnavailable, CourtBaseline
from core.schemas.case import NormalizedBatch
from core.schemas.durations import TimeToRulingSummary
from core.schemas.metrics import BiasMetrics
from service.config import Settings, get_settings
from service.sources.base import RecordSource

logger = logging.getLogger(__name__)


def lookback_cutoff(as_of: date, years: int) -> date:
    """Date `years` calendar years before as_of (Feb 29 maps to Feb 28)."""
    try:
        return as_of.replace(year=as_of.year - years)
    except ValueError:
        return as_of.replace(year=as_of.year - years, day=28)


class AnalyticsRunner:
    """Run bias metrics and time-to-ruling requests against a record source.

    Each call works on its own freshly fetched record set; the runner keeps
    no state between calls.
    """

    def __init__(self, source: RecordSource, settings: Settings | None = None) -> None:
        """Initialize runner.

        Args:
            source: External record storage
            settings: Runtime settings (defaults to environment settings)
        """
        self._source = source
        self._settings = settings or get_settings()

    def bias_metrics(
        self,
        subject_id: str,
        court_id: str | None = None,
        as_of: date | None = None,
    ) -> BiasMetrics:
        """Compute bias metrics for one decision-maker.

        The subject and court fetches run concurrently and are joined before
        the indicators are computed.

        Args:
            subject_id: Decision-maker identifier
            court_id: Court to build a baseline for (defaults to the source's
                court for the subject)
            as_of: Reference date for the baseline lookback (defaults to today)

        Returns:
            BiasMetrics for the subject
        """
        settings = self._settings
        if court_id is None:
            court_id = self._source.court_for_subject(subject_id)
        cutoff = lookback_cutoff(as_of or date.today(), settings.baseline_lookback_years)

        with ThreadPoolExecutor(max_workers=2) as pool:
            subject_future = pool.submit(
                self._source.fetch_subject_records,
                subject_id,
                decided_only=True,
                limit=settings.fetch_limit,
            )
            court_future = (
                pool.submit(
                    self._source.fetch_court_records,
                    court_id,
                    decided_since=cutoff,
                    limit=settings.baseline_fetch_limit,
                )
                if court_id is not None
                else None
            )
            subject_rows = subject_future.result()
            court_rows = court_future.result() if court_future is not None else []

        subject_batch = self._normalize(subject_rows, f"subject {subject_id}")
        court_batch = self._normalize(court_rows, f"court {court_id}")

        baseline = compute_court_baseline(
            court_id, court_batch.records, granularity=settings.period_granularity
        )
        if isinstance(baseline, BaselineUnavailable):
            logger.warning(
                "No baseline for subject %s: %s; using internal dispersion",
                subject_id,
                baseline.reason,
            )

        metrics = compute_bias_metrics(
            subject_batch.records,
            baseline=baseline,
            granularity=settings.period_granularity,
            floor=settings.min_sample_floor,
            high=settings.high_confidence_threshold,
        )
        logger.info(
            "Computed %d indicators for subject %s over %d records (baseline=%s)",
            len(metrics.bias_indicators),
            subject_id,
            metrics.total_records,
            isinstance(baseline, CourtBaseline),
        )
        return metrics

    def time_to_ruling(
        self,
        subject_id: str,
        case_type: str | None = None,
        outcome: str | None = None,
    ) -> TimeToRulingSummary:
        """Compute the time-to-ruling summary for one decision-maker.

        Args:
            subject_id: Decision-maker identifier
            case_type: Optional case-type substring filter
            outcome: Optional outcome/summary substring filter (e.g., a motion)

        Returns:
            TimeToRulingSummary
        """
        settings = self._settings
        rows = self._source.fetch_subject_records(
            subject_id, decided_only=True, limit=settings.fetch_limit
        )
        batch = self._normalize(rows, f"subject {subject_id}")

        summary = compute_time_to_ruling(
            batch.records,
            case_type=case_type,
            outcome=outcome,
            target_points=settings.survival_curve_points,
            low_percentile=settings.interval_low_percentile,
            high_percentile=settings.interval_high_percentile,
            floor=settings.min_sample_floor,
            high=settings.high_confidence_threshold,
        )
        logger.info(
            "Computed time to ruling for subject %s over %d durations",
            subject_id,
            summary.sample_size,
        )
        return summary

    @staticmethod
    def _normalize(rows, label: str) -> NormalizedBatch:
        batch = normalize_records(rows)
        if batch.malformed_rows:
            logger.info(
                "%s: %d of %d rows malformed (%d dropped)",
                label,
                batch.malformed_rows,
                batch.total_rows,
                batch.dropped_rows,
            )
        return batch
