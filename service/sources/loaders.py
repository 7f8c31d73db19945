"""Case record loaders backed by pandas.

Loads a flat case table (CSV or JSONL) with one row per adjudicated matter
and serves it as a RecordSource. Required columns identify the
decision-maker and court; the remaining columns are the raw CaseRecord
fields and may be partially missing.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from core.analytics.normalizer import calendar_date
from service.sources.base import RecordSource, Row

logger = logging.getLogger(__name__)

# Columns used to route rows to subjects and courts
ID_COLUMNS = ("judge_id", "court_id")

# Raw CaseRecord fields passed to the normalizer
RECORD_COLUMNS = (
    "case_type",
    "outcome",
    "status",
    "case_value",
    "filing_date",
    "decision_date",
    "summary",
)


def load_case_frame(path: Path | str) -> pd.DataFrame:
    """Load a case table from CSV or JSONL.

    Args:
        path: Path to a .csv, .jsonl or .json file

    Returns:
        DataFrame with at least the ID columns

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported or ID columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        # keep IDs and dates as text; the normalizer does the coercion
        frame = pd.read_csv(path, dtype=str, keep_default_na=True)
    elif suffix in (".jsonl", ".json"):
        frame = pd.read_json(path, lines=suffix == ".jsonl", dtype=False)
    else:
        raise ValueError(f"Unsupported case file format: {suffix}. Must be .csv or .jsonl")

    missing = validate_case_frame(frame)
    if missing:
        raise ValueError(f"Case file {path} is missing columns: {sorted(missing)}")

    logger.info("Loaded %d case rows from %s", len(frame), path)
    return frame


def validate_case_frame(frame: pd.DataFrame) -> set[str]:
    """Return the required ID columns absent from the frame."""
    return set(ID_COLUMNS) - set(frame.columns)


def _to_rows(frame: pd.DataFrame) -> list[Row]:
    # absent record columns come back as None, so no row is lost
    records = frame.reindex(columns=list(RECORD_COLUMNS))
    rows: list[dict[str, Any]] = []
    for values in records.itertuples(index=False, name=None):
        rows.append({col: (None if pd.isna(v) else v) for col, v in zip(RECORD_COLUMNS, values)})
    return rows


class FrameRecordSource(RecordSource):
    """Record source over an in-memory pandas DataFrame.

    Each subject belongs to the court on its rows; a subject seen in more
    than one court is assigned to its most frequent court.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        """Initialize with a case table.

        Args:
            frame: DataFrame with judge_id, court_id and raw record columns

        Raises:
            ValueError: If ID columns are missing
        """
        missing = validate_case_frame(frame)
        if missing:
            raise ValueError(f"Case frame is missing columns: {sorted(missing)}")
        self._frame = frame.copy()
        self._frame["judge_id"] = self._frame["judge_id"].astype(str)
        self._frame["court_id"] = self._frame["court_id"].astype(str)
        if "decision_date" in self._frame.columns:
            self._decided = self._frame["decision_date"].map(calendar_date)
        else:
            self._decided = pd.Series([None] * len(self._frame), index=self._frame.index)

    @classmethod
    def from_path(cls, path: Path | str) -> "FrameRecordSource":
        """Load a case table and wrap it."""
        return cls(load_case_frame(path))

    def fetch_subject_records(
        self,
        subject_id: str,
        *,
        decided_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return rows for one judge_id."""
        mask = self._frame["judge_id"] == str(subject_id)
        if decided_only:
            mask &= self._decided.notna()
        return self._select(mask, limit)

    def fetch_court_records(
        self,
        court_id: str,
        *,
        decided_since: date | None = None,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return decided rows for one court_id."""
        mask = (self._frame["court_id"] == str(court_id)) & self._decided.notna()
        if decided_since is not None:
            mask &= self._decided.map(lambda d: not pd.isna(d) and d >= decided_since).astype(bool)
        return self._select(mask, limit)

    def court_for_subject(self, subject_id: str) -> str | None:
        """Return the subject's most frequent court."""
        courts = self._frame.loc[self._frame["judge_id"] == str(subject_id), "court_id"]
        if courts.empty:
            return None
        counts = courts.value_counts()
        # most frequent, ties broken by court ID
        top = counts[counts == counts.max()].index
        return sorted(top)[0]

    def _select(self, mask: pd.Series, limit: int | None) -> list[Row]:
        selected = self._frame[mask]
        if limit is not None:
            selected = selected.head(limit)
        return _to_rows(selected)
