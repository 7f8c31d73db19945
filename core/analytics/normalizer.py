"""Case record normalizer.

Coerces raw rows (database rows, CSV rows, JSON objects) into CaseRecord.
A malformed field becomes absent and is reported as a RecordIssue; a single
bad row never raises.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping

import pandas as pd

from core.ids.canonical import canonicalize_label
from core.schemas.case import (
    UNCLASSIFIED_CASE_TYPE,
    UNKNOWN_OUTCOME,
    CaseRecord,
    NormalizedBatch,
    RecordIssue,
)

logger = logging.getLogger(__name__)


class _FieldError(ValueError):
    """Raised internally when a present value cannot be coerced."""


def _is_missing(value: Any) -> bool:
    """None, NaN, NaT and blank strings all count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (float, pd.Timestamp)) or value is pd.NaT:
        return bool(pd.isna(value))
    return False


def _coerce_label(value: Any) -> str | None:
    if _is_missing(value):
        return None
    if not isinstance(value, str):
        value = str(value)
    label = canonicalize_label(value)
    return label or None


def _coerce_date(value: Any) -> date | None:
    if _is_missing(value):
        return None
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise _FieldError(f"unsupported date type {type(value).__name__}")
    # offsets resolve to the UTC calendar date; naive values keep their date
    parsed = pd.to_datetime(value.strip(), errors="coerce", utc=True)
    if pd.isna(parsed):
        raise _FieldError(f"unparsable date '{value}'")
    return parsed.date()


def _coerce_value(value: Any) -> float | None:
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise _FieldError("boolean is not a case value")
    if isinstance(value, str):
        value = value.strip().replace(",", "").replace("$", "")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise _FieldError(f"unparsable case value '{value}'") from e
    if math.isnan(number) or math.isinf(number):
        raise _FieldError(f"non-finite case value '{value}'")
    return number


def calendar_date(value: Any) -> date | None:
    """Parse a date field the way normalize_record does.

    Record sources use this for decided and lookback checks so that a row is
    filtered on the same calendar date it is later bucketed under.

    Returns:
        The calendar date, or None when missing or unparsable
    """
    try:
        return _coerce_date(value)
    except _FieldError:
        return None


def normalize_record(
    row: Mapping[str, Any], row_index: int = 0
) -> tuple[CaseRecord, list[RecordIssue]]:
    """Coerce one raw row field-by-field.

    Outcome falls back to status when absent; both fall back to "unknown".

    Args:
        row: Raw row mapping
        row_index: Position of the row, for issue reporting

    Returns:
        Tuple of (CaseRecord, issues found on this row)
    """
    issues: list[RecordIssue] = []

    def coerce(field_name: str, coercer):
        try:
            return coercer(row.get(field_name))
        except _FieldError as e:
            issues.append(RecordIssue(row_index=row_index, field=field_name, reason=str(e)))
            return None

    case_type = coerce("case_type", _coerce_label)
    status = coerce("status", _coerce_label)
    outcome = coerce("outcome", _coerce_label) or status
    summary = row.get("summary")
    if _is_missing(summary):
        summary = None

    record = CaseRecord(
        case_type=case_type or UNCLASSIFIED_CASE_TYPE,
        outcome=outcome or UNKNOWN_OUTCOME,
        status=status or "",
        case_value=coerce("case_value", _coerce_value),
        filing_date=coerce("filing_date", _coerce_date),
        decision_date=coerce("decision_date", _coerce_date),
        summary=str(summary) if summary is not None else None,
    )
    return record, issues


def normalize_records(rows: Iterable[Any]) -> NormalizedBatch:
    """Coerce a sequence of raw rows into a NormalizedBatch.

    Rows that are not mappings are dropped and reported; every other row
    yields a record, with unparsable fields left absent.

    Args:
        rows: Raw rows

    Returns:
        NormalizedBatch with records, counts and issues
    """
    records: list[CaseRecord] = []
    issues: list[RecordIssue] = []
    malformed = 0
    total = 0

    for index, row in enumerate(rows):
        total += 1
        if not isinstance(row, Mapping):
            malformed += 1
            issues.append(
                RecordIssue(
                    row_index=index,
                    field="row",
                    reason=f"expected a mapping, got {type(row).__name__}",
                )
            )
            continue

        record, row_issues = normalize_record(row, row_index=index)
        records.append(record)
        if row_issues:
            malformed += 1
            issues.extend(row_issues)

    if malformed:
        logger.debug("Normalized %d rows, %d malformed", total, malformed)

    return NormalizedBatch(
        records=tuple(records),
        total_rows=total,
        malformed_rows=malformed,
        issues=tuple(issues),
    )
