"""Case record schemas for judicial analytics.

A CaseRecord is the canonical unit every analyzer consumes. Raw rows are
coerced into this shape by core.analytics.normalizer.
"""

from dataclasses import dataclass, field
from datetime import date

# Sentinels used instead of dropping a record with a missing category
UNCLASSIFIED_CASE_TYPE = "unclassified"
UNKNOWN_OUTCOME = "unknown"


@dataclass(frozen=True)
class CaseRecord:
    """One adjudicated matter.

    Attributes:
        case_type: Canonical case category ("unclassified" when absent)
        outcome: Canonical outcome label ("unknown" when absent)
        status: Canonical status text ("" when absent)
        case_value: Monetary value in dispute (None if absent or unparsable)
        filing_date: Date the matter was filed (None if absent or unparsable)
        decision_date: Date the matter was decided (None if absent or unparsable)
        summary: Free-text summary used by keyword filters (None if absent)
    """

    case_type: str = UNCLASSIFIED_CASE_TYPE
    outcome: str = UNKNOWN_OUTCOME
    status: str = ""
    case_value: float | None = None
    filing_date: date | None = None
    decision_date: date | None = None
    summary: str | None = None

    @property
    def is_classified(self) -> bool:
        """Check if the record has a real case type."""
        return self.case_type != UNCLASSIFIED_CASE_TYPE

    @property
    def has_known_outcome(self) -> bool:
        """Check if the record has a real outcome label."""
        return self.outcome != UNKNOWN_OUTCOME

    @property
    def duration_days(self) -> int | None:
        """Days from filing to decision, floored at zero.

        Returns None unless both dates are present.
        """
        if self.filing_date is None or self.decision_date is None:
            return None
        return max(0, (self.decision_date - self.filing_date).days)


@dataclass(frozen=True)
class RecordIssue:
    """A field that failed coercion on one raw row.

    Attributes:
        row_index: Position of the row in the raw input
        field: Field name that failed (or "row" when the row itself is unusable)
        reason: Human-readable description
    """

    row_index: int
    field: str
    reason: str


@dataclass(frozen=True)
class NormalizedBatch:
    """Output of normalizing a sequence of raw rows.

    Attributes:
        records: Coerced records, in input order
        total_rows: Number of raw rows received
        malformed_rows: Number of rows with at least one issue
        issues: Every coercion issue found
    """

    records: tuple[CaseRecord, ...] = ()
    total_rows: int = 0
    malformed_rows: int = 0
    issues: tuple[RecordIssue, ...] = field(default_factory=tuple)

    @property
    def dropped_rows(self) -> int:
        """Rows that could not be turned into a record at all."""
        return self.total_rows - len(self.records)
