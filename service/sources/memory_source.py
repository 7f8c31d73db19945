"""In-memory record source.

Holds raw rows per decision-maker and court membership in memory. Used by
tests and by callers that have already fetched their rows.
"""

import threading
from datetime import date
from typing import Sequence

from core.analytics.normalizer import calendar_date
from service.sources.base import RecordSource, Row


def _decision_date(row: Row) -> date | None:
    return calendar_date(row.get("decision_date"))


class InMemoryRecordSource(RecordSource):
    """Record source backed by plain dicts.

    Example:
        source = InMemoryRecordSource(
            subject_rows={"j1": [{"case_type": "civil", "decision_date": "2024-01-11"}]},
            court_members={"c1": ["j1", "j2"]},
        )
        rows = source.fetch_subject_records("j1")
    """

    def __init__(
        self,
        subject_rows: dict[str, list[Row]] | None = None,
        court_members: dict[str, list[str]] | None = None,
        fail_with: Exception | None = None,
    ) -> None:
        """Initialize with rows and court membership.

        Args:
            subject_rows: Dict mapping subject ID to its raw rows
            court_members: Dict mapping court ID to member subject IDs
            fail_with: If set, every fetch raises this exception
        """
        self._subject_rows = subject_rows or {}
        self._court_members = court_members or {}
        self._fail_with = fail_with
        self._lock = threading.Lock()
        self._call_history: list[tuple[str, str]] = []

    def _record_call(self, kind: str, key: str) -> None:
        with self._lock:
            self._call_history.append((kind, key))
        if self._fail_with is not None:
            raise self._fail_with

    def fetch_subject_records(
        self,
        subject_id: str,
        *,
        decided_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return the subject's rows, optionally only decided ones."""
        self._record_call("subject", subject_id)
        rows = list(self._subject_rows.get(subject_id, []))
        if decided_only:
            rows = [r for r in rows if _decision_date(r) is not None]
        return rows[:limit] if limit is not None else rows

    def fetch_court_records(
        self,
        court_id: str,
        *,
        decided_since: date | None = None,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return decided rows for every member of the court."""
        self._record_call("court", court_id)
        rows = []
        for subject_id in self._court_members.get(court_id, []):
            for row in self._subject_rows.get(subject_id, []):
                decided = _decision_date(row)
                if decided is None:
                    continue
                if decided_since is not None and decided < decided_since:
                    continue
                rows.append(row)
        return rows[:limit] if limit is not None else rows

    def court_for_subject(self, subject_id: str) -> str | None:
        """Return the first court listing the subject as a member."""
        for court_id, members in self._court_members.items():
            if subject_id in members:
                return court_id
        return None

    @property
    def call_history(self) -> list[tuple[str, str]]:
        """Return list of (kind, key) fetches made against this source.

        Useful for test assertions.
        """
        with self._lock:
            return self._call_history.copy()
