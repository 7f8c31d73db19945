"""Abstract record source interface.

A record source is the external storage collaborator: it returns raw
CaseRecord-shaped rows. Timeouts and retries are its own business; the
runner never retries a failed fetch.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Mapping, Sequence

Row = Mapping[str, Any]


class RecordFetchError(RuntimeError):
    """Raised when a source cannot return records.

    Fatal to the request; propagated to the caller unchanged.
    """


class RecordSource(ABC):
    """Abstract base class for case record storage.

    Implementations must be safe to call from two threads at once, since the
    subject and court fetches run concurrently.
    """

    @abstractmethod
    def fetch_subject_records(
        self,
        subject_id: str,
        *,
        decided_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return raw rows for one decision-maker.

        Args:
            subject_id: Decision-maker identifier
            decided_only: Only rows with a non-null decision date
            limit: Maximum number of rows

        Returns:
            Raw row mappings

        Raises:
            RecordFetchError: If the storage layer fails
        """
        pass

    @abstractmethod
    def fetch_court_records(
        self,
        court_id: str,
        *,
        decided_since: date | None = None,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """Return raw rows for every decision-maker in a court.

        Only decided rows are returned.

        Args:
            court_id: Court identifier
            decided_since: Only rows decided on or after this date
            limit: Maximum number of rows

        Returns:
            Raw row mappings

        Raises:
            RecordFetchError: If the storage layer fails
        """
        pass

    def court_for_subject(self, subject_id: str) -> str | None:
        """Return the subject's court identifier, if the source knows it."""
        return None
