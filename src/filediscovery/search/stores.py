"""Contracts for the data stores the search engine talks to."""

from __future__ import annotations

from typing import Protocol, Sequence

from filediscovery.entities.core import CandidateRecord, CorrelationType


class StoreError(Exception):
    """Raised by store adapters when the backing database fails."""

    def __init__(self, message: str, *, store: str = "store") -> None:
        super().__init__(message)
        self.store = store


class HashNormalizationError(StoreError):
    """Raised when a correlation value cannot be normalised for lookup."""


class CaseCatalog(Protocol):
    """Bulk access to the files of the current case."""

    def find_matching(self, predicate: str) -> Sequence[CandidateRecord]:
        """Return every file satisfying ``predicate`` (a ``WHERE`` clause body)."""
        ...


class OccurrenceRepository(Protocol):
    """Per-value occurrence lookups against the central repository."""

    def lookup_frequency_type(self, type_id: int) -> CorrelationType:
        ...

    def count_distinct_occurrences(self, correlation_type: CorrelationType, value: str) -> int:
        """Count distinct (case, data source) pairs that have observed ``value``."""
        ...


__all__ = ["StoreError", "HashNormalizationError", "CaseCatalog", "OccurrenceRepository"]
