"""Exceptions raised by the file search engine."""

from __future__ import annotations

from enum import Enum


class SearchErrorKind(str, Enum):
    """Classification attached to every :class:`FileSearchError`."""

    INVALID_INPUT = "invalid_input"
    STORE_FAILURE = "store_failure"
    ENRICHMENT_FAILURE = "enrichment_failure"
    MISCONFIGURED_FILTER = "misconfigured_filter"


class FileSearchError(Exception):
    """Uniform failure surfaced by :func:`run_queries` and the filters.

    The underlying store exception, when there is one, is chained as
    ``__cause__`` and exposed through :attr:`cause`.
    """

    def __init__(self, message: str, *, kind: SearchErrorKind) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        message = super().__str__()
        if self.__cause__ is not None:
            return f"{message}: {self.__cause__}"
        return message


__all__ = ["FileSearchError", "SearchErrorKind"]
