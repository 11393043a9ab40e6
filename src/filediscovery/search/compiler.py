"""Combine filter clauses into the case database bulk query."""

from __future__ import annotations

from typing import Sequence

from .errors import FileSearchError, SearchErrorKind
from .filters import BaseFileFilter


def compile_where_clause(filters: Sequence[BaseFileFilter]) -> str:
    """AND together the parenthesised clause of every filter that has one.

    Input order is preserved. Raises :class:`FileSearchError` when no filter
    contributes a clause, since there is no match-everything default.
    """

    clauses = [f"({clause})" for clause in (flt.where_clause() for flt in filters) if clause]
    if not clauses:
        raise FileSearchError(
            "Selected filters do not include a case database query",
            kind=SearchErrorKind.INVALID_INPUT,
        )
    return " AND ".join(clauses)


__all__ = ["compile_where_clause"]
