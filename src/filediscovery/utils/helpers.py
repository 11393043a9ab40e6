"""General-purpose helpers for rendering case database predicates."""

from __future__ import annotations

from typing import Iterable


def quote_literal(value: object) -> str:
    """Render ``value`` as a single-quoted SQL string literal."""

    text = str(value).replace("'", "''")
    return f"'{text}'"


def in_list(column: str, values: Iterable[object]) -> str:
    """Build a ``column IN ('a','b')`` membership test."""

    rendered = ",".join(quote_literal(value) for value in values)
    return f"{column} IN ({rendered})"


__all__ = ["quote_literal", "in_list"]
