"""Human-readable summaries of the active filters."""

from __future__ import annotations

from typing import List, Sequence

from .filters import BaseFileFilter


def describe_filters(filters: Sequence[BaseFileFilter]) -> List[str]:
    """Return one description per filter, in input order."""

    return [flt.describe() for flt in filters]


def format_filter_summary(filters: Sequence[BaseFileFilter], *, indent: str = "  ") -> str:
    """Render the descriptions as an indented, newline-separated block."""

    return "".join(f"{indent}{description}\n" for description in describe_filters(filters))


__all__ = ["describe_filters", "format_filter_summary"]
