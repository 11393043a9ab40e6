"""File search public API."""

from __future__ import annotations

from .compiler import compile_where_clause
from .describe import describe_filters, format_filter_summary
from .engine import run_queries
from .errors import FileSearchError, SearchErrorKind
from .filters import (
    BaseFileFilter,
    DataSourceFilter,
    FileFilter,
    FileTypeFilter,
    FrequencyFilter,
    KeywordListFilter,
    ParentFilter,
    SizeFilter,
    load_filters,
)
from .stores import CaseCatalog, HashNormalizationError, OccurrenceRepository, StoreError

__all__ = [
    "BaseFileFilter",
    "SizeFilter",
    "ParentFilter",
    "DataSourceFilter",
    "KeywordListFilter",
    "FileTypeFilter",
    "FrequencyFilter",
    "FileFilter",
    "load_filters",
    "compile_where_clause",
    "describe_filters",
    "format_filter_summary",
    "run_queries",
    "FileSearchError",
    "SearchErrorKind",
    "CaseCatalog",
    "OccurrenceRepository",
    "StoreError",
    "HashNormalizationError",
]
