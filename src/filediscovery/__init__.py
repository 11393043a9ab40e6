"""Top-level package for the file discovery search engine."""

from __future__ import annotations

from importlib.metadata import version

try:
    __version__ = version("filediscovery")
except Exception:  # pragma: no cover - fallback during local development
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import (
    CaseFile,
    DataSource,
    FileSize,
    FileTypeCategory,
    Frequency,
    ParentSearchTerm,
    ResultFile,
)
from .search import (
    DataSourceFilter,
    FileSearchError,
    FileTypeFilter,
    FrequencyFilter,
    KeywordListFilter,
    ParentFilter,
    SearchErrorKind,
    SizeFilter,
    compile_where_clause,
    run_queries,
)

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "CaseFile",
    "DataSource",
    "FileSize",
    "FileTypeCategory",
    "Frequency",
    "ParentSearchTerm",
    "ResultFile",
    "SizeFilter",
    "ParentFilter",
    "DataSourceFilter",
    "KeywordListFilter",
    "FileTypeFilter",
    "FrequencyFilter",
    "compile_where_clause",
    "run_queries",
    "FileSearchError",
    "SearchErrorKind",
]
