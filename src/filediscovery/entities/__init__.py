"""Domain entities for the file discovery engine."""

from .core import (
    BYTES_PER_MB,
    NO_MAXIMUM,
    CandidateRecord,
    CaseFile,
    CorrelationType,
    DataSource,
    FileSize,
    FileTypeCategory,
    Frequency,
    ParentSearchTerm,
    ResultFile,
)

__all__ = [
    "BYTES_PER_MB",
    "NO_MAXIMUM",
    "FileSize",
    "FileTypeCategory",
    "ParentSearchTerm",
    "DataSource",
    "Frequency",
    "CorrelationType",
    "CandidateRecord",
    "CaseFile",
    "ResultFile",
]
