"""Concrete store adapters for the case database and central repository."""

from .case_database import FILES_TABLE, SqlCaseCatalog
from .central_repository import SqlCentralRepository, normalize_correlation_value

__all__ = [
    "FILES_TABLE",
    "SqlCaseCatalog",
    "SqlCentralRepository",
    "normalize_correlation_value",
]
