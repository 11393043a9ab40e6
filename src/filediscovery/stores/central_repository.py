"""SQLAlchemy-backed occurrence lookups against the central repository."""

from __future__ import annotations

import re
from typing import Dict

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from filediscovery.entities.core import CorrelationType
from filediscovery.search.stores import HashNormalizationError, StoreError
from filediscovery.utils.logging import get_logger

from .case_database import build_engine

_MD5_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def normalize_correlation_value(correlation_type: CorrelationType, value: str | None) -> str:
    """Return the canonical form used for central repository lookups.

    File values are MD5 hashes and must be exactly 32 hex characters. Other
    attribute types are trimmed and lower-cased.
    """

    if value is None or not str(value).strip():
        raise HashNormalizationError(
            f"Empty value for correlation type '{correlation_type.display_name}'",
            store="central_repository",
        )
    normalized = str(value).strip().lower()
    if correlation_type.id == CorrelationType.FILES_TYPE_ID and not _MD5_PATTERN.match(normalized):
        raise HashNormalizationError(
            f"Data purporting to be an MD5 was found not to conform to expected format: {value!r}",
            store="central_repository",
        )
    return normalized


class SqlCentralRepository:
    """Count occurrences of correlation values across cases and data sources."""

    def __init__(self, url_or_engine: str | Engine, *, echo: bool = False) -> None:
        self._engine = build_engine(url_or_engine, echo=echo)
        self._types: Dict[int, CorrelationType] = {}
        self._log = get_logger(module=__name__)

    @property
    def engine(self) -> Engine:
        return self._engine

    def lookup_frequency_type(self, type_id: int) -> CorrelationType:
        cached = self._types.get(type_id)
        if cached is not None:
            return cached
        sql = text(
            "SELECT id, display_name, db_table_name, supported, enabled "
            "FROM correlation_types WHERE id = :type_id"
        )
        try:
            with self._engine.connect() as conn:
                row = conn.execute(sql, {"type_id": int(type_id)}).mappings().first()
        except SQLAlchemyError as exc:
            raise StoreError(
                f"Failed to look up correlation type {type_id}: {exc}",
                store="central_repository",
            ) from exc
        if row is None:
            raise StoreError(f"Unknown correlation type id {type_id}", store="central_repository")

        correlation_type = CorrelationType(
            id=int(row["id"]),
            display_name=str(row["display_name"]),
            db_table_name=str(row["db_table_name"]),
            supported=bool(row["supported"]),
            enabled=bool(row["enabled"]),
        )
        self._types[type_id] = correlation_type
        return correlation_type

    def count_distinct_occurrences(self, correlation_type: CorrelationType, value: str) -> int:
        normalized = normalize_correlation_value(correlation_type, value)
        table = f"{correlation_type.db_table_name}_instances"
        sql = text(
            "SELECT COUNT(*) AS total FROM "
            f"(SELECT DISTINCT case_id, data_source_id FROM {table} WHERE value = :value) AS pairs"
        )
        try:
            with self._engine.connect() as conn:
                total = conn.execute(sql, {"value": normalized}).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(
                f"Failed to count occurrences in {table}: {exc}",
                store="central_repository",
            ) from exc
        self._log.trace("Counted occurrences", table=table, value=normalized, total=total)
        return int(total or 0)

    def dispose(self) -> None:
        self._engine.dispose()


__all__ = ["SqlCentralRepository", "normalize_correlation_value"]
