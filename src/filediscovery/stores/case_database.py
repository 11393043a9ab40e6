"""SQLAlchemy-backed access to the case database file catalog."""

from __future__ import annotations

from typing import List

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from filediscovery.entities.core import CaseFile
from filediscovery.search.stores import StoreError
from filediscovery.utils.logging import get_logger

FILES_TABLE = "tsk_files"

_SELECT_FILES = f"""
SELECT
  obj_id,
  name,
  parent_path,
  size,
  md5,
  mime_type,
  data_source_obj_id
FROM {FILES_TABLE}
"""


def build_engine(url_or_engine: str | Engine, *, echo: bool = False) -> Engine:
    if isinstance(url_or_engine, Engine):
        return url_or_engine
    return create_engine(url_or_engine, echo=echo)


class SqlCaseCatalog:
    """Run compiled ``WHERE`` clauses against ``tsk_files``.

    Predicates come from :func:`compile_where_clause`, which only emits
    well-formed fragments with quoted literals.
    """

    def __init__(self, url_or_engine: str | Engine, *, echo: bool = False) -> None:
        self._engine = build_engine(url_or_engine, echo=echo)
        self._log = get_logger(module=__name__)

    @property
    def engine(self) -> Engine:
        return self._engine

    def find_matching(self, predicate: str) -> List[CaseFile]:
        sql = f"{_SELECT_FILES} WHERE {predicate} ORDER BY obj_id"
        try:
            with self._engine.connect() as conn:
                rows = conn.exec_driver_sql(sql).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Case database query failed: {exc}", store="case_database") from exc

        files = [
            CaseFile(
                obj_id=int(row["obj_id"]),
                name=str(row["name"] or ""),
                parent_path=str(row["parent_path"] or "/"),
                size=int(row["size"] or 0),
                md5_hash=(row["md5"] or None),
                mime_type=(row["mime_type"] or None),
                data_source_id=int(row["data_source_obj_id"] or 0),
            )
            for row in rows
        ]
        self._log.debug("Fetched case files", count=len(files))
        return files

    def dispose(self) -> None:
        self._engine.dispose()


__all__ = ["SqlCaseCatalog", "FILES_TABLE", "build_engine"]
