"""Shared fixtures: in-memory store fakes and temporary SQLite databases."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence

import pytest
from sqlalchemy import create_engine, text

from filediscovery.entities.core import CaseFile, CorrelationType
from filediscovery.search.stores import StoreError

MD5_A = "0" * 31 + "a"
MD5_B = "0" * 31 + "b"
MD5_C = "0" * 31 + "c"
MD5_D = "0" * 31 + "d"


class FakeCaseCatalog:
    """Case catalog returning canned records and recording predicates."""

    def __init__(self, records: Iterable[CaseFile] = (), error: Exception | None = None) -> None:
        self.records = list(records)
        self.error = error
        self.predicates: List[str] = []

    def find_matching(self, predicate: str) -> List[CaseFile]:
        self.predicates.append(predicate)
        if self.error is not None:
            raise self.error
        return list(self.records)


class FakeOccurrenceRepository:
    """Occurrence repository backed by a hash -> count mapping."""

    def __init__(
        self,
        counts: Dict[str, int] | None = None,
        *,
        fail_on: Sequence[str] = (),
        delays: Dict[str, float] | None = None,
    ) -> None:
        self.counts = dict(counts or {})
        self.fail_on = set(fail_on)
        self.delays = dict(delays or {})
        self.lookups: List[str] = []
        self.type_lookups: List[int] = []
        self._lock = threading.Lock()

    def lookup_frequency_type(self, type_id: int) -> CorrelationType:
        self.type_lookups.append(type_id)
        return CorrelationType(id=type_id, display_name="Files", db_table_name="file")

    def count_distinct_occurrences(self, correlation_type: CorrelationType, value: str) -> int:
        delay = self.delays.get(value)
        if delay:
            time.sleep(delay)
        with self._lock:
            self.lookups.append(value)
        if value in self.fail_on:
            raise StoreError(f"lookup failed for {value}", store="central_repository")
        return self.counts.get(value, 0)


class ExplodingOccurrenceRepository:
    """Repository that fails the test if the engine ever touches it."""

    def lookup_frequency_type(self, type_id: int) -> CorrelationType:
        raise AssertionError("central repository must not be queried")

    def count_distinct_occurrences(self, correlation_type: CorrelationType, value: str) -> int:
        raise AssertionError("central repository must not be queried")


@pytest.fixture
def make_file() -> Callable[..., CaseFile]:
    def _make(obj_id: int, md5: str | None = None, **overrides: object) -> CaseFile:
        payload: dict = {
            "obj_id": obj_id,
            "name": f"file-{obj_id}.jpg",
            "parent_path": "/img/",
            "size": 2048,
            "md5_hash": md5,
            "mime_type": "image/jpeg",
            "data_source_id": 1,
        }
        payload.update(overrides)
        return CaseFile(**payload)

    return _make


@pytest.fixture
def case_db_url(tmp_path: Path) -> str:
    """A case database with five files and two keyword hits."""

    url = f"sqlite:///{tmp_path / 'case.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE tsk_files (obj_id INTEGER PRIMARY KEY, name TEXT, parent_path TEXT, "
            "size INTEGER, md5 TEXT, mime_type TEXT, data_source_obj_id INTEGER)"
        )
        conn.exec_driver_sql(
            "CREATE TABLE blackboard_artifacts (artifact_id INTEGER PRIMARY KEY, obj_id INTEGER, "
            "artifact_type_id INTEGER)"
        )
        conn.exec_driver_sql(
            "CREATE TABLE blackboard_attributes (artifact_id INTEGER, artifact_type_id INTEGER, "
            "attribute_type_id INTEGER, value_text TEXT)"
        )
        conn.execute(
            text(
                "INSERT INTO tsk_files VALUES "
                "(:obj_id, :name, :parent_path, :size, :md5, :mime_type, :ds)"
            ),
            [
                {"obj_id": 1, "name": "a.jpg", "parent_path": "/img/", "size": 2048,
                 "md5": MD5_A, "mime_type": "image/jpeg", "ds": 1},
                {"obj_id": 2, "name": "b.png", "parent_path": "/C:/Users/x/", "size": 4096,
                 "md5": MD5_B, "mime_type": "image/png", "ds": 1},
                {"obj_id": 3, "name": "c.txt", "parent_path": "/docs/", "size": 500,
                 "md5": None, "mime_type": "text/plain", "ds": 2},
                {"obj_id": 4, "name": "big.jpg", "parent_path": "/img/", "size": 5_000_000,
                 "md5": MD5_C, "mime_type": "image/jpeg", "ds": 2},
                {"obj_id": 5, "name": "d.jpg", "parent_path": "/img/", "size": 3000,
                 "md5": MD5_D.upper(), "mime_type": "image/jpeg", "ds": 2},
            ],
        )
        conn.exec_driver_sql(
            "INSERT INTO blackboard_artifacts VALUES (10, 3, 9), (11, 1, 9), (12, 2, 4)"
        )
        conn.exec_driver_sql(
            "INSERT INTO blackboard_attributes VALUES "
            "(10, 9, 37, 'Passwords'), (11, 9, 37, 'Email Addresses'), (12, 4, 37, 'Passwords')"
        )
    engine.dispose()
    return url


@pytest.fixture
def central_repo_url(tmp_path: Path) -> str:
    """A central repository where B is rare, D is common and A is unseen."""

    url = f"sqlite:///{tmp_path / 'central.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE correlation_types (id INTEGER PRIMARY KEY, display_name TEXT, "
            "db_table_name TEXT, supported INTEGER, enabled INTEGER)"
        )
        conn.exec_driver_sql(
            "CREATE TABLE file_instances (case_id INTEGER, data_source_id INTEGER, value TEXT, "
            "file_path TEXT)"
        )
        conn.exec_driver_sql("INSERT INTO correlation_types VALUES (0, 'Files', 'file', 1, 1)")
        rows = [
            {"case_id": 1, "ds": 1, "value": MD5_B, "path": "/one"},
            {"case_id": 1, "ds": 1, "value": MD5_B, "path": "/two"},
            {"case_id": 2, "ds": 1, "value": MD5_B, "path": "/three"},
        ]
        rows.extend(
            {"case_id": case_id, "ds": 1, "value": MD5_D, "path": f"/d{case_id}"}
            for case_id in range(1, 13)
        )
        conn.execute(
            text("INSERT INTO file_instances VALUES (:case_id, :ds, :value, :path)"),
            rows,
        )
    engine.dispose()
    return url
