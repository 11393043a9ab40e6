"""Tests for the loguru helpers."""

from __future__ import annotations

from loguru import logger

from filediscovery.entities.core import DataSource
from filediscovery.search.engine import run_queries
from filediscovery.search.filters import DataSourceFilter
from filediscovery.utils.logging import get_logger, log_timing, logging_context

from conftest import FakeCaseCatalog


def test_logging_context_and_timing_bind_fields() -> None:
    captured: list[dict] = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    try:
        log = get_logger(module="tests")
        with logging_context(search_id="abc123", stage="frequency"):
            with log_timing("lookup", logger_=log):
                log.info("inside")
        log.info("outside")
    finally:
        logger.remove(sink_id)

    inside, timing, outside = captured
    assert inside["message"] == "inside"
    assert inside["extra"]["search_id"] == "abc123"
    assert inside["extra"]["stage"] == "frequency"
    assert timing["message"] == "Step timing"
    assert timing["extra"]["step"] == "lookup"
    assert timing["extra"]["seconds"] >= 0
    assert outside["extra"]["search_id"] == "-"


def test_search_logs_compiled_predicate() -> None:
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="INFO")
    try:
        run_queries([DataSourceFilter(data_sources=(DataSource(id=7),))], FakeCaseCatalog([]))
    finally:
        logger.remove(sink_id)

    assert "Running case database query: (data_source_obj_id IN ('7'))" in messages
