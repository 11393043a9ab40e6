"""Settings-driven entry point wiring the SQL stores into :func:`run_queries`."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Sequence

import yaml

from filediscovery.config.settings import Settings, get_settings
from filediscovery.entities.core import ResultFile
from filediscovery.stores.case_database import SqlCaseCatalog
from filediscovery.stores.central_repository import SqlCentralRepository
from filediscovery.utils.logging import get_logger, logging_context

from .engine import run_queries
from .filters import BaseFileFilter, FrequencyFilter, load_filters


def load_filter_file(path: str | Path) -> List[BaseFileFilter]:
    """Load an ordered filter list from a YAML file.

    The file holds either a top-level list or a mapping with a ``filters`` key.
    Each entry is a mapping with a ``kind`` discriminator.
    """

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Filter file not found: {source}")
    with source.open("r", encoding="utf-8") as handle:
        loaded: Any = yaml.safe_load(handle)
    if isinstance(loaded, dict):
        loaded = loaded.get("filters")
    if not isinstance(loaded, list):
        raise ValueError(f"Filter file '{source}' must contain a list of filters")
    return load_filters(loaded)


def apply_frequency_thresholds(
    filters: Sequence[BaseFileFilter], settings: Settings
) -> List[BaseFileFilter]:
    """Give frequency filters the configured thresholds unless set explicitly."""

    thresholds = settings.policies.search.frequency_thresholds
    configured: List[BaseFileFilter] = []
    for flt in filters:
        if isinstance(flt, FrequencyFilter) and "thresholds" not in flt.model_fields_set:
            flt = flt.model_copy(update={"thresholds": thresholds})
        configured.append(flt)
    return configured


def search_case(
    filters: Sequence[BaseFileFilter],
    *,
    settings: Settings | None = None,
    case_database_url: str | None = None,
    central_repository_url: str | None = None,
    max_workers: int | None = None,
) -> List[ResultFile]:
    """Run ``filters`` against the SQL case database and central repository."""

    cfg = settings or get_settings()
    log = get_logger(module=__name__)
    stores = cfg.policies.stores

    case_catalog = SqlCaseCatalog(case_database_url or stores.case_database_url, echo=stores.echo_sql)
    repository_url = central_repository_url or stores.central_repository_url
    repository = SqlCentralRepository(repository_url, echo=stores.echo_sql) if repository_url else None
    workers = max_workers or cfg.policies.search.enrichment_workers

    try:
        with logging_context(stage="search"):
            results = run_queries(
                apply_frequency_thresholds(filters, cfg),
                case_catalog,
                repository,
                max_workers=workers,
            )
    finally:
        case_catalog.dispose()
        if repository is not None:
            repository.dispose()

    log.info("Case search finished", matched=len(results), workers=workers)
    return results


__all__ = ["load_filter_file", "apply_frequency_thresholds", "search_case"]
