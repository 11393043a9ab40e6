"""Two-stage execution of file filters against the case stores."""

from __future__ import annotations

from typing import List, Sequence
from uuid import uuid4

from filediscovery.entities.core import ResultFile
from filediscovery.utils.logging import get_logger, log_timing, logging_context

from .compiler import compile_where_clause
from .describe import format_filter_summary
from .errors import FileSearchError, SearchErrorKind
from .filters import BaseFileFilter
from .stores import CaseCatalog, OccurrenceRepository, StoreError

_LOGGER = get_logger(module=__name__)


def run_queries(
    filters: Sequence[BaseFileFilter],
    case_catalog: CaseCatalog | None,
    occurrence_repository: OccurrenceRepository | None = None,
    *,
    max_workers: int = 1,
) -> List[ResultFile]:
    """Run the given filters and return the matching files.

    All filters with a case database clause are combined into one bulk
    query. The remaining filters are then applied in their original order to
    the wrapped results, stopping as soon as nothing is left.

    ``occurrence_repository`` may be ``None`` as long as no filter needs it.
    ``max_workers`` bounds the per-file lookups made by alternate filters.
    Any failure raises :class:`FileSearchError`; partial results are never
    returned.
    """

    if case_catalog is None:
        raise FileSearchError("Case database parameter is None", kind=SearchErrorKind.INVALID_INPUT)

    where_clause = compile_where_clause(filters)
    alternate_filters = [flt for flt in filters if flt.needs_alternate_evaluation()]
    if alternate_filters and occurrence_repository is None:
        names = ", ".join(type(flt).__name__ for flt in alternate_filters)
        raise FileSearchError(
            f"Central repository is required by: {names}",
            kind=SearchErrorKind.MISCONFIGURED_FILTER,
        )

    with logging_context(search_id=uuid4().hex[:8]):
        _LOGGER.info("Running filters:\n{}", format_filter_summary(filters))
        _LOGGER.info("Running case database query: {}", where_clause)

        try:
            with log_timing("case_database_query", logger_=_LOGGER):
                records = list(case_catalog.find_matching(where_clause))
        except StoreError as exc:
            raise FileSearchError(
                "Error querying case database",
                kind=SearchErrorKind.STORE_FAILURE,
            ) from exc

        if not records:
            _LOGGER.info("Case database query returned no files")
            return []

        results = [ResultFile(record=record) for record in records]
        _LOGGER.debug("Wrapped case database results", count=len(results))

        for flt in alternate_filters:
            with logging_context(stage=flt.kind):
                results = flt.evaluate_alternate(
                    results,
                    case_catalog,
                    occurrence_repository,
                    max_workers=max_workers,
                )
            if not results:
                _LOGGER.info("No files left after alternate filter", filter=flt.kind)
                return results

        _LOGGER.info("File search complete", matched=len(results))
        return results


__all__ = ["run_queries"]
