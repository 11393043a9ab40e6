"""File filters that select a subset of the files in a case.

Every filter contributes to one of two stages. Most filters render a
fragment of a ``WHERE`` clause on the case database ``tsk_files`` table
and are combined into a single bulk query. Filters that depend on data
outside the case database (currently only :class:`FrequencyFilter`) are
applied afterwards to the wrapped bulk results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated, Any, Iterable, List, Literal, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from filediscovery.config.policies.search import FrequencyThresholds
from filediscovery.entities.core import (
    CorrelationType,
    DataSource,
    FileSize,
    FileTypeCategory,
    Frequency,
    ParentSearchTerm,
    ResultFile,
)
from filediscovery.utils.helpers import in_list, quote_literal
from filediscovery.utils.logging import get_logger, log_timing

from .errors import FileSearchError, SearchErrorKind
from .stores import CaseCatalog, OccurrenceRepository, StoreError

KEYWORD_HIT_ARTIFACT_TYPE_ID = 9
SET_NAME_ATTRIBUTE_TYPE_ID = 37

_LOGGER = get_logger(module=__name__)


class BaseFileFilter(BaseModel, ABC):
    """Base class for the filters."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def where_clause(self) -> str:
        """Return a ``tsk_files`` predicate that can be AND-ed with others.

        Filters without a case database form return an empty string.
        """

    def needs_alternate_evaluation(self) -> bool:
        """Whether :meth:`evaluate_alternate` must run after the bulk query."""

        return False

    def evaluate_alternate(
        self,
        results: Sequence[ResultFile],
        case_catalog: CaseCatalog,
        occurrence_repository: OccurrenceRepository | None,
        *,
        max_workers: int = 1,
    ) -> List[ResultFile]:
        """Apply the filter to the current results outside the case database."""

        raise NotImplementedError(f"{type(self).__name__} has no alternate evaluation")

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable description of the selected criteria."""


class SizeFilter(BaseFileFilter):
    """Files whose size falls in any of the given ranges."""

    kind: Literal["size"] = "size"
    sizes: Tuple[FileSize, ...] = Field(..., min_length=1)

    def where_clause(self) -> str:
        ranges = [_size_range_clause(size) for size in self.sizes]
        if len(ranges) == 1:
            return ranges[0]
        return " OR ".join(f"({clause})" for clause in ranges)

    def describe(self) -> str:
        ranges = " or ".join(_size_range_label(size) for size in self.sizes)
        return f"Files with size in range(s): {ranges}"


def _size_range_clause(size: FileSize) -> str:
    if size.has_maximum:
        return f"size > {quote_literal(size.min_bytes)} AND size <= {quote_literal(size.max_bytes)}"
    return f"size >= {quote_literal(size.min_bytes)}"


def _size_range_label(size: FileSize) -> str:
    if size.has_maximum:
        return f"({size.min_bytes} to {size.max_bytes})"
    return f"({size.min_bytes} or more)"


class ParentFilter(BaseFileFilter):
    """Files whose parent path matches any term, exactly or as a substring."""

    kind: Literal["parent_path"] = "parent_path"
    terms: Tuple[ParentSearchTerm, ...] = Field(..., min_length=1)

    def where_clause(self) -> str:
        return " OR ".join(_parent_term_clause(term) for term in self.terms)

    def describe(self) -> str:
        matches = " or ".join(str(term) for term in self.terms)
        return f"Files with paths matching: {matches}"


def _parent_term_clause(term: ParentSearchTerm) -> str:
    if term.full_path:
        return f"parent_path={quote_literal(term.search_str)}"
    return f"parent_path LIKE {quote_literal('%' + term.search_str + '%')}"


class DataSourceFilter(BaseFileFilter):
    """Files that belong to one of the given data sources."""

    kind: Literal["data_source"] = "data_source"
    data_sources: Tuple[DataSource, ...] = Field(..., min_length=1)

    def where_clause(self) -> str:
        return in_list("data_source_obj_id", (source.id for source in self.data_sources))

    def describe(self) -> str:
        sources = " or ".join(f"{source.name}({source.id})" for source in self.data_sources)
        return f"Files in data source(s): {sources}"


class KeywordListFilter(BaseFileFilter):
    """Files with at least one keyword hit from any of the named lists."""

    kind: Literal["keyword_list"] = "keyword_list"
    list_names: Tuple[str, ...] = Field(..., min_length=1)

    @field_validator("list_names")
    @classmethod
    def _strip_names(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(name.strip() for name in value if name and name.strip())
        if not cleaned:
            raise ValueError("list_names must contain at least one non-empty name")
        return cleaned

    def where_clause(self) -> str:
        list_part = " OR ".join(f"value_text = {quote_literal(name)}" for name in self.list_names)
        return (
            "(obj_id IN (SELECT obj_id from blackboard_artifacts WHERE artifact_id IN "
            "(SELECT artifact_id FROM blackboard_attributes "
            f"WHERE artifact_type_id = {KEYWORD_HIT_ARTIFACT_TYPE_ID} "
            f"AND attribute_type_ID = {SET_NAME_ATTRIBUTE_TYPE_ID} "
            f"AND ({list_part}))))"
        )

    def describe(self) -> str:
        return f"Files with keywords in list(s): {', '.join(self.list_names)}"


class FileTypeFilter(BaseFileFilter):
    """Files whose MIME type belongs to one of the given categories."""

    kind: Literal["file_type"] = "file_type"
    categories: Tuple[FileTypeCategory, ...] = Field(..., min_length=1)

    def media_types(self) -> List[str]:
        seen: dict[str, None] = {}
        for category in self.categories:
            for media_type in category.media_types:
                seen.setdefault(media_type, None)
        return list(seen)

    def where_clause(self) -> str:
        return in_list("mime_type", self.media_types())

    def describe(self) -> str:
        return f"Files with type: {' or '.join(str(category) for category in self.categories)}"


class FrequencyFilter(BaseFileFilter):
    """Files whose central repository frequency is one of the given buckets.

    Frequency is derived from the number of distinct (case, data source)
    pairs that have seen the file's MD5 hash. Files without a hash keep
    :attr:`Frequency.UNKNOWN` and only pass when ``UNKNOWN`` is requested.
    """

    kind: Literal["frequency"] = "frequency"
    frequencies: Tuple[Frequency, ...] = Field(..., min_length=1)
    thresholds: FrequencyThresholds = Field(default_factory=FrequencyThresholds)

    @field_validator("frequencies", mode="before")
    @classmethod
    def _lower_names(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(item.strip().lower() if isinstance(item, str) else item for item in value)
        return value

    def where_clause(self) -> str:
        # Frequency lives in the central repository, not the case database.
        return ""

    def needs_alternate_evaluation(self) -> bool:
        return True

    def evaluate_alternate(
        self,
        results: Sequence[ResultFile],
        case_catalog: CaseCatalog,
        occurrence_repository: OccurrenceRepository | None,
        *,
        max_workers: int = 1,
    ) -> List[ResultFile]:
        if occurrence_repository is None:
            raise FileSearchError(
                "Can not run frequency filter without a central repository",
                kind=SearchErrorKind.MISCONFIGURED_FILTER,
            )
        # The bulk query must have run and produced results before this point.
        if not results:
            raise FileSearchError(
                "Can not run frequency filter on an empty result list",
                kind=SearchErrorKind.INVALID_INPUT,
            )

        hashed = [result for result in results if result.has_hash]
        if hashed:
            with log_timing("frequency_lookup", logger_=_LOGGER):
                counts = self._count_occurrences(hashed, occurrence_repository, max_workers)
            for result, count in zip(hashed, counts):
                result.set_occurrences(count, self.thresholds)

        wanted = set(self.frequencies)
        kept = [result for result in results if result.frequency in wanted]
        _LOGGER.debug(
            "Evaluated frequency filter",
            candidates=len(results),
            hashed=len(hashed),
            kept=len(kept),
            frequencies=[frequency.name for frequency in self.frequencies],
        )
        return kept

    def _count_occurrences(
        self,
        hashed: Sequence[ResultFile],
        repository: OccurrenceRepository,
        max_workers: int,
    ) -> List[int]:
        try:
            correlation_type = repository.lookup_frequency_type(CorrelationType.FILES_TYPE_ID)

            def _lookup(result: ResultFile) -> int:
                return int(repository.count_distinct_occurrences(correlation_type, result.md5_hash or ""))

            workers = min(max(1, max_workers), len(hashed))
            if workers == 1:
                return [_lookup(result) for result in hashed]
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="frequency") as pool:
                futures = [pool.submit(_lookup, result) for result in hashed]
                try:
                    return [future.result() for future in futures]
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise
        except StoreError as exc:
            raise FileSearchError(
                "Error querying central repository",
                kind=SearchErrorKind.ENRICHMENT_FAILURE,
            ) from exc

    def describe(self) -> str:
        return f"Files with frequency: {' or '.join(frequency.name for frequency in self.frequencies)}"


FileFilter = Annotated[
    Union[
        SizeFilter,
        ParentFilter,
        DataSourceFilter,
        KeywordListFilter,
        FileTypeFilter,
        FrequencyFilter,
    ],
    Field(discriminator="kind"),
]

_FILTER_LIST_ADAPTER: TypeAdapter[List[FileFilter]] = TypeAdapter(List[FileFilter])


def load_filters(data: Iterable[Any]) -> List[BaseFileFilter]:
    """Validate raw mappings (e.g. parsed YAML) into filter instances."""

    return list(_FILTER_LIST_ADAPTER.validate_python(list(data)))


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
    "KEYWORD_HIT_ARTIFACT_TYPE_ID",
    "SET_NAME_ATTRIBUTE_TYPE_ID",
]
