"""Search execution policy models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class FrequencyThresholds(BaseModel):
    """Count boundaries that map occurrence counts onto frequency buckets.

    ``count`` is the number of distinct (case, data source) pairs in the
    central repository that have observed a hash. Counts up to
    ``unique_max_count`` are unique, counts up to ``rare_max_count`` are
    rare and anything above is common.
    """

    unique_max_count: int = Field(default=0, ge=0)
    rare_max_count: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def _validate_ordering(self) -> "FrequencyThresholds":
        if self.rare_max_count < self.unique_max_count:
            raise ValueError("rare_max_count must not be lower than unique_max_count")
        return self


class SearchPolicy(BaseModel):
    """Controls for the two-stage file search."""

    enrichment_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Worker threads used for per-file central repository lookups.",
    )
    frequency_thresholds: FrequencyThresholds = Field(default_factory=FrequencyThresholds)
    max_results_displayed: int = Field(default=200, ge=1)


__all__ = ["FrequencyThresholds", "SearchPolicy"]
