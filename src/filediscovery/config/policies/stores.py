"""Data store connection policy models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class StorePolicy(BaseModel):
    """Connection settings for the case database and the central repository."""

    case_database_url: str = Field(
        default="sqlite:///case/autopsy.db",
        min_length=1,
        description="SQLAlchemy URL of the case database holding tsk_files.",
    )
    central_repository_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL of the central repository; frequency filters need it.",
    )
    echo_sql: bool = Field(default=False)

    @field_validator("central_repository_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None


__all__ = ["StorePolicy"]
