"""Logging policy models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LoggingPolicy(BaseModel):
    """Sink configuration applied by :func:`configure_logging`."""

    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    file_enabled: bool = Field(default=True)
    rotation: str = Field(default="10 MB", min_length=1)
    retention: str = Field(default="14 days", min_length=1)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return str(value).strip().upper()


__all__ = ["LoggingPolicy"]
