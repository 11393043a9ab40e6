"""Core domain entities used throughout the file search engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from filediscovery.config.policies.search import FrequencyThresholds

BYTES_PER_MB = 1024 * 1024
NO_MAXIMUM = -1


class FileSize(BaseModel):
    """Inclusive-exclusive byte range used by size filters.

    A range covers ``min_bytes < size <= max_bytes``. Ranges with
    ``max_bytes == NO_MAXIMUM`` are open-ended and cover ``size >= min_bytes``.
    Preset names (``xl``, ``large``, ``medium``, ``small``, ``xs``) are
    accepted wherever a :class:`FileSize` is expected.
    """

    model_config = ConfigDict(frozen=True)

    min_bytes: int = Field(..., ge=0)
    max_bytes: int = Field(default=NO_MAXIMUM)
    label: str | None = Field(default=None)

    PRESETS: ClassVar[Dict[str, Tuple[int, int, str]]] = {
        "xl": (1000 * BYTES_PER_MB, NO_MAXIMUM, "1GB+"),
        "large": (200 * BYTES_PER_MB, 1000 * BYTES_PER_MB, "200MB-1GB"),
        "medium": (50 * BYTES_PER_MB, 200 * BYTES_PER_MB, "50-200MB"),
        "small": (1 * BYTES_PER_MB, 50 * BYTES_PER_MB, "1-50MB"),
        "xs": (0, 1 * BYTES_PER_MB, "Under 1MB"),
    }

    @model_validator(mode="before")
    @classmethod
    def _resolve_preset(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        key = value.strip().lower()
        if key not in cls.PRESETS:
            raise ValueError(f"Unknown file size preset '{value}'; expected one of {sorted(cls.PRESETS)}")
        min_bytes, max_bytes, label = cls.PRESETS[key]
        return {"min_bytes": min_bytes, "max_bytes": max_bytes, "label": label}

    @model_validator(mode="after")
    def _validate_bounds(self) -> "FileSize":
        if self.max_bytes != NO_MAXIMUM and self.max_bytes <= self.min_bytes:
            raise ValueError("max_bytes must be greater than min_bytes or NO_MAXIMUM")
        return self

    @classmethod
    def preset(cls, name: str) -> "FileSize":
        return cls.model_validate(name)

    @property
    def has_maximum(self) -> bool:
        return self.max_bytes != NO_MAXIMUM


_BUILTIN_MEDIA_TYPES: Dict[str, Tuple[str, ...]] = {
    "Image": (
        "image/bmp",
        "image/gif",
        "image/jpeg",
        "image/png",
        "image/tiff",
        "image/webp",
        "image/x-icon",
        "image/x-ms-bmp",
        "image/vnd.adobe.photoshop",
        "image/vnd.microsoft.icon",
        "image/x-raw-nikon",
    ),
    "Audio": (
        "audio/midi",
        "audio/mpeg",
        "audio/ogg",
        "audio/wav",
        "audio/webm",
        "audio/vnd.wave",
        "audio/x-ms-wma",
    ),
    "Video": (
        "video/3gpp",
        "video/3gpp2",
        "video/mp4",
        "video/mpeg",
        "video/ogg",
        "video/quicktime",
        "video/webm",
        "video/x-flv",
        "video/x-m4v",
        "video/x-ms-wmv",
        "video/x-msvideo",
    ),
    "Executable": (
        "application/exe",
        "application/x-bat",
        "application/x-dosexec",
        "application/x-exe",
        "application/x-msdownload",
        "application/x-msdos-program",
        "application/x-winexe",
        "application/vnd.microsoft.portable-executable",
    ),
    "Documents": (
        "text/plain",
        "application/rtf",
        "application/pdf",
        "application/msword",
        "application/vnd.ms-excel",
        "application/vnd.ms-powerpoint",
        "application/vnd.oasis.opendocument.text",
        "application/vnd.oasis.opendocument.spreadsheet",
        "application/vnd.oasis.opendocument.presentation",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ),
}


class FileTypeCategory(BaseModel):
    """A named file type grouping and the concrete media types it covers."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    media_types: Tuple[str, ...] = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _resolve_builtin(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        for name, media_types in _BUILTIN_MEDIA_TYPES.items():
            if name.lower() == value.strip().lower():
                return {"name": name, "media_types": media_types}
        raise ValueError(
            f"Unknown file type category '{value}'; expected one of {sorted(_BUILTIN_MEDIA_TYPES)}"
        )

    @field_validator("media_types")
    @classmethod
    def _normalize_media_types(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(item.strip().lower() for item in value if item and item.strip())
        if not cleaned:
            raise ValueError("media_types must contain at least one non-empty entry")
        return cleaned

    @classmethod
    def builtin(cls, name: str) -> "FileTypeCategory":
        return cls.model_validate(name)

    def __str__(self) -> str:
        return self.name


class ParentSearchTerm(BaseModel):
    """Parent path search string and whether it must match the full path."""

    model_config = ConfigDict(frozen=True)

    search_str: str = Field(..., min_length=1)
    full_path: bool = Field(default=False)

    def __str__(self) -> str:
        suffix = "(exact match)" if self.full_path else "(substring)"
        return f"{self.search_str}{suffix}"


class DataSource(BaseModel):
    """A data source (disk image, logical file set) within the case."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0)
    name: str = Field(default="")


class Frequency(str, Enum):
    """How often a file has been seen across cases in the central repository."""

    UNIQUE = "unique"
    RARE = "rare"
    COMMON = "common"
    UNKNOWN = "unknown"

    @classmethod
    def from_count(cls, count: int, thresholds: FrequencyThresholds | None = None) -> "Frequency":
        """Map a distinct (case, data source) occurrence count onto a bucket."""

        bounds = thresholds or FrequencyThresholds()
        if count <= bounds.unique_max_count:
            return cls.UNIQUE
        if count <= bounds.rare_max_count:
            return cls.RARE
        return cls.COMMON


class CorrelationType(BaseModel):
    """Central repository attribute type (files, emails, domains, ...)."""

    model_config = ConfigDict(frozen=True)

    FILES_TYPE_ID: ClassVar[int] = 0

    id: int
    display_name: str
    db_table_name: str = Field(..., pattern=r"^[a-z_]+$")
    supported: bool = True
    enabled: bool = True


@runtime_checkable
class CandidateRecord(Protocol):
    """Attributes the engine reads from a case file record."""

    obj_id: int
    name: str
    parent_path: str
    size: int
    md5_hash: str | None
    mime_type: str | None
    data_source_id: int


class CaseFile(BaseModel):
    """A row of the case database ``tsk_files`` table."""

    model_config = ConfigDict(frozen=True)

    obj_id: int
    name: str
    parent_path: str = Field(default="/")
    size: int = Field(default=0, ge=0)
    md5_hash: str | None = Field(default=None)
    mime_type: str | None = Field(default=None)
    data_source_id: int = Field(default=0)

    @property
    def path(self) -> str:
        return f"{self.parent_path}{self.name}"


@dataclass
class ResultFile:
    """A candidate file plus the attributes computed while filtering it."""

    record: CandidateRecord
    frequency: Frequency = Frequency.UNKNOWN
    occurrence_count: int | None = None

    @property
    def md5_hash(self) -> str | None:
        return self.record.md5_hash

    @property
    def has_hash(self) -> bool:
        return bool(self.md5_hash and self.md5_hash.strip())

    def set_occurrences(self, count: int, thresholds: FrequencyThresholds | None = None) -> Frequency:
        self.occurrence_count = count
        self.frequency = Frequency.from_count(count, thresholds)
        return self.frequency


__all__ = [
    "BYTES_PER_MB",
    "NO_MAXIMUM",
    "FileSize",
    "FileTypeCategory",
    "ParentSearchTerm",
    "DataSource",
    "Frequency",
    "CorrelationType",
    "CandidateRecord",
    "CaseFile",
    "ResultFile",
]
