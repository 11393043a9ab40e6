"""Policy models grouped by concern, plus loading with environment overrides."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping

import yaml
from pydantic import BaseModel, Field

from .observability import LoggingPolicy
from .search import FrequencyThresholds, SearchPolicy
from .stores import StorePolicy

POLICY_ENV_PREFIX = "FILEDISCOVERY_POLICY__"


class Policies(BaseModel):
    """All tunable behaviour, versioned as one unit."""

    policy_version: str = Field(default="2026-10-01", min_length=1)
    search: SearchPolicy = Field(default_factory=SearchPolicy)
    stores: StorePolicy = Field(default_factory=StorePolicy)
    logging: LoggingPolicy = Field(default_factory=LoggingPolicy)


def _decode(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _apply_policy_env(raw: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Overlay ``FILEDISCOVERY_POLICY__SECTION__FIELD`` variables onto ``raw``.

    ``FILEDISCOVERY_POLICY__SEARCH__ENRICHMENT_WORKERS=4`` sets
    ``search.enrichment_workers`` to ``4``. Values that parse as JSON are
    decoded; anything else is kept as a string.
    """

    for name, value in sorted(os.environ.items()):
        if not name.startswith(POLICY_ENV_PREFIX):
            continue
        path = [part.lower() for part in name[len(POLICY_ENV_PREFIX) :].split("__") if part]
        if not path:
            continue
        node = raw
        for depth, part in enumerate(path[:-1], start=1):
            child = node.setdefault(part, {})
            if not isinstance(child, MutableMapping):
                raise ValueError(
                    f"{name} cannot override '{'.'.join(path)}': "
                    f"'{'.'.join(path[:depth])}' is not a section"
                )
            node = child
        node[path[-1]] = _decode(value)
    return raw


def load_policies(source: Mapping[str, Any] | str | os.PathLike[str]) -> Policies:
    """Validate policies from a mapping or a YAML file, environment applied last."""

    if isinstance(source, Mapping):
        raw: Dict[str, Any] = copy.deepcopy(dict(source))
    else:
        path = Path(source)
        if not path.is_file():
            raise FileNotFoundError(f"Policy file not found: {path}")
        loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Policy file '{path}' must contain a mapping")
        raw = loaded
    return Policies.model_validate(_apply_policy_env(raw))


__all__ = [
    "Policies",
    "load_policies",
    "SearchPolicy",
    "FrequencyThresholds",
    "StorePolicy",
    "LoggingPolicy",
]
