"""Runtime settings assembled from YAML layers and the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policies, load_policies

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"
SETTINGS_ENV_PREFIX = "FILEDISCOVERY_SETTINGS__"


def _merge_layers(layers: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Fold mappings left to right; nested mappings merge, other values replace."""

    merged: Dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, Mapping):
                merged[key] = _merge_layers([current, value])
            else:
                merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file '{path}' must contain a mapping")
    return loaded


def _settings_env_layer() -> Dict[str, Any]:
    """Collect ``FILEDISCOVERY_SETTINGS__A__B=value`` variables as ``{"a": {"b": value}}``."""

    layer: Dict[str, Any] = {}
    for name, value in os.environ.items():
        if not name.startswith(SETTINGS_ENV_PREFIX):
            continue
        *parents, leaf = name[len(SETTINGS_ENV_PREFIX) :].lower().split("__")
        node = layer
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
    return layer


class PathsConfig(BaseModel):
    """Where the CLI writes its log files."""

    logs_dir: Path = Field(default=PROJECT_ROOT / "logs")

    def ensure_exists(self) -> None:
        logs_dir = self.logs_dir if self.logs_dir.is_absolute() else PROJECT_ROOT / self.logs_dir
        logs_dir.mkdir(parents=True, exist_ok=True)
        object.__setattr__(self, "logs_dir", logs_dir)


class Settings(BaseSettings):
    """Configuration for searches, stores and logging.

    Later layers win: ``config/default.yaml``, ``config/<environment>.yaml``,
    ``FILEDISCOVERY_SETTINGS__*`` variables, then explicit keyword arguments.
    Policy values additionally honour ``FILEDISCOVERY_POLICY__*`` variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILEDISCOVERY_",
        validate_assignment=True,
        extra="allow",
    )

    environment: Literal["development", "testing", "production"] = Field(default="development")
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    create_dirs: bool = Field(default=False)
    policies: Policies

    @model_validator(mode="before")
    @classmethod
    def _layer_config_files(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        explicit = {key: value for key, value in values.items() if value is not None}
        config_dir = Path(explicit.get("config_dir") or DEFAULT_CONFIG_DIR)
        environment = explicit.get("environment") or os.getenv("FILEDISCOVERY_ENV", "development")

        file_layers = _merge_layers(
            [
                _read_yaml(config_dir / "default.yaml"),
                _read_yaml(config_dir / f"{environment}.yaml"),
                _settings_env_layer(),
            ]
        )
        combined = _merge_layers([file_layers, explicit])

        policies = combined.pop("policies", None)
        if not isinstance(policies, Policies):
            if policies is None:
                policies = {
                    name: file_layers[name]
                    for name in Policies.model_fields
                    if file_layers.get(name) is not None
                }
            policies = load_policies(policies)
        combined["policies"] = policies
        return combined

    @model_validator(mode="after")
    def _create_paths(self) -> "Settings":
        if self.create_dirs:
            self.paths.ensure_exists()
        return self

    @property
    def policy_version(self) -> str:
        return self.policies.policy_version

    @property
    def log_file(self) -> Path:
        return Path(self.paths.logs_dir) / "filediscovery.log"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings", "PathsConfig"]
