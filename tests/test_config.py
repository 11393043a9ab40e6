"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from filediscovery.config.policies import Policies, load_policies
from filediscovery.config.settings import Settings


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "default.yaml").write_text(
        yaml.safe_dump(
            {
                "policy_version": "test-version",
                "search": {"enrichment_workers": 2, "frequency_thresholds": {"rare_max_count": 5}},
                "stores": {"case_database_url": "sqlite:///default.db"},
                "logging": {"level": "info", "file_enabled": False},
            }
        ),
        encoding="utf-8",
    )
    (directory / "production.yaml").write_text(
        yaml.safe_dump({"search": {"enrichment_workers": 8}, "stores": {"central_repository_url": "  "}}),
        encoding="utf-8",
    )
    return directory


def test_policies_defaults() -> None:
    policies = Policies()

    assert policies.search.enrichment_workers == 1
    assert policies.search.frequency_thresholds.unique_max_count == 0
    assert policies.search.frequency_thresholds.rare_max_count == 10
    assert policies.stores.central_repository_url is None
    assert policies.logging.level == "INFO"


def test_settings_reads_default_yaml(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir, environment="development")

    assert settings.policy_version == "test-version"
    assert settings.policies.search.enrichment_workers == 2
    assert settings.policies.search.frequency_thresholds.rare_max_count == 5
    assert settings.policies.stores.case_database_url == "sqlite:///default.db"
    assert settings.policies.logging.level == "INFO"


def test_environment_yaml_overrides_defaults(config_dir: Path) -> None:
    settings = Settings(config_dir=config_dir, environment="production")

    assert settings.policies.search.enrichment_workers == 8
    assert settings.policies.search.frequency_thresholds.rare_max_count == 5
    assert settings.policies.stores.central_repository_url is None


def test_policy_env_overrides_take_precedence(config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILEDISCOVERY_POLICY__SEARCH__ENRICHMENT_WORKERS", "16")
    monkeypatch.setenv("FILEDISCOVERY_POLICY__STORES__CENTRAL_REPOSITORY_URL", "sqlite:///central.db")

    settings = Settings(config_dir=config_dir, environment="production")

    assert settings.policies.search.enrichment_workers == 16
    assert settings.policies.stores.central_repository_url == "sqlite:///central.db"


def test_load_policies_from_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "policies.yaml"
    path.write_text(yaml.safe_dump({"search": {"max_results_displayed": 25}}), encoding="utf-8")

    policies = load_policies(path)

    assert policies.search.max_results_displayed == 25
    with pytest.raises(FileNotFoundError):
        load_policies(tmp_path / "missing.yaml")


def test_load_policies_does_not_mutate_input() -> None:
    raw = {"search": {"enrichment_workers": 3}}

    load_policies(raw)

    assert raw == {"search": {"enrichment_workers": 3}}


def test_invalid_policy_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        load_policies({"search": {"enrichment_workers": 0}})
    with pytest.raises(ValidationError):
        load_policies({"search": {"frequency_thresholds": {"unique_max_count": 4, "rare_max_count": 1}}})
    with pytest.raises(ValidationError):
        load_policies({"logging": {"level": "chatty"}})


def test_log_file_lives_in_logs_dir(config_dir: Path, tmp_path: Path) -> None:
    settings = Settings(config_dir=config_dir, paths={"logs_dir": tmp_path / "logs"})

    assert settings.log_file == tmp_path / "logs" / "filediscovery.log"
