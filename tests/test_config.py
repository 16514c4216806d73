"""Tests for YAML + environment configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from quiz_catalog.config import Settings, load_settings
from quiz_catalog.config.loader import OVERRIDES_ENV_VAR, merge_dicts


@pytest.fixture(autouse=True)
def _clear_overrides(monkeypatch):
    monkeypatch.delenv(OVERRIDES_ENV_VAR, raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_settings_from_yaml(tmp_path):
    config = _write(
        tmp_path / "catalog.yaml",
        "provider:\n  base_url: https://trivia.example/\n  timeout_seconds: 2.5\n"
        "  question_count: 20\nlogging:\n  level: DEBUG\n",
    )

    settings = load_settings(config)

    assert settings.provider.base_url == "https://trivia.example"
    assert settings.provider.timeout_seconds == 2.5
    assert settings.provider.question_count == 20
    assert settings.logging.level == "DEBUG"
    assert settings.logging.use_json is False


def test_shipped_default_config_is_valid():
    default = Path(__file__).resolve().parents[1] / "config" / "default.yaml"
    settings = load_settings(default)
    assert settings.provider.base_url == "https://opentdb.com"
    assert settings.provider.question_count == 10


def test_env_overrides_are_merged(tmp_path, monkeypatch):
    config = _write(tmp_path / "catalog.yaml", "provider:\n  question_count: 20\n")
    monkeypatch.setenv(OVERRIDES_ENV_VAR, json.dumps({"provider": {"timeout_seconds": 1}}))

    settings = load_settings(config)

    assert settings.provider.question_count == 20
    assert settings.provider.timeout_seconds == 1


def test_defaults_when_no_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings() == Settings()


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


def test_bad_override_json_raises(tmp_path, monkeypatch):
    config = _write(tmp_path / "catalog.yaml", "")
    monkeypatch.setenv(OVERRIDES_ENV_VAR, "{not json")
    with pytest.raises(ValueError, match=OVERRIDES_ENV_VAR):
        load_settings(config)


@pytest.mark.parametrize(
    "body",
    [
        "provider:\n  question_count: 101\n",
        "provider:\n  timeout_seconds: 0\n",
        "provider:\n  base_url: '  '\n",
    ],
)
def test_invalid_configuration_raises(tmp_path, body):
    config = _write(tmp_path / "catalog.yaml", body)
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_settings(config)


def test_merge_dicts_is_recursive():
    base = {"provider": {"base_url": "a", "question_count": 10}, "logging": {"level": "INFO"}}
    merged = merge_dicts(base, {"provider": {"question_count": 5}})
    assert merged == {"provider": {"base_url": "a", "question_count": 5}, "logging": {"level": "INFO"}}
    assert base["provider"]["question_count"] == 10


def test_override_must_be_json_object(tmp_path, monkeypatch):
    config = _write(tmp_path / "catalog.yaml", "")
    monkeypatch.setenv(OVERRIDES_ENV_VAR, json.dumps(["provider"]))
    with pytest.raises(ValueError, match="JSON object"):
        load_settings(config)


def test_yaml_top_level_must_be_mapping(tmp_path):
    config = _write(tmp_path / "catalog.yaml", "- provider\n- logging\n")
    with pytest.raises(ValueError, match="mapping of config sections"):
        load_settings(config)
