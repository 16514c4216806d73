from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from .schema import Settings

DEFAULT_CONFIG_PATH = Path("config/default.yaml")
OVERRIDES_ENV_VAR = "QUIZ_CATALOG_CONFIG_OVERRIDES"


def read_yaml(path: Path) -> Dict[str, Any]:
    """Parse a catalog config file; a blank file counts as no settings."""
    if not path.exists():
        raise FileNotFoundError(f"Quiz catalog config not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must hold a mapping of config sections")
    return data


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay `override` onto `base` section by section; neither input is modified."""
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_dicts(current, value)
        merged[key] = value
    return merged


def _env_overrides() -> Dict[str, Any]:
    raw = os.getenv(OVERRIDES_ENV_VAR)
    if not raw:
        return {}
    try:
        overrides = json.loads(raw)
    except json.JSONDecodeError as err:
        raise ValueError(f"Failed to parse {OVERRIDES_ENV_VAR} env var as JSON.") from err
    if not isinstance(overrides, dict):
        raise ValueError(f"{OVERRIDES_ENV_VAR} must be a JSON object of config sections.")
    return overrides


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Build the catalog's Settings from YAML plus `QUIZ_CATALOG_CONFIG_OVERRIDES`.

    An explicit `config_path` must exist. Without one, `config/default.yaml` is used when
    present and built-in defaults otherwise. Schema errors surface as `ValueError`.
    """
    if config_path is not None:
        data = read_yaml(Path(config_path))
    elif DEFAULT_CONFIG_PATH.exists():
        data = read_yaml(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    data = merge_dicts(data, _env_overrides())
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
