from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from tx_ledger.usecases.config_models import AppConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "baseline_config.yml"


# ConfigError is raised for invalid configuration (fail fast).
class ConfigError(ValueError):
    pass


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {path}: {exc}") from exc
