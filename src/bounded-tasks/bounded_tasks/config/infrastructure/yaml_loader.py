"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bounded_tasks.config.domain.config import BoundedTasksConfig
from bounded_tasks.config.domain.observer import ConfigObserver
from bounded_tasks.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from bounded_tasks.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a BoundedTasksConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> BoundedTasksConfig:
        """
        Load, interpolate, validate, and return a BoundedTasksConfig from a YAML file.

        An empty file yields the all-defaults config.

        Raises:
            ConfigLoadError: if the file is missing, unreadable, or not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} without a fallback is unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        cfg = _build_config(interpolated=interpolated)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(name=cfg.name, path=str(path))
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigLoadError(path=path, reason=f"cannot read file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top level must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(interpolated: Any) -> BoundedTasksConfig:
    try:
        return BoundedTasksConfig.model_validate(interpolated)
    except ValidationError as exc:
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        raise ConfigValidationError(reason=str(exc), fields=fields) from exc


def _emit_warnings(cfg: BoundedTasksConfig, observer: ConfigObserver) -> None:
    if cfg.retry.max_delay_seconds < cfg.retry.initial_delay_seconds:
        observer.config_max_delay_below_initial_delay_warning(
            initial_delay_seconds=cfg.retry.initial_delay_seconds,
            max_delay_seconds=cfg.retry.max_delay_seconds,
        )
