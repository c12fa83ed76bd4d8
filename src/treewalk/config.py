from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from treewalk.constants import (
    DEFAULT_MAX_SIZE,
    DEFAULT_SEED,
    DEFAULT_SHRINK_MAX_ITERATIONS,
    DEFAULT_SHRINK_MAX_SECONDS,
    DEFAULT_TRAVERSAL,
    DEFAULT_TRIALS,
    DEFAULT_WORKERS,
)
from treewalk.traverse import TRAVERSALS


class ConfigError(ValueError):
    pass


@dataclass(slots=True)
class ShrinkConfig:
    max_seconds: float = DEFAULT_SHRINK_MAX_SECONDS
    max_iterations: int = DEFAULT_SHRINK_MAX_ITERATIONS


@dataclass(slots=True)
class CheckConfig:
    trials: int = DEFAULT_TRIALS
    seed: int = DEFAULT_SEED
    max_size: int = DEFAULT_MAX_SIZE
    workers: int = DEFAULT_WORKERS
    traversal: str = DEFAULT_TRAVERSAL
    shrink: ShrinkConfig = field(default_factory=ShrinkConfig)

    def validate(self) -> CheckConfig:
        for name in ("trials", "max_size", "workers"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be >= 1")
        if self.traversal not in TRAVERSALS:
            known = ", ".join(sorted(TRAVERSALS))
            raise ConfigError(f"Unknown traversal {self.traversal!r} (expected one of: {known})")
        if self.shrink.max_seconds <= 0:
            raise ConfigError("shrink.max_seconds must be > 0")
        if self.shrink.max_iterations < 1:
            raise ConfigError("shrink.max_iterations must be >= 1")
        return self

    def with_overrides(self, **overrides: Any) -> CheckConfig:
        """Return a copy with every non-``None`` override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied).validate()


_TOP_LEVEL_KEYS = {"trials", "seed", "max_size", "workers", "traversal", "shrink"}
_SHRINK_KEYS = {"max_seconds", "max_iterations"}


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return loaded


def _expect_int(data: dict[str, Any], key: str, prefix: str = "") -> int | None:
    if key not in data:
        return None
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{prefix}{key} must be an integer")
    return value


def parse_config(data: dict[str, Any]) -> CheckConfig:
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    shrink_data = data.get("shrink") or {}
    if not isinstance(shrink_data, dict):
        raise ConfigError("shrink must be a mapping")
    unknown_shrink = sorted(set(shrink_data) - _SHRINK_KEYS)
    if unknown_shrink:
        raise ConfigError(f"Unknown shrink keys: {', '.join(unknown_shrink)}")

    shrink = ShrinkConfig()
    if "max_seconds" in shrink_data:
        max_seconds = shrink_data["max_seconds"]
        if isinstance(max_seconds, bool) or not isinstance(max_seconds, (int, float)):
            raise ConfigError("shrink.max_seconds must be a number")
        shrink.max_seconds = float(max_seconds)
    max_iterations = _expect_int(shrink_data, "max_iterations", prefix="shrink.")
    if max_iterations is not None:
        shrink.max_iterations = max_iterations

    traversal = data.get("traversal", DEFAULT_TRAVERSAL)
    if not isinstance(traversal, str):
        raise ConfigError("traversal must be a string")

    config = CheckConfig(traversal=traversal, shrink=shrink)
    for key in ("trials", "seed", "max_size", "workers"):
        value = _expect_int(data, key)
        if value is not None:
            setattr(config, key, value)
    return config.validate()


def load_config(path: Path | None) -> CheckConfig:
    if path is None:
        return CheckConfig().validate()
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    return parse_config(_load_yaml(path))


__all__ = [
    "CheckConfig",
    "ConfigError",
    "ShrinkConfig",
    "load_config",
    "parse_config",
]
