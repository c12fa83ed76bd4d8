from __future__ import annotations

from pathlib import Path

import pytest

from treewalk.config import CheckConfig, ConfigError, load_config, parse_config
from treewalk.constants import DEFAULT_TRIALS


def _write(path: Path, body: str) -> Path:
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_without_file() -> None:
    config = load_config(None)
    assert config.trials == DEFAULT_TRIALS
    assert config.traversal == "stack"
    assert config.shrink.max_iterations > 0


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "treewalk.yaml",
        """
trials: 25
seed: 9
max_size: 12
workers: 3
traversal: recursive
shrink:
  max_seconds: 1.5
  max_iterations: 40
""",
    )
    config = load_config(path)
    assert (config.trials, config.seed, config.max_size, config.workers) == (25, 9, 12, 3)
    assert config.traversal == "recursive"
    assert config.shrink.max_seconds == 1.5
    assert config.shrink.max_iterations == 40


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "treewalk.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == CheckConfig()


def test_overrides_skip_none() -> None:
    config = CheckConfig(trials=10).with_overrides(trials=None, seed=4)
    assert config.trials == 10
    assert config.seed == 4


@pytest.mark.parametrize(
    ("body", "match"),
    [
        ("- 1\n- 2", "must be a mapping"),
        ("trials: 0", "trials must be >= 1"),
        ("trials: ten", "trials must be an integer"),
        ("workers: true", "workers must be an integer"),
        ("traversal: breadth", "Unknown traversal 'breadth'"),
        ("depth: 3", "Unknown config keys: depth"),
        ("shrink: 3", "shrink must be a mapping"),
        ("shrink:\n  budget: 3", "Unknown shrink keys: budget"),
        ("shrink:\n  max_seconds: 0", "shrink.max_seconds must be > 0"),
        ("shrink:\n  max_iterations: 1.5", "shrink.max_iterations must be an integer"),
        ("trials: [", "Invalid YAML"),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, body: str, match: str) -> None:
    path = tmp_path / "treewalk.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=match):
        load_config(path)


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "absent.yaml")


def test_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_config({"max_size": -1})
