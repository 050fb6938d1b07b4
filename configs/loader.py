"""Configuration loading and validation utilities for snake evolution experiments."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


_REQUIRED_KEYS: tuple[str, ...] = (
    "population_size",
    "generations",
    "mutation_rate",
    "environment",
    "seed",
)

# Optional keys understood by the default component stack.
DEFAULTS: dict[str, Any] = {
    "agent_type": "linear",
    "fitness": "score",
    "board_width": 20,
    "board_height": 20,
    "max_steps_without_food": 100,
    "mutation_scale": 0.2,
    "max_ticks": 10_000,
    "survival_weight": 0.01,
    "early_stop_score": None,
}


@dataclass(frozen=True)
class ExperimentConfig:
    """Validated experiment configuration container.

    Provides typed field access for required parameters and dictionary-style
    access for extensible optional parameters.
    """

    population_size: int
    generations: int
    mutation_rate: float
    environment: str
    seed: int
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Falls back to ``DEFAULTS`` before ``default`` for known optional keys.
        """
        if hasattr(self, key):
            return getattr(self, key)
        if key in self.extras:
            return self.extras[key]
        return DEFAULTS.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload = {
            "population_size": self.population_size,
            "generations": self.generations,
            "mutation_rate": self.mutation_rate,
            "environment": self.environment,
            "seed": self.seed,
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate experiment configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> ExperimentConfig:
        """Load a single experiment config from ``path``.

        Args:
            path: Path to a YAML or JSON config file.

        Returns:
            A validated ``ExperimentConfig`` instance.
        """
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise ValueError("Single config file must contain a mapping object.")
        return _validate_and_build(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[ExperimentConfig]:
        """Load one or many experiment configs from ``path``.

        Supports:
            - top-level mapping for single experiment
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [_validate_and_build(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ValueError("'experiments' must be a list of mappings.")
            return [_validate_and_build(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [_validate_and_build(payload)]

        raise ValueError("Unsupported config file structure.")


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)

    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)

    raise ValueError(f"Unsupported config extension: {suffix}")


def _validate_and_build(payload: Mapping[str, Any]) -> ExperimentConfig:
    """Validate raw mapping and build ``ExperimentConfig``."""
    if not isinstance(payload, Mapping):
        raise ValueError("Experiment config must be a mapping.")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ValueError(f"Missing required config keys: {', '.join(missing)}")

    population_size = int(payload["population_size"])
    generations = int(payload["generations"])
    mutation_rate = float(payload["mutation_rate"])
    environment = str(payload["environment"])
    seed = int(payload["seed"])

    if population_size <= 0:
        raise ValueError("population_size must be > 0")
    if generations < 0:
        raise ValueError("generations must be >= 0")
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError("mutation_rate must be in [0.0, 1.0]")
    if not environment:
        raise ValueError("environment must be non-empty")

    extras = {k: v for k, v in payload.items() if k not in _REQUIRED_KEYS}
    for key in ("board_width", "board_height"):
        if key in extras and int(extras[key]) < 2:
            raise ValueError(f"{key} must be >= 2")
    for key in ("max_steps_without_food", "max_ticks"):
        if key in extras and int(extras[key]) <= 0:
            raise ValueError(f"{key} must be > 0")
    if "mutation_scale" in extras and float(extras["mutation_scale"]) < 0:
        raise ValueError("mutation_scale must be >= 0")

    return ExperimentConfig(
        population_size=population_size,
        generations=generations,
        mutation_rate=mutation_rate,
        environment=environment,
        seed=seed,
        extras=extras,
    )
