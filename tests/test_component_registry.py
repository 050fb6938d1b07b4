from __future__ import annotations

import random

import numpy as np
import pytest

from agents.base import Agent
from agents.random_agent import RandomSnakeAgent
from agents.snake_agent import LinearSnakeAgent
from configs.loader import ExperimentConfig
from engine.component_registry import (
    available_agent_factories,
    available_environment_factories,
    available_fitness_factories,
    create_agent,
    create_environment,
    create_fitness,
    register_fitness_factory,
)
from environment.base import Environment
from environment.snake import SnakeEnvironment


def _config(**extras) -> ExperimentConfig:
    return ExperimentConfig(
        population_size=4,
        generations=2,
        mutation_rate=0.1,
        environment="snake",
        seed=123,
        extras={"board_width": 9, "board_height": 7, **extras},
    )


def test_default_factories_registered() -> None:
    assert {"linear", "random"} <= set(available_agent_factories())
    assert "snake" in available_environment_factories()
    assert {"score", "squared_score", "score_survival"} <= set(available_fitness_factories())


def test_create_environment_and_agents() -> None:
    config = _config(mutation_scale=0.5)

    env = create_environment("snake", config)
    assert isinstance(env, Environment)
    assert isinstance(env, SnakeEnvironment)
    assert (env.width, env.height, env.seed) == (9, 7, 123)

    linear = create_agent("linear", "agent_0", np.random.default_rng(1), random.Random(1), config)
    assert isinstance(linear, LinearSnakeAgent)
    assert linear.mutation_scale == 0.5
    assert linear.mutation_rate == 0.1

    baseline = create_agent("random", "agent_1", np.random.default_rng(1), random.Random(1), config)
    assert isinstance(baseline, RandomSnakeAgent)
    assert isinstance(baseline, Agent)

    action = linear.act(env.observe())
    assert action in (0, 1, 2)


def test_create_fitness_uses_config() -> None:
    env = create_environment("snake", _config())
    env.body = [(1, 1), (1, 2)]

    assert create_fitness("score", _config())(env) == 1.0
    assert create_fitness("squared_score", _config())(env) == 1.0
    assert create_fitness("score_survival", _config(survival_weight=0.0))(env) == 1.0


def test_unknown_names_raise() -> None:
    with pytest.raises(ValueError, match="Unknown agent factory"):
        create_agent("nope", "a", np.random.default_rng(0), random.Random(0), _config())
    with pytest.raises(ValueError, match="Unknown environment factory"):
        create_environment("nope", _config())
    with pytest.raises(ValueError, match="Unknown fitness factory"):
        create_fitness("nope", _config())


def test_custom_fitness_registration() -> None:
    register_fitness_factory("constant", lambda _config: lambda _env: 2.0)

    assert "constant" in available_fitness_factories()
    assert create_fitness("constant", _config())(create_environment("snake", _config())) == 2.0
