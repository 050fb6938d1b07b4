"""Factories/registries for agents, environments and fitness strategies."""

from __future__ import annotations

import random
from typing import Callable

import numpy as np

from agents.base import Agent
from agents.random_agent import RandomSnakeAgent
from agents.snake_agent import LinearSnakeAgent
from agents.weight_genome import WeightGenome
from configs.loader import ExperimentConfig
from environment.base import Environment
from environment.snake import ACTION_SPACE, N_FEATURES, SnakeEnvironment
from evolution.fitness import (
    FitnessFunction,
    score_fitness,
    score_survival_fitness,
    squared_score_fitness,
)


AgentFactory = Callable[[str, np.random.Generator, random.Random, ExperimentConfig], Agent]
EnvironmentFactory = Callable[[ExperimentConfig], Environment]
FitnessFactory = Callable[[ExperimentConfig], FitnessFunction]


_AGENT_FACTORIES: dict[str, AgentFactory] = {}
_ENVIRONMENT_FACTORIES: dict[str, EnvironmentFactory] = {}
_FITNESS_FACTORIES: dict[str, FitnessFactory] = {}


def register_agent_factory(name: str, factory: AgentFactory) -> None:
    _AGENT_FACTORIES[str(name)] = factory


def register_environment_factory(name: str, factory: EnvironmentFactory) -> None:
    _ENVIRONMENT_FACTORIES[str(name)] = factory


def register_fitness_factory(name: str, factory: FitnessFactory) -> None:
    _FITNESS_FACTORIES[str(name)] = factory


def available_agent_factories() -> list[str]:
    return sorted(_AGENT_FACTORIES)


def available_environment_factories() -> list[str]:
    return sorted(_ENVIRONMENT_FACTORIES)


def available_fitness_factories() -> list[str]:
    return sorted(_FITNESS_FACTORIES)


def create_agent(
    name: str,
    agent_id: str,
    genome_rng: np.random.Generator,
    policy_rng: random.Random,
    config: ExperimentConfig,
) -> Agent:
    factory = _AGENT_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_agent_factories()) or "<none>"
        raise ValueError(f"Unknown agent factory '{name}'. Available: {available}")
    return factory(agent_id, genome_rng, policy_rng, config)


def create_environment(name: str, config: ExperimentConfig) -> Environment:
    factory = _ENVIRONMENT_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_environment_factories()) or "<none>"
        raise ValueError(f"Unknown environment factory '{name}'. Available: {available}")
    return factory(config)


def create_fitness(name: str, config: ExperimentConfig) -> FitnessFunction:
    factory = _FITNESS_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_fitness_factories()) or "<none>"
        raise ValueError(f"Unknown fitness factory '{name}'. Available: {available}")
    return factory(config)


def _initial_genome(genome_rng: np.random.Generator) -> WeightGenome:
    return WeightGenome.random(len(ACTION_SPACE), N_FEATURES, genome_rng)


def _linear_agent_factory(
    agent_id: str,
    genome_rng: np.random.Generator,
    _policy_rng: random.Random,
    config: ExperimentConfig,
) -> Agent:
    return LinearSnakeAgent(
        genome=_initial_genome(genome_rng),
        agent_id=agent_id,
        mutation_rate=float(config.mutation_rate),
        mutation_scale=float(config.get("mutation_scale")),
    )


def _random_agent_factory(
    agent_id: str,
    genome_rng: np.random.Generator,
    policy_rng: random.Random,
    config: ExperimentConfig,
) -> Agent:
    return RandomSnakeAgent(
        genome=_initial_genome(genome_rng),
        rng=policy_rng,
        agent_id=agent_id,
        mutation_rate=float(config.mutation_rate),
        mutation_scale=float(config.get("mutation_scale")),
    )


def _snake_environment_factory(config: ExperimentConfig) -> Environment:
    return SnakeEnvironment(
        width=int(config.get("board_width")),
        height=int(config.get("board_height")),
        max_steps_without_food=int(config.get("max_steps_without_food")),
        seed=int(config.seed),
    )


def _score_fitness_factory(_config: ExperimentConfig) -> FitnessFunction:
    return score_fitness


def _squared_score_fitness_factory(_config: ExperimentConfig) -> FitnessFunction:
    return squared_score_fitness


def _score_survival_fitness_factory(config: ExperimentConfig) -> FitnessFunction:
    return score_survival_fitness(float(config.get("survival_weight")))


def _register_defaults() -> None:
    if _AGENT_FACTORIES:
        return
    register_agent_factory("linear", _linear_agent_factory)
    register_agent_factory("random", _random_agent_factory)

    register_environment_factory("snake", _snake_environment_factory)

    register_fitness_factory("score", _score_fitness_factory)
    register_fitness_factory("squared_score", _squared_score_fitness_factory)
    register_fitness_factory("score_survival", _score_survival_fitness_factory)


_register_defaults()
