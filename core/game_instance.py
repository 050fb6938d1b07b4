"""One agent paired with one environment for a single episode."""

from __future__ import annotations

import logging

import numpy as np

from agents.base import Agent
from environment.base import Environment
from evolution.fitness import FitnessFunction, score_fitness

LOGGER = logging.getLogger(__name__)


class GameInstance:
    """Agent + environment pairing driven one step at a time.

    The instance owns both collaborators exclusively. ``reset`` clears episode
    state only; the agent's genome survives it.
    """

    def __init__(
        self,
        agent: Agent,
        environment: Environment,
        fitness_function: FitnessFunction = score_fitness,
    ) -> None:
        self.agent = agent
        self.environment = environment
        self.fitness_function = fitness_function

    @property
    def is_terminal(self) -> bool:
        return bool(self.environment.is_over)

    @property
    def score(self) -> float:
        return float(self.environment.score)

    @property
    def steps(self) -> int:
        return int(self.environment.steps)

    def advance(self) -> None:
        """Run one observe/act/step cycle. No-op once terminal."""
        if self.is_terminal:
            return
        observation = self.agent.observe(self.environment.observe())
        action = self.agent.act(observation)
        self.environment.step(action)

    def reset(self) -> None:
        self.environment.reset()

    def mutate(self, rng: np.random.Generator) -> None:
        self.agent.mutate(rng)

    def fitness(self) -> float:
        """Return the non-negative fitness of the current episode state."""
        value = float(self.fitness_function(self.environment))
        if value < 0:
            LOGGER.warning("Fitness function returned %s; clamping to 0.", value)
            return 0.0
        return value

    def copy(self) -> "GameInstance":
        """Return an instance with independent deep copies of agent and environment."""
        return GameInstance(
            agent=self.agent.copy(),
            environment=self.environment.copy(),
            fitness_function=self.fitness_function,
        )
