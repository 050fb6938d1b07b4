"""Fixed-size population of game instances evolved by roulette selection."""

from __future__ import annotations

import logging
import random

import numpy as np

from agents.base import Agent
from core.game_instance import GameInstance
from core.weighted_sampler import weighted_random_selection
from environment.base import Environment
from evolution.fitness import FitnessFunction, score_fitness

LOGGER = logging.getLogger(__name__)


class SelectionError(RuntimeError):
    """Raised when roulette selection cannot pick a survivor."""


class PopulationController:
    """Owns ``size`` game instances and advances them generation by generation.

    An external driver calls ``advance_all`` until ``all_terminal`` holds, then
    ``next_generation``. The controller never decides when an episode ends and
    has no stop condition of its own.

    Selection randomness comes from ``rng`` and mutation randomness from
    ``mutation_rng``; both are injected so runs replay under a fixed seed.
    """

    def __init__(
        self,
        size: int,
        prototype_agent: Agent,
        prototype_environment: Environment,
        fitness_function: FitnessFunction = score_fitness,
        rng: random.Random | None = None,
        mutation_rng: np.random.Generator | None = None,
    ) -> None:
        if size <= 0:
            raise ValueError("Population size must be > 0.")
        self.size = int(size)
        self.rng = rng or random.Random(0)
        self.mutation_rng = mutation_rng if mutation_rng is not None else np.random.default_rng(0)

        self.generation: int = 0
        self.last_fitnesses: tuple[float, ...] = ()
        self.last_parent_indices: tuple[int, ...] = ()

        self._instances: list[GameInstance] = []
        for _ in range(self.size):
            instance = GameInstance(
                agent=prototype_agent.copy(),
                environment=prototype_environment.copy(),
                fitness_function=fitness_function,
            )
            instance.reset()
            self._instances.append(instance)

    @property
    def instances(self) -> tuple[GameInstance, ...]:
        """Read-only ordered view of the population."""
        return tuple(self._instances)

    @property
    def agents(self) -> tuple[Agent, ...]:
        """Agents in population order, for rendering and logging."""
        return tuple(instance.agent for instance in self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    def advance_all(self) -> None:
        """Advance every instance by one step; terminal instances are skipped."""
        for instance in self._instances:
            instance.advance()

    def all_terminal(self) -> bool:
        return all(instance.is_terminal for instance in self._instances)

    def fitnesses(self) -> list[float]:
        """Return current fitness per instance without mutating any instance."""
        return [instance.fitness() for instance in self._instances]

    def next_generation(self) -> None:
        """Run ``selection`` then ``mutation``.

        Callers must wait for ``all_terminal``; calling early selects over
        partially evaluated episodes.
        """
        if not self.all_terminal():
            LOGGER.warning(
                "next_generation called at generation %d before all instances finished.",
                self.generation,
            )
        self.selection()
        self.mutation()
        self.generation += 1

    def selection(self) -> None:
        """Replace the population with ``size`` fitness-proportionate picks.

        Each pick is cloned and reset, so a parent chosen several times yields
        independent children that diverge under mutation. A zero total fitness
        normalizes to all-NaN weights, which the sampler treats as uniform.
        """
        fitnesses = self.fitnesses()
        total_fitness = sum(fitnesses)
        if total_fitness == 0:
            normalized = [float("nan")] * len(fitnesses)
        else:
            normalized = [fitness / total_fitness for fitness in fitnesses]

        indices = list(range(len(self._instances)))
        new_instances: list[GameInstance] = []
        parent_indices: list[int] = []
        for _ in range(self.size):
            parent_index = weighted_random_selection(indices, normalized, self.rng)
            if parent_index is None:
                raise SelectionError(
                    f"No survivor could be selected from fitnesses {fitnesses!r}."
                )
            child = self._instances[parent_index].copy()
            child.reset()
            new_instances.append(child)
            parent_indices.append(parent_index)

        self._instances = new_instances
        self.last_fitnesses = tuple(fitnesses)
        self.last_parent_indices = tuple(parent_indices)
        LOGGER.debug(
            "Generation %d selection: total fitness %.3f, %d distinct parents",
            self.generation,
            total_fitness,
            len(set(parent_indices)),
        )

    def mutation(self) -> None:
        """Mutate every instance exactly once."""
        for instance in self._instances:
            instance.mutate(self.mutation_rng)
