"""Random-action agent implementations."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from agents.base import Agent
from agents.genome import Genome


@dataclass
class RandomSnakeAgent(Agent):
    """Baseline agent that selects uniformly from the observation's action space.

    The genome is carried and mutated so population metrics stay comparable with
    learning agents, but it never influences the chosen action.
    """

    genome: Genome
    rng: random.Random
    agent_id: str = ""
    mutation_rate: float = 0.05
    mutation_scale: float = 0.2

    def act(self, observation: Any) -> int:
        """Select an action index from ``observation['action_space']``."""
        if not isinstance(observation, dict) or "action_space" not in observation:
            raise ValueError("Observation must be a mapping with an 'action_space' key.")
        action_space: Sequence[int] = observation["action_space"]
        if not action_space:
            raise ValueError("Action space must be non-empty.")
        return int(self.rng.choice(list(action_space)))

    def mutate(self, rng: np.random.Generator) -> None:
        """Mutate the genome and reseed the action stream so clones diverge."""
        self.genome = self.genome.mutate(self.mutation_rate, self.mutation_scale, rng)
        self.rng.seed(int(rng.integers(0, 2**32)))

    def get_genome(self) -> Genome:
        """Return current genome."""
        return self.genome

    def set_genome(self, genome: Genome) -> None:
        """Assign a new genome."""
        self.genome = genome
