"""Linear-policy snake agent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from agents.base import Agent
from agents.genome import Genome
from agents.weight_genome import WeightGenome


@dataclass
class LinearSnakeAgent(Agent):
    """Agent scoring each action as ``weights[action] @ features``.

    The highest-scoring action wins; ties go to the lowest action index.
    """

    genome: WeightGenome
    agent_id: str = ""
    mutation_rate: float = 0.05
    mutation_scale: float = 0.2

    def act(self, observation: Any) -> int:
        if not isinstance(observation, dict) or "features" not in observation:
            raise ValueError("Observation must be a mapping with a 'features' key.")
        features = np.asarray(observation["features"], dtype=float)
        n_actions, n_features = self.genome.shape
        if features.shape != (n_features,):
            raise ValueError(f"Expected {n_features} features, got shape {features.shape}.")
        scores = self.genome.weights @ features
        action_space = observation.get("action_space") or list(range(n_actions))
        return int(action_space[int(np.argmax(scores))])

    def mutate(self, rng: np.random.Generator) -> None:
        self.genome = self.genome.mutate(self.mutation_rate, self.mutation_scale, rng)

    def get_genome(self) -> Genome:
        return self.genome

    def set_genome(self, genome: Genome) -> None:
        if not isinstance(genome, WeightGenome):
            raise TypeError("LinearSnakeAgent requires a WeightGenome.")
        self.genome = genome
