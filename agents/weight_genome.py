"""Weight-matrix genome driving linear snake policies."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from agents.genome import Genome


@dataclass(frozen=True, eq=False)
class WeightGenome(Genome):
    """Genome holding one weight row per action.

    The matrix is copied and made read-only on construction, so genomes can be
    shared between agents without aliasing mutable state.
    """

    weights: np.ndarray

    def __post_init__(self) -> None:
        matrix = np.array(self.weights, dtype=float)
        if matrix.ndim != 2:
            raise ValueError("WeightGenome weights must be a 2D matrix.")
        matrix.setflags(write=False)
        object.__setattr__(self, "weights", matrix)

    @classmethod
    def random(cls, n_actions: int, n_features: int, rng: np.random.Generator, scale: float = 1.0) -> "WeightGenome":
        """Return a genome with Gaussian-initialized weights."""
        return cls(weights=rng.normal(0.0, scale, size=(n_actions, n_features)))

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.weights.shape[0]), int(self.weights.shape[1]))

    def mutate(self, rate: float, scale: float, rng: np.random.Generator) -> "WeightGenome":
        """Return a copy with each weight perturbed with probability ``rate``."""
        mask = rng.random(self.weights.shape) < rate
        noise = rng.normal(0.0, scale, size=self.weights.shape)
        return WeightGenome(weights=self.weights + mask * noise)

    def distance(self, other: Genome) -> float:
        """Mean absolute weight difference."""
        if not isinstance(other, WeightGenome):
            raise TypeError("WeightGenome distance requires another WeightGenome.")
        if other.shape != self.shape:
            raise ValueError(f"Genome shapes differ: {self.shape} != {other.shape}")
        return float(np.mean(np.abs(self.weights - other.weights)))
