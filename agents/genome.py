"""Genome contracts for evolutionary operators."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class Genome(ABC):
    """Abstract genome representation used by agent mutation.

    Implementations may represent parameter vectors, graph structures, or neural
    encodings, but must preserve deterministic semantics for mutation under
    controlled randomness.
    """

    @abstractmethod
    def mutate(self, rate: float, scale: float, rng: np.random.Generator) -> "Genome":
        """Create a mutated genome derived from this genome.

        Args:
            rate (float): Per-parameter mutation probability.
            scale (float): Magnitude of the perturbation.
            rng (np.random.Generator): Source of mutation randomness.

        Returns:
            Genome: A mutated genome instance.

        Invariants:
            - Must not mutate the original genome instance in place.
            - Behavior should be deterministic given equivalent RNG state.
        """

    @abstractmethod
    def distance(self, other: "Genome") -> float:
        """Measure distance between this genome and ``other``.

        Args:
            other (Genome): Genome to compare against.

        Returns:
            float: Non-negative distance metric value.

        Invariants:
            - Distance must be deterministic for equivalent inputs.
            - Distance must be non-negative.
        """
