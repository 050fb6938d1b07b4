"""Fitness strategies mapping a terminal episode to a non-negative scalar."""

from __future__ import annotations

from typing import Callable

from environment.base import Environment


FitnessFunction = Callable[[Environment], float]


def score_fitness(environment: Environment) -> float:
    """Episode score (food eaten)."""
    return float(environment.score)


def squared_score_fitness(environment: Environment) -> float:
    """Squared score, widening the gap between good and mediocre snakes."""
    return float(environment.score) ** 2


def score_survival_fitness(survival_weight: float = 0.01) -> FitnessFunction:
    """Return a fitness rewarding food first and survival time second."""
    if survival_weight < 0:
        raise ValueError("survival_weight must be >= 0")

    def _fitness(environment: Environment) -> float:
        return float(environment.score) + survival_weight * float(environment.steps)

    return _fitness
