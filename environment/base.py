"""Environment contracts for evolutionary simulations."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, Mapping


class Environment(ABC):
    """Abstract interface for single-agent episode environments.

    One environment instance belongs to exactly one game instance. Episodes must
    replay deterministically when reset with equivalent configuration and seed.
    """

    @abstractmethod
    def reset(self) -> Mapping[str, Any]:
        """Reset the environment to its initial state.

        Returns:
            Mapping[str, Any]: Initial observation.

        Invariants:
            - Must fully reset internal episode state.
            - Must be deterministic under equivalent seed/configuration.
        """

    @abstractmethod
    def step(self, action: Any) -> Mapping[str, Any]:
        """Advance environment state by one simulation step.

        Args:
            action (Any): Action chosen by the agent.

        Returns:
            Mapping[str, Any]: Transition payload with at least ``observation``,
                ``reward`` and ``done``.

        Invariants:
            - Must be a no-op once the episode is over.
        """

    @abstractmethod
    def observe(self) -> Mapping[str, Any]:
        """Return the current observation without mutating state."""

    @property
    @abstractmethod
    def is_over(self) -> bool:
        """Whether the episode has reached a terminal state."""

    @property
    @abstractmethod
    def score(self) -> float:
        """Episode score accumulated so far."""

    @property
    @abstractmethod
    def steps(self) -> int:
        """Number of steps taken in the current episode."""

    def copy(self) -> "Environment":
        """Return an independent deep copy."""
        return copy.deepcopy(self)
