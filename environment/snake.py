"""Tile-based snake board: movement, collision, food and scoring."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

from environment.base import Environment

LOGGER = logging.getLogger(__name__)

Tile = tuple[int, int]

# Relative actions shared by snake environments/agents.
ACTION_STRAIGHT = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2
ACTION_SPACE: tuple[int, ...] = (ACTION_STRAIGHT, ACTION_LEFT, ACTION_RIGHT)

# danger (3) + food direction (3) + food distance + bias
N_FEATURES = 8


def manhattan_distance(a: Tile, b: Tile) -> int:
    """Distance between two tiles in tiles."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def turn(direction: Tile, action: int) -> Tile:
    """Apply a relative action to a heading (y grows downwards)."""
    dx, dy = direction
    if action == ACTION_LEFT:
        return (dy, -dx)
    if action == ACTION_RIGHT:
        return (-dy, dx)
    if action == ACTION_STRAIGHT:
        return direction
    raise ValueError(f"Unknown action: {action}")


@dataclass
class SnakeEnvironment(Environment):
    """Single snake on a bounded ``width`` x ``height`` board.

    The snake starts with length 1 at the board centre heading right. Leaving
    the board, running into its own body, or going ``max_steps_without_food``
    steps without eating ends the episode. Score is body length minus one.
    Food positions are drawn from ``random.Random(seed)``, re-seeded on every
    reset so each episode on the same board sees the same food sequence.
    """

    width: int = 20
    height: int = 20
    max_steps_without_food: int = 100
    seed: int = 0
    body: list[Tile] = field(default_factory=list, init=False)
    direction: Tile = field(default=(1, 0), init=False)
    food: Tile | None = field(default=None, init=False)
    _rng: random.Random = field(default_factory=random.Random, init=False, repr=False)
    _steps: int = field(default=0, init=False)
    _steps_since_food: int = field(default=0, init=False)
    _over: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.width < 2 or self.height < 2:
            raise ValueError("Snake board must be at least 2x2 tiles.")
        if self.max_steps_without_food <= 0:
            raise ValueError("max_steps_without_food must be > 0")
        self.reset()

    def reset(self) -> Mapping[str, Any]:
        """Place a length-1 snake at the centre and spawn the first food."""
        self._rng = random.Random(self.seed)
        self.body = [(self.width // 2, self.height // 2)]
        self.direction = (1, 0)
        self._steps = 0
        self._steps_since_food = 0
        self._over = False
        self.food = self._place_food()
        return self.observe()

    @property
    def head(self) -> Tile:
        return self.body[0]

    @property
    def is_over(self) -> bool:
        return self._over

    @property
    def score(self) -> float:
        return float(len(self.body) - 1)

    @property
    def steps(self) -> int:
        return self._steps

    def step(self, action: Any) -> Mapping[str, Any]:
        """Turn, move one tile, and resolve food and collisions."""
        if self._over:
            return self._transition(reward=0.0)

        self.direction = turn(self.direction, int(action))
        head_x, head_y = self.head
        new_head = (head_x + self.direction[0], head_y + self.direction[1])
        self._steps += 1

        if self._outside(new_head):
            self._over = True
            return self._transition(reward=0.0)

        ate = new_head == self.food
        self.body.insert(0, new_head)
        if ate:
            self._steps_since_food = 0
        else:
            self.body.pop()
            self._steps_since_food += 1

        if new_head in self.body[1:]:
            self._over = True
        elif ate:
            self.food = self._place_food()
            if self.food is None:
                LOGGER.debug("Board filled after %d steps", self._steps)
                self._over = True
        if self._steps_since_food >= self.max_steps_without_food:
            self._over = True

        return self._transition(reward=1.0 if ate else 0.0)

    def observe(self) -> Mapping[str, Any]:
        return {
            "features": self.features(),
            "action_space": list(ACTION_SPACE),
            "step": self._steps,
        }

    def features(self) -> np.ndarray:
        """Encode board state relative to the current heading."""
        values = np.zeros(N_FEATURES, dtype=float)
        for index, action in enumerate(ACTION_SPACE):
            dx, dy = turn(self.direction, action)
            values[index] = 1.0 if self._blocked((self.head[0] + dx, self.head[1] + dy)) else 0.0

        if self.food is not None:
            to_food = (self.food[0] - self.head[0], self.food[1] - self.head[1])
            dx, dy = self.direction
            ahead = to_food[0] * dx + to_food[1] * dy
            # Positive cross product means the food is on the right (y down).
            side = dx * to_food[1] - dy * to_food[0]
            values[3] = 1.0 if ahead > 0 else 0.0
            values[4] = 1.0 if side < 0 else 0.0
            values[5] = 1.0 if side > 0 else 0.0
            values[6] = manhattan_distance(self.head, self.food) / float(self.width + self.height)
        values[7] = 1.0
        return values

    def _transition(self, reward: float) -> Mapping[str, Any]:
        return {
            "observation": self.observe(),
            "reward": reward,
            "done": self._over,
            "score": self.score,
            "step": self._steps,
        }

    def _outside(self, tile: Tile) -> bool:
        x, y = tile
        return x < 0 or x >= self.width or y < 0 or y >= self.height

    def _blocked(self, tile: Tile) -> bool:
        # The tail tile moves away on the next step.
        return self._outside(tile) or tile in self.body[:-1]

    def _place_food(self) -> Tile | None:
        occupied = set(self.body)
        free = [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in occupied
        ]
        if not free:
            return None
        return self._rng.choice(free)
