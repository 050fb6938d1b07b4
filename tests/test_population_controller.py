"""Tests for PopulationController generation lifecycle with stub collaborators."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np
import pytest

from agents.base import Agent
from agents.weight_genome import WeightGenome
from core.population import PopulationController, SelectionError
from environment.base import Environment


@dataclass
class CountingAgent(Agent):
    """Agent stub recording how often it was asked to act and mutate."""

    tag: str = "prototype"
    act_calls: int = 0
    mutate_calls: int = 0
    genome: WeightGenome = field(default_factory=lambda: WeightGenome(weights=np.zeros((1, 1))))

    def act(self, observation: Any) -> int:
        self.act_calls += 1
        return 0

    def mutate(self, rng: np.random.Generator) -> None:
        self.mutate_calls += 1
        self.genome = WeightGenome(weights=self.genome.weights + rng.normal(size=(1, 1)))

    def get_genome(self) -> WeightGenome:
        return self.genome

    def set_genome(self, genome: Any) -> None:
        self.genome = genome


@dataclass
class PayoutEnvironment(Environment):
    """Episode that ends after ``steps_to_finish`` steps with score ``payout``."""

    payout: float = 0.0
    steps_to_finish: int = 1
    _steps: int = 0
    _score: float = 0.0
    _over: bool = False

    def reset(self) -> Mapping[str, Any]:
        self._steps = 0
        self._score = 0.0
        self._over = False
        return self.observe()

    def step(self, action: Any) -> Mapping[str, Any]:
        if not self._over:
            self._steps += 1
            if self._steps >= self.steps_to_finish:
                self._score = self.payout
                self._over = True
        return {"observation": self.observe(), "reward": 0.0, "done": self._over}

    def observe(self) -> Mapping[str, Any]:
        return {"step": self._steps}

    @property
    def is_over(self) -> bool:
        return self._over

    @property
    def score(self) -> float:
        return self._score

    @property
    def steps(self) -> int:
        return self._steps


def _controller(size: int = 4, seed: int = 0, steps_to_finish: int = 1) -> PopulationController:
    return PopulationController(
        size=size,
        prototype_agent=CountingAgent(),
        prototype_environment=PayoutEnvironment(steps_to_finish=steps_to_finish),
        rng=random.Random(seed),
        mutation_rng=np.random.default_rng(seed),
    )


def _set_payouts(controller: PopulationController, payouts: list[float]) -> None:
    for instance, payout in zip(controller.instances, payouts):
        instance.environment.payout = payout
        instance.agent.tag = f"parent_{payout}"


def _finish_episode(controller: PopulationController) -> None:
    while not controller.all_terminal():
        controller.advance_all()


def test_construction_clones_prototype_into_independent_instances() -> None:
    controller = _controller(size=5)

    agents = controller.agents
    environments = [instance.environment for instance in controller.instances]
    assert len(controller) == 5
    assert len({id(agent) for agent in agents}) == 5
    assert len({id(environment) for environment in environments}) == 5
    assert not any(instance.is_terminal for instance in controller.instances)
    assert all(instance.score == 0.0 for instance in controller.instances)


def test_invalid_population_size_raises() -> None:
    with pytest.raises(ValueError):
        _controller(size=0)


def test_views_are_read_only_tuples() -> None:
    controller = _controller()

    assert isinstance(controller.agents, tuple)
    assert isinstance(controller.instances, tuple)


def test_advance_all_steps_every_instance_once() -> None:
    controller = _controller(size=3, steps_to_finish=3)

    controller.advance_all()

    assert [agent.act_calls for agent in controller.agents] == [1, 1, 1]
    assert [instance.steps for instance in controller.instances] == [1, 1, 1]
    assert not controller.all_terminal()


def test_advance_all_is_idempotent_once_terminal() -> None:
    controller = _controller(size=3, steps_to_finish=1)
    controller.advance_all()
    assert controller.all_terminal()

    controller.advance_all()
    controller.advance_all()

    assert [agent.act_calls for agent in controller.agents] == [1, 1, 1]
    assert [instance.steps for instance in controller.instances] == [1, 1, 1]


def test_all_terminal_requires_every_instance() -> None:
    controller = _controller(size=3, steps_to_finish=2)
    controller.instances[0].environment.steps_to_finish = 1

    controller.advance_all()

    assert controller.instances[0].is_terminal
    assert not controller.all_terminal()
    controller.advance_all()
    assert controller.all_terminal()


def test_population_size_is_invariant_across_generations() -> None:
    controller = _controller(size=7, seed=3)
    _set_payouts(controller, [1.0, 0.0, 5.0, 2.0, 0.0, 0.0, 3.0])

    for _ in range(5):
        assert len(controller) == 7
        _finish_episode(controller)
        controller.next_generation()
        assert len(controller) == 7
    assert controller.generation == 5


def test_selection_resets_every_survivor() -> None:
    controller = _controller(size=6, seed=1)
    _set_payouts(controller, [3.0, 1.0, 0.0, 4.0, 2.0, 5.0])
    _finish_episode(controller)
    assert all(instance.fitness() > 0 for instance in controller.instances if instance.environment.payout)

    controller.selection()

    for instance in controller.instances:
        assert instance.is_terminal is False
        assert instance.fitness() == 0.0
        assert instance.steps == 0


def test_mutation_called_exactly_once_per_instance() -> None:
    controller = _controller(size=5, seed=2)
    _set_payouts(controller, [1.0, 1.0, 1.0, 1.0, 1.0])
    _finish_episode(controller)

    controller.next_generation()

    assert [agent.mutate_calls for agent in controller.agents] == [1, 1, 1, 1, 1]


def test_repeated_picks_are_independent_and_diverge() -> None:
    controller = _controller(size=4, seed=5)
    _set_payouts(controller, [0.0, 10.0, 0.0, 0.0])
    _finish_episode(controller)

    controller.next_generation()

    agents = controller.agents
    assert len({id(agent) for agent in agents}) == 4
    weights = {float(agent.get_genome().weights[0, 0]) for agent in agents}
    assert len(weights) == 4


def test_sole_fit_instance_parents_the_whole_next_generation() -> None:
    for seed in range(20):
        controller = _controller(size=4, seed=seed)
        _set_payouts(controller, [0.0, 10.0, 0.0, 0.0])

        controller.advance_all()
        assert controller.all_terminal()
        controller.next_generation()

        assert controller.last_parent_indices == (1, 1, 1, 1)
        assert controller.last_fitnesses == (0.0, 10.0, 0.0, 0.0)
        assert [agent.tag for agent in controller.agents] == ["parent_10.0"] * 4
        assert not any(instance.is_terminal for instance in controller.instances)


def test_zero_total_fitness_selects_uniformly() -> None:
    controller = _controller(size=30, seed=8)
    _finish_episode(controller)

    counts: Counter = Counter()
    for _ in range(200):
        controller.selection()
        counts.update(controller.last_parent_indices)
        _finish_episode(controller)

    assert set(counts) == set(range(30))
    assert max(counts.values()) < 3 * min(counts.values())


def test_fitter_instances_are_picked_more_often() -> None:
    controller = _controller(size=3, seed=4)
    _set_payouts(controller, [1.0, 2.0, 3.0])
    counts: Counter = Counter()

    for _ in range(2_000):
        _finish_episode(controller)
        controller.selection()
        counts.update(controller.last_parent_indices)
        # Survivors inherit their parent's payout; restore the original layout.
        _set_payouts(controller, [1.0, 2.0, 3.0])

    assert counts[2] > counts[1] > counts[0]
    assert 2.5 <= counts[2] / counts[0] <= 3.5


def test_unselectable_population_raises_selection_error() -> None:
    controller = _controller(size=3)
    for instance in controller.instances:
        instance.fitness_function = lambda _env: 1.0
    controller.instances[0].fitness_function = lambda _env: float("inf")
    _finish_episode(controller)

    with pytest.raises(SelectionError):
        controller.selection()


def test_next_generation_before_episode_end_warns_but_proceeds(caplog) -> None:
    controller = _controller(size=3, steps_to_finish=5)
    controller.advance_all()

    with caplog.at_level(logging.WARNING, logger="core.population"):
        controller.next_generation()

    assert "before all instances finished" in caplog.text
    assert len(controller) == 3
    assert controller.generation == 1
