"""Generation loop driver for a population controller."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Mapping, Sequence

from core.population import PopulationController
from data.logger import SimulationLogger

LOGGER = logging.getLogger(__name__)


class SimulatorState(str, enum.Enum):
    """Execution control states for the generation loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class SimulatorExecutionError(RuntimeError):
    """Raised when one simulator lifecycle phase fails."""


class Simulator:
    """Drives a ``PopulationController`` through successive generations.

    The simulator owns the episode-completion policy: it advances every
    instance until all are terminal (or ``max_ticks`` is reached) and only then
    asks the controller for the next generation.
    """

    def __init__(
        self,
        controller: PopulationController,
        max_ticks: int = 10_000,
        seed: int | None = None,
        logger: SimulationLogger | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        if max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")
        self.controller = controller
        self.max_ticks = int(max_ticks)
        self.seed = seed

        self.logger = logger
        self.config = dict(config or {})
        self.experiment_id: str | None = None
        if self.logger is not None:
            safe_seed = int(seed if seed is not None else 0)
            self.experiment_id = self.logger.start_experiment(
                config=self.config,
                seed=safe_seed,
                metadata={"population_size": len(controller), "max_ticks": self.max_ticks},
            )

        self.generation_index: int = 0
        self.last_generation_metrics: dict[str, float] | None = None

        self._state = SimulatorState.IDLE
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()

    def run_episode(self) -> int:
        """Advance all instances until every one is terminal. Returns ticks used."""
        ticks = 0
        while not self.controller.all_terminal():
            if ticks >= self.max_ticks:
                LOGGER.warning(
                    "Generation %d hit max_ticks=%d with unfinished instances.",
                    self.generation_index,
                    self.max_ticks,
                )
                break
            self._safe_call("controller.advance_all", self.controller.advance_all)
            ticks += 1
        return ticks

    def run_generation(self) -> None:
        """Run one generation: episode, metrics, selection and mutation."""
        ticks = self.run_episode()

        instances = self.controller.instances
        fitnesses = self._safe_call("controller.fitnesses", self.controller.fitnesses)
        scores = [instance.score for instance in instances]
        steps = [instance.steps for instance in instances]

        self._safe_call("controller.next_generation", self.controller.next_generation)

        metrics = self._compute_metrics(fitnesses, scores, steps)
        metrics["ticks"] = float(ticks)
        metrics["distinct_parents"] = float(len(set(self.controller.last_parent_indices)))
        metrics["diversity"] = float(self._compute_genome_diversity())
        self.last_generation_metrics = metrics

        LOGGER.info(
            "Generation %d: max_score=%.0f mean_fitness=%.3f max_fitness=%.3f parents=%d",
            self.generation_index,
            metrics["max_score"],
            metrics["mean_fitness"],
            metrics["max_fitness"],
            int(metrics["distinct_parents"]),
        )

    @staticmethod
    def _compute_metrics(
        fitnesses: Sequence[float],
        scores: Sequence[float],
        steps: Sequence[int],
    ) -> dict[str, float]:
        """Summarize the terminal population of one generation."""
        metrics: dict[str, float] = {}
        if fitnesses:
            metrics["mean_fitness"] = float(sum(fitnesses) / len(fitnesses))
            metrics["max_fitness"] = float(max(fitnesses))
            metrics["max_score"] = float(max(scores))
            metrics["mean_steps"] = float(sum(steps) / len(steps))
        else:
            metrics["mean_fitness"] = 0.0
            metrics["max_fitness"] = 0.0
            metrics["max_score"] = 0.0
            metrics["mean_steps"] = 0.0
        return metrics

    def _compute_genome_diversity(self) -> float:
        """Compute mean pairwise genome distance for diversity tracking."""
        genomes = [agent.get_genome() for agent in self.controller.agents]
        if len(genomes) < 2:
            return 0.0

        total = 0.0
        pairs = 0
        for i in range(len(genomes)):
            for j in range(i + 1, len(genomes)):
                total += float(genomes[i].distance(genomes[j]))
                pairs += 1
        return total / pairs if pairs else 0.0

    def control_state(self) -> str:
        """Return current execution control state."""
        with self._state_lock:
            return str(self._state.value)

    def stop(self) -> None:
        """Stop the loop after the generation in progress."""
        self._stop_event.set()
        with self._state_lock:
            self._state = SimulatorState.STOPPED

    def run(self, generations: int, early_stop_score: float | None = None) -> None:
        """Run the generation loop for at most ``generations`` generations.

        Stops early once a generation's best score reaches ``early_stop_score``.
        """
        if generations < 0:
            raise ValueError("generations must be non-negative")

        self._stop_event.clear()
        with self._state_lock:
            self._state = SimulatorState.RUNNING

        try:
            for generation_index in range(generations):
                if self._stop_event.is_set():
                    break
                self.generation_index = generation_index
                self.run_generation()
                self.on_generation_end(generation_index)
                if early_stop_score is not None:
                    best = float((self.last_generation_metrics or {}).get("max_score", 0.0))
                    if best >= early_stop_score:
                        LOGGER.info("Early stop at generation %d (max_score=%.0f).", generation_index, best)
                        break
        finally:
            with self._state_lock:
                if self._state != SimulatorState.STOPPED:
                    self._state = SimulatorState.IDLE

    def on_generation_end(self, generation_index: int) -> None:
        """Persist metrics for a completed generation if logger is configured."""
        if self.logger is None or self.experiment_id is None:
            return

        raw_metrics = self.last_generation_metrics or {}
        self._safe_call(
            "logger.log_metrics",
            self.logger.log_metrics,
            experiment_id=self.experiment_id,
            generation_index=generation_index,
            metrics=raw_metrics,
        )

    @staticmethod
    def _safe_call(label: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            raise SimulatorExecutionError(f"{label} failed: {exc}") from exc
