"""Simple simulation runner for local validation."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, ExperimentConfig
from core.deterministic_rng import DeterministicRNG
from core.population import PopulationController
from data.logger import SimulationLogger
from engine.component_registry import create_agent, create_environment, create_fitness
from engine.simulator import Simulator

LOGGER = logging.getLogger(__name__)


def build_controller(config: ExperimentConfig, rng: DeterministicRNG) -> PopulationController:
    """Create a population cloned from one prototype snake and board.

    Clones start identical, so one mutation pass spreads the first generation
    over genome space before any episode runs.
    """
    prototype_agent = create_agent(
        str(config.get("agent_type")),
        "prototype",
        rng.numpy_stream("genome_init"),
        rng.stream("policy"),
        config,
    )
    prototype_environment = create_environment(config.environment, config)
    controller = PopulationController(
        size=config.population_size,
        prototype_agent=prototype_agent,
        prototype_environment=prototype_environment,
        fitness_function=create_fitness(str(config.get("fitness")), config),
        rng=rng.stream("selection"),
        mutation_rng=rng.numpy_stream("mutation"),
    )
    controller.mutation()
    return controller


def build_components(config: ExperimentConfig, logger: SimulationLogger | None = None) -> Simulator:
    """Build a simulator from experiment configuration."""
    rng = DeterministicRNG(seed=config.seed)
    return Simulator(
        controller=build_controller(config, rng),
        max_ticks=int(config.get("max_ticks")),
        seed=config.seed,
        logger=logger,
        config=config.to_dict(),
    )


def main(config_path: str = "configs/example_experiment.yaml") -> None:
    """Load config, build components, and run the simulator."""
    logging.basicConfig(level=logging.INFO)
    config = ConfigLoader.load(config_path)
    logger = SimulationLogger(Path("simulation_metrics.db"))
    try:
        simulator = build_components(config=config, logger=logger)
        early_stop = config.get("early_stop_score")
        simulator.run(
            config.generations,
            early_stop_score=float(early_stop) if early_stop is not None else None,
        )
        LOGGER.info("Finished experiment %s", simulator.experiment_id)
    finally:
        logger.close()


if __name__ == "__main__":
    main()
