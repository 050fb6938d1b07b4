"""Tests for SQLite-backed experiment logger and simulator hook integration."""

from __future__ import annotations

import sqlite3

from configs.loader import ExperimentConfig
from data.logger import SimulationLogger
from main import build_components


def test_logger_persists_metadata_and_metrics(tmp_path) -> None:
    db_path = tmp_path / "metrics.db"
    logger = SimulationLogger(db_path)

    experiment_id = logger.start_experiment(
        config={"population_size": 2, "generations": 1, "mutation_rate": 0.1, "environment": "snake"},
        seed=42,
    )
    logger.log_metrics(
        experiment_id=experiment_id,
        generation_index=0,
        metrics={"mean_fitness": 0.5, "max_fitness": 1.0, "max_score": 1.0, "diversity": 0.2},
    )
    assert logger.latest_experiment_id() == experiment_id
    logger.close()

    conn = sqlite3.connect(db_path)
    metadata_count = conn.execute("SELECT COUNT(*) FROM experiment_metadata").fetchone()[0]
    metrics_count = conn.execute("SELECT COUNT(*) FROM generation_metrics").fetchone()[0]
    conn.close()

    assert metadata_count == 1
    assert metrics_count == 1


def test_log_metrics_upserts_by_generation(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "metrics.db")
    experiment_id = logger.start_experiment(config={"seed": 1}, seed=1)

    logger.log_metrics(experiment_id, 0, {"max_score": 1.0})
    logger.log_metrics(experiment_id, 0, {"max_score": 3.0})
    logger.log_metrics(experiment_id, 1, {"max_score": 4.0})
    rows = logger.fetch_metrics(experiment_id)
    logger.close()

    assert [row["max_score"] for row in rows] == [3.0, 4.0]
    assert rows[0]["mean_steps"] == 0.0


def test_simulator_on_generation_end_logs_partial_metrics(tmp_path) -> None:
    db_path = tmp_path / "sim.db"
    logger = SimulationLogger(db_path)
    config = ExperimentConfig(
        population_size=2,
        generations=1,
        mutation_rate=0.1,
        environment="snake",
        seed=7,
        extras={"board_width": 6, "board_height": 6},
    )
    simulator = build_components(config, logger=logger)

    simulator.last_generation_metrics = {"mean_fitness": 0.3, "max_fitness": 0.9}
    simulator.on_generation_end(0)
    logger.close()

    conn = sqlite3.connect(db_path)
    row = conn.execute(
        "SELECT mean_fitness, max_fitness, max_score, diversity FROM generation_metrics"
    ).fetchone()
    conn.close()

    assert row is not None
    assert row[0] == 0.3
    assert row[1] == 0.9
    assert row[2] == 0.0
    assert row[3] == 0.0
