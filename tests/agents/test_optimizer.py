from unittest.mock import MagicMock

import pytest

from agents.optimizer import run_optimization
from config.config import OptimizationRunConfig
from models.inventory import InventoryConfig, sample_inventory_config


@pytest.fixture
def small_config(product_mix) -> InventoryConfig:
    return InventoryConfig(products=product_mix, max_warehouse_capacity=200, optimization_days=12)


def test_run_optimization_end_to_end(small_config):
    progress = MagicMock()
    comparison = run_optimization(
        small_config,
        run_config=OptimizationRunConfig(total_episodes=25, batch_size=10, seed=7),
        progress_callback=progress,
    )
    assert comparison.episodes == 25
    assert [call.args for call in progress.call_args_list] == [(10, 25), (20, 25), (25, 25)]
    assert len(comparison.baseline.results) == 12
    assert len(comparison.rl.results) == 12
    expected_reduction = comparison.baseline.total_cost - comparison.rl.total_cost
    assert comparison.improvement.cost_reduction == pytest.approx(expected_reduction)


def test_run_optimization_seeded_runs_match(small_config):
    run_config = OptimizationRunConfig(total_episodes=5, batch_size=5, seed=123)
    first = run_optimization(small_config, run_config=run_config)
    second = run_optimization(small_config, run_config=run_config)
    assert first == second


def test_run_optimization_without_training(midpoint_rng):
    config = sample_inventory_config(optimization_days=3)
    comparison = run_optimization(
        config, run_config=OptimizationRunConfig(total_episodes=0), rng=midpoint_rng
    )
    assert comparison.episodes == 0
    assert len(comparison.rl.results) == 3


@pytest.mark.parametrize(
    "run_config",
    [
        OptimizationRunConfig(total_episodes=-1),
        OptimizationRunConfig(batch_size=0),
    ],
)
def test_run_optimization_rejects_bad_run_config(small_config, run_config):
    with pytest.raises(ValueError):
        run_optimization(small_config, run_config=run_config)
