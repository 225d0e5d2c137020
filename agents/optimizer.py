"""
End-to-end optimization run: train the Q-learning agent in batches, roll out
both strategies over the configured horizon and compare them.
"""

from collections.abc import Callable

from agents.baseline import BaselineStrategy
from agents.qlearning import QLearningAgent
from config.config import OptimizationRunConfig, QLearningAgentConfig
from models.inventory import InventoryConfig
from utils.comparison import ComparisonResults, compare_strategies
from utils.logger import get_logger
from utils.random_source import RandomSource, default_random_source

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


def run_optimization(
    config: InventoryConfig,
    run_config: OptimizationRunConfig | None = None,
    agent_config: QLearningAgentConfig | None = None,
    rng: RandomSource | None = None,
    progress_callback: ProgressCallback | None = None,
) -> ComparisonResults:
    """
    Train a fresh agent, simulate both strategies and return the comparison.

    Training runs in batches of ``run_config.batch_size`` episodes; after each
    batch ``progress_callback(episodes_done, total_episodes)`` is invoked.
    Both strategies share the random source so a seeded run is reproducible.
    """
    run_config = run_config or OptimizationRunConfig()
    if run_config.total_episodes < 0 or run_config.batch_size < 1:
        logger.error(f"Invalid run config: {run_config}")
        raise ValueError(
            "total_episodes must be non-negative and batch_size at least 1"
        )
    rng = rng if rng is not None else default_random_source(run_config.seed)

    agent = QLearningAgent(
        config.products, config.max_warehouse_capacity, config=agent_config, rng=rng
    )
    episodes_done = 0
    while episodes_done < run_config.total_episodes:
        batch = min(run_config.batch_size, run_config.total_episodes - episodes_done)
        summary = agent.train(batch)
        episodes_done += batch
        logger.info(
            f"Trained {episodes_done}/{run_config.total_episodes} episodes, "
            f"epsilon={summary.exploration_rate:.3f}, states={summary.q_table_states}"
        )
        if progress_callback is not None:
            progress_callback(episodes_done, run_config.total_episodes)

    rl_results = agent.simulate(config.optimization_days)
    baseline = BaselineStrategy(config.products, config.max_warehouse_capacity, rng=rng)
    baseline_results = baseline.simulate(config.optimization_days)

    comparison = compare_strategies(
        baseline_results,
        rl_results,
        config.optimization_days,
        episodes=episodes_done,
    )
    improvement = comparison.improvement
    if improvement.percent_improvement is None:
        logger.warning("Baseline cost is zero; percent improvement is undefined.")
    else:
        logger.info(
            f"Cost reduction {improvement.cost_reduction:.2f} "
            f"({improvement.percent_improvement:.1f}%), "
            f"stockout reduction {improvement.stockout_reduction:.0f}"
        )
    return comparison
