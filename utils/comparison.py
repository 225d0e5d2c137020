"""
Reduces baseline and learned-policy trajectories into comparison metrics.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from models.inventory import SimulationResult


@dataclass(frozen=True)
class StrategySummary:
    results: tuple[SimulationResult, ...]
    total_cost: float
    total_stockouts: float
    restocking_frequency: float  # Restock events (product-days) per horizon day
    final_reward: float  # Profit on the last simulated day


@dataclass(frozen=True)
class ImprovementMetrics:
    cost_reduction: float
    stockout_reduction: float
    percent_improvement: float | None  # None when the baseline cost is zero


@dataclass(frozen=True)
class ComparisonResults:
    baseline: StrategySummary
    rl: StrategySummary
    improvement: ImprovementMetrics
    episodes: int = 0


def summarize_strategy(
    results: Sequence[SimulationResult], optimization_days: int
) -> StrategySummary:
    if optimization_days < 1:
        raise ValueError(f"optimization_days must be at least 1, got {optimization_days}")
    restocks = sum(day.restock_count for day in results)
    return StrategySummary(
        results=tuple(results),
        total_cost=sum(day.total_cost for day in results),
        total_stockouts=sum(day.total_stockouts for day in results),
        restocking_frequency=restocks / optimization_days,
        final_reward=results[-1].total_profit if results else 0.0,
    )


def percent_improvement(baseline_cost: float, optimized_cost: float) -> float | None:
    """Cost reduction as a percentage of the baseline, or None if undefined."""
    if baseline_cost == 0:
        return None
    return (baseline_cost - optimized_cost) / baseline_cost * 100


def compare_strategies(
    baseline_results: Sequence[SimulationResult],
    rl_results: Sequence[SimulationResult],
    optimization_days: int,
    episodes: int = 0,
) -> ComparisonResults:
    """
    Compare two trajectories over the same horizon.

    ``percent_improvement`` is None when either trajectory is empty or the
    baseline cost is zero; no division error is raised.
    """
    baseline = summarize_strategy(baseline_results, optimization_days)
    rl = summarize_strategy(rl_results, optimization_days)
    if baseline_results and rl_results:
        percent = percent_improvement(baseline.total_cost, rl.total_cost)
    else:
        percent = None
    improvement = ImprovementMetrics(
        cost_reduction=baseline.total_cost - rl.total_cost,
        stockout_reduction=baseline.total_stockouts - rl.total_stockouts,
        percent_improvement=percent,
    )
    return ComparisonResults(
        baseline=baseline, rl=rl, improvement=improvement, episodes=episodes
    )
