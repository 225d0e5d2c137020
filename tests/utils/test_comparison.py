import pytest

from models.inventory import ProductDayResult, SimulationResult
from utils.comparison import (
    ComparisonResults,
    compare_strategies,
    percent_improvement,
    summarize_strategy,
)


def make_days(costs: list[float], restocks: list[float] | None = None, stockouts: list[float] | None = None):
    restocks = restocks or [0] * len(costs)
    stockouts = stockouts or [0] * len(costs)
    days = []
    for day, (cost, restock, short) in enumerate(zip(costs, restocks, stockouts)):
        product = ProductDayResult(
            product_id="p1",
            stock_level=10,
            demand=5,
            restock_action=restock,
            stockout_units=short,
            daily_cost=cost,
            daily_revenue=12.0,
        )
        days.append(
            SimulationResult(
                day=day,
                product_results=(product,),
                total_cost=cost,
                total_revenue=12.0,
                total_profit=12.0 - cost,
            )
        )
    return days


def test_compare_strategies_scenario():
    baseline = make_days([10, 10, 10])
    optimized = make_days([8, 8, 8])
    comparison = compare_strategies(baseline, optimized, optimization_days=3, episodes=200)
    assert isinstance(comparison, ComparisonResults)
    assert comparison.baseline.total_cost == 30
    assert comparison.rl.total_cost == 24
    assert comparison.improvement.cost_reduction == 6
    assert comparison.improvement.percent_improvement == pytest.approx(20.0)
    assert comparison.episodes == 200


def test_summarize_strategy_counts():
    days = make_days([1, 2, 3, 4], restocks=[5, 0, 2, 0], stockouts=[0, 3, 1, 0])
    summary = summarize_strategy(days, optimization_days=4)
    assert summary.total_cost == 10
    assert summary.total_stockouts == 4
    assert summary.restocking_frequency == pytest.approx(0.5)
    assert summary.final_reward == pytest.approx(12.0 - 4)
    assert summary.results == tuple(days)


def test_stockout_reduction():
    baseline = make_days([5, 5], stockouts=[4, 2])
    optimized = make_days([5, 5], stockouts=[1, 0])
    comparison = compare_strategies(baseline, optimized, optimization_days=2)
    assert comparison.improvement.stockout_reduction == 5


def test_zero_baseline_cost_is_undefined():
    comparison = compare_strategies(make_days([0, 0]), make_days([1, 1]), optimization_days=2)
    assert comparison.improvement.percent_improvement is None
    assert comparison.improvement.cost_reduction == -2


def test_empty_sequence_is_undefined():
    comparison = compare_strategies([], make_days([1]), optimization_days=1)
    assert comparison.improvement.percent_improvement is None
    assert comparison.baseline.final_reward == 0.0
    assert comparison.baseline.total_cost == 0


def test_percent_improvement_helper():
    assert percent_improvement(50.0, 40.0) == pytest.approx(20.0)
    assert percent_improvement(50.0, 60.0) == pytest.approx(-20.0)
    assert percent_improvement(0.0, 10.0) is None


def test_summarize_requires_positive_horizon():
    with pytest.raises(ValueError, match="optimization_days must be at least 1"):
        summarize_strategy(make_days([1]), optimization_days=0)
