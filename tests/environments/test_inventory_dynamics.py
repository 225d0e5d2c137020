import pytest

from config.config import SimulationConfig
from environments.inventory import (
    apply_restock,
    average_demand,
    draw_demand,
    pattern_demand,
    settle_day,
    validate_products,
)
from models.inventory import Product
from utils.logger import get_logger
from utils.random_source import ConstantRandomSource

# --- Demand generation --- #


@pytest.mark.parametrize(
    "random_value, expected_demand",
    [
        (0.5, 10),  # No noise
        (0.0, 9),  # Lower edge: 10 - 1
        (0.99, 10),  # floor(10.98)
    ],
)
def test_draw_demand_noise_band(random_value, expected_demand):
    rng = ConstantRandomSource(random_value)
    assert draw_demand(10, rng) == expected_demand


def test_draw_demand_zero_expected_is_zero():
    for value in (0.0, 0.5, 0.99):
        assert draw_demand(0, ConstantRandomSource(value)) == 0


def test_draw_demand_stays_within_ten_percent(sequence_rng):
    rng = sequence_rng([i / 100 for i in range(100)])
    for _ in range(100):
        demand = draw_demand(50, rng)
        assert 45 <= demand <= 55


def test_draw_demand_custom_noise_fraction():
    config = SimulationConfig(demand_noise_fraction=1.0)
    assert draw_demand(10, ConstantRandomSource(0.0), config) == 5


def test_pattern_demand_uses_day_index(midpoint_rng):
    product = Product(id="p", historical_demand=[1, 2, 3])
    assert [pattern_demand(product, day, midpoint_rng) for day in range(5)] == [1, 2, 3, 1, 2]


def test_average_demand_uses_long_run_mean(midpoint_rng):
    product = Product(id="p", historical_demand=[1, 2, 3, 10])
    # Mean is 4 regardless of the day
    assert average_demand(product, midpoint_rng) == 4


# --- Day settlement --- #


def test_apply_restock_adds_elementwise():
    assert apply_restock([1, 2, 3], [4, 0, 1]) == [5, 2, 4]


def test_apply_restock_length_mismatch():
    with pytest.raises(ValueError, match="Restock vector has 1 entries for 2 products"):
        apply_restock([1, 2], [3])


def test_settle_day_accounting(widget):
    result, remaining = settle_day([widget], [5], [15], [12], day=3)
    (product_result,) = result.product_results
    assert result.day == 3
    assert product_result.product_id == "widget"
    assert product_result.stock_level == 20
    assert product_result.demand == 12
    assert product_result.restock_action == 15
    assert product_result.stockout_units == 0
    # 12 sold at 1.5 x cost
    assert product_result.daily_revenue == pytest.approx(12 * 10.0 * 1.5)
    # 20 held at 1.0 plus 15 bought at 10.0
    assert product_result.daily_cost == pytest.approx(20 * 1.0 + 15 * 10.0)
    assert result.total_profit == pytest.approx(result.total_revenue - result.total_cost)
    assert remaining == [8]


def test_settle_day_stockout(widget):
    result, remaining = settle_day([widget], [2], [1], [7], day=0)
    (product_result,) = result.product_results
    assert product_result.stockout_units == 4
    assert product_result.daily_revenue == pytest.approx(3 * 10.0 * 1.5)
    assert product_result.daily_cost == pytest.approx(3 * 1.0 + 1 * 10.0 + 4 * 5.0)
    assert remaining == [0]


def test_settle_day_sums_across_products(product_mix):
    result, remaining = settle_day(product_mix, [10, 0, 5], [0, 5, 0], [4, 8, 5], day=0)
    assert len(result.product_results) == 3
    assert result.total_cost == pytest.approx(sum(r.daily_cost for r in result.product_results))
    assert result.total_revenue == pytest.approx(sum(r.daily_revenue for r in result.product_results))
    assert remaining == [6, 0, 0]


def test_settle_day_no_products():
    result, remaining = settle_day([], [], [], [], day=0)
    assert result.product_results == ()
    assert result.total_cost == 0
    assert remaining == []


def test_validate_products_rejects_empty_history():
    broken = Product.model_construct(id="broken", historical_demand=())
    with pytest.raises(ValueError, match="broken has an empty historical demand"):
        validate_products([broken], get_logger("test"))
