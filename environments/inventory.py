"""
Day-by-day inventory dynamics shared by every restocking strategy.

Both the baseline heuristic and the Q-learning agent draw demand and settle
each day through these functions, so their results are directly comparable.
"""

import math
from collections.abc import Sequence

from config.config import SimulationConfig
from models.inventory import Product, ProductDayResult, SimulationResult
from utils.random_source import RandomSource

DEFAULT_SIMULATION_CONFIG = SimulationConfig()


def draw_demand(
    expected: float,
    rng: RandomSource,
    config: SimulationConfig = DEFAULT_SIMULATION_CONFIG,
) -> int:
    """
    Draw a non-negative integer demand within +/-10% of ``expected``.

    Noise is uniform on [-0.1 * expected, 0.1 * expected) with the default
    noise fraction of 0.2. An expected demand of 0 always yields 0.
    """
    noise = (rng.random() - 0.5) * config.demand_noise_fraction * expected
    return max(0, math.floor(expected + noise))


def pattern_demand(
    product: Product,
    day: int,
    rng: RandomSource,
    config: SimulationConfig = DEFAULT_SIMULATION_CONFIG,
) -> int:
    """Demand around the day-indexed historical pattern."""
    return draw_demand(product.expected_demand(day), rng, config)


def average_demand(
    product: Product,
    rng: RandomSource,
    config: SimulationConfig = DEFAULT_SIMULATION_CONFIG,
) -> int:
    """Demand around the long-run historical average."""
    return draw_demand(product.average_demand, rng, config)


def apply_restock(
    stock_levels: Sequence[float], restock_amounts: Sequence[float]
) -> list[float]:
    if len(stock_levels) != len(restock_amounts):
        raise ValueError(
            f"Restock vector has {len(restock_amounts)} entries for {len(stock_levels)} products"
        )
    return [stock + amount for stock, amount in zip(stock_levels, restock_amounts)]


def settle_day(
    products: Sequence[Product],
    stock_levels: Sequence[float],
    restock_amounts: Sequence[float],
    demand: Sequence[int],
    day: int,
    config: SimulationConfig = DEFAULT_SIMULATION_CONFIG,
) -> tuple[SimulationResult, list[float]]:
    """
    Apply restocks, serve demand and account for one day.

    Args:
        products: Products in vector order.
        stock_levels: On-hand units at the start of the day.
        restock_amounts: Units ordered per product, applied before demand.
        demand: Realised demand per product.
        day: Zero-based day index.
        config: Simulation economics.

    Returns:
        The day's SimulationResult and the stock levels after demand,
        clamped at zero.
    """
    restocked = apply_restock(stock_levels, restock_amounts)
    product_results = []
    remaining = []
    total_cost = 0.0
    total_revenue = 0.0
    for product, stock, restock, day_demand in zip(
        products, restocked, restock_amounts, demand
    ):
        served = min(day_demand, stock)
        stockouts = max(0, day_demand - stock)
        daily_revenue = served * product.cost_per_item * config.revenue_markup
        daily_cost = (
            stock * product.storage_cost_per_day
            + restock * product.cost_per_item
            + stockouts * product.stockout_penalty
        )
        product_results.append(
            ProductDayResult(
                product_id=product.id,
                stock_level=stock,
                demand=day_demand,
                restock_action=restock,
                stockout_units=stockouts,
                daily_cost=daily_cost,
                daily_revenue=daily_revenue,
            )
        )
        total_cost += daily_cost
        total_revenue += daily_revenue
        remaining.append(max(0, stock - day_demand))
    result = SimulationResult(
        day=day,
        product_results=tuple(product_results),
        total_cost=total_cost,
        total_revenue=total_revenue,
        total_profit=total_revenue - total_cost,
    )
    return result, remaining


def validate_products(products: Sequence[Product], logger) -> None:
    """Reject products that cannot be simulated before any day runs."""
    for product in products:
        if not product.historical_demand:
            logger.error(f"Product {product.id} has no historical demand.")
            raise ValueError(f"Product {product.id} has an empty historical demand")
