"""
Heuristic restocking strategy used as the comparison benchmark.
"""

from collections.abc import Sequence

from config.config import SimulationConfig
from environments.inventory import average_demand, settle_day, validate_products
from models.inventory import Product, SimulationResult
from utils.logger import get_logger
from utils.random_source import RandomSource, default_random_source


class BaselineStrategy:
    """
    Order-up-to heuristic: when stock falls below the average daily demand,
    restock to twice the average, capped by the warehouse capacity.

    Demand is drawn around each product's long-run average, not the
    day-indexed pattern the learning agent sees.
    """

    def __init__(
        self,
        products: Sequence[Product],
        max_capacity: float,
        rng: RandomSource | None = None,
        simulation_config: SimulationConfig | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        validate_products(products, self.logger)
        self.products = list(products)
        self.max_capacity = max_capacity
        self.rng = rng if rng is not None else default_random_source()
        self.simulation_config = simulation_config or SimulationConfig()

    def restock_amounts(self, stock_levels: Sequence[float]) -> list[float]:
        amounts = []
        for product, stock in zip(self.products, stock_levels):
            avg_demand = product.average_demand
            if stock < avg_demand:
                amount = min(2 * avg_demand - stock, self.max_capacity - stock)
                amounts.append(max(0, amount))
            else:
                amounts.append(0)
        return amounts

    def simulate(self, days: int) -> list[SimulationResult]:
        if days < 0:
            self.logger.error(f"Invalid simulation length: {days}")
            raise ValueError(f"days must be non-negative, got {days}")
        results: list[SimulationResult] = []
        stock_levels: list[float] = [p.initial_stock for p in self.products]
        for day in range(days):
            restock = self.restock_amounts(stock_levels)
            demand = [
                average_demand(p, self.rng, self.simulation_config)
                for p in self.products
            ]
            result, stock_levels = settle_day(
                self.products,
                stock_levels,
                restock,
                demand,
                day,
                self.simulation_config,
            )
            results.append(result)
            self.logger.debug(
                f"Day {day}: Restock={restock}, Demand={demand}, Cost={result.total_cost:.2f}"
            )
        self.logger.info(
            f"Baseline simulated {days} days for {len(self.products)} products"
        )
        return results
