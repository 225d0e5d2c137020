"""
Inventory-related data models for the restocking optimizer.
Includes the Product and InventoryConfig input models and the immutable
records produced by a simulation run.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Product(BaseModel):
    """
    Per-product economics and demand history. Frozen once built.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    initial_stock: int = Field(default=0, ge=0)
    cost_per_item: float = Field(default=0.0, ge=0)
    storage_cost_per_day: float = Field(default=0.0, ge=0)  # Per unit held per day
    stockout_penalty: float = Field(default=0.0, ge=0)  # Per unit of unmet demand
    historical_demand: tuple[int, ...]

    @field_validator("historical_demand")
    @classmethod
    def _check_history(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("historical_demand must contain at least one value")
        if any(d < 0 for d in value):
            raise ValueError("historical_demand values must be non-negative")
        return value

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def average_demand(self) -> float:
        return sum(self.historical_demand) / len(self.historical_demand)

    def expected_demand(self, day: int) -> int:
        """Demand pattern for a day, cycling through the history."""
        return self.historical_demand[day % len(self.historical_demand)]


class InventoryConfig(BaseModel):
    """Products plus the warehouse capacity and evaluation horizon."""

    model_config = ConfigDict(frozen=True)

    products: tuple[Product, ...]
    max_warehouse_capacity: int = Field(default=500, gt=0)
    optimization_days: int = Field(default=30, ge=1)

    @field_validator("products")
    @classmethod
    def _check_products(cls, value: tuple[Product, ...]) -> tuple[Product, ...]:
        if not value:
            raise ValueError("at least one product is required")
        ids = [p.id for p in value]
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        if duplicates:
            raise ValueError(f"duplicate product ids: {duplicates}")
        return value

    @property
    def total_initial_stock(self) -> int:
        return sum(p.initial_stock for p in self.products)


@dataclass(frozen=True)
class SimulationState:
    """On-hand stock per product at the start of a day."""

    stock_levels: tuple[float, ...]
    day: int


@dataclass(frozen=True)
class RestockAction:
    """Units ordered per product, applied before the day's demand."""

    restock_amounts: tuple[float, ...]

    @classmethod
    def do_nothing(cls, num_products: int) -> "RestockAction":
        return cls(tuple(0 for _ in range(num_products)))


@dataclass(frozen=True)
class ProductDayResult:
    """Outcome for one product on one day."""

    product_id: str
    stock_level: float  # After restock, before demand
    demand: int
    restock_action: float
    stockout_units: float
    daily_cost: float
    daily_revenue: float


@dataclass(frozen=True)
class SimulationResult:
    """All product outcomes for one day plus day totals."""

    day: int
    product_results: tuple[ProductDayResult, ...]
    total_cost: float
    total_revenue: float
    total_profit: float

    @property
    def total_stockouts(self) -> float:
        return sum(r.stockout_units for r in self.product_results)

    @property
    def restock_count(self) -> int:
        return sum(1 for r in self.product_results if r.restock_action > 0)


SAMPLE_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="widget-a",
        name="Widget A",
        initial_stock=100,
        cost_per_item=10.50,
        storage_cost_per_day=0.25,
        stockout_penalty=5.00,
        historical_demand=(15, 18, 12, 20, 14, 16, 13, 19, 17, 15, 14, 18, 16, 12, 20),
    ),
    Product(
        id="widget-b",
        name="Widget B",
        initial_stock=75,
        cost_per_item=25.00,
        storage_cost_per_day=0.50,
        stockout_penalty=12.00,
        historical_demand=(8, 10, 12, 9, 11, 7, 13, 8, 10, 9, 11, 8, 12, 10, 9),
    ),
    Product(
        id="gadget-x",
        name="Gadget X",
        initial_stock=200,
        cost_per_item=8.75,
        storage_cost_per_day=0.20,
        stockout_penalty=3.50,
        historical_demand=(25, 30, 28, 32, 26, 29, 31, 27, 33, 28, 26, 30, 29, 27, 31),
    ),
)


def sample_inventory_config(
    max_warehouse_capacity: int = 500, optimization_days: int = 30
) -> InventoryConfig:
    """Return the built-in three-product sample configuration."""
    return InventoryConfig(
        products=SAMPLE_PRODUCTS,
        max_warehouse_capacity=max_warehouse_capacity,
        optimization_days=optimization_days,
    )
