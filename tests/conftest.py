import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import agents`, `import utils`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from models.inventory import Product  # noqa: E402
from utils.random_source import ConstantRandomSource  # noqa: E402


class SequenceRandomSource:
    """Replays a fixed list of values, cycling when exhausted."""

    def __init__(self, values: list[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def sequence_rng():
    """Factory for SequenceRandomSource instances."""
    return SequenceRandomSource


@pytest.fixture
def midpoint_rng() -> ConstantRandomSource:
    """Random source pinned at 0.5, which zeroes demand noise."""
    return ConstantRandomSource(0.5)


@pytest.fixture
def widget() -> Product:
    """One product with a flat demand history of 10 units a day."""
    return Product(
        id="widget",
        name="Widget",
        initial_stock=5,
        cost_per_item=10.0,
        storage_cost_per_day=1.0,
        stockout_penalty=5.0,
        historical_demand=[10, 10],
    )


@pytest.fixture
def product_mix() -> list[Product]:
    """Three products with varied economics and demand patterns."""
    return [
        Product(
            id="widget-a",
            initial_stock=100,
            cost_per_item=10.5,
            storage_cost_per_day=0.25,
            stockout_penalty=5.0,
            historical_demand=[15, 18, 12, 20, 14],
        ),
        Product(
            id="widget-b",
            initial_stock=0,
            cost_per_item=25.0,
            storage_cost_per_day=0.5,
            stockout_penalty=12.0,
            historical_demand=[8, 10, 12, 9],
        ),
        Product(
            id="gadget-x",
            initial_stock=40,
            cost_per_item=8.75,
            storage_cost_per_day=0.2,
            stockout_penalty=3.5,
            historical_demand=[25, 0, 28],
        ),
    ]
