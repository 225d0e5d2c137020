"""
Module: connectors.csv_io

CSV import of product configurations and flat export of comparison results.
"""

import csv
import io
import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from models.inventory import InventoryConfig, Product
from utils.comparison import ComparisonResults

logger = logging.getLogger(__name__)

SAMPLE_CSV_HEADER = (
    "Product Name,Initial Stock,Cost Per Item,Storage Cost Per Day,"
    "Stockout Penalty,Historical Demand (semicolon separated)"
)

SAMPLE_CSV_ROWS = [
    "Widget A,100,10.50,0.25,5.00,15;18;12;20;14;16;13;19;17;15",
    "Widget B,75,25.00,0.50,12.00,8;10;12;9;11;7;13;8;10;9",
    "Widget C,50,45.00,1.00,20.00,5;6;4;7;5;6;8;4;5;6",
    "Gadget X,200,8.75,0.20,3.50,25;30;28;32;26;29;31;27;33;28",
    "Gadget Y,150,15.25,0.35,8.00,12;14;16;13;15;11;17;12;14;13",
]

EXPORT_COLUMNS = [
    "Strategy",
    "Day",
    "Product",
    "Stock Level",
    "Demand",
    "Restock Action",
    "Stockouts",
    "Daily Cost",
    "Daily Revenue",
]

BASELINE_LABEL = "Baseline"
RL_LABEL = "Reinforcement Learning"

REQUIRED_FIELDS = 6


def _to_int(value: str) -> int:
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return 0


def _to_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def generate_sample_csv() -> str:
    """Return a five-product sample file in the import format."""
    return "\n".join([SAMPLE_CSV_HEADER, *SAMPLE_CSV_ROWS])


def parse_csv(csv_text: str) -> list[Product]:
    """
    Parse products from CSV text.

    The first line is a header and only marks where the data starts. Each data
    row holds name, initial stock, cost per item, storage cost per day,
    stockout penalty and a semicolon-separated demand history. Fields are split
    on plain commas. Rows with fewer than six fields are skipped, unparsable
    numbers read as 0, and product ids are ``product-<row number>``.

    Raises:
        ValueError: if a row describes an invalid product, e.g. one with an
            empty demand history.
    """
    lines = csv_text.strip().splitlines()[1:]
    if not lines:
        logger.info("Parsed 0 products from CSV")
        return []
    # pandas pads short rows, so field counts come from the raw lines
    field_counts = [line.count(",") + 1 for line in lines]
    df = pd.read_csv(
        io.StringIO("\n".join(lines)),
        header=None,
        names=list(range(max(REQUIRED_FIELDS, *field_counts))),
        dtype=str,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
        index_col=False,
        skip_blank_lines=False,
    )
    products: list[Product] = []
    for row_number, (row, field_count) in enumerate(zip(df.itertuples(index=False), field_counts), start=1):
        if field_count < REQUIRED_FIELDS:
            logger.warning(f"Skipping CSV row {row_number}: expected {REQUIRED_FIELDS} fields, got {field_count}")
            continue
        values = [v.strip() if isinstance(v, str) else "" for v in row]
        history = [_to_int(d.strip()) for d in values[5].split(";")] if values[5] else []
        try:
            product = Product(
                id=f"product-{row_number}",
                name=values[0] or f"Product {row_number}",
                initial_stock=_to_int(values[1]),
                cost_per_item=_to_float(values[2]),
                storage_cost_per_day=_to_float(values[3]),
                stockout_penalty=_to_float(values[4]),
                historical_demand=history,
            )
        except ValidationError as exc:
            logger.error(f"Invalid product in CSV row {row_number}: {exc}")
            raise ValueError(f"CSV row {row_number} is not a valid product: {exc}") from exc
        products.append(product)
    logger.info(f"Parsed {len(products)} products from CSV")
    return products


def load_inventory_config(
    path: str | Path,
    max_warehouse_capacity: int = 500,
    optimization_days: int = 30,
) -> InventoryConfig:
    """Read a product CSV from disk into a validated InventoryConfig."""
    products = parse_csv(Path(path).read_text())
    return InventoryConfig(
        products=products,
        max_warehouse_capacity=max_warehouse_capacity,
        optimization_days=optimization_days,
    )


def results_to_dataframe(results: ComparisonResults) -> pd.DataFrame:
    """One row per strategy, day and product."""
    records = []
    for label, summary in ((BASELINE_LABEL, results.baseline), (RL_LABEL, results.rl)):
        for day_result in summary.results:
            for product_result in day_result.product_results:
                records.append(
                    {
                        "Strategy": label,
                        "Day": day_result.day,
                        "Product": product_result.product_id,
                        "Stock Level": product_result.stock_level,
                        "Demand": product_result.demand,
                        "Restock Action": product_result.restock_action,
                        "Stockouts": product_result.stockout_units,
                        "Daily Cost": product_result.daily_cost,
                        "Daily Revenue": product_result.daily_revenue,
                    }
                )
    return pd.DataFrame(records, columns=EXPORT_COLUMNS)


def _format_quantity(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def export_results_csv(results: ComparisonResults | None) -> str:
    """
    Serialize both trajectories to CSV.

    Money columns are written at two decimals. Whole-number units are written
    without a decimal point.
    """
    if results is None:
        return ""
    df = results_to_dataframe(results)
    for column in ("Stock Level", "Demand", "Restock Action", "Stockouts"):
        df[column] = df[column].map(_format_quantity)
    for column in ("Daily Cost", "Daily Revenue"):
        df[column] = df[column].map(lambda v: f"{v:.2f}")
    return df.to_csv(index=False, lineterminator="\n")
