"""
Demonstration of the baseline vs. Q-learning restocking comparison.

Run as a script to train on the built-in sample products (or a CSV file)
and print the comparison, optionally exporting the day-by-day results.
"""

import argparse
import sys
from pathlib import Path

from agents.optimizer import run_optimization
from config.config import OptimizationRunConfig
from connectors.csv_io import export_results_csv, load_inventory_config
from models.inventory import InventoryConfig, sample_inventory_config
from utils.comparison import ComparisonResults
from utils.env import load_project_dotenv
from utils.logger import get_logger

logger = get_logger("demos.inventory_optimization")


def demonstrate_inventory_optimization(
    config: InventoryConfig | None = None,
    run_config: OptimizationRunConfig | None = None,
) -> dict:
    """
    Run the full comparison and return the results for further use or display.
    """
    logger.info("--- Starting Inventory Optimization Demonstration ---")
    config = config or sample_inventory_config()
    run_config = run_config or OptimizationRunConfig()
    progress: list[tuple[int, int]] = []
    comparison = run_optimization(
        config,
        run_config=run_config,
        progress_callback=lambda done, total: progress.append((done, total)),
    )
    logger.info("--- Inventory Optimization Demonstration Complete ---")
    return {"comparison": comparison, "config": config, "progress": progress}


def format_comparison(comparison: ComparisonResults, config: InventoryConfig | None = None) -> str:
    improvement = comparison.improvement
    percent = (
        "undefined"
        if improvement.percent_improvement is None
        else f"{improvement.percent_improvement:.1f}%"
    )
    lines = []
    if config is not None:
        names = ", ".join(p.display_name for p in config.products)
        lines += [
            f"Products:               {len(config.products)} ({names})",
            f"Total initial stock:    {config.total_initial_stock}",
            f"Warehouse capacity:     {config.max_warehouse_capacity}",
        ]
    lines += [
        f"Training episodes:      {comparison.episodes}",
        f"Baseline total cost:    {comparison.baseline.total_cost:.2f}",
        f"RL total cost:          {comparison.rl.total_cost:.2f}",
        f"Baseline stockouts:     {comparison.baseline.total_stockouts:.0f}",
        f"RL stockouts:           {comparison.rl.total_stockouts:.0f}",
        f"Baseline restock freq:  {comparison.baseline.restocking_frequency:.2f}",
        f"RL restock freq:        {comparison.rl.restocking_frequency:.2f}",
        f"Cost reduction:         {improvement.cost_reduction:.2f} ({percent})",
        f"Stockout reduction:     {improvement.stockout_reduction:.0f}",
    ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    load_project_dotenv()
    env_run_config = OptimizationRunConfig.from_env()
    parser = argparse.ArgumentParser(
        description="Compare a baseline restocking rule with a Q-learning policy"
    )
    parser.add_argument("--csv", type=Path, default=None, help="Product CSV (default: built-in sample)")
    parser.add_argument("--capacity", type=int, default=500, help="Max warehouse capacity (default: 500)")
    parser.add_argument("--days", type=int, default=30, help="Evaluation horizon in days (default: 30)")
    parser.add_argument(
        "--episodes",
        type=int,
        default=env_run_config.total_episodes,
        help="Training episodes (default: 200)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=env_run_config.batch_size,
        help="Episodes per training batch (default: 10)",
    )
    parser.add_argument("--seed", type=int, default=env_run_config.seed, help="Random seed")
    parser.add_argument("--export", type=Path, default=None, help="Write day-by-day results CSV here")
    args = parser.parse_args(argv)

    try:
        if args.csv is not None:
            config = load_inventory_config(args.csv, args.capacity, args.days)
        else:
            config = sample_inventory_config(args.capacity, args.days)
        run_config = OptimizationRunConfig(
            total_episodes=args.episodes, batch_size=args.batch_size, seed=args.seed
        )
        results = demonstrate_inventory_optimization(config, run_config)
    except (OSError, ValueError) as exc:
        logger.error(f"Optimization failed: {exc}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    comparison = results["comparison"]
    print(format_comparison(comparison, results["config"]))
    if args.export is not None:
        args.export.write_text(export_results_csv(comparison))
        print(f"\nResults written to {args.export}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
