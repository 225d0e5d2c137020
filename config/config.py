"""
Configuration classes for the inventory restocking optimizer.
Defines hyperparameters for the simulation, the Q-learning agent and the
optimization run in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass


@dataclass
class SimulationConfig:
    revenue_markup: float = 1.5  # Sale price as a multiple of cost_per_item
    demand_noise_fraction: float = 0.2  # Width of the uniform noise band around expected demand


@dataclass
class QLearningAgentConfig:
    learning_rate: float = 0.2
    discount_factor: float = 0.95
    exploration_rate: float = 1.0
    min_exploration_rate: float = 0.01
    exploration_decay: float = 0.995
    episode_length: int = 30  # Training days per episode, independent of the evaluation horizon
    day_normalizer: float = 30.0
    num_candidate_actions: int = 10  # Plus the "do nothing" action
    max_restock_per_product: int = 50
    safety_stock_factor: float = 1.5
    variation_bias: float = 0.3
    state_resolution: int = 10_000
    tie_break_noise: float = 1e-6
    storage_cost_weight: float = 1.2
    stockout_exponent: float = 1.5
    stockout_weight: float = 5.0
    day_penalty_weight: float = 0.1
    log_every: int = 50


@dataclass
class OptimizationRunConfig:
    total_episodes: int = 200
    batch_size: int = 10
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "OptimizationRunConfig":
        """Build a run config from INVENTORY_RL_* environment variables."""
        seed = os.getenv("INVENTORY_RL_SEED")
        return cls(
            total_episodes=int(os.getenv("INVENTORY_RL_EPISODES", cls.total_episodes)),
            batch_size=int(os.getenv("INVENTORY_RL_BATCH_SIZE", cls.batch_size)),
            seed=int(seed) if seed else None,
        )


# Example usage:
# run_config = OptimizationRunConfig.from_env()
# agent_config = QLearningAgentConfig(learning_rate=0.1)
