"""
Tabular Q-learning agent for multi-product inventory restocking.

The agent learns over 30-day episodes, choosing each day among a freshly
sampled set of candidate restock vectors around a safety-stock target, and
is evaluated with the same day dynamics as the baseline strategy.
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import pandas as pd

from config.config import QLearningAgentConfig, SimulationConfig
from environments.inventory import (
    apply_restock,
    pattern_demand,
    settle_day,
    validate_products,
)
from models.inventory import Product, RestockAction, SimulationResult, SimulationState
from utils.logger import get_logger
from utils.random_source import RandomSource, default_random_source

StateKey = tuple[int, ...]
ActionKey = tuple[int, ...]


class QTable:
    """
    Mapping from (state key, action key) to an estimated value.

    Looking up a state registers it, so the set of known states only grows.
    Unseen state-action pairs are valued at 0.
    """

    def __init__(self, values: dict[StateKey, dict[ActionKey, float]] | None = None):
        self._values: dict[StateKey, dict[ActionKey, float]] = {}
        for state, actions in (values or {}).items():
            self._values[state] = dict(actions)

    def get(self, state: StateKey, action: ActionKey) -> float:
        return self._values.setdefault(state, {}).get(action, 0.0)

    def set(self, state: StateKey, action: ActionKey, value: float) -> None:
        self._values.setdefault(state, {})[action] = value

    def max_value(self, state: StateKey, actions: Sequence[ActionKey]) -> float:
        return max(self.get(state, action) for action in actions)

    def actions(self, state: StateKey) -> dict[ActionKey, float]:
        return dict(self._values.get(state, {}))

    def states(self) -> Iterator[StateKey]:
        return iter(self._values)

    @property
    def num_states(self) -> int:
        return len(self._values)

    @property
    def num_entries(self) -> int:
        return sum(len(actions) for actions in self._values.values())

    def __len__(self) -> int:
        return self.num_states

    def __contains__(self, state: object) -> bool:
        return state in self._values


@dataclass(frozen=True)
class TrainingSummary:
    episodes: int
    total_episodes: int
    exploration_rate: float
    average_reward: float  # Mean daily reward over the last episode
    q_table_states: int


class QLearningAgent:
    """
    A Q-learning agent for the multi-product restocking problem.

    States are (stock levels, day) normalised by the warehouse capacity and a
    fixed 30-day scale. Actions are restock vectors sampled around a
    safety-stock target plus the all-zero vector.
    """

    def __init__(
        self,
        products: Sequence[Product],
        max_capacity: float,
        config: QLearningAgentConfig | None = None,
        q_table: QTable | None = None,
        rng: RandomSource | None = None,
        simulation_config: SimulationConfig | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        validate_products(products, self.logger)
        if max_capacity <= 0:
            self.logger.error(f"Invalid warehouse capacity: {max_capacity}")
            raise ValueError(f"max_capacity must be positive, got {max_capacity}")
        self.products = list(products)
        self.max_capacity = max_capacity
        self.config = config or QLearningAgentConfig()
        self.simulation_config = simulation_config or SimulationConfig()
        self.q_table = q_table if q_table is not None else QTable()
        self.rng = rng if rng is not None else default_random_source()
        self.learning_rate = self.config.learning_rate
        self.discount_factor = self.config.discount_factor
        self.exploration_rate = self.config.exploration_rate
        self.min_exploration_rate = self.config.min_exploration_rate
        self.exploration_decay = self.config.exploration_decay
        self.episodes_trained = 0
        self.logger.info(
            f"QLearningAgent initialized: {len(self.products)} products, capacity={max_capacity}, "
            f"LR={self.learning_rate}, Gamma={self.discount_factor}, Epsilon={self.exploration_rate}"
        )

    # --- State and action encoding --- #

    def normalize_state(self, state: SimulationState) -> tuple[float, ...]:
        """Stock as a fraction of capacity followed by day / 30."""
        stock = tuple(level / self.max_capacity for level in state.stock_levels)
        return stock + (state.day / self.config.day_normalizer,)

    def state_key(self, state: SimulationState) -> StateKey:
        resolution = self.config.state_resolution
        return tuple(round(v * resolution) for v in self.normalize_state(state))

    @staticmethod
    def action_key(action: RestockAction) -> ActionKey:
        return tuple(int(round(amount)) for amount in action.restock_amounts)

    # --- Policy --- #

    def generate_candidate_actions(self, stock_levels: Sequence[float]) -> list[RestockAction]:
        """
        Sample restock vectors biased toward topping stock up to
        ``safety_stock_factor`` times the average demand, then append the
        "do nothing" action.
        """
        cfg = self.config
        actions = []
        for _ in range(cfg.num_candidate_actions):
            amounts = []
            for product, stock in zip(self.products, stock_levels):
                avg_demand = product.average_demand
                safety_stock = math.ceil(avg_demand * cfg.safety_stock_factor)
                suggested = max(0, safety_stock - stock)
                max_possible = min(cfg.max_restock_per_product, self.max_capacity - stock)
                variation = math.floor((self.rng.random() - cfg.variation_bias) * avg_demand)
                amounts.append(max(0, min(max_possible, suggested + variation)))
            actions.append(RestockAction(tuple(amounts)))
        actions.append(RestockAction.do_nothing(len(self.products)))
        return actions

    def choose_action(self, state: SimulationState) -> RestockAction:
        candidates = self.generate_candidate_actions(state.stock_levels)
        if self.rng.random() < self.exploration_rate:
            action = candidates[int(self.rng.random() * len(candidates))]
            self.logger.debug(f"Action chosen (Explore): {action.restock_amounts} on day {state.day}")
            return action
        key = self.state_key(state)
        best_action = candidates[0]
        best_value = -math.inf
        for candidate in candidates:
            value = self.q_table.get(key, self.action_key(candidate))
            value += self.rng.random() * self.config.tie_break_noise
            if value > best_value:
                best_value = value
                best_action = candidate
        self.logger.debug(
            f"Action chosen (Exploit): {best_action.restock_amounts} (Q={best_value:.3f}) on day {state.day}"
        )
        return best_action

    # --- Learning --- #

    def calculate_reward(
        self,
        action: RestockAction,
        stock_levels: Sequence[float],
        demand: Sequence[int],
        day: int,
    ) -> float:
        """
        Shaped daily reward summed over products.

        Stockouts are penalised super-linearly. Holding cost is weighted up
        and grows with the day of the episode.
        """
        cfg = self.config
        total_reward = 0.0
        for product, stock, restock, day_demand in zip(
            self.products, stock_levels, action.restock_amounts, demand
        ):
            served = min(day_demand, stock)
            stockouts = max(0, day_demand - stock)
            revenue = served * product.cost_per_item * self.simulation_config.revenue_markup
            storage_cost = stock * product.storage_cost_per_day
            restock_cost = restock * product.cost_per_item
            stockout_penalty = stockouts**cfg.stockout_exponent * product.stockout_penalty * cfg.stockout_weight
            day_penalty = (day / cfg.day_normalizer) * cfg.day_penalty_weight * storage_cost
            total_reward += (
                revenue
                - storage_cost * cfg.storage_cost_weight
                - restock_cost
                - stockout_penalty
                - day_penalty
            )
        return total_reward

    def update(
        self,
        state: SimulationState,
        action: RestockAction,
        reward: float,
        next_state: SimulationState,
        learning_rate: float | None = None,
    ) -> float:
        """
        One tabular Q-learning step. The bootstrap target maximises over a
        freshly sampled candidate set for the next state.

        Returns the TD error.
        """
        alpha = self.learning_rate if learning_rate is None else learning_rate
        key = self.state_key(state)
        action_key = self.action_key(action)
        current_q = self.q_table.get(key, action_key)
        next_key = self.state_key(next_state)
        next_actions = self.generate_candidate_actions(next_state.stock_levels)
        max_next_q = self.q_table.max_value(next_key, [self.action_key(a) for a in next_actions])
        td_error = reward + self.discount_factor * max_next_q - current_q
        self.q_table.set(key, action_key, current_q + alpha * td_error)
        self.logger.debug(
            f"Q-update: State={key}, Action={action_key}, Reward={reward:.2f}, TD_Error={td_error:.3f}"
        )
        return td_error

    def decay_exploration(self):
        self.exploration_rate = max(
            self.min_exploration_rate, self.exploration_rate * self.exploration_decay
        )

    def run_episode(self, episode: int) -> float:
        """Train on one episode and return its total reward."""
        stock_levels: list[float] = [p.initial_stock for p in self.products]
        adaptive_learning_rate = self.learning_rate / math.sqrt(episode + 1)
        episode_reward = 0.0
        for day in range(self.config.episode_length):
            state = SimulationState(tuple(stock_levels), day)
            action = self.choose_action(state)
            restocked = apply_restock(stock_levels, action.restock_amounts)
            demand = [
                pattern_demand(p, day, self.rng, self.simulation_config)
                for p in self.products
            ]
            reward = self.calculate_reward(action, restocked, demand, day)
            episode_reward += reward
            stock_levels = [max(0, s - d) for s, d in zip(restocked, demand)]
            next_state = SimulationState(tuple(stock_levels), day + 1)
            self.update(state, action, reward, next_state, adaptive_learning_rate)
        return episode_reward

    def train(self, episodes: int = 200) -> TrainingSummary:
        """
        Run ``episodes`` training episodes. Can be called repeatedly; the
        Q-table and exploration rate carry over between calls, while the
        learning-rate anneal restarts with each call.
        """
        if episodes < 0:
            self.logger.error(f"Invalid episode count: {episodes}")
            raise ValueError(f"episodes must be non-negative, got {episodes}")
        episode_reward = 0.0
        for episode in range(episodes):
            episode_reward = self.run_episode(episode)
            self.decay_exploration()
            self.episodes_trained += 1
            if episode % self.config.log_every == 0:
                self.logger.info(
                    f"Episode {episode}, Epsilon: {self.exploration_rate:.3f}, "
                    f"Avg Reward: {episode_reward / self.config.episode_length:.2f}"
                )
        return TrainingSummary(
            episodes=episodes,
            total_episodes=self.episodes_trained,
            exploration_rate=self.exploration_rate,
            average_reward=episode_reward / self.config.episode_length,
            q_table_states=self.q_table.num_states,
        )

    # --- Rollout --- #

    def simulate(self, days: int) -> list[SimulationResult]:
        """
        Roll the learned policy out over ``days`` days.

        Actions are chosen epsilon-greedily at the current exploration rate,
        so residual exploration shows up in the results.
        """
        if days < 0:
            self.logger.error(f"Invalid simulation length: {days}")
            raise ValueError(f"days must be non-negative, got {days}")
        results: list[SimulationResult] = []
        stock_levels: list[float] = [p.initial_stock for p in self.products]
        for day in range(days):
            action = self.choose_action(SimulationState(tuple(stock_levels), day))
            demand = [
                pattern_demand(p, day, self.rng, self.simulation_config)
                for p in self.products
            ]
            result, stock_levels = settle_day(
                self.products,
                stock_levels,
                action.restock_amounts,
                demand,
                day,
                self.simulation_config,
            )
            results.append(result)
        self.logger.info(
            f"Rollout simulated {days} days at epsilon={self.exploration_rate:.3f}"
        )
        return results

    # --- Inspection --- #

    def get_policy(self) -> dict[StateKey, ActionKey]:
        policy = {}
        for state in self.q_table.states():
            actions = self.q_table.actions(state)
            if actions:
                policy[state] = max(actions, key=actions.get)
        return policy

    def get_q_table_df(self) -> pd.DataFrame | None:
        if not self.q_table.num_entries:
            return None
        resolution = self.config.state_resolution
        records = []
        for state in self.q_table.states():
            for action, q_value in self.q_table.actions(state).items():
                record = {"day": round(state[-1] / resolution * self.config.day_normalizer)}
                for product, level in zip(self.products, state[:-1]):
                    record[f"stock_fraction[{product.id}]"] = level / resolution
                for product, amount in zip(self.products, action):
                    record[f"restock[{product.id}]"] = amount
                record["q_value"] = q_value
                records.append(record)
        df = pd.DataFrame(records)
        df = df.sort_values(by=["day", "q_value"], ascending=[True, False])
        return df.reset_index(drop=True)
