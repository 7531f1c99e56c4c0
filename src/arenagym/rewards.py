"""
Reward functions for ArenaGym.

This module defines the RewardFunction protocol the orchestrator calls every
tick, plus a few generic, game-agnostic reward functions and a small factory.
Task-specific reward shaping belongs to the caller; the functions here are
building blocks (constant signals, goal deltas, weighted sums).

Architecture Role:
    GameMatch owns exactly one reward function for the lifetime of the
    environment. Each tick it calls:

    GameMatch.get_rewards(state, done)
    → reward_fn.pre_step(state)                     once
    → reward_fn.get_reward(player, state)           per player, or
      reward_fn.get_final_reward(player, state)     per player when done

    and at the start of every episode:

    GameMatch.episode_reset(state, reward_stage)
    → reward_fn.reset(state, reward_stage)

Reward Stages:
    reward_stage is an optional curriculum index handed through from
    ArenaEnv.set_reward_stage(). Reward functions keep their own state across
    episodes, so a function can change its behavior by stage without being
    rebuilt. CombinedReward uses it to pick a weight table.

Usage:
    # Weighted sum with a harder weighting from stage 2 onwards
    reward_fn = CombinedReward(
        [ScoreDeltaReward(), ConstantReward(-0.01)],
        weights=[1.0, 1.0],
        stage_weights={2: [1.0, 3.0]},
    )

    # Or by name
    reward_fn = create_reward("score_delta", goal_reward=10.0)

Dependencies:
    - typing: For Protocol
    - arenagym.gamestates: Snapshot types
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from arenagym.gamestates import BLUE_TEAM, GameState, PlayerData

logger = logging.getLogger(__name__)


# =============================================================================
# REWARD FUNCTION PROTOCOL
# =============================================================================


class RewardFunction(Protocol):
    """
    Protocol defining the interface for reward functions.

    Any class with these methods can be used as a reward function. Subclass
    the protocol explicitly to inherit the no-op pre_step() and the default
    get_final_reward(), which falls back to get_reward().

    Required Methods:
        reset(): Clear episode state, optionally switching curriculum stage
        get_reward(): Reward of one player for the current tick

    Optional Methods:
        pre_step(): Tick-level preparation shared by all players
        get_final_reward(): Reward on the tick the episode terminates

    Notes:
        - get_final_reward() is used for *every* player on the terminal
          tick, not only for the player that caused termination
        - The orchestrator is the only caller; no locking is needed
    """

    def reset(self, initial_state: GameState, reward_stage: int | None = None) -> None:
        """
        Reset internal state for a new episode.

        Args:
            initial_state: The snapshot the episode starts from.
            reward_stage: Curriculum stage index, or None when no curriculum
                is in use.
        """
        ...

    def pre_step(self, state: GameState) -> None:
        """Prepare data shared by all players, once per tick."""

    def get_reward(self, player: PlayerData, state: GameState) -> float:
        """Return the reward of one player for a non-terminal tick."""
        ...

    def get_final_reward(self, player: PlayerData, state: GameState) -> float:
        """Return the reward of one player for the terminal tick."""
        return self.get_reward(player, state)


# =============================================================================
# GENERIC REWARD FUNCTIONS
# =============================================================================


class ConstantReward(RewardFunction):
    """
    Same reward for every player on every tick.

    Mostly useful as a per-step penalty (negative value) inside a
    CombinedReward, or as a stand-in while wiring an environment.
    """

    def __init__(self, value: float = 1.0):
        self.value = float(value)

    def reset(self, initial_state: GameState, reward_stage: int | None = None) -> None:
        pass

    def get_reward(self, player: PlayerData, state: GameState) -> float:
        return self.value


class ScoreDeltaReward(RewardFunction):
    """
    Reward goals scored by the player's team since the previous tick.

    Goals for the player's own team give +goal_reward each, goals for the
    other team give -concede_penalty each.

    Attributes:
        goal_reward (float): Reward per goal scored by the player's team.
        concede_penalty (float): Penalty per goal scored against it.
    """

    def __init__(self, goal_reward: float = 1.0, concede_penalty: float = 1.0):
        self.goal_reward = float(goal_reward)
        self.concede_penalty = float(concede_penalty)

        # Scores seen at the previous tick
        self._last_blue = 0
        self._last_orange = 0

        # Goals scored during the current tick, computed in pre_step
        self._blue_delta = 0
        self._orange_delta = 0

    def reset(self, initial_state: GameState, reward_stage: int | None = None) -> None:
        self._last_blue = initial_state.blue_score
        self._last_orange = initial_state.orange_score
        self._blue_delta = 0
        self._orange_delta = 0

    def pre_step(self, state: GameState) -> None:
        self._blue_delta = state.blue_score - self._last_blue
        self._orange_delta = state.orange_score - self._last_orange
        self._last_blue = state.blue_score
        self._last_orange = state.orange_score

    def get_reward(self, player: PlayerData, state: GameState) -> float:
        if player.team_num == BLUE_TEAM:
            scored, conceded = self._blue_delta, self._orange_delta
        else:
            scored, conceded = self._orange_delta, self._blue_delta
        return scored * self.goal_reward - conceded * self.concede_penalty


class CombinedReward(RewardFunction):
    """
    Weighted sum of several reward functions, with per-stage weights.

    Every call is forwarded to each child in order, so children keep their
    own pre_step/reset semantics. The weight vector is chosen on reset():
    if stage_weights has an entry for the given reward_stage that entry is
    used, otherwise the base weights are.

    Attributes:
        reward_fns (list): Child reward functions.
        weights (list[float]): Base weights, one per child.
        stage_weights (dict[int, list[float]]): Optional weight tables keyed
            by curriculum stage.
        active_weights (list[float]): Weights in use for this episode.

    Raises:
        ValueError: If no children are given or a weight table has the
            wrong length.
    """

    def __init__(
        self,
        reward_fns: Sequence[RewardFunction],
        weights: Sequence[float] | None = None,
        stage_weights: Mapping[int, Sequence[float]] | None = None,
    ):
        if not reward_fns:
            raise ValueError("CombinedReward needs at least one reward function")

        self.reward_fns = list(reward_fns)
        self.weights = self._check_weights(weights if weights is not None else [1.0] * len(self.reward_fns))
        self.stage_weights = {
            int(stage): self._check_weights(table) for stage, table in (stage_weights or {}).items()
        }
        self.active_weights = list(self.weights)

    def _check_weights(self, weights: Sequence[float]) -> list[float]:
        if len(weights) != len(self.reward_fns):
            raise ValueError(
                f"Got {len(weights)} weights for {len(self.reward_fns)} reward functions"
            )
        return [float(w) for w in weights]

    def reset(self, initial_state: GameState, reward_stage: int | None = None) -> None:
        if reward_stage is not None and reward_stage in self.stage_weights:
            self.active_weights = list(self.stage_weights[reward_stage])
        else:
            self.active_weights = list(self.weights)
        logger.debug("CombinedReward stage=%s weights=%s", reward_stage, self.active_weights)

        for fn in self.reward_fns:
            fn.reset(initial_state, reward_stage)

    def pre_step(self, state: GameState) -> None:
        for fn in self.reward_fns:
            fn.pre_step(state)

    def get_reward(self, player: PlayerData, state: GameState) -> float:
        return sum(
            w * fn.get_reward(player, state) for w, fn in zip(self.active_weights, self.reward_fns)
        )

    def get_final_reward(self, player: PlayerData, state: GameState) -> float:
        return sum(
            w * fn.get_final_reward(player, state)
            for w, fn in zip(self.active_weights, self.reward_fns)
        )


# =============================================================================
# REWARD FACTORY
# =============================================================================

# Maps names to reward classes
REWARD_FUNCTIONS = {
    "constant": ConstantReward,
    "score_delta": ScoreDeltaReward,
}


def create_reward(name: str = "score_delta", **kwargs) -> RewardFunction:
    """
    Create a reward function by name.

    Args:
        name: One of the keys of REWARD_FUNCTIONS.
        **kwargs: Passed to the reward class constructor.

    Returns:
        A new reward function instance.

    Raises:
        ValueError: If the reward name is not recognized.

    Example:
        >>> create_reward("constant", value=-0.01)
    """
    if name not in REWARD_FUNCTIONS:
        available = list(REWARD_FUNCTIONS.keys())
        raise ValueError(f"Unknown reward: {name}. Available: {available}")
    return REWARD_FUNCTIONS[name](**kwargs)
