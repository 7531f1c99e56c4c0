"""
ArenaGym environment facade.

This module provides the reset/step loop a training process talks to. The
facade owns one GameMatch (the episode orchestrator) and the previous
snapshot, and sequences calls between the simulator and the orchestrator.

Architecture Role:
    ArenaEnv is the outermost layer of ArenaGym:

    training loop → ArenaEnv.reset()/step() → GameMatch → strategies
                                            → simulation backend

    It is multi-agent: observations and rewards are lists with one entry per
    agent in snapshot player order, and step() takes one action per agent.
    Because of that it does not subclass gymnasium.Env; it only exposes
    gymnasium spaces describing a single agent. sb3.py adapts it to the
    stable-baselines3 VecEnv interface.

Episode State Machine:
    Constructed → reset() → Active → step() → Active | Done

    The facade never resets on its own. After a step returns done=True the
    caller must call reset() before stepping again.

Done and Truncation:
    `done` is the terminal condition's is_terminal(). Truncation is reported
    separately as info["truncated"]; whether a truncated episode should also
    be treated as finished is the training client's decision.

Usage:
    >>> env = make(backend_factory=MySim, obs_builder=MyObs())
    >>> obs = env.reset()
    >>> actions = np.zeros((env.agent_count, 8), dtype=np.float32)
    >>> obs, rewards, done, info = env.step(actions)
    >>> info["result"]
    0.0

Dependencies:
    - numpy: Action arrays
    - gymnasium: Space descriptors exposed by the facade
    - arenagym.game_match: The episode orchestrator
"""

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
from gymnasium import spaces

from arenagym.action_parsers import ActionParser, ContinuousAction
from arenagym.backend import BackendFactory
from arenagym.conditions import CombinedCondition, GoalScoredCondition, TerminalCondition, TimeoutCondition
from arenagym.config import MatchConfig
from arenagym.game_match import GameMatch
from arenagym.gamestates import GameState
from arenagym.obs_builders import ObsBuilder
from arenagym.rewards import RewardFunction, create_reward
from arenagym.state_setters import DefaultState, StateSetter

logger = logging.getLogger(__name__)

# Default episode length: 225 steps at tick_skip=8 is 15 seconds of play
DEFAULT_TIMEOUT_STEPS = 225


# =============================================================================
# ENVIRONMENT FACADE
# =============================================================================


class ArenaEnv:
    """
    Multi-agent reset/step facade over a GameMatch.

    Attributes:
        reward_stage (int | None): Curriculum stage passed to the reward
            function on every reset. Change it with set_reward_stage().

    Notes:
        - The constructor performs one reset() so the environment is Active
          and prev_state is populated right away
        - Any exception from a strategy or the simulator propagates
          unchanged; the instance should be rebuilt afterwards
    """

    metadata = {"render_modes": []}
    render_mode = None

    def __init__(self, game_match: GameMatch, reward_stage: int | None = None):
        self._game_match = game_match
        self.reward_stage = reward_stage
        self._prev_state: GameState | None = None

        self.reset()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def game_match(self) -> GameMatch:
        return self._game_match

    @property
    def prev_state(self) -> GameState | None:
        return self._prev_state

    @property
    def agent_count(self) -> int:
        return self._game_match.agents

    @property
    def observation_space(self) -> spaces.Space:
        return self._game_match.observation_space

    @property
    def action_space(self) -> spaces.Space:
        return self._game_match.action_space

    # =========================================================================
    # RESET / STEP
    # =========================================================================

    def reset(
        self,
        return_info: bool = False,
        seed: int | None = None,
    ) -> list[np.ndarray] | tuple[list[np.ndarray], dict[str, Any]]:
        """
        Start a new episode.

        Args:
            return_info: Also return an info dict with the episode result.
            seed: Seed forwarded to the state setter before building the
                start state.

        Returns:
            One observation per agent, or (observations, info) when
            return_info is True.
        """
        if seed is not None:
            self._game_match.set_seeds(seed)

        state_wrapper = self._game_match.get_reset_state(self._prev_state)
        state = self._game_match.sim.force_state(state_wrapper)

        self._game_match.episode_reset(state, self.reward_stage)
        self._prev_state = state

        obs = self._game_match.build_observations(state)
        if return_info:
            return obs, {"result": float(self._game_match.get_result(state))}
        return obs

    def step(self, actions) -> tuple[list[np.ndarray], list[float], bool, dict[str, Any]]:
        """
        Advance the match by one control step.

        Args:
            actions: One raw action per agent, in snapshot player order.

        Returns:
            Tuple of (observations, rewards, done, info):
            - observations: One observation per agent
            - rewards: One float per agent
            - done: Whether the terminal condition fired
            - info: "result" (episode-relative score difference, float) and
              "truncated" (bool)

        Raises:
            CardinalityError: If the parsed actions do not match the roster.
        """
        parsed = self._game_match.parse_actions(actions, self._prev_state)
        state = self._game_match.sim.advance(parsed)

        obs = self._game_match.build_observations(state)
        done = self._game_match.is_done(state)
        truncated = self._game_match.is_truncated(state)
        self._prev_state = state

        rewards = self._game_match.get_rewards(state, done)
        info = {
            "result": float(self._game_match.get_result(state)),
            "truncated": truncated,
        }
        return obs, rewards, done, info

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def set_reward_stage(self, stage: int | None) -> None:
        """Set the curriculum stage used from the next reset() on."""
        logger.debug("Reward stage set to %s", stage)
        self.reward_stage = stage

    def update_settings(
        self,
        new_config: MatchConfig,
        new_obs_builder: ObsBuilder | Sequence[ObsBuilder] | None = None,
        restart: bool = False,
    ) -> GameState:
        """
        Replace the match configuration without rebuilding the environment.

        The new agent count applies immediately. Whether the returned
        snapshot already carries the new roster depends on the backend; the
        next reset() always forces a matching state.

        Returns:
            The simulator snapshot after the change, also cached as
            prev_state.
        """
        state = self._game_match.update_settings(new_config, new_obs_builder, restart)
        self._prev_state = state
        return state

    def close(self) -> None:
        """Release the simulator if it exposes close()."""
        close = getattr(self._game_match.sim, "close", None)
        if callable(close):
            close()


# =============================================================================
# ENVIRONMENT FACTORY
# =============================================================================


def make(
    backend_factory: BackendFactory,
    obs_builder: ObsBuilder | Sequence[ObsBuilder],
    config: MatchConfig | dict | None = None,
    reward_fn: RewardFunction | str = "score_delta",
    terminal_condition: TerminalCondition | None = None,
    action_parser: ActionParser | None = None,
    state_setter: StateSetter | None = None,
    use_single_obs: bool = True,
    reward_stage: int | None = None,
) -> ArenaEnv:
    """
    Assemble a GameMatch and wrap it in an ArenaEnv.

    Args:
        backend_factory: Creates the simulator from the match config.
        obs_builder: One builder, or one per agent slot (use_single_obs=False).
        config: MatchConfig, a dict for MatchConfig.from_dict(), or None
            for default_match_config().
        reward_fn: Reward function instance, or a name for create_reward().
        terminal_condition: Defaults to a goal-or-timeout condition
            (GoalScoredCondition plus TimeoutCondition(225)).
        action_parser: Defaults to ContinuousAction.
        state_setter: Defaults to DefaultState (kickoff).
        use_single_obs: Share one observation builder between all agents.
        reward_stage: Initial curriculum stage.

    Returns:
        A reset ArenaEnv.

    Example:
        >>> env = make(MySim, MyObs(), config={"team_size": 2})
        >>> env.agent_count
        4
    """
    if isinstance(config, dict):
        config = MatchConfig.from_dict(config)

    if isinstance(reward_fn, str):
        reward_fn = create_reward(reward_fn)

    if terminal_condition is None:
        terminal_condition = CombinedCondition(
            [GoalScoredCondition(), TimeoutCondition(DEFAULT_TIMEOUT_STEPS)]
        )

    game_match = GameMatch(
        backend_factory=backend_factory,
        reward_fn=reward_fn,
        terminal_condition=terminal_condition,
        obs_builder=obs_builder,
        action_parser=action_parser or ContinuousAction(),
        state_setter=state_setter or DefaultState(),
        config=config,
        use_single_obs=use_single_obs,
    )
    return ArenaEnv(game_match, reward_stage=reward_stage)
