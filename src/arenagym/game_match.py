"""
Episode orchestrator for ArenaGym.

GameMatch sits between the environment facade and the five pluggable
strategy components. It owns them, owns the match configuration and the
simulator handle, and keeps the small amount of per-episode bookkeeping
needed to call everything in the right order every tick.

Architecture Role:
    ArenaEnv (env.py) owns exactly one GameMatch and sequences it:

    reset: get_reset_state() → sim.force_state() → episode_reset()
           → build_observations()
    step:  parse_actions() → sim.advance() → build_observations()
           → is_done() → get_rewards() → get_result()

    GameMatch is the only caller of every mutating strategy method, so the
    strategies need no locking. It must not be copied while strategies are
    live; two orchestrators sharing one reward function would interleave
    their pre_step/reset calls.

Roster Contracts:
    Every per-agent sequence is aligned with GameState.players:
    - observations and rewards are produced in player order
    - in multi-builder mode the i-th builder serves the i-th player, so at
      least as many builders as players are required
    - the action parser must return exactly one 8-wide row per player

    A mismatch is a configuration or programming error. It raises
    CardinalityError and nothing is truncated or padded.

Observation Builder Modes:
    use_single_obs=True:  one shared builder; pre_step once per tick, then
                          build_obs once per player on the same instance
    use_single_obs=False: one builder per agent slot; pre_step on every
                          instance, then builders zipped with players

Dependencies:
    - numpy: Action arrays
    - gymnasium: Observation/action space descriptors
    - arenagym.config: MatchConfig and agent-count validation
"""

import logging
from collections.abc import Sequence

import numpy as np
from gymnasium import spaces

from arenagym.action_parsers import ActionParser
from arenagym.backend import BackendFactory
from arenagym.conditions import TerminalCondition
from arenagym.config import (
    ACTION_SIZE,
    MAX_SPECTATOR_SLOTS,
    MatchConfig,
    compute_agent_count,
    default_match_config,
)
from arenagym.errors import CardinalityError
from arenagym.gamestates import GameState
from arenagym.obs_builders import ObsBuilder
from arenagym.rewards import RewardFunction
from arenagym.state_setters import StateSetter
from arenagym.state_wrapper import StateWrapper

logger = logging.getLogger(__name__)


def _as_builder_list(obs_builder: ObsBuilder | Sequence[ObsBuilder]) -> list[ObsBuilder]:
    if isinstance(obs_builder, (list, tuple)):
        builders = list(obs_builder)
    else:
        builders = [obs_builder]
    if not builders:
        raise CardinalityError("At least one observation builder is required")
    return builders


class GameMatch:
    """
    Owns the strategy set and sequences it against simulator snapshots.

    Attributes:
        config (MatchConfig): Current match configuration.
        agents (int): Number of controlled agents derived from config.
        use_single_obs (bool): Whether one builder serves every player.
        sim: Simulation backend handle created from config.
        prev_actions (np.ndarray): Last parsed actions, (agents, 8).
        spectator_ids (list[int]): Car ids of the episode's players in
            snapshot order, padded with 0 to MAX_SPECTATOR_SLOTS.
        initial_score (int): Blue minus orange score at episode start.
        observation_space (spaces.Space): One agent's observation space.
        action_space (spaces.Space): One agent's raw action space.

    Example:
        >>> match = GameMatch(
        ...     backend_factory=MySim,
        ...     reward_fn=ScoreDeltaReward(),
        ...     terminal_condition=GoalScoredCondition(),
        ...     obs_builder=MyObs(),
        ...     action_parser=ContinuousAction(),
        ...     state_setter=DefaultState(),
        ... )
    """

    def __init__(
        self,
        backend_factory: BackendFactory,
        reward_fn: RewardFunction,
        terminal_condition: TerminalCondition,
        obs_builder: ObsBuilder | Sequence[ObsBuilder],
        action_parser: ActionParser,
        state_setter: StateSetter,
        config: MatchConfig | None = None,
        use_single_obs: bool = True,
    ):
        """
        Build the orchestrator and start the simulator.

        Args:
            backend_factory: Called once with the config to create the
                simulator handle.
            reward_fn: Reward function, kept for the whole lifetime.
            terminal_condition: Terminal/truncation condition.
            obs_builder: A single builder, or a sequence of builders (one per
                agent slot when use_single_obs is False).
            action_parser: Maps raw policy actions to simulator inputs.
            state_setter: Builds the state every episode starts from.
            config: Match configuration. Defaults to default_match_config().
            use_single_obs: Share the first builder between all players.

        Raises:
            ConfigError: If the configuration is invalid.
            CardinalityError: If no observation builder is given.
        """
        self.config = config or default_match_config()
        self.agents = compute_agent_count(self.config)

        self._reward_fn = reward_fn
        self._terminal_condition = terminal_condition
        self._obs_builders = _as_builder_list(obs_builder)
        self._action_parser = action_parser
        self._state_setter = state_setter
        self.use_single_obs = bool(use_single_obs)

        # Episode bookkeeping
        self.prev_actions = np.zeros((self.agents, ACTION_SIZE), dtype=np.float32)
        self.spectator_ids = [0] * MAX_SPECTATOR_SLOTS
        self.initial_score = 0

        self.sim = backend_factory(self.config)

        self.observation_space: spaces.Space | None = None
        self.action_space: spaces.Space | None = None
        self._auto_detect_spaces()

    # =========================================================================
    # EPISODE LIFECYCLE
    # =========================================================================

    def episode_reset(self, initial_state: GameState, reward_stage: int | None = None) -> None:
        """
        Reset the strategies and bookkeeping for a new episode.

        Args:
            initial_state: The snapshot the episode starts from.
            reward_stage: Curriculum stage forwarded to the reward function.
        """
        ids = [player.car_id for player in initial_state.players][:MAX_SPECTATOR_SLOTS]
        self.spectator_ids = ids + [0] * (MAX_SPECTATOR_SLOTS - len(ids))

        self.prev_actions = np.zeros((self.agents, ACTION_SIZE), dtype=np.float32)

        self._terminal_condition.reset(initial_state)
        self._reward_fn.reset(initial_state, reward_stage)

        if self.use_single_obs:
            self._obs_builders[0].reset(initial_state)
        else:
            for builder in self._obs_builders:
                builder.reset(initial_state)

        self.initial_score = initial_state.blue_score - initial_state.orange_score
        logger.debug(
            "Episode reset: players=%s initial_score=%d reward_stage=%s",
            ids,
            self.initial_score,
            reward_stage,
        )

    def get_reset_state(self, state: GameState | None = None) -> StateWrapper:
        """
        Ask the state setter for the state the next episode starts from.

        Args:
            state: Optional prior snapshot the setter may randomize around.

        Returns:
            The wrapper to hand to the simulator.
        """
        wrapper = self._state_setter.build_wrapper(
            self.config.team_size,
            self.config.spawn_opponents,
            state,
        )
        self._state_setter.reset(wrapper)
        return wrapper

    def set_seeds(self, seed: int) -> None:
        """Seed the state setter for the next get_reset_state()."""
        self._state_setter.set_seed(seed)

    # =========================================================================
    # PER-TICK OPERATIONS
    # =========================================================================

    def build_observations(self, state: GameState) -> list[np.ndarray]:
        """
        Build one observation per player, in player order.

        Raises:
            CardinalityError: In multi-builder mode, if there are fewer
                builders than players.
        """
        if self.use_single_obs:
            builder = self._obs_builders[0]
            builder.pre_step(state, self.config)
            return [
                np.asarray(builder.build_obs(player, state, self.config), dtype=np.float32)
                for player in state.players
            ]

        n_builders = len(self._obs_builders)
        n_players = len(state.players)
        if n_builders < n_players:
            raise CardinalityError(
                f"Not enough observation builders (len: {n_builders}) "
                f"for the amount of players (len: {n_players})"
            )

        for builder in self._obs_builders:
            builder.pre_step(state, self.config)

        return [
            np.asarray(builder.build_obs(player, state, self.config), dtype=np.float32)
            for player, builder in zip(state.players, self._obs_builders)
        ]

    def get_rewards(self, state: GameState, done: bool) -> list[float]:
        """
        Compute one reward per player, in player order.

        On the terminal tick (done=True) every player gets its final reward.
        """
        self._reward_fn.pre_step(state)

        rewards = []
        for player in state.players:
            if done:
                rewards.append(float(self._reward_fn.get_final_reward(player, state)))
            else:
                rewards.append(float(self._reward_fn.get_reward(player, state)))
        return rewards

    def is_done(self, state: GameState) -> bool:
        """Whether the terminal condition ends the episode at this snapshot."""
        return bool(self._terminal_condition.is_terminal(state))

    is_terminal = is_done

    def is_truncated(self, state: GameState) -> bool:
        """Whether the terminal condition cuts the episode short at this snapshot."""
        return bool(self._terminal_condition.is_truncated(state))

    def get_result(self, state: GameState) -> int:
        """Score difference relative to the start of the episode."""
        current_score = state.blue_score - state.orange_score
        return current_score - self.initial_score

    def parse_actions(self, actions, state: GameState) -> np.ndarray:
        """
        Convert raw actions into simulator inputs and remember them.

        Args:
            actions: One raw action per player in snapshot order.
            state: The snapshot the actions were chosen from.

        Returns:
            Float32 array of shape (n_players, 8).

        Raises:
            CardinalityError: If the parser did not return exactly one
                8-wide row per player.
        """
        parsed = np.asarray(self._action_parser.parse_actions(actions, state), dtype=np.float32)

        acts_len = parsed.shape[0] if parsed.ndim >= 1 else 0
        players_len = len(state.players)
        if acts_len != players_len:
            raise CardinalityError(
                f"Parsed actions was not the same length (len: {acts_len}) "
                f"as player count (len: {players_len})"
            )
        if parsed.ndim != 2 or parsed.shape[1] != ACTION_SIZE:
            raise CardinalityError(
                f"Parsed actions must have shape ({players_len}, {ACTION_SIZE}), got {parsed.shape}"
            )

        self.prev_actions = parsed.copy()
        return parsed

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def get_state(self) -> GameState:
        """Current simulator snapshot, without advancing it."""
        return self.sim.current_state()

    def get_config(self) -> MatchConfig:
        """The match configuration currently in effect."""
        return self.config

    def update_settings(
        self,
        new_config: MatchConfig,
        new_obs_builder: ObsBuilder | Sequence[ObsBuilder] | None = None,
        restart: bool = False,
    ) -> GameState:
        """
        Replace the match configuration and optionally the builders.

        The new config is validated before anything changes, so a rejected
        update leaves the orchestrator as it was.

        prev_actions keeps its previous row count until the next
        episode_reset(), which resizes it to the new agent count.

        Args:
            new_config: Replacement configuration.
            new_obs_builder: Replacement builder(s), or None to keep the
                current ones.
            restart: Forwarded to the simulator; False keeps the running
                match going.

        Returns:
            The simulator snapshot after the change.

        Raises:
            ConfigError: If new_config is invalid.
            CardinalityError: If new_obs_builder is an empty sequence.
        """
        agents = compute_agent_count(new_config)
        builders = _as_builder_list(new_obs_builder) if new_obs_builder is not None else None

        self.config = new_config
        self.agents = agents
        if builders is not None:
            self._obs_builders = builders

        logger.info(
            "Match settings updated: team_size=%d spawn_opponents=%s tick_skip=%d agents=%d",
            new_config.team_size,
            new_config.spawn_opponents,
            new_config.tick_skip,
            agents,
        )

        state = self.sim.reconfigure(new_config, restart)
        self._auto_detect_spaces()
        return state

    def _auto_detect_spaces(self) -> None:
        obs_space = self._obs_builders[0].get_obs_space()
        if isinstance(obs_space, spaces.Space):
            self.observation_space = obs_space
        else:
            self.observation_space = spaces.Box(
                low=-np.inf,
                high=np.inf,
                shape=tuple(int(d) for d in obs_space),
                dtype=np.float32,
            )
        self.action_space = self._action_parser.get_action_space()
