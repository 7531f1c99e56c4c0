"""
Shared pytest fixtures for ArenaGym test suite.

This module provides a fake simulation backend and recording strategy
components, so the orchestrator can be tested without a simulator and every
strategy call can be asserted on in order.

Fixtures:
    call_log: Shared list every recording fake appends to
    default_config: Default MatchConfig (1v1, opponents spawned)
    backend_factory: Creates FakeBackend instances and remembers them
    obs_builder: RecordingObsBuilder on the shared call log
    reward_fn: RecordingReward on the shared call log
    terminal_condition: ScriptedCondition on the shared call log
    make_match: Factory for GameMatch with recording fakes
    make_env: Factory for ArenaEnv with recording fakes
    sample_state: 1v1 GameState
"""
from dataclasses import replace

import numpy as np
import pytest
from unittest.mock import MagicMock, Mock

from arenagym.gamestates import ORANGE_TEAM, BLUE_TEAM, GameState, PhysicsObject, PlayerData
from arenagym.state_wrapper import StateWrapper


# =============================================================================
# FAKE SIMULATION BACKEND
# =============================================================================

class FakeBackend:
    """
    In-memory stand-in for an arena simulator.

    force_state() turns the wrapper's cars into players. advance() keeps the
    roster and applies the next scripted (blue, orange) goal delta, if any.
    reconfigure() respawns cars for the new team size, keeping the score.

    Attributes:
        config: Last config received.
        score_script: Goal deltas consumed one per advance() call.
        forced: Every StateWrapper passed to force_state().
        advanced: Every action array passed to advance().
        reconfigured: (config, restart) pairs passed to reconfigure().
    """

    def __init__(self, config):
        self.config = config
        self.state = GameState()
        self.score_script: list[tuple[int, int]] = []
        self.forced = []
        self.advanced = []
        self.reconfigured = []
        self.closed = False

    def _state_from_wrapper(self, wrapper: StateWrapper) -> GameState:
        players = [
            PlayerData(
                car_id=car.car_id,
                team_num=car.team_num,
                car_data=PhysicsObject(
                    position=car.position.copy(),
                    linear_velocity=car.linear_velocity.copy(),
                    angular_velocity=car.angular_velocity.copy(),
                    rotation=car.rotation.copy(),
                ),
                boost_amount=car.boost,
            )
            for car in wrapper.cars
        ]
        return replace(self.state, players=players, ball=PhysicsObject(position=wrapper.ball.position.copy()))

    def current_state(self) -> GameState:
        return self.state

    def force_state(self, state_wrapper: StateWrapper) -> GameState:
        self.forced.append(state_wrapper)
        self.state = self._state_from_wrapper(state_wrapper)
        return self.state

    def advance(self, actions) -> GameState:
        self.advanced.append(np.array(actions))
        blue, orange = self.score_script.pop(0) if self.score_script else (0, 0)
        self.state = replace(
            self.state,
            blue_score=self.state.blue_score + blue,
            orange_score=self.state.orange_score + orange,
            tick_count=self.state.tick_count + self.config.tick_skip,
        )
        return self.state

    def reconfigure(self, config, restart: bool = False) -> GameState:
        self.reconfigured.append((config, restart))
        self.config = config
        orange = config.team_size if config.spawn_opponents else 0
        self.state = self._state_from_wrapper(StateWrapper.for_teams(config.team_size, orange))
        return self.state

    def close(self) -> None:
        self.closed = True


# =============================================================================
# RECORDING STRATEGY FAKES
# =============================================================================

class RecordingObsBuilder:
    """Observation builder that logs every call and encodes the car id."""

    def __init__(self, log: list, name: str = "obs", size: int = 4):
        self.log = log
        self.name = name
        self.size = size

    def reset(self, initial_state):
        self.log.append((self.name, "reset"))

    def pre_step(self, state, config):
        self.log.append((self.name, "pre_step"))

    def build_obs(self, player, state, config):
        self.log.append((self.name, "build_obs", player.car_id))
        return np.full(self.size, player.car_id, dtype=np.float32)

    def get_obs_space(self):
        return (self.size,)


class RecordingReward:
    """Reward function returning 1.0 per tick and 10.0 on the terminal tick."""

    STEP_REWARD = 1.0
    FINAL_REWARD = 10.0

    def __init__(self, log: list):
        self.log = log

    def reset(self, initial_state, reward_stage=None):
        self.log.append(("reward", "reset", reward_stage))

    def pre_step(self, state):
        self.log.append(("reward", "pre_step"))

    def get_reward(self, player, state):
        self.log.append(("reward", "get_reward", player.car_id))
        return self.STEP_REWARD

    def get_final_reward(self, player, state):
        self.log.append(("reward", "get_final_reward", player.car_id))
        return self.FINAL_REWARD


class ScriptedCondition:
    """
    Terminal condition driven by step counts.

    Attributes:
        terminal_after: is_terminal() turns True on this call, or never.
        truncate_after: is_truncated() turns True on this call, or never.
    """

    def __init__(self, log: list, terminal_after: int | None = None, truncate_after: int | None = None):
        self.log = log
        self.terminal_after = terminal_after
        self.truncate_after = truncate_after
        self.terminal_calls = 0
        self.truncated_calls = 0

    def reset(self, initial_state):
        self.log.append(("condition", "reset"))
        self.terminal_calls = 0
        self.truncated_calls = 0

    def is_terminal(self, state):
        self.terminal_calls += 1
        return self.terminal_after is not None and self.terminal_calls >= self.terminal_after

    def is_truncated(self, state):
        self.truncated_calls += 1
        return self.truncate_after is not None and self.truncated_calls >= self.truncate_after


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture
def default_config():
    """
    Create the default MatchConfig.

    Returns:
        MatchConfig for a 1v1 with opponents spawned (2 agents).
    """
    from arenagym.config import default_match_config
    return default_match_config()


# =============================================================================
# STRATEGY FIXTURES
# =============================================================================

@pytest.fixture
def call_log() -> list:
    """Shared, ordered record of strategy calls."""
    return []


@pytest.fixture
def backend_factory():
    """
    Create a backend factory that remembers the backends it built.

    Returns:
        Mock wrapping FakeBackend; `factory.backends` lists every instance.
    """
    backends = []

    def build(config):
        backend = FakeBackend(config)
        backends.append(backend)
        return backend

    factory = Mock(side_effect=build)
    factory.backends = backends
    return factory


@pytest.fixture
def obs_builder(call_log: list) -> RecordingObsBuilder:
    return RecordingObsBuilder(call_log)


@pytest.fixture
def reward_fn(call_log: list) -> RecordingReward:
    return RecordingReward(call_log)


@pytest.fixture
def terminal_condition(call_log: list) -> ScriptedCondition:
    return ScriptedCondition(call_log)


@pytest.fixture
def make_obs_builder(call_log: list):
    """Factory for extra RecordingObsBuilder instances on the shared log."""
    def build(name: str = "obs", size: int = 4) -> RecordingObsBuilder:
        return RecordingObsBuilder(call_log, name=name, size=size)
    return build


@pytest.fixture
def make_condition(call_log: list):
    """Factory for ScriptedCondition instances on the shared log."""
    def build(terminal_after=None, truncate_after=None) -> ScriptedCondition:
        return ScriptedCondition(call_log, terminal_after=terminal_after, truncate_after=truncate_after)
    return build


# =============================================================================
# ORCHESTRATOR / ENVIRONMENT FIXTURES
# =============================================================================

@pytest.fixture
def make_match(backend_factory, reward_fn, terminal_condition, obs_builder):
    """
    Factory for a GameMatch wired to the recording fakes.

    Keyword arguments override the GameMatch constructor arguments.
    """
    from arenagym.action_parsers import ContinuousAction
    from arenagym.game_match import GameMatch
    from arenagym.state_setters import DefaultState

    def build(**overrides):
        kwargs = dict(
            backend_factory=backend_factory,
            reward_fn=reward_fn,
            terminal_condition=terminal_condition,
            obs_builder=obs_builder,
            action_parser=ContinuousAction(),
            state_setter=DefaultState(seed=0),
        )
        kwargs.update(overrides)
        return GameMatch(**kwargs)

    return build


@pytest.fixture
def make_env(backend_factory, reward_fn, terminal_condition, obs_builder):
    """
    Factory for an ArenaEnv built through make() with the recording fakes.

    Keyword arguments override the make() arguments.

    Example:
        >>> def test_two_v_two(make_env):
        ...     env = make_env(config={"team_size": 2})
        ...     assert env.agent_count == 4
    """
    from arenagym.env import make

    envs = []

    def build(**overrides):
        kwargs = dict(
            backend_factory=backend_factory,
            obs_builder=obs_builder,
            reward_fn=reward_fn,
            terminal_condition=terminal_condition,
        )
        kwargs.update(overrides)
        env = make(**kwargs)
        envs.append(env)
        return env

    yield build

    for env in envs:
        env.close()


# =============================================================================
# UTILITY FIXTURES
# =============================================================================

@pytest.fixture
def sample_state() -> GameState:
    """
    Create a 1v1 snapshot with one blue (id 1) and one orange (id 5) car.

    Returns:
        GameState with both scores at 0.
    """
    return GameState(
        players=[
            PlayerData(car_id=1, team_num=BLUE_TEAM),
            PlayerData(car_id=5, team_num=ORANGE_TEAM),
        ],
    )


@pytest.fixture
def mock_player() -> MagicMock:
    """MagicMock standing in for a PlayerData on the blue team."""
    player = MagicMock()
    player.car_id = 1
    player.team_num = BLUE_TEAM
    return player


@pytest.fixture
def random_seed() -> int:
    """Fixed seed for reproducible state setters."""
    return 42
