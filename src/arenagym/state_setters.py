"""
State setters for ArenaGym.

A state setter decides where every episode starts. On reset the orchestrator
asks it for a StateWrapper sized to the current match, lets it edit that
wrapper, and the environment forces the result into the simulator.

Architecture Role:
    ArenaEnv.reset(seed)
    → GameMatch.set_seeds(seed)                   (only when a seed is given)
    → GameMatch.get_reset_state(prev_state)
        → setter.build_wrapper(team_size, spawn_opponents, prev_state)
        → setter.reset(wrapper)
    → backend.force_state(wrapper)

Seeding:
    Setters that randomize keep their own numpy Generator so that
    set_seed() makes episode starts reproducible without touching global
    random state.
"""

import math
from typing import Protocol

import numpy as np

from arenagym.gamestates import GameState
from arenagym.state_wrapper import BALL_RADIUS, StateWrapper

# Half extents of the playable field
SIDE_WALL_X = 4096.0
BACK_WALL_Y = 5120.0
CEILING_Z = 2044.0

# Car rest height
CAR_REST_Z = 17.0


class StateSetter(Protocol):
    """
    Protocol defining the interface for state setters.

    Subclass it explicitly to inherit the default build_wrapper() and
    set_seed(); only reset() is then required.
    """

    def build_wrapper(
        self,
        team_size: int,
        spawn_opponents: bool,
        state: GameState | None = None,
    ) -> StateWrapper:
        """
        Build the wrapper the setter will edit.

        The default mirrors the given snapshot when its roster matches the
        requested match shape, and otherwise creates a fresh wrapper.

        Args:
            team_size: Cars per team.
            spawn_opponents: Whether the orange team exists.
            state: Optional prior snapshot to randomize around.
        """
        orange_count = team_size if spawn_opponents else 0
        if state is not None:
            wrapper = StateWrapper.from_state(state)
            if wrapper.blue_count == team_size and wrapper.orange_count == orange_count:
                return wrapper
        return StateWrapper.for_teams(team_size, orange_count)

    def reset(self, state_wrapper: StateWrapper) -> None:
        """Edit the wrapper in place to describe the next episode's start."""
        ...

    def set_seed(self, seed: int) -> None:
        """Seed the setter's random generator. No-op by default."""


class StateModifier(Protocol):
    """
    Protocol for transforms applied to a snapshot rather than to a wrapper.

    GameMatch never calls a modifier. It is an extension point for callers
    that edit snapshots between episodes, for example to replay a recorded
    state with a perturbation before converting it with
    StateWrapper.from_state().
    """

    def modify_state(self, state: GameState) -> GameState:
        """Return the modified snapshot. May mutate and return `state`."""
        ...


class DefaultState(StateSetter):
    """
    Standard kickoff: cars on randomly chosen kickoff spots, ball at centre.

    Orange spots mirror the blue ones, so both teams always get the same
    layout. Every car starts with a third of a tank of boost.
    """

    SPAWN_BLUE_POS = np.array(
        [
            [-2048.0, -2560.0, CAR_REST_Z],
            [2048.0, -2560.0, CAR_REST_Z],
            [-256.0, -3840.0, CAR_REST_Z],
            [256.0, -3840.0, CAR_REST_Z],
            [0.0, -4608.0, CAR_REST_Z],
        ],
        dtype=np.float32,
    )
    SPAWN_BLUE_YAW = [0.25 * math.pi, 0.75 * math.pi, 0.5 * math.pi, 0.5 * math.pi, 0.5 * math.pi]

    KICKOFF_BOOST = 0.33

    def __init__(self, seed: int | None = None):
        self.rng = np.random.default_rng(seed)

    def set_seed(self, seed: int) -> None:
        self.rng = np.random.default_rng(seed)

    def reset(self, state_wrapper: StateWrapper) -> None:
        n_spots = len(self.SPAWN_BLUE_POS)
        spots = self.rng.permutation(n_spots)

        for i, car in enumerate(state_wrapper.blue_cars()):
            spot = spots[i % n_spots]
            x, y, z = self.SPAWN_BLUE_POS[spot]
            car.set_pos(x, y, z)
            car.set_rot(0.0, self.SPAWN_BLUE_YAW[spot], 0.0)
            car.set_lin_vel(0.0, 0.0, 0.0)
            car.set_ang_vel(0.0, 0.0, 0.0)
            car.boost = self.KICKOFF_BOOST

        # Point-mirror of the blue layout
        for i, car in enumerate(state_wrapper.orange_cars()):
            spot = spots[i % n_spots]
            x, y, z = self.SPAWN_BLUE_POS[spot]
            car.set_pos(-x, -y, z)
            car.set_rot(0.0, self.SPAWN_BLUE_YAW[spot] - math.pi, 0.0)
            car.set_lin_vel(0.0, 0.0, 0.0)
            car.set_ang_vel(0.0, 0.0, 0.0)
            car.boost = self.KICKOFF_BOOST

        state_wrapper.ball.set_pos(0.0, 0.0, BALL_RADIUS)
        state_wrapper.ball.set_lin_vel(0.0, 0.0, 0.0)
        state_wrapper.ball.set_ang_vel(0.0, 0.0, 0.0)


class RandomState(StateSetter):
    """
    Uniformly random car and ball placement on the field.

    Attributes:
        ball_speed (float): Maximum initial ball speed per axis. 0 keeps
            the ball still.
        cars_on_ground (bool): Place cars at rest height with zero pitch
            and roll instead of anywhere in the air.
    """

    def __init__(self, ball_speed: float = 0.0, cars_on_ground: bool = True, seed: int | None = None):
        self.ball_speed = float(ball_speed)
        self.cars_on_ground = bool(cars_on_ground)
        self.rng = np.random.default_rng(seed)

    def set_seed(self, seed: int) -> None:
        self.rng = np.random.default_rng(seed)

    def _random_xy(self) -> tuple[float, float]:
        # Keep clear of the walls
        x = self.rng.uniform(-0.9 * SIDE_WALL_X, 0.9 * SIDE_WALL_X)
        y = self.rng.uniform(-0.9 * BACK_WALL_Y, 0.9 * BACK_WALL_Y)
        return float(x), float(y)

    def reset(self, state_wrapper: StateWrapper) -> None:
        for car in state_wrapper.cars:
            x, y = self._random_xy()
            yaw = float(self.rng.uniform(-math.pi, math.pi))
            if self.cars_on_ground:
                car.set_pos(x, y, CAR_REST_Z)
                car.set_rot(0.0, yaw, 0.0)
            else:
                z = float(self.rng.uniform(CAR_REST_Z, 0.9 * CEILING_Z))
                pitch, roll = self.rng.uniform(-math.pi / 2, math.pi / 2, size=2)
                car.set_pos(x, y, z)
                car.set_rot(float(pitch), yaw, float(roll))
            car.set_lin_vel(0.0, 0.0, 0.0)
            car.set_ang_vel(0.0, 0.0, 0.0)
            car.boost = float(self.rng.uniform(0.0, 1.0))

        x, y = self._random_xy()
        state_wrapper.ball.set_pos(x, y, BALL_RADIUS)
        if self.ball_speed > 0:
            vx, vy = self.rng.uniform(-self.ball_speed, self.ball_speed, size=2)
            state_wrapper.ball.set_lin_vel(float(vx), float(vy), 0.0)
        else:
            state_wrapper.ball.set_lin_vel(0.0, 0.0, 0.0)
        state_wrapper.ball.set_ang_vel(0.0, 0.0, 0.0)
