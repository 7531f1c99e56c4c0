"""
Editable state description used to reset the simulator.

State setters build a StateWrapper, move the cars and the ball around in it,
and the environment hands it to backend.force_state(). Unlike GameState, a
StateWrapper is meant to be mutated.

Dependencies:
    - numpy: Vector fields are float32 arrays
    - arenagym.gamestates: Seeding a wrapper from a prior snapshot
"""

from dataclasses import dataclass, field

import numpy as np

from arenagym.gamestates import BLUE_TEAM, ORANGE_TEAM, GameState

# First car id for each team
BLUE_ID_START = 1
ORANGE_ID_START = 5

# Ball rest height above the floor
BALL_RADIUS = 91.25


def _vec(values=(0.0, 0.0, 0.0)) -> np.ndarray:
    return np.array(values, dtype=np.float32)


@dataclass
class BallWrapper:
    position: np.ndarray = field(default_factory=lambda: _vec((0.0, 0.0, BALL_RADIUS)))
    linear_velocity: np.ndarray = field(default_factory=_vec)
    angular_velocity: np.ndarray = field(default_factory=_vec)

    def set_pos(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.position, x, y, z)

    def set_lin_vel(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.linear_velocity, x, y, z)

    def set_ang_vel(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.angular_velocity, x, y, z)


@dataclass
class CarWrapper:
    car_id: int
    team_num: int = BLUE_TEAM
    position: np.ndarray = field(default_factory=_vec)
    linear_velocity: np.ndarray = field(default_factory=_vec)
    angular_velocity: np.ndarray = field(default_factory=_vec)
    rotation: np.ndarray = field(default_factory=_vec)
    boost: float = 0.0

    def set_pos(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.position, x, y, z)

    def set_rot(self, pitch: float | None = None, yaw: float | None = None, roll: float | None = None) -> None:
        _set_components(self.rotation, pitch, yaw, roll)

    def set_lin_vel(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.linear_velocity, x, y, z)

    def set_ang_vel(self, x: float | None = None, y: float | None = None, z: float | None = None) -> None:
        _set_components(self.angular_velocity, x, y, z)


@dataclass
class StateWrapper:
    """
    Editable match state: one CarWrapper per car plus the ball.

    Cars are ordered blue first, then orange. Build one with for_teams() or,
    to randomize around a known state, with from_state().

    Attributes:
        blue_count: Number of blue cars.
        orange_count: Number of orange cars.
        cars: Car wrappers, blue team first.
        ball: Ball wrapper.
    """

    blue_count: int = 0
    orange_count: int = 0
    cars: list[CarWrapper] = field(default_factory=list)
    ball: BallWrapper = field(default_factory=BallWrapper)

    @classmethod
    def for_teams(cls, blue_count: int, orange_count: int) -> "StateWrapper":
        """Create a wrapper with default-initialized cars for both teams."""
        cars = [CarWrapper(car_id=BLUE_ID_START + i, team_num=BLUE_TEAM) for i in range(blue_count)]
        cars += [
            CarWrapper(car_id=ORANGE_ID_START + i, team_num=ORANGE_TEAM) for i in range(orange_count)
        ]
        return cls(blue_count=blue_count, orange_count=orange_count, cars=cars)

    @classmethod
    def from_state(cls, state: GameState) -> "StateWrapper":
        """
        Create a wrapper that mirrors an existing snapshot.

        Copies every array so editing the wrapper never touches the snapshot.
        """
        cars = []
        for player in state.players:
            physics = player.car_data
            cars.append(
                CarWrapper(
                    car_id=player.car_id,
                    team_num=player.team_num,
                    position=np.array(physics.position, dtype=np.float32),
                    linear_velocity=np.array(physics.linear_velocity, dtype=np.float32),
                    angular_velocity=np.array(physics.angular_velocity, dtype=np.float32),
                    rotation=np.array(physics.rotation, dtype=np.float32),
                    boost=float(player.boost_amount),
                )
            )
        cars.sort(key=lambda car: car.team_num)

        ball = BallWrapper(
            position=np.array(state.ball.position, dtype=np.float32),
            linear_velocity=np.array(state.ball.linear_velocity, dtype=np.float32),
            angular_velocity=np.array(state.ball.angular_velocity, dtype=np.float32),
        )
        blue_count = sum(1 for car in cars if car.team_num == BLUE_TEAM)
        return cls(
            blue_count=blue_count,
            orange_count=len(cars) - blue_count,
            cars=cars,
            ball=ball,
        )

    def blue_cars(self) -> list[CarWrapper]:
        return [car for car in self.cars if car.team_num == BLUE_TEAM]

    def orange_cars(self) -> list[CarWrapper]:
        return [car for car in self.cars if car.team_num == ORANGE_TEAM]


def _set_components(target: np.ndarray, *values) -> None:
    # None leaves a component untouched
    for i, value in enumerate(values):
        if value is not None:
            target[i] = value
