"""
Snapshot types produced by the simulation backend.

A GameState is one view of the match at a control-step boundary: the ordered
list of players plus the two team scores. The orchestrator consumes snapshots
read-only; strategies receive the same objects.

Architecture Role:
    backend.advance() / backend.force_state() → GameState
    → GameMatch.build_observations() / get_rewards() / get_result()

    The player order in GameState.players is stable within an episode and is
    the order every per-agent sequence (observations, rewards, actions,
    observation builders) is aligned with.

Dependencies:
    - dataclasses: For the snapshot records
    - numpy: Vector fields (positions, velocities) are float32 arrays
"""

from dataclasses import dataclass, field

import numpy as np

BLUE_TEAM = 0
ORANGE_TEAM = 1


def _zeros3() -> np.ndarray:
    return np.zeros(3, dtype=np.float32)


@dataclass
class PhysicsObject:
    """Position, velocities and orientation (pitch, yaw, roll) of a body."""

    position: np.ndarray = field(default_factory=_zeros3)
    linear_velocity: np.ndarray = field(default_factory=_zeros3)
    angular_velocity: np.ndarray = field(default_factory=_zeros3)
    rotation: np.ndarray = field(default_factory=_zeros3)


@dataclass
class PlayerData:
    """
    One car in a snapshot.

    Attributes:
        car_id: Identifier of the car, stable for the whole episode. Used as
            the spectator identifier.
        team_num: BLUE_TEAM (0) or ORANGE_TEAM (1).
        car_data: Physics of the car.
        boost_amount: Remaining boost in [0, 1].
        on_ground: Whether the wheels are touching a surface.
        has_flip: Whether a flip/dodge is still available.
        is_demoed: Whether the car is currently demolished.
        ball_touched: Whether the car touched the ball during the last step.
    """

    car_id: int
    team_num: int = BLUE_TEAM
    car_data: PhysicsObject = field(default_factory=PhysicsObject)
    boost_amount: float = 0.0
    on_ground: bool = True
    has_flip: bool = True
    is_demoed: bool = False
    ball_touched: bool = False


@dataclass
class GameState:
    """
    Snapshot of the match at a control-step boundary.

    Attributes:
        players: Cars in stable per-episode order.
        blue_score: Goals scored by the blue team.
        orange_score: Goals scored by the orange team.
        ball: Physics of the ball.
        tick_count: Simulator ticks elapsed since the simulator was created.
    """

    players: list[PlayerData] = field(default_factory=list)
    blue_score: int = 0
    orange_score: int = 0
    ball: PhysicsObject = field(default_factory=PhysicsObject)
    tick_count: int = 0

    @property
    def score_difference(self) -> int:
        """Blue score minus orange score."""
        return self.blue_score - self.orange_score
