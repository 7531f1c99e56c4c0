"""
Action parsers for ArenaGym.

An action parser maps what the policy outputs to what the simulator accepts:
one row of 8 controller inputs per car,

    [throttle, steer, pitch, yaw, roll, jump, boost, handbrake]

with the first five in [-1, 1] and the last three treated as buttons.

Architecture Role:
    ArenaEnv.step(actions) → GameMatch.parse_actions(actions, prev_state)
    → parser.parse_actions(actions, prev_state) → (n_players, 8) array

    The parser must return exactly one row per player in snapshot order.
    GameMatch raises CardinalityError otherwise; parsers never get the
    chance to silently drop or invent rows.
"""

from typing import Protocol

import numpy as np
from gymnasium import spaces

from arenagym.config import ACTION_SIZE
from arenagym.gamestates import GameState


class ActionParser(Protocol):
    """Protocol defining the interface for action parsers."""

    def get_action_space(self) -> spaces.Space:
        """Return the space of one agent's raw action."""
        ...

    def parse_actions(self, actions, state: GameState) -> np.ndarray:
        """
        Convert raw policy actions into simulator inputs.

        Args:
            actions: One raw action per player, in snapshot player order.
            state: The snapshot the actions were chosen from.

        Returns:
            Float32 array of shape (n_players, 8).
        """
        ...


class ContinuousAction(ActionParser):
    """
    Pass continuous controls through, clipped to [-1, 1].

    Button columns (jump, boost, handbrake) are left continuous; the
    simulator treats values above 0 as pressed.
    """

    def get_action_space(self) -> spaces.Space:
        return spaces.Box(low=-1.0, high=1.0, shape=(ACTION_SIZE,), dtype=np.float32)

    def parse_actions(self, actions, state: GameState) -> np.ndarray:
        parsed = np.atleast_2d(np.asarray(actions, dtype=np.float32))
        return np.clip(parsed, -1.0, 1.0)


class DiscreteAction(ActionParser):
    """
    Bin the five analog controls and treat the three buttons as binary.

    Raw actions are integer rows of length 8: the first five columns are bin
    indices in [0, n_bins), the last three are 0 or 1. Values outside those
    ranges are clipped, like ContinuousAction clips its controls.

    Attributes:
        n_bins (int): Number of bins per analog control. Must be odd so that
            the middle bin maps to exactly 0.
    """

    def __init__(self, n_bins: int = 3):
        if n_bins < 3 or n_bins % 2 == 0:
            raise ValueError(f"n_bins must be an odd number >= 3, got {n_bins}")
        self.n_bins = int(n_bins)

    def get_action_space(self) -> spaces.Space:
        return spaces.MultiDiscrete([self.n_bins] * 5 + [2] * 3)

    def parse_actions(self, actions, state: GameState) -> np.ndarray:
        parsed = np.atleast_2d(np.asarray(actions, dtype=np.float32)).copy()

        # Bin index -> [-1, 1]
        parsed[:, :5] = parsed[:, :5] / (self.n_bins // 2) - 1.0

        # Out-of-range indices saturate instead of reaching the simulator
        parsed[:, :5] = np.clip(parsed[:, :5], -1.0, 1.0)
        parsed[:, 5:] = np.clip(parsed[:, 5:], 0.0, 1.0)
        return parsed
