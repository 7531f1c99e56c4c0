"""
Observation builder contract for ArenaGym.

An observation builder turns a snapshot into one observation vector per
player. ArenaGym does not ship any concrete encoding; callers supply their
own builder and the orchestrator only sequences the calls.

Call Order Per Tick:
    GameMatch.build_observations(state)
    → builder.pre_step(state, config)          once per builder instance
    → builder.build_obs(player, state, config) once per player, in order

    With use_single_obs=True one builder serves every player, so build_obs
    is called several times on the same instance within one tick. pre_step
    is the place for work shared by all players of that tick (normalizing
    the ball, caching team lists, ...); anything stored per player inside
    build_obs must not leak into the next player's observation.

Observation Space:
    get_obs_space() returns the shape of a single agent's observation. The
    environment turns it into a gymnasium Box once, when the builders are
    installed, instead of on every step.
"""

from typing import Protocol

import numpy as np

from arenagym.config import MatchConfig
from arenagym.gamestates import GameState, PlayerData


class ObsBuilder(Protocol):
    """
    Protocol defining the interface for observation builders.

    Subclass it explicitly to inherit the no-op pre_step(), or implement
    the methods on any class (structural typing).

    Example Implementation:
        >>> class BallPositionObs(ObsBuilder):
        ...     def reset(self, initial_state):
        ...         pass
        ...
        ...     def build_obs(self, player, state, config):
        ...         return np.asarray(state.ball.position, dtype=np.float32)
        ...
        ...     def get_obs_space(self):
        ...         return (3,)
    """

    def reset(self, initial_state: GameState) -> None:
        """
        Clear episode state.

        Called once per builder instance at the start of every episode,
        with the snapshot the episode starts from.
        """
        ...

    def pre_step(self, state: GameState, config: MatchConfig) -> None:
        """Prepare tick-level data before any build_obs() call of the tick."""

    def build_obs(self, player: PlayerData, state: GameState, config: MatchConfig) -> np.ndarray:
        """
        Build the observation of one player.

        Args:
            player: The player the observation is for.
            state: The full snapshot.
            config: The current match configuration.

        Returns:
            A 1-D float array whose shape matches get_obs_space().
        """
        ...

    def get_obs_space(self) -> tuple[int, ...]:
        """Return the shape of a single observation."""
        ...
