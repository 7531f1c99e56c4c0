"""
Simulation backend contract.

ArenaGym never simulates anything itself. It drives an external arena
simulator through the small SimulationBackend protocol below, created by a
BackendFactory from the match configuration.

Architecture Role:
    make() / GameMatch(backend_factory=...) → backend_factory(config)
    ArenaEnv.reset() → backend.force_state(wrapper) → GameState
    ArenaEnv.step()  → backend.advance(actions)     → GameState
    GameMatch.update_settings() → backend.reconfigure(config) → GameState

    Every call is blocking and synchronous. Whatever parallelism the
    simulator uses internally is invisible to the orchestrator.

Implementing a Backend:
    Any object with these methods works; no inheritance is needed.

    >>> class MySim:
    ...     def __init__(self, config): ...
    ...     def current_state(self) -> GameState: ...
    ...     def force_state(self, state_wrapper) -> GameState: ...
    ...     def advance(self, actions) -> GameState: ...
    ...     def reconfigure(self, config, restart=False) -> GameState: ...
    >>> env = make(backend_factory=MySim, obs_builder=MyObs())
"""

from collections.abc import Callable
from typing import Protocol

import numpy as np

from arenagym.config import MatchConfig
from arenagym.gamestates import GameState
from arenagym.state_wrapper import StateWrapper


class SimulationBackend(Protocol):
    """
    Protocol for a handle on one running arena simulation.

    Notes:
        - Snapshots returned here are treated as read-only by ArenaGym
        - A backend may also define close(); ArenaEnv.close() calls it
          when present
    """

    def current_state(self) -> GameState:
        """Return a snapshot of the simulation without advancing it."""
        ...

    def force_state(self, state_wrapper: StateWrapper) -> GameState:
        """
        Overwrite the simulation with the given state.

        Returns:
            The snapshot of the simulation after adopting the state.
        """
        ...

    def advance(self, actions: np.ndarray) -> GameState:
        """
        Apply one control step.

        Args:
            actions: Parsed actions, shape (n_players, 8), in snapshot
                player order.

        Returns:
            The snapshot after config.tick_skip simulator ticks.
        """
        ...

    def reconfigure(self, config: MatchConfig, restart: bool = False) -> GameState:
        """
        Adopt a new match configuration.

        Args:
            config: The replacement configuration.
            restart: Whether to restart the match. When False the running
                match keeps going with the new settings.

        Returns:
            The snapshot after the change.
        """
        ...


BackendFactory = Callable[[MatchConfig], SimulationBackend]
