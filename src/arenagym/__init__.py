"""ArenaGym - Episode orchestration for multi-agent car-soccer RL.

A small gym-style layer over an external car-soccer simulator.
"""

__version__ = "0.1.0"

from arenagym.config import MatchConfig, default_match_config
from arenagym.env import ArenaEnv, make
from arenagym.errors import ArenaGymError, CardinalityError, ConfigError
from arenagym.game_match import GameMatch

__all__ = [
    "ArenaEnv",
    "ArenaGymError",
    "CardinalityError",
    "ConfigError",
    "GameMatch",
    "MatchConfig",
    "default_match_config",
    "make",
    "__version__",
]
