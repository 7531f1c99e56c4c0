"""
Exception types raised by ArenaGym.

Cardinality errors are contract violations between the strategy components
and the live player roster. They are raised instead of truncating or padding
anything, and the environment instance should be discarded afterwards.
"""


class ArenaGymError(Exception):
    """Base class for every error raised by ArenaGym itself."""


class CardinalityError(ArenaGymError, AssertionError):
    """A strategy output or strategy set does not match the player roster."""


class ConfigError(ArenaGymError, ValueError):
    """A match configuration is structurally invalid."""
