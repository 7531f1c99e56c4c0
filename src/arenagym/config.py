"""
Match configuration for ArenaGym.

This module holds the value types that describe the *shape* of a match:
how many cars per team, whether opponents are spawned, how many simulator
ticks pass per control step, and the physical tuning handed to the
simulation backend.

Architecture Role:
    MatchConfig is consumed by:
    - game_match.py: Derives the agent count and forwards the config to the
      simulation backend and to every observation builder each tick
    - state_setters.py: Team size and spawn_opponents decide the car layout
    - env.py: make() assembles a GameMatch from a MatchConfig

Key Design Decisions:
    - Frozen dataclasses: a config is never mutated in place. Settings
      updates replace the whole object (see GameMatch.update_settings)
    - Validation at the point of use: compute_agent_count() is the one
      place that rejects an invalid team size or tick skip
    - Vehicle profiles are read-only module constants, selected by
      default_match_config() rather than by a mutable global

Example Usage:
    >>> config = MatchConfig(team_size=2, spawn_opponents=True)
    >>> compute_agent_count(config)
    4
    >>> config = MatchConfig.from_dict({"team_size": 3, "unknown": 1})

Dependencies:
    - dataclasses: For frozen value types
    - arenagym.errors: ConfigError for invalid configurations
"""

from dataclasses import dataclass, field, replace

from arenagym.errors import ConfigError

# Number of controller degrees of freedom per car:
# throttle, steer, pitch, yaw, roll, jump, boost, handbrake
ACTION_SIZE = 8

# Spectator identifier slots kept per episode (3v3 is the largest match)
MAX_SPECTATOR_SLOTS = 6


# =============================================================================
# VEHICLE PROFILES
# =============================================================================


@dataclass(frozen=True)
class VehicleProfile:
    """
    Physical description of a car body, passed through to the simulator.

    Attributes:
        name: Human-readable hitbox name.
        hitbox_size: (length, width, height) of the hitbox in unreal units.
        hitbox_offset: Offset of the hitbox centre from the car origin.
        dodge_deadzone: Stick magnitude below which a dodge becomes a stall.
    """

    name: str
    hitbox_size: tuple[float, float, float]
    hitbox_offset: tuple[float, float, float]
    dodge_deadzone: float = 0.5


OCTANE = VehicleProfile(
    name="octane",
    hitbox_size=(120.507, 86.6994, 38.6591),
    hitbox_offset=(13.8757, 0.0, 20.755),
)

DOMINUS = VehicleProfile(
    name="dominus",
    hitbox_size=(130.427, 85.7799, 33.8),
    hitbox_offset=(9.0, 0.0, 15.75),
)

BREAKOUT = VehicleProfile(
    name="breakout",
    hitbox_size=(131.32, 80.521, 30.3),
    hitbox_offset=(12.5, 0.0, 11.75),
)

VEHICLE_PROFILES = {
    "octane": OCTANE,
    "dominus": DOMINUS,
    "breakout": BREAKOUT,
}


# =============================================================================
# MATCH CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class MatchConfig:
    """
    Immutable description of one match's shape.

    A MatchConfig is created when the environment is built and replaced
    wholesale whenever settings change. Use dataclasses.replace() (or
    MatchConfig.with_changes()) to derive a modified copy.

    Attributes:
        gravity (float): Gravity multiplier applied by the simulator.
            1.0 is standard arena gravity.
        boost_consumption (float): Boost usage multiplier. 0.0 gives
            unlimited boost, 1.0 is standard.
        team_size (int): Cars per team. Must be >= 1.
        tick_skip (int): Simulator ticks advanced per control step. At the
            simulator's 120Hz, tick_skip=8 gives 15 decisions per second.
        spawn_opponents (bool): Whether the orange team is spawned. When
            False only the blue team exists and is controlled.
        vehicle_profile (VehicleProfile): Car body used for every car.

    Notes:
        - The derived agent count is not stored on the config; it is
          computed by compute_agent_count() so it can never go stale
        - Invalid values are rejected when the agent count is computed,
          not at construction time
    """

    # Simulator tuning
    gravity: float = 1.0
    boost_consumption: float = 1.0

    # Match shape
    team_size: int = 1
    tick_skip: int = 8
    spawn_opponents: bool = True

    # Every car uses the same body
    vehicle_profile: VehicleProfile = field(default=OCTANE)

    def with_changes(self, **changes) -> "MatchConfig":
        """Return a copy of this config with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, d: dict) -> "MatchConfig":
        """
        Create a MatchConfig from a dictionary, ignoring unknown keys.

        The vehicle profile may be given either as a VehicleProfile or by
        name ("octane", "dominus", "breakout").

        Args:
            d: Dictionary of configuration values. Unknown keys are ignored
               and missing keys use their defaults.

        Returns:
            A new MatchConfig.

        Raises:
            ConfigError: If vehicle_profile names an unknown profile.

        Example:
            >>> MatchConfig.from_dict({"team_size": 2, "vehicle_profile": "dominus"})
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in d.items() if k in valid_keys}

        profile = filtered.get("vehicle_profile")
        if isinstance(profile, str):
            if profile not in VEHICLE_PROFILES:
                available = list(VEHICLE_PROFILES.keys())
                raise ConfigError(f"Unknown vehicle profile: {profile}. Available: {available}")
            filtered["vehicle_profile"] = VEHICLE_PROFILES[profile]

        return cls(**filtered)


def default_match_config() -> MatchConfig:
    """
    Build the default match configuration.

    Returns:
        1v1 with opponents spawned, tick_skip=8, standard gravity and boost,
        and the octane body.
    """
    return MatchConfig(
        gravity=1.0,
        boost_consumption=1.0,
        team_size=1,
        tick_skip=8,
        spawn_opponents=True,
        vehicle_profile=OCTANE,
    )


def compute_agent_count(config: MatchConfig) -> int:
    """
    Derive the number of controlled agents from a match configuration.

    This is where a configuration is validated: anything that needs the
    agent count goes through here, so a structurally invalid config is
    rejected before it can be installed.

    Args:
        config: The match configuration.

    Returns:
        team_size * 2 if opponents are spawned, otherwise team_size.

    Raises:
        ConfigError: If team_size < 1 or tick_skip < 1.
    """
    if config.team_size < 1:
        raise ConfigError(
            f"team_size must be >= 1, got {config.team_size}. "
            "A match needs at least one car per team."
        )
    if config.tick_skip < 1:
        raise ConfigError(
            f"tick_skip must be >= 1, got {config.tick_skip}. "
            "Each control step has to advance the simulator at least one tick."
        )

    if config.spawn_opponents:
        return config.team_size * 2
    return config.team_size


# =============================================================================
# PLAYER STATISTICS
# =============================================================================


@dataclass(frozen=True)
class Stats:
    """Per-player match statistics. Not populated by the orchestrator."""

    goals: int = 0
    own_goals: int = 0
    assists: int = 0
