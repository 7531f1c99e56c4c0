"""
CLI entry point for ArenaGym.

Invoked via:
- `arenagym <command>` (installed script)
- `python -m arenagym <command>` (module execution)

ArenaGym is a library: training runs are assembled in user code with a
simulator of the user's choosing. The CLI therefore only reports what the
package provides and what a match configuration resolves to.

Available Commands:
    info: Display version, default configuration and registered components

Usage:
    # Show defaults
    arenagym info

    # Show what a 3v3 match without opponents resolves to
    arenagym info --team-size 3 --no-opponents

Design Decisions:
    - argparse subparsers, one handler branch per command
    - Returns exit codes (0=success, 1=error) for shell scripting

Dependencies:
    - argparse: Command-line argument parsing
    - sys: Exit code handling
"""

import argparse
import sys
from dataclasses import fields

# =============================================================================
# MAIN CLI FUNCTION
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for ArenaGym.

    Args:
        argv: Argument list, defaults to sys.argv[1:].

    Returns:
        Exit code: 0 for success, 1 for errors or unknown commands.
    """
    parser = argparse.ArgumentParser(
        prog="arenagym",
        description="ArenaGym - Episode orchestration for multi-agent car-soccer RL",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # -------------------------------------------------------------------------
    # Info Command
    # -------------------------------------------------------------------------
    info_parser = subparsers.add_parser(
        "info",
        help="Show package and configuration information",
    )
    info_parser.add_argument(
        "--team-size",
        type=int,
        default=None,
        help="Cars per team (default: from default configuration)",
    )
    info_parser.add_argument(
        "--tick-skip",
        type=int,
        default=None,
        help="Simulator ticks per control step (default: from default configuration)",
    )
    info_parser.add_argument(
        "--no-opponents",
        action="store_true",
        help="Resolve the configuration without the orange team",
    )
    info_parser.add_argument(
        "--vehicle",
        default=None,
        help="Vehicle profile name (default: octane)",
    )

    args = parser.parse_args(argv)

    if args.command == "info":
        from arenagym import __version__
        from arenagym.config import MatchConfig, compute_agent_count, default_match_config
        from arenagym.errors import ConfigError
        from arenagym.rewards import REWARD_FUNCTIONS

        print(f"ArenaGym v{__version__}")
        print()

        # Only override what was given on the command line
        overrides = {}
        if args.team_size is not None:
            overrides["team_size"] = args.team_size
        if args.tick_skip is not None:
            overrides["tick_skip"] = args.tick_skip
        if args.no_opponents:
            overrides["spawn_opponents"] = False
        if args.vehicle is not None:
            overrides["vehicle_profile"] = args.vehicle

        try:
            base = default_match_config()
            config = MatchConfig.from_dict({**base.__dict__, **overrides})
            agents = compute_agent_count(config)
        except ConfigError as e:
            print(f"Error: {e}")
            return 1

        print("Configuration:")
        for f in fields(config):
            value = getattr(config, f.name)
            if f.name == "vehicle_profile":
                value = value.name
            print(f"  {f.name}: {value}")
        print(f"  agents: {agents}")
        print()

        print(f"Reward functions: {', '.join(sorted(REWARD_FUNCTIONS))}")
        return 0

    parser.print_help()
    return 1


# =============================================================================
# MODULE EXECUTION
# =============================================================================

if __name__ == "__main__":
    sys.exit(main())
