"""
ArenaGym Test Suite.

This package contains pytest tests for the ArenaGym orchestration layer.
Tests are organized by module:

    test_config.py          - MatchConfig and agent-count derivation
    test_state_wrapper.py   - Editable reset state
    test_state_setters.py   - Kickoff and random start states
    test_rewards.py         - Reward functions and factory
    test_conditions.py      - Terminal and truncation conditions
    test_action_parsers.py  - Continuous and discrete action parsing
    test_game_match.py      - Episode orchestrator call order and contracts
    test_env.py             - Reset/step facade and make()
    test_sb3.py             - stable-baselines3 VecEnv adapter
    test_cli.py             - Command-line interface

Fixtures are defined in conftest.py and shared across all test modules.
No simulator is needed: FakeBackend in conftest.py stands in for one.
"""
