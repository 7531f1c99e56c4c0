"""
Terminal conditions for ArenaGym.

A terminal condition answers two independent questions every tick: has the
episode ended in a way that belongs to the task (is_terminal), and has it been
cut short from outside the task, for example by a time limit (is_truncated).
Both can be true on the same tick.

Architecture Role:
    GameMatch.episode_reset()  → condition.reset(initial_state)
    ArenaEnv.step()            → GameMatch.is_done()      → condition.is_terminal(state)
                               → GameMatch.is_truncated() → condition.is_truncated(state)

    ArenaEnv reports is_terminal as `done` and is_truncated as
    info["truncated"]; the training client decides how to combine them.
"""

from collections.abc import Sequence
from typing import Protocol

from arenagym.gamestates import GameState


class TerminalCondition(Protocol):
    """
    Protocol defining the interface for terminal conditions.

    Subclass it explicitly to inherit the default is_truncated(), which
    never truncates.
    """

    def reset(self, initial_state: GameState) -> None:
        """Clear episode state at the start of an episode."""
        ...

    def is_terminal(self, state: GameState) -> bool:
        """Return True when the episode has ended."""
        ...

    def is_truncated(self, state: GameState) -> bool:
        """Return True when the episode has been cut short."""
        return False


class TimeoutCondition(TerminalCondition):
    """
    Truncate after a fixed number of control steps.

    Each is_truncated() call counts as one step, so the condition must be
    queried exactly once per tick (the environment does).

    Attributes:
        max_steps (int): Steps per episode before truncation.
        steps (int): Steps counted since the last reset.
    """

    def __init__(self, max_steps: int):
        if max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {max_steps}")
        self.max_steps = int(max_steps)
        self.steps = 0

    def reset(self, initial_state: GameState) -> None:
        self.steps = 0

    def is_terminal(self, state: GameState) -> bool:
        return False

    def is_truncated(self, state: GameState) -> bool:
        self.steps += 1
        return self.steps >= self.max_steps


class GoalScoredCondition(TerminalCondition):
    """End the episode as soon as either team scores."""

    def __init__(self):
        self._initial_total = 0

    def reset(self, initial_state: GameState) -> None:
        self._initial_total = initial_state.blue_score + initial_state.orange_score

    def is_terminal(self, state: GameState) -> bool:
        return state.blue_score + state.orange_score != self._initial_total


class CombinedCondition(TerminalCondition):
    """
    Any-of combination of several conditions.

    Every child is queried on every call (no short-circuit) so stateful
    children such as TimeoutCondition keep counting correctly.
    """

    def __init__(self, conditions: Sequence[TerminalCondition]):
        if not conditions:
            raise ValueError("CombinedCondition needs at least one condition")
        self.conditions = list(conditions)

    def reset(self, initial_state: GameState) -> None:
        for condition in self.conditions:
            condition.reset(initial_state)

    def is_terminal(self, state: GameState) -> bool:
        results = [condition.is_terminal(state) for condition in self.conditions]
        return any(results)

    def is_truncated(self, state: GameState) -> bool:
        results = [condition.is_truncated(state) for condition in self.conditions]
        return any(results)
