"""Countdown core: a tick-driven state-machine countdown timer."""

from __future__ import annotations

import math
from enum import Enum


class SessionState(Enum):
    """Possible states of a therapy session."""

    MODE_SELECT = "mode_select"
    GOAL_SET = "goal_set"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class InvalidStateError(Exception):
    """Raised when an invalid state transition is attempted."""


# Rotary crown range while paused; the dial moves in steps of 5.
CROWN_MIN = 0
CROWN_MAX = 600

ADJUST_HAPTIC_THRESHOLD = 5


def format_remaining(seconds: int) -> str:
    """Format *seconds* as ``M:SS``."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


class Countdown:
    """A pure state-machine countdown driven by external one-second ticks.

    Holds no timers and performs no I/O: the caller delivers :meth:`tick`
    once per second while the countdown is RUNNING.  Remaining time never
    goes negative and the total never drops below the remaining time, so
    :attr:`progress` always stays within ``[0, 1]``.
    """

    def __init__(self) -> None:
        self._state: SessionState = SessionState.GOAL_SET
        self._remaining_seconds: int = 0
        self._total_seconds: int = 0

    # -- public interface ----------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def progress(self) -> float:
        """Fraction of the total already elapsed, 0.0 when there is no total."""
        if self._total_seconds == 0:
            return 0.0
        return (self._total_seconds - self._remaining_seconds) / self._total_seconds

    def start(self, goal_seconds: int) -> None:
        """Start counting down from *goal_seconds*.

        Valid only from GOAL_SET.
        """
        if isinstance(goal_seconds, bool) or not isinstance(goal_seconds, int):
            raise TypeError(
                f"goal_seconds must be an integer, got {type(goal_seconds).__name__}"
            )
        if goal_seconds <= 0:
            raise ValueError(f"goal_seconds must be positive, got {goal_seconds}")
        self._require_state("start", frozenset({SessionState.GOAL_SET}))

        self._total_seconds = goal_seconds
        self._remaining_seconds = goal_seconds
        self._state = SessionState.RUNNING

    def tick(self) -> bool:
        """Advance the countdown by one second.

        Returns True when this tick completed the countdown.  A tick that
        arrives outside RUNNING is stale and is discarded.
        """
        if self._state != SessionState.RUNNING:
            return False

        self._remaining_seconds = max(self._remaining_seconds - 1, 0)
        if self._remaining_seconds == 0:
            self._complete()
            return True
        return False

    def pause(self) -> None:
        """Freeze the countdown.  Valid only from RUNNING."""
        self._require_state("pause", frozenset({SessionState.RUNNING}))
        self._state = SessionState.PAUSED

    def resume(self) -> None:
        """Continue a paused countdown.

        Valid only from PAUSED with time left on the clock.
        """
        self._require_state("resume", frozenset({SessionState.PAUSED}))
        if self._remaining_seconds <= 0:
            raise InvalidStateError("resume() is not valid with no time remaining")
        self._state = SessionState.RUNNING

    def reset(self) -> None:
        """Clear the countdown and return to goal selection.  Valid from any state."""
        self._state = SessionState.GOAL_SET
        self._remaining_seconds = 0
        self._total_seconds = 0

    def adjust(self, raw_value: float) -> int:
        """Set the remaining time from a rotary input while PAUSED.

        The total is raised when needed so it never falls below the
        remaining time.  Returns the absolute change in remaining seconds.
        """
        self._require_state("adjust", frozenset({SessionState.PAUSED}))

        old = self._remaining_seconds
        self._remaining_seconds = max(0, math.floor(raw_value))
        self._total_seconds = max(self._total_seconds, self._remaining_seconds)
        return abs(old - self._remaining_seconds)

    # -- private helpers -----------------------------------------------------

    def _complete(self) -> None:
        self._remaining_seconds = 0
        self._state = SessionState.COMPLETED

    def _require_state(self, method: str, valid: frozenset[SessionState]) -> None:
        """Raise ``InvalidStateError`` if the current state is not in *valid*."""
        if self._state not in valid:
            raise InvalidStateError(f"{method}() is not valid from {self._state.value} state")
