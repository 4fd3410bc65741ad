"""Goal duration selection (minute and second wheels)."""

from __future__ import annotations

from dataclasses import dataclass

MAX_MINUTES = 10
MAX_SECONDS = 59


@dataclass(frozen=True)
class GoalSelection:
    """A goal picked on the minute (0--10) and second (0--59) wheels."""

    minutes: int = 2
    seconds: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.minutes <= MAX_MINUTES):
            raise ValueError(f"minutes must be between 0 and {MAX_MINUTES}, got {self.minutes}")
        if not (0 <= self.seconds <= MAX_SECONDS):
            raise ValueError(f"seconds must be between 0 and {MAX_SECONDS}, got {self.seconds}")

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    @property
    def can_start(self) -> bool:
        """A zero goal keeps the start button disabled."""
        return self.total_seconds > 0

    @classmethod
    def from_seconds(cls, total: int) -> GoalSelection:
        """Split *total* seconds onto the wheels."""
        return cls(minutes=total // 60, seconds=total % 60)
