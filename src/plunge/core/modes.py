"""Session modes and the fixed presentation attached to each."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ModeTheme:
    display_name: str
    icon: str
    accent: str
    encouragement: str
    completion_headline: str
    completion_subline: str
    workout_activity: str
    workout_location: str


class SessionMode(Enum):
    """Kind of therapy session; fixes theme and workout classification."""

    COLD_PLUNGE = "cold_plunge"
    SAUNA = "sauna"

    @property
    def theme(self) -> ModeTheme:
        return _THEMES[self]

    @property
    def uses_water_lock(self) -> bool:
        """Water lock and immersion auto-start only apply in the water."""
        return self is SessionMode.COLD_PLUNGE

    @classmethod
    def parse(cls, value: str) -> SessionMode:
        """Look a mode up by value, accepting ``cold-plunge`` style spelling."""
        normalized = value.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"unknown session mode: {value!r}") from None


_THEMES = {
    SessionMode.COLD_PLUNGE: ModeTheme(
        display_name="Cold Plunge",
        icon="❄️",
        accent="cyan",
        encouragement="Stay Strong!",
        completion_headline="Champion!",
        completion_subline="You did it!",
        workout_activity="swimming",
        workout_location="outdoor",
    ),
    SessionMode.SAUNA: ModeTheme(
        display_name="Sauna",
        icon="🔥",
        accent="orange",
        encouragement="Embrace the Heat!",
        completion_headline="Well Done!",
        completion_subline="Time to cool down.",
        workout_activity="other",
        workout_location="indoor",
    ),
}
