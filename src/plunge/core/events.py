"""Inbound events consumed by the session controller.

Every button press, sensor callback, voice command and timer tick is
delivered as one of these values and handled on the controller's single
event loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from plunge.core.modes import SessionMode


@dataclass(frozen=True)
class ModeSelected:
    mode: SessionMode


@dataclass(frozen=True)
class GoalChanged:
    goal_seconds: int


@dataclass(frozen=True)
class StartPressed:
    pass


@dataclass(frozen=True)
class PausePressed:
    pass


@dataclass(frozen=True)
class ResumePressed:
    pass


@dataclass(frozen=True)
class ResetPressed:
    pass


@dataclass(frozen=True)
class NewSessionPressed:
    pass


@dataclass(frozen=True)
class CrownRotated:
    raw_value: float


@dataclass(frozen=True)
class AutoStartToggled:
    armed: bool


@dataclass(frozen=True)
class ImmersionDetected:
    pass


@dataclass(frozen=True)
class VoiceStartRequested:
    duration: int
    mode: Optional[SessionMode] = None


@dataclass(frozen=True)
class Tick:
    pass


Event = Union[
    ModeSelected,
    GoalChanged,
    StartPressed,
    PausePressed,
    ResumePressed,
    ResetPressed,
    NewSessionPressed,
    CrownRotated,
    AutoStartToggled,
    ImmersionDetected,
    VoiceStartRequested,
    Tick,
]
