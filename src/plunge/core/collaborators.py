"""Interfaces of the external systems a session talks to.

None of these may influence the timer: the controller treats every call as
fire-and-forget and logs failures instead of propagating them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

from plunge.core.modes import SessionMode


class HapticKind(Enum):
    SUCCESS = "success"
    CLICK = "click"


class HealthRecorder(Protocol):
    def begin(self, mode: SessionMode, start_time: datetime) -> None: ...

    def end(self, end_time: datetime) -> None: ...


class GlanceableSurface(Protocol):
    def invalidate(self) -> None: ...


class HapticFeedback(Protocol):
    def play(self, kind: HapticKind) -> None: ...


class VoiceShortcut(Protocol):
    def donate(self, duration: int, mode: SessionMode) -> None: ...


class ScreenLock(Protocol):
    def engage(self) -> None: ...


class _Noop:
    """Accepts every collaborator call and does nothing."""

    def begin(self, mode: SessionMode, start_time: datetime) -> None:
        pass

    def end(self, end_time: datetime) -> None:
        pass

    def invalidate(self) -> None:
        pass

    def play(self, kind: HapticKind) -> None:
        pass

    def donate(self, duration: int, mode: SessionMode) -> None:
        pass

    def engage(self) -> None:
        pass


@dataclass
class Collaborators:
    """Handles injected into the controller at construction time."""

    health: HealthRecorder = field(default_factory=_Noop)
    glance: GlanceableSurface = field(default_factory=_Noop)
    haptics: HapticFeedback = field(default_factory=_Noop)
    voice: VoiceShortcut = field(default_factory=_Noop)
    screen_lock: ScreenLock = field(default_factory=_Noop)
