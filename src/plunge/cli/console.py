"""Terminal stand-ins for the watch's health, haptic and display services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import click

from plunge.core.collaborators import Collaborators, HapticKind
from plunge.core.modes import SessionMode

logger = logging.getLogger(__name__)


@dataclass
class WorkoutRecord:
    mode: SessionMode
    started_at: datetime
    ended_at: Optional[datetime] = None


class ConsoleHealthRecorder:
    """Keeps workouts in memory for the lifetime of the process."""

    def __init__(self) -> None:
        self.workouts: list[WorkoutRecord] = []

    def begin(self, mode: SessionMode, start_time: datetime) -> None:
        theme = mode.theme
        self.workouts.append(WorkoutRecord(mode=mode, started_at=start_time))
        logger.info(
            "Workout started: %s (%s, %s)", mode.value, theme.workout_activity, theme.workout_location
        )

    def end(self, end_time: datetime) -> None:
        if not self.workouts or self.workouts[-1].ended_at is not None:
            logger.warning("Workout end without an open workout")
            return
        self.workouts[-1].ended_at = end_time
        logger.info("Workout ended after %s", end_time - self.workouts[-1].started_at)


class ConsoleHaptics:
    def play(self, kind: HapticKind) -> None:
        # Terminal bell stands in for the taptic engine.
        if kind is HapticKind.SUCCESS:
            click.echo("\a", nl=False, err=True)
        logger.debug("Haptic: %s", kind.value)


class ConsoleGlance:
    def __init__(self) -> None:
        self.stale = False

    def invalidate(self) -> None:
        self.stale = True
        logger.debug("Glanceable surfaces invalidated")


class ConsoleVoiceShortcut:
    def donate(self, duration: int, mode: SessionMode) -> None:
        logger.debug("Donated voice shortcut: %s for %ss", mode.value, duration)


class ConsoleScreenLock:
    def engage(self) -> None:
        click.echo("Water lock on.")


def console_collaborators() -> Collaborators:
    return Collaborators(
        health=ConsoleHealthRecorder(),
        glance=ConsoleGlance(),
        haptics=ConsoleHaptics(),
        voice=ConsoleVoiceShortcut(),
        screen_lock=ConsoleScreenLock(),
    )
