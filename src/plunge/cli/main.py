"""CLI entry point for plunge-timer.

Uses Click to expose the ``plunge`` command group.  Sessions run on the
same controller the watch face uses, with a threaded one-second ticker and
console stand-ins for the watch services.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

import plunge
from plunge.cli.console import console_collaborators
from plunge.core import events
from plunge.core.goal import GoalSelection
from plunge.core.modes import SessionMode
from plunge.core.session import SessionController, SessionSnapshot
from plunge.core.ticker import TICK_INTERVAL, ThreadTicker
from plunge.core.timer import SessionState, format_remaining
from plunge.settings import Settings

_MODE_CHOICES = click.Choice(["cold-plunge", "sauna"], case_sensitive=False)


def _build_controller(settings: Settings) -> SessionController:
    """Wire a controller for the terminal; there is no water sensor here."""
    return SessionController(
        collaborators=console_collaborators(),
        ticker=ThreadTicker(TICK_INTERVAL),
        sensor_available=False,
        auto_start_armed=settings.auto_start,
    )


def _drive(controller: SessionController) -> None:
    """Run the event loop until the session completes, echoing each tick.

    Ctrl-C resets the session and exits with code 1.
    """
    last_remaining: Optional[int] = None

    def on_change(snap: SessionSnapshot) -> None:
        nonlocal last_remaining
        if snap.state == SessionState.RUNNING and snap.remaining_seconds != last_remaining:
            last_remaining = snap.remaining_seconds
            click.echo(
                f"{format_remaining(snap.remaining_seconds)} left ({round(snap.progress * 100)}%)"
            )

    controller.set_on_change(on_change)
    try:
        controller.run_until(lambda snap: snap.state == SessionState.COMPLETED)
    except KeyboardInterrupt:
        controller.dispatch(events.ResetPressed())
        click.echo("Session reset.", err=True)
        sys.exit(1)

    snap = controller.snapshot()
    assert snap.mode is not None
    theme = snap.mode.theme
    click.echo(f"{theme.completion_headline} {theme.completion_subline}")
    click.echo(f"Completed {format_remaining(snap.total_seconds)}")


def _announce(mode: SessionMode, goal_seconds: int) -> None:
    theme = mode.theme
    click.echo(f"{theme.icon} {theme.display_name} {format_remaining(goal_seconds)}. {theme.encouragement}")


@click.group()
@click.version_option(version=plunge.__version__, prog_name="plunge")
@click.option("-v", "--verbose", is_flag=True, help="Log state transitions.")
def cli(verbose: bool) -> None:
    """plunge-timer: A countdown timer for cold plunge and sauna sessions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--mode", type=_MODE_CHOICES, default=None, help="Session mode.")
@click.option("--minutes", type=click.IntRange(0, 10), default=None, help="Goal minutes.")
@click.option("--seconds", type=click.IntRange(0, 59), default=None, help="Goal seconds.")
def run(mode: Optional[str], minutes: Optional[int], seconds: Optional[int]) -> None:
    """Run one session to completion."""
    settings = Settings()
    session_mode = SessionMode.parse(mode) if mode else settings.mode
    goal = GoalSelection(
        minutes=settings.goal.minutes if minutes is None else minutes,
        seconds=settings.goal.seconds if seconds is None else seconds,
    )
    if not goal.can_start:
        click.echo("Goal must be longer than 0:00", err=True)
        sys.exit(1)

    controller = _build_controller(settings)
    _announce(session_mode, goal.total_seconds)
    controller.post(events.ModeSelected(session_mode))
    controller.post(events.GoalChanged(goal.total_seconds))
    controller.post(events.StartPressed())
    _drive(controller)


@cli.command()
@click.argument("duration", type=click.IntRange(min=1))
@click.option("--mode", type=_MODE_CHOICES, default=None, help="Session mode.")
def voice(duration: int, mode: Optional[str]) -> None:
    """Start a DURATION-second session the way a voice command does."""
    settings = Settings()
    session_mode = SessionMode.parse(mode) if mode else settings.mode
    controller = _build_controller(settings)
    _announce(session_mode, duration)
    controller.post(events.VoiceStartRequested(duration, session_mode))
    _drive(controller)


@cli.command()
def modes() -> None:
    """List the available session modes."""
    for mode in SessionMode:
        theme = mode.theme
        name = mode.value.replace("_", "-")
        click.echo(f"{theme.icon} {name}: {theme.display_name}, {theme.encouragement}")


@cli.group()
def config() -> None:
    """Show or change saved preferences."""


@config.command("show")
def config_show() -> None:
    """Print the saved preferences."""
    settings = Settings()
    for key, value in settings.to_dict().items():
        click.echo(f"{key}: {value}")


@config.command("set")
@click.option("--mode", type=_MODE_CHOICES, default=None, help="Default session mode.")
@click.option("--minutes", type=click.IntRange(0, 10), default=None, help="Default goal minutes.")
@click.option("--seconds", type=click.IntRange(0, 59), default=None, help="Default goal seconds.")
@click.option("--auto-start/--no-auto-start", default=None, help="Start on water entry.")
def config_set(
    mode: Optional[str],
    minutes: Optional[int],
    seconds: Optional[int],
    auto_start: Optional[bool],
) -> None:
    """Update the saved preferences."""
    settings = Settings()
    if mode is not None:
        settings.mode = SessionMode.parse(mode)
    if minutes is not None or seconds is not None:
        settings.goal = GoalSelection(
            minutes=settings.goal.minutes if minutes is None else minutes,
            seconds=settings.goal.seconds if seconds is None else seconds,
        )
    if auto_start is not None:
        settings.auto_start = auto_start
    settings.save()
    click.echo(f"Settings saved to {settings.path}")
