"""Session controller: drives one therapy session from inbound events.

All state changes happen on the thread that drains the controller's event
queue.  Tick sources, sensors and voice commands only :meth:`post` events;
they never mutate the session directly.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from plunge.core import events
from plunge.core.collaborators import Collaborators, HapticKind
from plunge.core.modes import SessionMode
from plunge.core.ticker import ManualTicker, Ticker
from plunge.core.timer import (
    ADJUST_HAPTIC_THRESHOLD,
    CROWN_MAX,
    CROWN_MIN,
    Countdown,
    InvalidStateError,
    SessionState,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """The single mutable aggregate behind the watch face."""

    mode: Optional[SessionMode] = None
    goal_seconds: int = 0
    auto_start_armed: bool = False
    countdown: Countdown = field(default_factory=Countdown)

    @property
    def state(self) -> SessionState:
        if self.mode is None:
            return SessionState.MODE_SELECT
        return self.countdown.state

    @property
    def remaining_seconds(self) -> int:
        return self.countdown.remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self.countdown.total_seconds

    @property
    def progress(self) -> float:
        return self.countdown.progress


@dataclass(frozen=True)
class SessionSnapshot:
    state: SessionState
    mode: Optional[SessionMode]
    goal_seconds: int
    remaining_seconds: int
    total_seconds: int
    progress: float
    auto_start_armed: bool
    sensor_available: bool


class SessionController:
    """Owns the current :class:`Session`, its tick source and collaborators.

    Invalid transitions (pausing while paused, adjusting while running,
    starting a zero goal ...) are ignored.  Collaborator failures are logged
    and never change the timer.
    """

    def __init__(
        self,
        collaborators: Optional[Collaborators] = None,
        ticker: Optional[Ticker] = None,
        *,
        sensor_available: bool = False,
        auto_start_armed: bool = False,
    ) -> None:
        self._collaborators = collaborators if collaborators is not None else Collaborators()
        self._ticker: Ticker = ticker if ticker is not None else ManualTicker()
        self._sensor_available = sensor_available
        self._events: queue.Queue[events.Event] = queue.Queue()
        self._on_change: Optional[Callable[[SessionSnapshot], None]] = None
        # Start time of the health recording this controller owns, if any.
        self._recording_since: Optional[datetime] = None

        self._session = Session()
        self.arm_auto_start(auto_start_armed)

        self._handlers: dict[type, Callable[..., object]] = {
            events.ModeSelected: lambda e: self.select_mode(e.mode),
            events.GoalChanged: lambda e: self.set_goal(e.goal_seconds),
            events.StartPressed: lambda e: self.start(),
            events.PausePressed: lambda e: self.pause(),
            events.ResumePressed: lambda e: self.resume(),
            events.ResetPressed: lambda e: self.reset(),
            events.NewSessionPressed: lambda e: self.new_session(),
            events.CrownRotated: lambda e: self.adjust(e.raw_value),
            events.AutoStartToggled: lambda e: self.arm_auto_start(e.armed),
            events.ImmersionDetected: lambda e: self.on_immersion_detected(),
            events.VoiceStartRequested: lambda e: self.voice_start(e.duration, e.mode),
            events.Tick: lambda e: self.tick(),
        }

    # -- observation ---------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def sensor_available(self) -> bool:
        return self._sensor_available

    @property
    def recording(self) -> bool:
        return self._recording_since is not None

    def snapshot(self) -> SessionSnapshot:
        s = self._session
        return SessionSnapshot(
            state=s.state,
            mode=s.mode,
            goal_seconds=s.goal_seconds,
            remaining_seconds=s.remaining_seconds,
            total_seconds=s.total_seconds,
            progress=s.progress,
            auto_start_armed=s.auto_start_armed,
            sensor_available=self._sensor_available,
        )

    def set_on_change(self, fn: Optional[Callable[[SessionSnapshot], None]]) -> None:
        """Register a listener called with a snapshot after each dispatched event."""
        self._on_change = fn

    # -- event loop ----------------------------------------------------------

    def post(self, event: events.Event) -> None:
        """Queue *event* for the event loop.  Safe to call from any thread."""
        self._events.put(event)

    def dispatch(self, event: events.Event) -> None:
        """Handle *event* now.  Must only be called from the event loop."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"unsupported event: {event!r}")
        handler(event)
        if self._on_change is not None:
            self._on_change(self.snapshot())

    def process_pending(self) -> int:
        """Dispatch every queued event without blocking; return how many ran."""
        count = 0
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return count
            self.dispatch(event)
            count += 1

    def run_until(self, done: Callable[[SessionSnapshot], bool], poll: float = 0.1) -> None:
        """Block, dispatching events as they arrive, until *done* holds."""
        while not done(self.snapshot()):
            try:
                event = self._events.get(timeout=poll)
            except queue.Empty:
                continue
            self.dispatch(event)

    # -- selection -----------------------------------------------------------

    def select_mode(self, mode: SessionMode) -> None:
        if self._session.state != SessionState.MODE_SELECT:
            logger.debug("Ignoring mode change to %s in %s", mode.value, self._session.state.value)
            return
        self._session.mode = mode
        logger.info("Mode selected: %s", mode.value)

    def set_goal(self, goal_seconds: int) -> None:
        if self._session.state != SessionState.GOAL_SET or goal_seconds < 0:
            logger.debug("Ignoring goal %s in %s", goal_seconds, self._session.state.value)
            return
        self._session.goal_seconds = int(goal_seconds)

    # -- countdown transitions -----------------------------------------------

    def start(self, goal_seconds: Optional[int] = None) -> None:
        """Start the countdown from the selected goal, or from *goal_seconds*."""
        session = self._session
        if session.state != SessionState.GOAL_SET:
            logger.debug("Ignoring start in %s", session.state.value)
            return
        goal = session.goal_seconds if goal_seconds is None else goal_seconds
        try:
            session.countdown.start(goal)
        except (InvalidStateError, TypeError, ValueError) as exc:
            logger.debug("Ignoring start: %s", exc)
            return
        session.goal_seconds = goal
        self._restart_ticker()

        mode = session.mode
        assert mode is not None
        logger.info("Session started: %s for %ss", mode.value, goal)
        started_at = _now()
        if self._call_safely("health.begin", self._collaborators.health.begin, mode, started_at):
            self._recording_since = started_at
        self._call_safely("voice.donate", self._collaborators.voice.donate, goal, mode)
        if mode.uses_water_lock:
            self._call_safely("screen_lock.engage", self._collaborators.screen_lock.engage)

    def tick(self) -> None:
        if self._session.countdown.tick():
            self._complete()
        else:
            logger.debug("Tick: %ss remaining", self._session.remaining_seconds)

    def pause(self) -> None:
        if self._transition("pause", self._session.countdown.pause):
            self._ticker.cancel()
            logger.info("Session paused at %ss remaining", self._session.remaining_seconds)

    def resume(self) -> None:
        if self._transition("resume", self._session.countdown.resume):
            self._restart_ticker()
            logger.info("Session resumed at %ss remaining", self._session.remaining_seconds)

    def reset(self) -> None:
        """Stop everything and return to goal selection.  Idempotent."""
        self._ticker.cancel()
        self._end_recording()
        if self._session.mode is not None:
            self._session.countdown.reset()
        logger.info("Session reset")

    def new_session(self) -> None:
        """Discard the session and start over at mode selection."""
        armed = self._session.auto_start_armed
        self.reset()
        self._session = Session(auto_start_armed=armed)

    def adjust(self, raw_value: float) -> None:
        """Dial the remaining time with the crown; only honoured while PAUSED."""
        countdown = self._session.countdown
        if self._session.state != SessionState.PAUSED:
            logger.debug("Ignoring adjust in %s", self._session.state.value)
            return
        value = min(max(raw_value, CROWN_MIN), CROWN_MAX)
        delta = countdown.adjust(value)
        if delta > ADJUST_HAPTIC_THRESHOLD:
            self._call_safely("haptics.play", self._collaborators.haptics.play, HapticKind.CLICK)

    # -- auto-start and voice ------------------------------------------------

    def arm_auto_start(self, armed: bool) -> bool:
        """Arm or disarm immersion auto-start; returns the resulting setting.

        Arming is refused while the water sensor is unavailable.
        """
        if armed and not self._sensor_available:
            logger.info("Water detection unavailable; auto-start stays disarmed")
            armed = False
        self._session.auto_start_armed = armed
        return armed

    def on_immersion_detected(self) -> None:
        session = self._session
        if not session.auto_start_armed or session.state != SessionState.GOAL_SET:
            logger.debug("Ignoring immersion in %s", session.state.value)
            return
        if session.mode is None or not session.mode.uses_water_lock:
            return
        logger.info("Immersion detected; starting session")
        self.start()

    def voice_start(self, duration: int, mode: Optional[SessionMode] = None) -> None:
        """Start a session of *duration* seconds from a voice command."""
        if self._session.state == SessionState.MODE_SELECT:
            self.select_mode(mode if mode is not None else SessionMode.COLD_PLUNGE)
        if self._session.state != SessionState.GOAL_SET:
            logger.debug("Ignoring voice start in %s", self._session.state.value)
            return
        self.start(duration)

    # -- private helpers -----------------------------------------------------

    def _transition(self, name: str, action: Callable[[], None]) -> bool:
        try:
            action()
        except InvalidStateError as exc:
            logger.debug("Ignoring %s: %s", name, exc)
            return False
        return True

    def _restart_ticker(self) -> None:
        self._ticker.cancel()
        self._ticker.start(lambda: self.post(events.Tick()))

    def _complete(self) -> None:
        self._ticker.cancel()
        logger.info("Session completed after %ss", self._session.total_seconds)
        self._end_recording()
        self._call_safely("haptics.play", self._collaborators.haptics.play, HapticKind.SUCCESS)
        self._call_safely("glance.invalidate", self._collaborators.glance.invalidate)

    def _end_recording(self) -> None:
        if self._recording_since is None:
            return
        self._recording_since = None
        self._call_safely("health.end", self._collaborators.health.end, _now())

    def _call_safely(self, name: str, fn: Callable[..., object], *args: object) -> bool:
        """Call a collaborator; log and swallow its failure so the timer keeps going."""
        try:
            fn(*args)
        except Exception:
            logger.warning("Collaborator call %s failed", name, exc_info=True)
            return False
        return True
