"""Comprehensive tests for the Countdown state machine."""

import pytest

from plunge.core.timer import Countdown, InvalidStateError, SessionState, format_remaining


def _running(goal: int = 60) -> Countdown:
    countdown = Countdown()
    countdown.start(goal)
    return countdown


def _paused(goal: int = 60, ticks: int = 0) -> Countdown:
    countdown = _running(goal)
    for _ in range(ticks):
        countdown.tick()
    countdown.pause()
    return countdown


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


class TestCountdownInitialState:
    """A freshly-created Countdown waits for a goal with nothing on the clock."""

    def test_initial_state_is_goal_set(self) -> None:
        assert Countdown().state == SessionState.GOAL_SET

    def test_initial_times_are_zero(self) -> None:
        countdown = Countdown()
        assert countdown.remaining_seconds == 0
        assert countdown.total_seconds == 0

    def test_progress_is_zero_without_total(self) -> None:
        assert Countdown().progress == 0.0


# ---------------------------------------------------------------------------
# start()
# ---------------------------------------------------------------------------


class TestCountdownStart:
    """start(goal_seconds) transitions GOAL_SET -> RUNNING."""

    def test_start_sets_times_and_state(self) -> None:
        countdown = _running(125)
        assert countdown.state == SessionState.RUNNING
        assert countdown.remaining_seconds == 125
        assert countdown.total_seconds == 125
        assert countdown.progress == 0.0

    def test_start_with_zero_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            Countdown().start(0)

    def test_start_with_negative_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            Countdown().start(-5)

    def test_start_with_float_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            Countdown().start(2.5)  # type: ignore[arg-type]

    def test_start_while_running_raises(self) -> None:
        countdown = _running()
        with pytest.raises(InvalidStateError, match="start\\(\\) is not valid from running state"):
            countdown.start(30)

    def test_start_after_completion_raises(self) -> None:
        countdown = _running(1)
        countdown.tick()
        with pytest.raises(InvalidStateError):
            countdown.start(30)


# ---------------------------------------------------------------------------
# tick()
# ---------------------------------------------------------------------------


class TestCountdownTick:
    """tick() decrements while RUNNING and completes at zero."""

    def test_tick_decrements_remaining(self) -> None:
        countdown = _running(60)
        assert countdown.tick() is False
        assert countdown.remaining_seconds == 59
        assert countdown.progress == pytest.approx(1 / 60)

    @pytest.mark.parametrize("goal", [1, 2, 59, 125, 600])
    def test_goal_ticks_complete_the_countdown(self, goal: int) -> None:
        countdown = _running(goal)
        results = [countdown.tick() for _ in range(goal)]
        assert results[-1] is True
        assert not any(results[:-1])
        assert countdown.remaining_seconds == 0
        assert countdown.state == SessionState.COMPLETED
        assert countdown.progress == 1.0

    def test_tick_after_completion_does_not_complete_again(self) -> None:
        countdown = _running(1)
        assert countdown.tick() is True
        assert countdown.tick() is False
        assert countdown.remaining_seconds == 0
        assert countdown.state == SessionState.COMPLETED

    def test_tick_while_paused_is_noop(self) -> None:
        countdown = _paused(60, ticks=10)
        assert countdown.tick() is False
        assert countdown.remaining_seconds == 50

    def test_tick_after_reset_is_noop(self) -> None:
        countdown = _running(60)
        countdown.reset()
        assert countdown.tick() is False
        assert countdown.remaining_seconds == 0
        assert countdown.state == SessionState.GOAL_SET


# ---------------------------------------------------------------------------
# pause() / resume()
# ---------------------------------------------------------------------------


class TestCountdownPauseResume:
    """pause() freezes the clock; resume() continues from the same point."""

    def test_pause_keeps_remaining(self) -> None:
        countdown = _paused(60, ticks=10)
        assert countdown.state == SessionState.PAUSED
        assert countdown.remaining_seconds == 50

    def test_resume_keeps_remaining(self) -> None:
        countdown = _paused(60, ticks=10)
        countdown.resume()
        assert countdown.state == SessionState.RUNNING
        assert countdown.remaining_seconds == 50

    def test_pause_from_goal_set_raises(self) -> None:
        with pytest.raises(InvalidStateError):
            Countdown().pause()

    def test_pause_while_paused_raises(self) -> None:
        countdown = _paused()
        with pytest.raises(InvalidStateError):
            countdown.pause()

    def test_resume_while_running_raises(self) -> None:
        with pytest.raises(InvalidStateError):
            _running().resume()

    def test_resume_with_nothing_remaining_raises(self) -> None:
        countdown = _paused(60)
        countdown.adjust(0)
        with pytest.raises(InvalidStateError):
            countdown.resume()
        assert countdown.state == SessionState.PAUSED


# ---------------------------------------------------------------------------
# reset()
# ---------------------------------------------------------------------------


class TestCountdownReset:
    """reset() is valid from every state and idempotent."""

    @pytest.mark.parametrize("ticks", [0, 5])
    def test_reset_returns_to_goal_set(self, ticks: int) -> None:
        countdown = _running(60)
        for _ in range(ticks):
            countdown.tick()
        countdown.reset()
        assert countdown.state == SessionState.GOAL_SET
        assert countdown.remaining_seconds == 0
        assert countdown.progress == 0.0

    def test_reset_twice_is_same_as_once(self) -> None:
        once = _paused(60, ticks=3)
        once.reset()
        twice = _paused(60, ticks=3)
        twice.reset()
        twice.reset()
        assert (once.state, once.remaining_seconds, once.total_seconds) == (
            twice.state,
            twice.remaining_seconds,
            twice.total_seconds,
        )

    def test_reset_after_completion_allows_new_start(self) -> None:
        countdown = _running(1)
        countdown.tick()
        countdown.reset()
        countdown.start(30)
        assert countdown.remaining_seconds == 30


# ---------------------------------------------------------------------------
# adjust()
# ---------------------------------------------------------------------------


class TestCountdownAdjust:
    """adjust(raw) dials remaining time while PAUSED."""

    def test_adjust_above_goal_raises_total(self) -> None:
        countdown = _paused(60, ticks=10)
        delta = countdown.adjust(80)
        assert delta == 30
        assert countdown.remaining_seconds == 80
        assert countdown.total_seconds == 80
        assert countdown.progress == 0.0

    def test_adjust_below_keeps_total(self) -> None:
        countdown = _paused(60, ticks=10)
        countdown.adjust(30)
        assert countdown.remaining_seconds == 30
        assert countdown.total_seconds == 60
        assert countdown.progress == pytest.approx(0.5)

    def test_adjust_floors_fractional_values(self) -> None:
        countdown = _paused(60)
        countdown.adjust(42.9)
        assert countdown.remaining_seconds == 42

    def test_adjust_negative_clamps_to_zero(self) -> None:
        countdown = _paused(60)
        countdown.adjust(-10)
        assert countdown.remaining_seconds == 0

    @pytest.mark.parametrize("value", [0, 5, 55, 300, 600])
    def test_adjust_keeps_progress_in_range(self, value: int) -> None:
        countdown = _paused(120, ticks=7)
        countdown.adjust(value)
        assert countdown.total_seconds >= countdown.remaining_seconds
        assert 0.0 <= countdown.progress <= 1.0

    def test_adjust_while_running_raises(self) -> None:
        countdown = _running(60)
        with pytest.raises(InvalidStateError):
            countdown.adjust(10)
        assert countdown.remaining_seconds == 60

    def test_adjusted_session_completes_after_new_remaining(self) -> None:
        countdown = _paused(60, ticks=10)
        countdown.adjust(80)
        countdown.resume()
        for _ in range(79):
            countdown.tick()
        assert countdown.state == SessionState.RUNNING
        countdown.tick()
        assert countdown.state == SessionState.COMPLETED


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestFormatRemaining:
    def test_minutes_and_seconds(self) -> None:
        assert format_remaining(454) == "7:34"

    def test_seconds_only(self) -> None:
        assert format_remaining(5) == "0:05"

    def test_zero(self) -> None:
        assert format_remaining(0) == "0:00"
