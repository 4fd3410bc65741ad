"""Tests for session modes and goal selection."""

import pytest

from plunge.core.goal import GoalSelection
from plunge.core.modes import SessionMode


class TestSessionMode:
    def test_only_cold_plunge_uses_water_lock(self) -> None:
        assert SessionMode.COLD_PLUNGE.uses_water_lock
        assert not SessionMode.SAUNA.uses_water_lock

    def test_workout_classification(self) -> None:
        assert SessionMode.COLD_PLUNGE.theme.workout_activity == "swimming"
        assert SessionMode.SAUNA.theme.workout_activity == "other"

    @pytest.mark.parametrize("text", ["cold-plunge", "COLD_PLUNGE", " cold_plunge "])
    def test_parse_accepts_spellings(self, text: str) -> None:
        assert SessionMode.parse(text) is SessionMode.COLD_PLUNGE

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown session mode"):
            SessionMode.parse("steam")

    def test_every_mode_has_theme(self) -> None:
        for mode in SessionMode:
            assert mode.theme.encouragement


class TestGoalSelection:
    def test_total_seconds(self) -> None:
        assert GoalSelection(minutes=2, seconds=5).total_seconds == 125

    def test_zero_goal_cannot_start(self) -> None:
        assert not GoalSelection(minutes=0, seconds=0).can_start

    @pytest.mark.parametrize("minutes, seconds", [(11, 0), (-1, 0), (0, 60), (0, -1)])
    def test_out_of_range_rejected(self, minutes: int, seconds: int) -> None:
        with pytest.raises(ValueError):
            GoalSelection(minutes=minutes, seconds=seconds)

    def test_from_seconds(self) -> None:
        assert GoalSelection.from_seconds(125) == GoalSelection(minutes=2, seconds=5)
