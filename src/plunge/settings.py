"""User preferences persisted as JSON between runs."""

from __future__ import annotations

import fcntl
import json
import logging
import os
from pathlib import Path

from plunge.core.goal import GoalSelection
from plunge.core.modes import SessionMode

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "plunge"
_CONFIG_DIR_ENV = "PLUNGE_CONFIG_DIR"
_SETTINGS_FILE = "settings.json"


def default_config_dir() -> Path:
    """Return ``$PLUNGE_CONFIG_DIR`` if set, else ``~/.config/plunge``."""
    override = os.environ.get(_CONFIG_DIR_ENV)
    return Path(override) if override else _DEFAULT_CONFIG_DIR


class Settings:
    """Default mode, goal and auto-start preference.

    Values are read from ``<config_dir>/settings.json`` on construction and
    written back by :meth:`save`.  Missing or malformed entries fall back to
    the defaults.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir: Path = config_dir if config_dir is not None else default_config_dir()
        self.mode: SessionMode = SessionMode.COLD_PLUNGE
        self.goal: GoalSelection = GoalSelection()
        self.auto_start: bool = True
        self._load()

    @property
    def path(self) -> Path:
        return self._config_dir / _SETTINGS_FILE

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "goal_minutes": self.goal.minutes,
            "goal_seconds": self.goal.seconds,
            "auto_start": self.auto_start,
        }

    # -- persistence ---------------------------------------------------------

    def save(self) -> None:
        """Write current settings to the JSON file with file locking."""
        self._config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            json.dump(self.to_dict(), f, indent=2)

    def _load(self) -> None:
        """Load settings from the JSON file if it exists."""
        path = self.path
        if not path.exists():
            return

        try:
            with open(path) as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable settings file %s", path)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected an object", path)
            return

        try:
            self.mode = SessionMode.parse(str(data.get("mode", self.mode.value)))
        except ValueError:
            logger.warning("Unknown mode in %s; using %s", path, self.mode.value)

        try:
            self.goal = GoalSelection(
                minutes=int(data.get("goal_minutes", self.goal.minutes)),
                seconds=int(data.get("goal_seconds", self.goal.seconds)),
            )
        except (TypeError, ValueError):
            logger.warning("Invalid goal in %s; using %s", path, self.goal)

        auto_start = data.get("auto_start", self.auto_start)
        if isinstance(auto_start, bool):
            self.auto_start = auto_start
