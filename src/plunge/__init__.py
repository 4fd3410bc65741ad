"""plunge-timer: countdown timer for cold plunge and sauna sessions."""

__version__ = "0.1.0"
