"""
Swappable UTC time source.

The engine stamps events through a clock object so tests can pause time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


class SystemClock:
    """Wall-clock time source."""

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PausedClock:
    """
    Frozen time source.

    utcnow() always returns the same instant until a new clock is made
    with tick(). Since PausedClock is immutable, tick() returns a new
    instance.
    """
    current: datetime

    @staticmethod
    def pause() -> "PausedClock":
        """Freeze the current system time."""
        return PausedClock(SystemClock().utcnow())

    def utcnow(self) -> datetime:
        return self.current

    def tick(self, step: timedelta = timedelta(seconds=1)) -> "PausedClock":
        return PausedClock(self.current + step)
