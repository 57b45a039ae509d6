"""
Injectable time source.

Read-side code asks a ``Clock`` for "today" instead of calling
``date.today()``, so on-leave lookups are reproducible in tests.  Record
timestamps never come from here: the database assigns them.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """A clock that only moves when told to.

    Starts at Monday 2024-06-03 09:00 UTC unless another instant is given.
    """

    DEFAULT_START = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)

    def __init__(self, start: datetime | None = None):
        self._current = start or self.DEFAULT_START

    def now(self) -> datetime:
        return self._current

    def set_time(self, instant: datetime) -> None:
        self._current = instant

    def advance(self, **delta: float) -> None:
        """Move forward by a ``timedelta`` expressed as keywords (``days=1``)."""
        self._current += timedelta(**delta)
