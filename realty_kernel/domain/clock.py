"""
Clock -- injectable time source.

Statement builders never read the wall clock: the only timestamp a report
carries is ``ReportMetadata.generated_at``, and the service obtains it from
an injected ``Clock`` so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time (timezone-aware)."""
        ...


class SystemClock(Clock):
    """Production clock that returns actual system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    ``now()`` returns the same value on repeated calls until ``advance()``
    is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(
            2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc
        )

    def now(self) -> datetime:
        return self._fixed_time

    def advance(self, seconds: int = 1) -> None:
        self._fixed_time = self._fixed_time + timedelta(seconds=seconds)
