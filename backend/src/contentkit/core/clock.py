"""Time source for lifecycle hooks.

Hooks never call datetime.now() directly; they ask the clock, so tests can
freeze or step time.
"""

from datetime import UTC, datetime, timedelta
from typing import Protocol, runtime_checkable

NOW = "now"


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, at: datetime | None = None):
        self._now = at or datetime(2024, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def set(self, at: datetime) -> None:
        self._now = at

    def advance(self, **delta: float) -> datetime:
        """Move forward by a timedelta expressed as keyword args (seconds=5)."""
        self._now = self._now + timedelta(**delta)
        return self._now


system_clock = SystemClock()


def resolve_time(value: object, clock: Clock | None = None) -> object:
    """Replace the "now" token with the clock's current time."""
    if isinstance(value, str) and value.strip().lower() == NOW:
        return (clock or system_clock).now()
    return value
