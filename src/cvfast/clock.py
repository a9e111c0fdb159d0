"""Injectable source of the current UTC time.

Services read timestamps through :func:`now` instead of calling
``datetime.now`` so tests can pin ``created_at``/``updated_at``/``revoked_at``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a given instant, advanced manually."""

    def __init__(self, start: datetime) -> None:
        self._current = start

    def now(self) -> datetime:
        return self._current

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by ``timedelta(**kwargs)`` and return the new time."""
        self._current = self._current + timedelta(**kwargs)
        return self._current


_clock: Clock = SystemClock()


def now() -> datetime:
    """Return the current time from the active clock."""
    return _clock.now()


def set_clock(clock: Clock) -> Clock:
    """Install ``clock`` and return the previously active one."""
    global _clock
    previous = _clock
    _clock = clock
    return previous


@contextmanager
def use_clock(clock: Clock) -> Iterator[Clock]:
    """Temporarily install ``clock`` for the duration of the block."""
    previous = set_clock(clock)
    try:
        yield clock
    finally:
        set_clock(previous)
