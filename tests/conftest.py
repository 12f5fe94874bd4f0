"""Shared fixtures: a pinned clock, hand-cranked timers, an in-memory store."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from services import PuzzleContentStore
from services.timers import TimerHandle, Timers
from stores import MemoryKeyValueStore
from utils.time import ClockAndCalendarProvider


START = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock(ClockAndCalendarProvider):

    def __init__(self, start: datetime = START):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class ManualHandle(TimerHandle):

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class _Job:
    due: float
    seq: int
    callback: Callable[[], None]
    interval: Optional[float]
    handle: ManualHandle


class ManualTimers(Timers):
    """Timers driven by `advance()`, which also moves the clock forward."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._jobs: list[_Job] = []
        self._seq = 0

    def _add(self, delay, callback, interval):
        self._seq += 1
        handle = ManualHandle()
        self._jobs.append(_Job(self.clock.timestamp() + delay, self._seq, callback, interval, handle))
        return handle

    def call_later(self, delay, callback):
        return self._add(delay, callback, None)

    def call_every(self, interval, callback):
        return self._add(interval, callback, interval)

    @property
    def pending(self) -> int:
        return sum(1 for j in self._jobs if not j.handle.cancelled)

    def advance(self, seconds: float) -> None:
        start_dt = self.clock.current
        start = self.clock.timestamp()
        end = start + seconds
        while True:
            due = [j for j in self._jobs if not j.handle.cancelled and j.due <= end]
            if not due:
                break
            job = min(due, key=lambda j: (j.due, j.seq))
            self.clock.current = start_dt + timedelta(seconds=job.due - start)
            if job.interval is None:
                job.handle.cancelled = True
                self._jobs.remove(job)
            else:
                job.due += job.interval
            job.callback()
        self.clock.current = start_dt + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers(clock):
    return ManualTimers(clock)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def fallback_content(tmp_path):
    """Content store with no files, so every day gets the built-in puzzles."""
    return PuzzleContentStore(tmp_path)


@pytest.fixture
def make_session(store, fallback_content, timers, clock):
    def _make(cls, **kwargs):
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("save_debounce", 0.5)
        kwargs.setdefault("tick_seconds", 1.0)
        return cls(store, fallback_content, timers, **kwargs)
    return _make
