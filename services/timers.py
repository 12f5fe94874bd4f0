"""Cancelable timers for sessions: debounced saves, the elapsed-time tick and win sequences.

In the app these are APScheduler jobs on an `AsyncIOScheduler`, so every
callback runs on the same event loop as the request handlers and never
races with them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Awaitable, Callable
import logging

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import utc

from utils.time import now_utc

logger = logging.getLogger(__name__)


class TimerHandle(ABC):

    @abstractmethod
    def cancel(self) -> None:
        """Stop any further callbacks. Calling it twice is harmless."""
        raise NotImplementedError


class Timers(ABC):

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` once after `delay` seconds."""
        raise NotImplementedError

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` every `interval` seconds until cancelled."""
        raise NotImplementedError


class JobHandle(TimerHandle):
    """Wraps an APScheduler job."""

    def __init__(self, job):
        self._job = job
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._job.remove()
        except JobLookupError:
            # one-shot jobs drop themselves from the store after running
            logger.debug(f"[TIMERS] job {self._job.id} already gone")


def on_loop(callback: Callable[[], object]) -> Callable[[], Awaitable[None]]:
    """Wrap a sync callback as a coroutine function.

    `AsyncIOExecutor` hands plain functions to a thread pool; coroutine
    functions run as tasks on the scheduler's own event loop.
    """
    async def run() -> None:
        callback()
    return run


class SchedulerTimers(Timers):

    def __init__(self, scheduler: AsyncIOScheduler):
        self.scheduler = scheduler

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        job = self.scheduler.add_job(
            on_loop(callback),
            trigger="date",
            run_date=now_utc() + timedelta(seconds=delay),
            misfire_grace_time=None,
        )
        return JobHandle(job)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        job = self.scheduler.add_job(
            on_loop(callback),
            trigger="interval",
            seconds=interval,
            coalesce=True,
            misfire_grace_time=None,
        )
        return JobHandle(job)


def build_scheduler() -> AsyncIOScheduler:
    """Scheduler for session timers and the midnight rollover, pinned to UTC."""
    return AsyncIOScheduler(timezone=utc)
