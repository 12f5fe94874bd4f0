import asyncio

from apscheduler.jobstores.base import JobLookupError

from services.timers import JobHandle, SchedulerTimers, build_scheduler, on_loop


class GoneJob:
    id = "gone"

    def __init__(self):
        self.removals = 0

    def remove(self):
        self.removals += 1
        raise JobLookupError(self.id)


def test_on_loop_wraps_sync_callback_as_coroutine():
    calls = []
    run = on_loop(lambda: calls.append("tick"))
    assert asyncio.iscoroutinefunction(run)
    asyncio.run(run())
    assert calls == ["tick"]


def test_cancel_tolerates_finished_job_and_repeats():
    job = GoneJob()
    handle = JobHandle(job)
    handle.cancel()
    handle.cancel()
    assert job.removals == 1


def test_scheduler_timers_fire_repeat_and_cancel():
    async def scenario():
        scheduler = build_scheduler()
        scheduler.start()
        timers = SchedulerTimers(scheduler)
        fired = []
        try:
            once = timers.call_later(0.05, lambda: fired.append("once"))
            dropped = timers.call_later(0.05, lambda: fired.append("dropped"))
            dropped.cancel()
            ticking = timers.call_every(0.05, lambda: fired.append("tick"))

            await asyncio.sleep(0.5)
            ticking.cancel()
            await asyncio.sleep(0.05)
            ticks = fired.count("tick")
            await asyncio.sleep(0.3)
            # the one-shot job is already gone; cancelling it is harmless
            once.cancel()
            return fired, ticks
        finally:
            scheduler.shutdown(wait=False)

    fired, ticks = asyncio.run(scenario())
    assert fired.count("once") == 1
    assert "dropped" not in fired
    assert ticks >= 2
    assert fired.count("tick") == ticks
