from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from barberbot.infrastructure.scheduling.asyncio_scheduler import AsyncioReminderScheduler

from tests.conftest import FIXED_NOW, fixed_clock

KEY = ("26/08/2025", "11:00", "joao")


def _recorder():
    calls: list[str] = []

    async def callback() -> None:
        calls.append("fired")

    return calls, callback


async def test_past_trigger_is_dropped_by_default():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)
    calls, callback = _recorder()

    job = scheduler.schedule(KEY, "chat-1", FIXED_NOW - timedelta(minutes=5), callback)

    assert job is None
    assert scheduler.get(KEY) is None
    await asyncio.sleep(0)
    assert calls == []


async def test_past_trigger_fires_immediately_when_configured():
    scheduler = AsyncioReminderScheduler(past_trigger_policy="fire", clock=fixed_clock)
    calls, callback = _recorder()

    job = scheduler.schedule(KEY, "chat-1", FIXED_NOW - timedelta(minutes=5), callback)

    assert job is not None
    await job.task
    assert calls == ["fired"]
    assert scheduler.get(KEY) is None


async def test_future_trigger_fires_once():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)
    calls, callback = _recorder()

    job = scheduler.schedule(KEY, "chat-1", FIXED_NOW + timedelta(milliseconds=10), callback)
    await job.task

    assert calls == ["fired"]
    assert scheduler.pending() == []


async def test_cancel_stops_pending_reminder():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)
    calls, callback = _recorder()
    job = scheduler.schedule(KEY, "chat-1", FIXED_NOW + timedelta(hours=1), callback)

    assert scheduler.cancel(KEY) is True
    assert scheduler.cancel(KEY) is False
    await asyncio.sleep(0)
    assert job.task.cancelled()
    assert calls == []


async def test_rescheduling_replaces_existing_job():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)
    _, callback = _recorder()
    first = scheduler.schedule(KEY, "chat-1", FIXED_NOW + timedelta(hours=1), callback)
    second = scheduler.schedule(KEY, "chat-1", FIXED_NOW + timedelta(hours=2), callback)

    await asyncio.sleep(0)
    assert first.task.cancelled()
    assert scheduler.get(KEY) is second
    scheduler.shutdown()


async def test_failing_callback_is_contained():
    scheduler = AsyncioReminderScheduler(clock=fixed_clock)

    async def callback() -> None:
        raise RuntimeError("telegram down")

    job = scheduler.schedule(KEY, "chat-1", FIXED_NOW, callback)
    await job.task
    assert scheduler.get(KEY) is None


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        AsyncioReminderScheduler(past_trigger_policy="later")
