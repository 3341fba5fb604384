"""
Tests for the background session reclaimer.
"""

import asyncio

import pytest

from parlor.clock import new_session_id
from parlor.sessions import SessionReclaimer

TIMEOUT = 1200
NOW = 1_000_000


@pytest.mark.asyncio
async def test_sweep_deletes_only_stale_sessions(session_factory, session_store):
    stale, fresh = new_session_id(), new_session_id()
    await session_store.insert(stale, NOW - TIMEOUT - 1)
    await session_store.insert(fresh, NOW - TIMEOUT + 1)

    reclaimer = SessionReclaimer(session_factory, timeout_seconds=TIMEOUT, period_seconds=300)
    assert await reclaimer.sweep(now=NOW) == 1

    assert await session_store.get(stale) is None
    assert await session_store.get(fresh) is not None


@pytest.mark.asyncio
async def test_sweep_cascades(session_factory, session_store, make_room):
    await make_room("lobby")
    stale = new_session_id()
    await session_store.insert(stale, NOW - TIMEOUT - 1)
    await session_store.save_room_attempt(stale, "lobby", "hash")
    await session_store.save_checkpoint(stale, "lobby", 42)

    reclaimer = SessionReclaimer(session_factory, timeout_seconds=TIMEOUT, period_seconds=300)
    await reclaimer.sweep(now=NOW)

    assert await session_store.get_room_attempt(stale, "lobby") is None
    assert await session_store.get_checkpoint(stale, "lobby") is None


@pytest.mark.asyncio
async def test_sweep_uses_clock(session_factory, session_store):
    stale = new_session_id()
    await session_store.insert(stale, 10)

    reclaimer = SessionReclaimer(
        session_factory, timeout_seconds=5, period_seconds=5, clock=lambda: 16
    )
    assert await reclaimer.sweep() == 1


def test_remaining_sleep_accounts_for_sweep_time(session_factory):
    reclaimer = SessionReclaimer(session_factory, timeout_seconds=1200, period_seconds=300)

    assert reclaimer.remaining_sleep(0) == 300
    assert reclaimer.remaining_sleep(100) == 200
    assert reclaimer.remaining_sleep(400) == 0


@pytest.mark.parametrize("timeout, period", [(0, 10), (10, 0), (-1, 10)])
def test_rejects_non_positive_settings(session_factory, timeout, period):
    with pytest.raises(ValueError):
        SessionReclaimer(session_factory, timeout_seconds=timeout, period_seconds=period)


def test_warns_when_period_exceeds_timeout(session_factory, caplog):
    SessionReclaimer(session_factory, timeout_seconds=10, period_seconds=20)

    assert "exceeds session timeout" in caplog.text


@pytest.mark.asyncio
async def test_run_survives_failed_sweeps(session_factory):
    reclaimer = SessionReclaimer(session_factory, timeout_seconds=10, period_seconds=0.01)
    calls = []

    async def flaky_sweep(now=None):
        calls.append(now)
        if len(calls) == 1:
            raise ConnectionError("database unreachable")
        return 0

    reclaimer.sweep = flaky_sweep

    reclaimer.start()
    for _ in range(100):
        if len(calls) >= 3:
            break
        await asyncio.sleep(0.01)

    assert reclaimer.running
    await reclaimer.stop()

    assert len(calls) >= 3
    assert not reclaimer.running


@pytest.mark.asyncio
async def test_run_removes_stale_sessions(session_factory, session_store):
    stale = new_session_id()
    await session_store.insert(stale, 1)

    reclaimer = SessionReclaimer(session_factory, timeout_seconds=60, period_seconds=0.05)
    reclaimer.start()
    await asyncio.sleep(0.1)
    await reclaimer.stop()

    assert await session_store.get(stale) is None


@pytest.mark.asyncio
async def test_stop_without_start(session_factory):
    reclaimer = SessionReclaimer(session_factory, timeout_seconds=60, period_seconds=10)

    await reclaimer.stop()

    assert not reclaimer.running
