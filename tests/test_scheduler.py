from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import timedelta

import pytest

from conftest import ScriptedProber

from config.constants import SessionState
from exceptions.monitoring import SessionStateError
from monitoring.models import ProbeRecord
from monitoring.scheduler import Scheduler


class ClockSteppedBack(ScriptedProber):
    """Every record after the first is stamped 30 seconds in the past."""

    async def probe(self, endpoint: str, timeout_seconds: float) -> ProbeRecord:
        record = await super().probe(endpoint, timeout_seconds)
        if self.calls == 1:
            return record
        return replace(record, timestamp=record.timestamp - timedelta(seconds=30))


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    async def send_report(self, email, log, interval_seconds) -> bool:
        self.sent.append((email, tuple(log), interval_seconds))
        return True

    def get_stats(self) -> dict:
        return {"sent_count": len(self.sent)}


@pytest.mark.asyncio
async def test_start_probes_immediately(session) -> None:
    prober = ScriptedProber([False])
    scheduler = Scheduler(session, prober)

    record = await scheduler.start()
    try:
        assert scheduler.state == SessionState.RUNNING
        assert record is not None and record.reachable is False
        assert session.probe_log.snapshot() == (record,)
        assert session.total_downtime_ms == 1000
    finally:
        await scheduler.stop()


@pytest.mark.asyncio
async def test_invalid_transitions_raise(session) -> None:
    scheduler = Scheduler(session, ScriptedProber())

    with pytest.raises(SessionStateError):
        await scheduler.stop()

    await scheduler.start()
    try:
        with pytest.raises(SessionStateError):
            await scheduler.start()
        assert scheduler.is_running
    finally:
        await scheduler.stop()

    assert scheduler.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_periodic_ticks_append_in_order(session) -> None:
    prober = ScriptedProber()
    scheduler = Scheduler(session, prober)

    await scheduler.start()
    await asyncio.sleep(2.3)
    await scheduler.stop()

    records = session.probe_log.snapshot()
    assert len(records) >= 3
    assert [r.timestamp for r in records] == sorted(r.timestamp for r in records)


@pytest.mark.asyncio
async def test_restart_keeps_log(session) -> None:
    scheduler = Scheduler(session, ScriptedProber())

    await scheduler.start()
    await scheduler.stop()
    await scheduler.start()
    await scheduler.stop()

    assert len(session.probe_log) == 2


@pytest.mark.asyncio
async def test_no_ticks_after_stop(session) -> None:
    prober = ScriptedProber()
    scheduler = Scheduler(session, prober)

    await scheduler.start()
    await scheduler.stop()
    calls = prober.calls
    await asyncio.sleep(1.2)

    assert prober.calls == calls
    assert len(session.probe_log) == 1


@pytest.mark.asyncio
async def test_stop_discards_in_flight_initial_probe(session) -> None:
    prober = ScriptedProber()
    prober.gate = asyncio.Event()
    scheduler = Scheduler(session, prober)

    start_task = asyncio.create_task(scheduler.start())
    await prober.started.wait()
    await scheduler.stop()

    assert await start_task is None
    assert len(session.probe_log) == 0
    assert scheduler.get_stats()["discarded_probes"] == 1
    assert scheduler.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_stop_discards_in_flight_periodic_tick(session) -> None:
    prober = ScriptedProber()
    scheduler = Scheduler(session, prober)

    await scheduler.start()
    assert len(session.probe_log) == 1

    prober.gate = asyncio.Event()
    prober.started.clear()
    await asyncio.wait_for(prober.started.wait(), timeout=3)
    assert prober.calls == 2
    await scheduler.stop()

    assert len(session.probe_log) == 1
    assert prober.completed == 1
    stats = scheduler.get_stats()
    assert stats["discarded_probes"] == 1
    assert stats["tick_count"] == 1
    assert scheduler.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_backward_clock_step_keeps_every_record(session) -> None:
    prober = ClockSteppedBack([True, False, False])
    scheduler = Scheduler(session, prober)

    first = await scheduler.start()
    await asyncio.sleep(2.3)
    await scheduler.stop()

    records = session.probe_log.snapshot()
    assert prober.completed >= 3
    assert len(records) == prober.completed
    assert [r.timestamp for r in records] == sorted(r.timestamp for r in records)
    assert records[1].timestamp == first.timestamp
    assert [r.reachable for r in records[:3]] == [True, False, False]
    assert session.total_downtime_ms == 2000


@pytest.mark.asyncio
async def test_slow_probes_never_overlap(session) -> None:
    prober = ScriptedProber(delay=1.2)
    scheduler = Scheduler(session, prober)

    await scheduler.start()
    await asyncio.sleep(1.5)
    await scheduler.stop()

    assert prober.max_in_flight == 1
    assert scheduler.get_stats()["late_ticks"] >= 1
    records = session.probe_log.snapshot()
    assert [r.timestamp for r in records] == sorted(r.timestamp for r in records)


@pytest.mark.asyncio
async def test_configuration_locked_while_running(session) -> None:
    scheduler = Scheduler(session, ScriptedProber())
    await scheduler.start()
    try:
        with pytest.raises(SessionStateError):
            session.configure(interval_seconds=10)
    finally:
        await scheduler.stop()

    session.configure(interval_seconds=10)
    assert session.interval_seconds == 10


@pytest.mark.asyncio
async def test_notifications_armed_when_enabled(session) -> None:
    session.configure(notify_enabled=True, notify_email="ops@example.com")
    notifier = RecordingNotifier()
    scheduler = Scheduler(session, ScriptedProber(), notifier=notifier, notify_interval_seconds=0.1)

    await scheduler.start()
    assert scheduler.get_stats()["notifications_armed"] is True
    await asyncio.sleep(0.35)
    await scheduler.stop()

    assert len(notifier.sent) >= 2
    email, log, interval = notifier.sent[0]
    assert email == "ops@example.com"
    assert len(log) >= 1
    assert interval == 1
    assert scheduler.get_stats()["notifications_armed"] is False


@pytest.mark.asyncio
async def test_notifications_not_armed_without_address(session) -> None:
    session.configure(notify_enabled=True)
    notifier = RecordingNotifier()
    scheduler = Scheduler(session, ScriptedProber(), notifier=notifier, notify_interval_seconds=0.05)

    await scheduler.start()
    await asyncio.sleep(0.2)
    await scheduler.stop()

    assert notifier.sent == []


@pytest.mark.asyncio
async def test_context_manager_stops_on_exit(session) -> None:
    async with Scheduler(session, ScriptedProber()) as scheduler:
        await scheduler.start()
        assert scheduler.is_running
    assert session.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_clear_while_running_keeps_monitoring(session) -> None:
    scheduler = Scheduler(session, ScriptedProber([False]))
    await scheduler.start()
    try:
        assert session.clear() == 1
        assert session.total_downtime_ms == 0
        assert scheduler.is_running
    finally:
        await scheduler.stop()
