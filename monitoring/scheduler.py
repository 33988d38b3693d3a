"""
============================================================================
CONNECTION MONITOR - PROBE SCHEDULER
============================================================================
Owns the lifecycle of the monitoring session and drives the prober.

States
------
IDLE ──start()──▶ RUNNING ──stop()──▶ IDLE

• start() is only valid while IDLE, stop() only while RUNNING; anything
  else raises SessionStateError and leaves the state untouched.
• start() issues one probe immediately and appends it, then arms the
  periodic probe task.  When notifications are enabled with a recipient
  it also arms a second, independent report task.
• stop() cancels both tasks and waits for them to finish.  The probe log
  is kept.

Tick policy
-----------
Single-flight: the probe task awaits each probe before looking at the
next deadline, so exactly one probe is in flight and records are appended
in the order they were issued.  If a probe outlives one or more deadlines
the missed ticks are coalesced into one late tick that fires as soon as
the probe completes; the schedule then continues from there.

A probe in flight when stop() is called (including the immediate probe
issued by start()) is cancelled and its result discarded.

Records take the wall-clock time of their probe.  If the clock steps
backward, the record is stamped with the previous record's time instead,
so the log stays in non-decreasing order and no outcome is dropped.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Optional

from config.constants import SessionState, TimeIntervals
from exceptions.monitoring import SessionStateError
from monitoring.aggregator import last_incident
from monitoring.models import ProbeRecord
from monitoring.notifier import NotificationDispatcher
from monitoring.prober import Prober
from monitoring.session import MonitoringSession
from reporting.formatter import format_duration
from utils.helpers import TimeHelper
from utils.logger import MonitorLogger, get_logger


logger = get_logger("Scheduler")


class Scheduler:
    """
    Asyncio probe scheduler for one MonitoringSession.

    Usage
    -----
        scheduler = Scheduler(session, Prober(), notifier)
        await scheduler.start()
        # ... later ...
        await scheduler.stop()

    or, to guarantee cancellation on exit::

        async with Scheduler(session, Prober()) as scheduler:
            await scheduler.start()
            ...
    """

    def __init__(
        self,
        session: MonitoringSession,
        prober: Prober,
        notifier: Optional[NotificationDispatcher] = None,
        notify_interval_seconds: float = TimeIntervals.ONE_HOUR,
    ):
        self.session = session
        self.prober = prober
        self.notifier = notifier
        self.notify_interval_seconds = notify_interval_seconds

        self._probe_task: Optional[asyncio.Task] = None
        self._notify_task: Optional[asyncio.Task] = None
        self._monitor_logger = MonitorLogger()

        # diagnostics
        self._tick_count = 0
        self._late_ticks = 0
        self._coalesced_ticks = 0
        self._discarded_probes = 0
        self._started_at: Optional[datetime] = None

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_running(self) -> bool:
        return self.session.is_running

    async def start(self) -> Optional[ProbeRecord]:
        """
        Start monitoring.

        Returns the record of the immediate probe, or None if stop() was
        called before it completed.

        Raises:
            SessionStateError: already running
        """
        if self.session.is_running:
            raise SessionStateError(
                "Monitoring is already running",
                state=self.session.state.value,
                operation="start",
            )

        self.session.state = SessionState.RUNNING
        loop = asyncio.get_running_loop()
        self._started_at = TimeHelper.get_utc_now()
        logger.info(
            f"✓ Monitoring started — target={self.session.target_endpoint}, "
            f"interval={self.session.interval_seconds}s, "
            f"timeout={self.session.timeout_seconds}s"
        )

        # Immediate probe.  Held in _probe_task so stop() can cancel it.
        first_deadline = loop.time() + self.session.interval_seconds
        self._probe_task = asyncio.create_task(self._tick())
        try:
            record = await self._probe_task
        except asyncio.CancelledError:
            if self.session.is_running:
                # start() itself was cancelled, not stopped
                self.session.state = SessionState.IDLE
                self._probe_task = None
                raise
            return None
        except Exception as e:
            logger.exception(f"Initial probe failed: {e}")
            record = None

        if not self.session.is_running:
            return None

        self._probe_task = asyncio.create_task(self._probe_loop(first_deadline))

        if self.notifier is not None and self.session.wants_notifications:
            self._notify_task = asyncio.create_task(self._notify_loop())
            logger.info(
                f"Periodic reports to {self.session.notify_email} "
                f"every {self.notify_interval_seconds}s"
            )

        return record

    async def stop(self) -> None:
        """
        Stop monitoring.  Cancels the probe and report tasks; the probe
        log is kept.

        Raises:
            SessionStateError: not running
        """
        if not self.session.is_running:
            raise SessionStateError(
                "Monitoring is not running",
                state=self.session.state.value,
                operation="stop",
            )

        self.session.state = SessionState.IDLE

        tasks = [t for t in (self._probe_task, self._notify_task) if t is not None]
        self._probe_task = None
        self._notify_task = None

        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.exception(f"Task ended with error during stop: {e}")

        logger.info(
            f"✓ Monitoring stopped — {len(self.session.probe_log)} records, "
            f"total downtime {format_duration(self.session.total_downtime_ms)}"
        )

    async def close(self) -> None:
        """Stop if running.  Used on process shutdown."""
        if self.session.is_running:
            await self.stop()

    async def __aenter__(self) -> "Scheduler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # PROBING
    # ------------------------------------------------------------------

    async def _tick(self) -> Optional[ProbeRecord]:
        """Probe once and append the result."""
        try:
            record = await self.prober.probe(
                self.session.target_endpoint, self.session.timeout_seconds
            )
        except asyncio.CancelledError:
            if not self.session.is_running:
                self._discarded_probes += 1
                logger.debug("Probe cancelled by stop, result discarded")
            raise

        if not self.session.is_running:
            self._discarded_probes += 1
            logger.debug("Probe completed after stop, result discarded")
            return None

        previous = self.session.probe_log.last()
        if previous is not None and record.timestamp < previous.timestamp:
            # wall clock stepped backward; keep the log ordered
            logger.warning(
                f"Clock moved back {(previous.timestamp - record.timestamp).total_seconds():.3f}s; "
                f"record stamped {previous.iso_timestamp}"
            )
            record = replace(record, timestamp=previous.timestamp)
        result = self.session.record(record)
        self._tick_count += 1

        self._monitor_logger.log_probe(
            self.session.target_endpoint, record.reachable, record.latency_ms
        )
        if not record.reachable and (previous is None or previous.reachable):
            self._monitor_logger.log_downtime(
                self.session.target_endpoint, record.iso_timestamp
            )
        elif record.reachable and previous is not None and not previous.reachable:
            incident = last_incident(result)
            downtime = (
                format_duration(incident.duration_seconds * TimeIntervals.MS_PER_SECOND)
                if incident else "0s"
            )
            self._monitor_logger.log_recovery(self.session.target_endpoint, downtime)

        return record

    async def _probe_loop(self, next_deadline: float) -> None:
        """Periodic trigger; runs until cancelled by stop()."""
        loop = asyncio.get_running_loop()
        interval = self.session.interval_seconds

        while True:
            delay = next_deadline - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

            try:
                await self._tick()
            except Exception as e:
                # Prober never raises for probe failures; this is a bug
                logger.exception(f"Tick failed: {e}")

            next_deadline += interval
            now = loop.time()
            if now > next_deadline:
                missed = int((now - next_deadline) // interval)
                self._late_ticks += 1
                self._coalesced_ticks += missed
                logger.warning(
                    f"Probe outlived the {interval}s interval; firing late tick now"
                    + (f", {missed} missed tick(s) coalesced" if missed else "")
                )
                next_deadline = now

    async def _notify_loop(self) -> None:
        """Secondary trigger: periodic report delivery."""
        while True:
            await asyncio.sleep(self.notify_interval_seconds)
            await self.send_report_now()

    async def send_report_now(self) -> bool:
        """Send the current report to the configured recipient."""
        if self.notifier is None:
            logger.debug("No notifier configured, report not sent")
            return False
        try:
            return await self.notifier.send_report(
                self.session.notify_email,
                self.session.probe_log.snapshot(),
                self.session.interval_seconds,
            )
        except Exception as e:
            logger.exception(f"Report delivery raised: {e}")
            return False

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Return scheduler counters."""
        return {
            "state": self.session.state.value,
            "tick_count": self._tick_count,
            "late_ticks": self._late_ticks,
            "coalesced_ticks": self._coalesced_ticks,
            "discarded_probes": self._discarded_probes,
            "notifications_armed": self._notify_task is not None,
            "started_at": (
                TimeHelper.to_iso(self._started_at) if self._started_at else None
            ),
        }
