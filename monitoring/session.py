"""
============================================================================
CONNECTION MONITOR - MONITORING SESSION
============================================================================
The single process-wide monitoring session: target, cadence, timeout,
notification preferences, lifecycle state and the probe log.

Mutation rules
--------------
• target_endpoint, interval_seconds, timeout_seconds, notify_enabled and
  notify_email change only through ``configure()``, which is rejected
  with SessionStateError while the session is RUNNING.
• state is driven by the Scheduler (IDLE → RUNNING → IDLE).
• probe_log grows through ``record()`` and is emptied only by
  ``clear()``; stopping and restarting keeps it.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import threading
from typing import Any, Dict, Optional

from config.constants import SessionState
from config.settings import Settings
from exceptions.monitoring import SessionStateError
from monitoring.aggregator import aggregate
from monitoring.models import DowntimeAggregate, ProbeRecord
from monitoring.probe_log import ProbeLog
from reporting.formatter import build_report, format_duration
from utils.logger import get_logger
from utils.validators import (
    validate_bool,
    validate_email,
    validate_interval,
    validate_timeout,
    validate_url,
)


logger = get_logger("Session")


class MonitoringSession:
    """
    Mutable state of the one monitoring run of this process.

    Parameters
    ----------
    target_endpoint : str
        HTTP(S) URL to probe.
    interval_seconds : int
        Probe cadence; also the unit downtime is counted in.
    timeout_seconds : float
        Upper bound of a single probe.
    notify_enabled : bool
        Whether periodic reports are sent while running.
    notify_email : str
        Recipient of periodic reports.
    """

    def __init__(
        self,
        target_endpoint: str,
        interval_seconds: int,
        timeout_seconds: float,
        notify_enabled: bool = False,
        notify_email: str = "",
    ):
        self.target_endpoint = validate_url(target_endpoint)
        self.interval_seconds = validate_interval(interval_seconds)
        self.timeout_seconds = validate_timeout(timeout_seconds)
        self.notify_enabled = validate_bool(notify_enabled, "notify_enabled")
        self.notify_email = validate_email(notify_email)

        self.state = SessionState.IDLE
        self.probe_log = ProbeLog()
        self.total_downtime_ms = 0

        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MonitoringSession":
        """Session with the configured defaults, as created at start-up."""
        return cls(
            target_endpoint=settings.monitoring.target_url,
            interval_seconds=settings.monitoring.interval_seconds,
            timeout_seconds=settings.monitoring.timeout_seconds,
            notify_enabled=settings.notification.enabled,
            notify_email=settings.notification.email,
        )

    # ------------------------------------------------------------------
    # STATE
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def wants_notifications(self) -> bool:
        return self.notify_enabled and bool(self.notify_email)

    # ------------------------------------------------------------------
    # CONFIGURATION
    # ------------------------------------------------------------------

    def configure(
        self,
        *,
        target_endpoint: Optional[str] = None,
        interval_seconds: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        notify_enabled: Optional[bool] = None,
        notify_email: Optional[str] = None,
    ) -> None:
        """
        Change session configuration.  Only allowed while IDLE.

        All values are validated before any is applied, so a rejected
        call leaves the session unchanged.

        Raises:
            SessionStateError: the session is running
            ValidationException: a value is invalid
        """
        with self._lock:
            if self.is_running:
                raise SessionStateError(
                    "Configuration cannot change while monitoring is running",
                    state=self.state.value,
                    operation="configure",
                )

            updates: Dict[str, Any] = {}
            if target_endpoint is not None:
                updates["target_endpoint"] = validate_url(target_endpoint)
            if interval_seconds is not None:
                updates["interval_seconds"] = validate_interval(interval_seconds)
            if timeout_seconds is not None:
                updates["timeout_seconds"] = validate_timeout(timeout_seconds)
            if notify_enabled is not None:
                updates["notify_enabled"] = validate_bool(notify_enabled, "notify_enabled")
            if notify_email is not None:
                updates["notify_email"] = validate_email(notify_email)

            for name, value in updates.items():
                setattr(self, name, value)

            # downtime is counted in interval units
            if "interval_seconds" in updates:
                self.total_downtime_ms = self.aggregate().total_downtime_ms

        if updates:
            logger.info(f"Session reconfigured: {updates}")

    # ------------------------------------------------------------------
    # PROBE LOG
    # ------------------------------------------------------------------

    def record(self, record: ProbeRecord) -> DowntimeAggregate:
        """Append *record* and refresh the cumulative downtime."""
        self.probe_log.append(record)
        result = self.aggregate()
        self.total_downtime_ms = result.total_downtime_ms
        return result

    def aggregate(self) -> DowntimeAggregate:
        return aggregate(self.probe_log.snapshot(), self.interval_seconds)

    def clear(self) -> int:
        """Operator action: forget every probe record."""
        removed = self.probe_log.clear()
        self.total_downtime_ms = 0
        logger.info(f"Probe log cleared ({removed} records removed)")
        return removed

    def report(self) -> str:
        return build_report(self.probe_log.snapshot(), self.interval_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "target_endpoint": self.target_endpoint,
            "interval_seconds": self.interval_seconds,
            "timeout_seconds": self.timeout_seconds,
            "notify_enabled": self.notify_enabled,
            "notify_email": self.notify_email,
            "records": len(self.probe_log),
            "total_downtime_ms": self.total_downtime_ms,
            "total_downtime": format_duration(self.total_downtime_ms),
        }
