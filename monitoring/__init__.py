"""
============================================================================
CONNECTION MONITOR - MONITORING PACKAGE
============================================================================
Runtime monitoring infrastructure:
    • Prober               — one bounded HTTP reachability probe
    • ProbeLog             — append-only probe history
    • aggregator           — downtime totals and incident extraction
    • MonitoringSession    — configuration, state and the probe log
    • Scheduler            — start/stop lifecycle and the periodic ticks
    • NotificationDispatcher — periodic report delivery
    • ControlServer        — aiohttp control and status surface

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── models.py            ← ProbeRecord, DowntimeIncident, DowntimeAggregate
├── prober.py            ← Prober
├── probe_log.py         ← ProbeLog
├── aggregator.py        ← aggregate / extract_incidents / total_downtime_ms
├── session.py           ← MonitoringSession
├── scheduler.py         ← Scheduler
├── notifier.py          ← NotificationDispatcher
└── control_server.py    ← ControlServer

Only the modules below are re-exported here.  session, scheduler,
notifier and control_server depend on the reporting package, which in
turn depends on this one; import them from their own modules.
============================================================================
"""

from monitoring.models import ProbeRecord, DowntimeIncident, DowntimeAggregate
from monitoring.probe_log import ProbeLog
from monitoring.aggregator import aggregate, extract_incidents, total_downtime_ms
from monitoring.prober import Prober

__all__ = [
    # Records
    "ProbeRecord",
    "DowntimeIncident",
    "DowntimeAggregate",

    # Probe history
    "ProbeLog",

    # Aggregation
    "aggregate",
    "extract_incidents",
    "total_downtime_ms",

    # Probing
    "Prober",
]
