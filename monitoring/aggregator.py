"""
============================================================================
CONNECTION MONITOR - DOWNTIME AGGREGATOR
============================================================================
Turns a flat sequence of probe records into discrete downtime incidents.

An incident opens on the first unreachable record after a reachable one
(or at the very start of the log), grows while unreachable records keep
coming, and closes on the next reachable record.  An incident still open
when the log ends is kept.

Downtime is counted in probe intervals:

    total_downtime_ms = unreachable_records * interval_seconds * 1000

so two isolated unreachable records count independently, even with
reachable records between them.

Pure functions only: same log and interval, same result.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Iterable, List, Optional

from config.constants import TimeIntervals
from monitoring.models import DowntimeAggregate, DowntimeIncident, ProbeRecord


def total_downtime_ms(log: Iterable[ProbeRecord], interval_seconds: int) -> int:
    """Cumulative downtime of *log* in milliseconds."""
    unreachable = sum(1 for record in log if not record.reachable)
    return unreachable * interval_seconds * TimeIntervals.MS_PER_SECOND


def extract_incidents(
    log: Iterable[ProbeRecord], interval_seconds: int
) -> List[DowntimeIncident]:
    """Single ordered scan of *log* collecting maximal unreachable runs."""
    incidents: List[DowntimeIncident] = []
    start = None
    count = 0

    for record in log:
        if not record.reachable:
            if count == 0:
                start = record.timestamp
            count += 1
        elif count:
            incidents.append(_incident(start, count, interval_seconds))
            start, count = None, 0

    # still down at the end of the log
    if count:
        incidents.append(_incident(start, count, interval_seconds))

    return incidents


def _incident(start, count: int, interval_seconds: int) -> DowntimeIncident:
    return DowntimeIncident(
        start_timestamp=start,
        probe_count=count,
        duration_seconds=count * interval_seconds,
    )


def aggregate(
    log: Iterable[ProbeRecord], interval_seconds: int
) -> DowntimeAggregate:
    """
    Derive incidents and total downtime from one log snapshot.

    Parameters
    ----------
    log : iterable of ProbeRecord
        Records in issuance order.  Consumed once.
    interval_seconds : int
        Probe cadence the records were taken at.
    """
    records = tuple(log)
    return DowntimeAggregate(
        incidents=tuple(extract_incidents(records, interval_seconds)),
        total_downtime_ms=total_downtime_ms(records, interval_seconds),
    )


def last_incident(aggregate_result: DowntimeAggregate) -> Optional[DowntimeIncident]:
    """The most recent incident, or None for a clean log."""
    if not aggregate_result.incidents:
        return None
    return aggregate_result.incidents[-1]
